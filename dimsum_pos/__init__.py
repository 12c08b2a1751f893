"""Dimsum point-of-sale core: cart, checkout and sales reporting."""

__version__ = "0.1.0"
