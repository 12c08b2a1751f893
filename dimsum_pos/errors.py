"""Error taxonomy for the checkout boundary and report queries.

Every checkout error is recoverable: the caller keeps the session in its
current state so the operator can correct the input and retry.
"""


class CheckoutError(Exception):
    """Base class for recoverable checkout failures."""


class EmptyCartError(CheckoutError):
    """Checkout was attempted with no lines in the cart."""


class PaymentMethodNotSelectedError(CheckoutError):
    """Payment was submitted before a method was chosen."""


class InsufficientFundsError(CheckoutError):
    """Cash tendered is missing or below the order total."""


class PersistenceError(CheckoutError):
    """The storage collaborator failed to record or read transactions."""


class CheckoutStateError(CheckoutError):
    """A checkout transition was invoked from a state that does not allow it."""


class BranchSwitchNotAllowedError(CheckoutError):
    """Only owners may move a session to another branch."""


class InvalidReportPeriodError(ValueError):
    """A report period could not be turned into a date window."""
