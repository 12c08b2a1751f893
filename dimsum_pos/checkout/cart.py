# dimsum_pos/checkout/cart.py
from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional

from dimsum_pos.data.models import CartLine, MenuItem, MenuVariant
from dimsum_pos.errors import CheckoutStateError

TaxPolicy = Callable[[int], int]


def no_tax(subtotal: int) -> int:
    """Current tax policy: nothing is added on top of the subtotal."""
    return 0


class Cart:
    """
    The in-progress order.
    - At most one line per variant; lines keep the order they were first added.
    - A line whose quantity reaches 0 is removed, never kept at 0.
    - Totals are recomputed from the lines on every read.
    - A frozen cart refuses every mutation until it is unfrozen.
    """

    def __init__(self, lines: Optional[Iterable[CartLine]] = None, tax_policy: TaxPolicy = no_tax) -> None:
        self._lines: Dict[str, CartLine] = {}
        self._tax_policy = tax_policy
        self._frozen = False
        for line in lines or ():
            self._lines[line.line_id] = line.model_copy()

    # ---------- freezing ----------

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        self._frozen = True

    def unfreeze(self) -> None:
        self._frozen = False

    def _check_mutable(self) -> None:
        if self._frozen:
            raise CheckoutStateError("Cart is locked while awaiting payment")

    # ---------- mutations ----------

    def add_item(self, menu_item: MenuItem, variant: MenuVariant) -> CartLine:
        self._check_mutable()
        line = self._lines.get(variant.id)
        if line is not None:
            line.quantity += 1
            return line

        line = CartLine(
            line_id=variant.id,
            menu_item_id=menu_item.id,
            display_name=menu_item.name,
            variant_label=variant.size_label,
            unit_price=variant.unit_price,
            quantity=1,
        )
        self._lines[line.line_id] = line
        return line

    def change_quantity(self, line_id: str, delta: int) -> None:
        self._check_mutable()
        line = self._lines.get(line_id)
        if line is None:
            return
        new_quantity = max(0, line.quantity + delta)
        if new_quantity == 0:
            del self._lines[line_id]
        else:
            line.quantity = new_quantity

    def remove_item(self, line_id: str) -> None:
        self._check_mutable()
        self._lines.pop(line_id, None)

    def clear(self) -> None:
        self._check_mutable()
        self._lines.clear()

    # ---------- reads ----------

    @property
    def lines(self) -> List[CartLine]:
        return list(self._lines.values())

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def get_line(self, line_id: str) -> Optional[CartLine]:
        return self._lines.get(line_id)

    def item_count(self) -> int:
        """Total units across all lines."""
        return sum(line.quantity for line in self._lines.values())

    def subtotal(self) -> int:
        return sum(line.unit_price * line.quantity for line in self._lines.values())

    def tax(self) -> int:
        return self._tax_policy(self.subtotal())

    def total(self) -> int:
        return self.subtotal() + self.tax()

    def snapshot(self) -> "Cart":
        """Independent copy of the current lines, sharing the tax policy."""
        return Cart(self.lines, tax_policy=self._tax_policy)

    def __len__(self) -> int:
        return len(self._lines)
