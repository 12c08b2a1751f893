from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from pydantic import (
    BaseModel, ConfigDict, Field, NonNegativeInt, PositiveInt, field_validator, model_validator,
)


class PaymentMethod(str, Enum):
    CASH = "cash"
    QRIS = "qris"
    DEBIT = "debit"
    TRANSFER = "transfer"

    @property
    def display_name(self) -> str:
        return _PAYMENT_DISPLAY_NAMES[self]


_PAYMENT_DISPLAY_NAMES = {
    PaymentMethod.CASH: "Cash",
    PaymentMethod.QRIS: "QRIS",
    PaymentMethod.DEBIT: "Debit Card",
    PaymentMethod.TRANSFER: "Transfer",
}


class CartLine(BaseModel):
    """One row of the cart: a menu variant and how many of it."""
    line_id: str = Field(description="Variant identifier; unique within a cart")
    menu_item_id: str = Field(description="Parent menu item identifier")
    display_name: str = Field(description="Menu item name")
    variant_label: str = Field(description="Variant size label")
    unit_price: NonNegativeInt = Field(description="Price per unit in the smallest currency unit")
    quantity: PositiveInt = Field(default=1, description="Units ordered, always >= 1")

    @property
    def line_total(self) -> int:
        return self.unit_price * self.quantity


class TransactionLine(CartLine):
    """A cart line as sold. Frozen together with its transaction."""
    model_config = ConfigDict(frozen=True)


class TransactionRecord(BaseModel):
    """Immutable record produced by a completed checkout."""
    model_config = ConfigDict(frozen=True)

    order_number: str = Field(description="Display identifier ORD-YYYYMMDD-NNNN")
    branch: str = Field(description="Branch name at checkout time")
    branch_id: Optional[str] = Field(default=None, description="Branch identifier")
    cashier_id: Optional[str] = Field(default=None, description="User who took the payment")
    line_items: Tuple[TransactionLine, ...] = Field(description="Snapshot of the cart at checkout")
    subtotal: NonNegativeInt
    tax: NonNegativeInt = 0
    total: NonNegativeInt
    payment_method: PaymentMethod
    tendered_amount: NonNegativeInt = Field(description="Cash handed over, or the total for non-cash")
    change_amount: NonNegativeInt = 0

    @field_validator("line_items", mode="before")
    @classmethod
    def _copy_lines(cls, value):
        # Detach from live cart lines so later cart edits cannot reach the record
        if isinstance(value, (list, tuple)):
            return tuple(item.model_dump() if isinstance(item, BaseModel) else item for item in value)
        return value

    @model_validator(mode="after")
    def _check_amounts(self):
        if self.total != self.subtotal + self.tax:
            raise ValueError("total must equal subtotal + tax")
        if self.payment_method is PaymentMethod.CASH:
            if self.change_amount != self.tendered_amount - self.total:
                raise ValueError("change_amount must equal tendered_amount - total")
        elif self.tendered_amount != self.total or self.change_amount != 0:
            raise ValueError("non-cash payments tender exactly the total with no change")
        return self


class StoredTransaction(TransactionRecord):
    """A transaction as returned by the persistence layer. Read-only all the way down."""
    id: str = Field(description="Server-assigned identifier")
    created_at: datetime = Field(description="Server-assigned creation timestamp")
