# dimsum_pos/checkout/session.py
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional

from dimsum_pos.config import get_config
from dimsum_pos.data.interface import TransactionStore
from dimsum_pos.data.models import PaymentMethod, SessionContext, StoredTransaction, TransactionRecord
from dimsum_pos.errors import (
    CheckoutStateError,
    EmptyCartError,
    InsufficientFundsError,
    PaymentMethodNotSelectedError,
    PersistenceError,
)
from dimsum_pos.logging import get_logger

from .cart import Cart
from .order_numbers import OrderNumberGenerator, get_order_number_generator

logger = get_logger(__name__)

QUICK_CASH_AMOUNTS = (50_000, 100_000, 150_000, 200_000)


class CheckoutState(str, Enum):
    BUILDING = "building"
    AWAITING_PAYMENT = "awaiting_payment"
    COMPLETED = "completed"


class CheckoutSession:
    """
    One till's order lifecycle: Building -> AwaitingPayment -> Completed.

    - `begin_checkout` locks the cart and keeps a snapshot of it; payment is validated
      against the snapshot total. `cancel` unlocks it, completion clears it.
    - Every error leaves the session in the state it was in, so the operator
      can correct the input and retry.
    - A failed persistence write keeps the session in AwaitingPayment.
    """

    def __init__(
        self,
        context: SessionContext,
        store: TransactionStore,
        cart: Optional[Cart] = None,
        order_numbers: Optional[OrderNumberGenerator] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.context = context
        self.store = store
        self.cart = cart if cart is not None else Cart()
        self.order_numbers = order_numbers or get_order_number_generator()
        self._clock = clock

        self._state = CheckoutState.BUILDING
        self._snapshot: Optional[Cart] = None
        self._payment_method: Optional[PaymentMethod] = None
        self._tendered_amount: Optional[int] = None
        self.last_transaction: Optional[StoredTransaction] = None

    # ---------- reads ----------

    @property
    def state(self) -> CheckoutState:
        return self._state

    @property
    def payment_method(self) -> Optional[PaymentMethod]:
        return self._payment_method

    @property
    def tendered_amount(self) -> Optional[int]:
        return self._tendered_amount

    @property
    def order_cart(self) -> Cart:
        """The frozen snapshot while paying, otherwise the live cart."""
        return self._snapshot if self._snapshot is not None else self.cart

    def total(self) -> int:
        return self.order_cart.total()

    def change_due(self) -> int:
        if self._payment_method is PaymentMethod.CASH and self._tendered_amount is not None:
            return self._tendered_amount - self.total()
        return 0

    def quick_cash_options(self) -> List[int]:
        """Exact total first, then the preset notes that cover it."""
        total = self.total()
        return [total] + [amount for amount in QUICK_CASH_AMOUNTS if amount > total]

    # ---------- transitions ----------

    def _require(self, *states: CheckoutState) -> None:
        if self._state not in states:
            allowed = ", ".join(s.value for s in states)
            raise CheckoutStateError(f"Checkout is {self._state.value}; expected {allowed}")

    def _reset_payment(self) -> None:
        self._payment_method = None
        self._tendered_amount = None

    def begin_checkout(self) -> None:
        self._require(CheckoutState.BUILDING)
        if self.cart.is_empty:
            raise EmptyCartError("Cart is empty")
        self._snapshot = self.cart.snapshot()
        self.cart.freeze()
        self._reset_payment()
        self._state = CheckoutState.AWAITING_PAYMENT
        logger.debug(f"Checkout started: {len(self._snapshot)} lines, total {self.total()}")

    def select_payment_method(self, method: PaymentMethod | str) -> None:
        self._require(CheckoutState.AWAITING_PAYMENT)
        method = PaymentMethod(method)
        self._payment_method = method
        if method is PaymentMethod.CASH:
            self._tendered_amount = None
        else:
            self._tendered_amount = self.total()

    def submit_cash_amount(self, amount: int) -> int:
        """Record the cash handed over and return the change due."""
        self._require(CheckoutState.AWAITING_PAYMENT)
        if self._payment_method is None:
            raise PaymentMethodNotSelectedError("Select a payment method first")
        if self._payment_method is not PaymentMethod.CASH:
            raise CheckoutStateError(f"Cash amount does not apply to {self._payment_method.value} payments")

        total = self.total()
        if amount is None or amount <= 0 or amount < total:
            raise InsufficientFundsError(f"Cash tendered {amount} is less than total {total}")
        self._tendered_amount = int(amount)
        return self._tendered_amount - total

    def complete_payment(self) -> StoredTransaction:
        self._require(CheckoutState.AWAITING_PAYMENT)
        if self._payment_method is None:
            raise PaymentMethodNotSelectedError("Select a payment method first")

        order = self._snapshot
        total = order.total()
        if self._payment_method is PaymentMethod.CASH:
            if self._tendered_amount is None or self._tendered_amount < total:
                raise InsufficientFundsError("Enter a cash amount covering the total")
            tendered, change = self._tendered_amount, self._tendered_amount - total
        else:
            tendered, change = total, 0

        record = TransactionRecord(
            order_number=self.order_numbers.next_number(self._clock().date()),
            branch=self.context.branch_name or get_config().default_branch_name,
            branch_id=self.context.branch_id,
            cashier_id=self.context.user_id,
            line_items=order.lines,
            subtotal=order.subtotal(),
            tax=order.tax(),
            total=total,
            payment_method=self._payment_method,
            tendered_amount=tendered,
            change_amount=change,
        )

        try:
            stored = self.store.create_transaction(record)
        except PersistenceError:
            logger.exception(f"Failed to store transaction {record.order_number}")
            raise
        except Exception as e:
            logger.exception(f"Failed to store transaction {record.order_number}")
            raise PersistenceError(f"Could not save transaction {record.order_number}: {e}") from e

        self.last_transaction = stored
        self._state = CheckoutState.COMPLETED
        self._snapshot = None
        self.cart.unfreeze()
        self.cart.clear()
        logger.info(
            f"Completed {stored.order_number}: {stored.total} via {stored.payment_method.value}"
            f" (branch {stored.branch})"
        )
        return stored

    def cancel(self) -> None:
        """Leave the payment step; cart contents are untouched."""
        self._require(CheckoutState.AWAITING_PAYMENT)
        self._snapshot = None
        self.cart.unfreeze()
        self._reset_payment()
        self._state = CheckoutState.BUILDING

    def start_new_order(self) -> None:
        self._require(CheckoutState.COMPLETED, CheckoutState.BUILDING)
        self.cart.unfreeze()
        self.cart.clear()
        self._reset_payment()
        self.last_transaction = None
        self._state = CheckoutState.BUILDING
