"""
Simulated payment step.

No payment is processed. The simulator waits a configured delay and then
always succeeds. On success the cart is cleared and the current order is
released; the order record itself is not edited (payment fields stay as
the collaborator last reported them).
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict

from models.cart import CartState
from models.order import Order, OrderState
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

PAYMENT_METHODS = {
    "card": "Credit/Debit Card",
    "upi": "UPI",
    "netbanking": "Net Banking",
}

DEFAULT_PAYMENT_METHOD = "card"


@dataclass(frozen=True)
class PaymentReceipt:
    """Outcome of a simulated payment."""

    order_id: Any
    order_number: str
    method: str
    amount: float
    success: bool = True
    paid_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "order_id": self.order_id,
            "order_number": self.order_number,
            "method": self.method,
            "method_name": PAYMENT_METHODS.get(self.method, self.method),
            "amount": self.amount,
            "success": self.success,
            "paid_at": self.paid_at,
        }


class PaymentSimulator:
    """
    Stand-in for a payment gateway.

    Attributes:
        delay_seconds: Simulated processing time
    """

    def __init__(self, delay_seconds: float = 3.0, sleep: Callable[[float], None] = time.sleep):
        self.delay_seconds = delay_seconds
        self._sleep = sleep

    def pay(self, order: Order, method: str) -> PaymentReceipt:
        """
        Charge ``order.total`` using ``method``.

        Raises:
            ValueError: If method is not a supported payment method
        """
        if method not in PAYMENT_METHODS:
            raise ValueError(f"Unsupported payment method: {method}")

        logger.info(
            f"Processing {PAYMENT_METHODS[method]} payment of {order.total:.2f} "
            f"for order {order.order_number}"
        )

        if self.delay_seconds > 0:
            self._sleep(self.delay_seconds)

        return PaymentReceipt(
            order_id=order.id,
            order_number=order.order_number,
            method=method,
            amount=order.total,
        )

    def complete_payment(self, cart: CartState, orders: OrderState, method: str) -> PaymentReceipt:
        """
        Pay for the current order and close out the checkout.

        The caller must have checked that ``orders.current_order`` is set.

        Raises:
            ValueError: If there is no current order or the method is unsupported
        """
        order = orders.current_order
        if order is None:
            raise ValueError("No order awaiting payment")

        receipt = self.pay(order, method)

        cart.clear_cart()
        orders.clear_current_order()

        logger.info(f"Payment completed for order {order.order_number}")
        return receipt
