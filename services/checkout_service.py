"""
Checkout service: cart -> validated address -> order draft -> created order.

Flow:
    1. Refuse an empty cart (EmptyCartError)
    2. Clean and validate the address form (CheckoutValidationError)
    3. Build the order draft from the cart and the shared totals
    4. Call the collaborator's create_order
    5. Only after it succeeds, add the order to OrderState

Nothing is mutated before step 5. A failure at any step leaves the cart
and the order cache exactly as they were, and nothing is retried.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping

from core.api_client import CommerceAPIClient
from core.exceptions import CheckoutValidationError, EmptyCartError
from models.cart import CartState
from models.order import Order, OrderState, ShippingAddress
from models.session import AuthState
from modules.checkout import clean_checkout_form, compute_totals, validate_checkout_form
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

# Payment is collected after the order exists
INITIAL_PAYMENT_METHOD = "Pending"
INITIAL_PAYMENT_STATUS = "Pending"


def build_order_draft(cart: CartState, address: ShippingAddress, user_id: Any) -> Dict[str, Any]:
    """
    Assemble the payload sent to create_order.

    Item prices are the cart's unit prices at this moment; the order keeps
    them even if the catalog price changes later.
    """
    totals = compute_totals(cart.items)

    return {
        "userId": user_id,
        "shippingAddress": address.to_dict(),
        "items": [
            {
                "productId": item.product_id,
                "quantity": item.quantity,
                "price": item.unit_price,
            }
            for item in cart.items
        ],
        "subtotal": totals.subtotal,
        "tax": totals.tax,
        "shipping": totals.shipping,
        "total": totals.total,
        "paymentMethod": INITIAL_PAYMENT_METHOD,
        "paymentStatus": INITIAL_PAYMENT_STATUS,
    }


class CheckoutService:
    """
    Places orders with the commerce API.

    Attributes:
        api_client: CommerceAPIClient used for create_order
    """

    def __init__(self, api_client: CommerceAPIClient):
        self.api_client = api_client

    def place_order(
        self,
        cart: CartState,
        auth: AuthState,
        orders: OrderState,
        form: Mapping[str, Any]
    ) -> Order:
        """
        Validate the checkout form and create the order.

        Args:
            cart: Current cart (read only here; cleared after payment)
            auth: Current session; supplies the user id
            orders: Order cache; receives the created order
            form: Raw checkout form fields

        Returns:
            The created order, also set as orders.current_order

        Raises:
            EmptyCartError: If the cart has no items
            CheckoutValidationError: If any address field is invalid
            CommerceAPIError: If the collaborator rejects or cannot be reached
        """
        if cart.is_empty:
            raise EmptyCartError()

        cleaned = clean_checkout_form(form)
        errors = validate_checkout_form(cleaned)
        if errors:
            logger.info(f"Checkout blocked by invalid fields: {sorted(errors)}")
            raise CheckoutValidationError(errors)

        user_id = auth.user.id if auth.user else None
        draft = build_order_draft(cart, ShippingAddress.from_form(cleaned), user_id)

        logger.debug(
            f"Submitting order draft: {len(draft['items'])} lines, total={draft['total']:.2f}"
        )

        receipt = self.api_client.create_order(draft)

        order = Order.from_api(_merge_receipt(draft, receipt))
        orders.add_order(order)

        logger.info(f"Order {order.order_number} created (id={order.id}, status={order.status})")
        return order


def _merge_receipt(draft: Dict[str, Any], receipt: Dict[str, Any]) -> Dict[str, Any]:
    # Identity, status and timestamp come from the collaborator; everything
    # else is the draft it accepted.
    merged = dict(draft)
    for key in ("id", "orderNumber", "status", "createdAt"):
        merged[key] = receipt.get(key)
    return merged
