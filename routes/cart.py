"""
Cart routes.

Cart mutations are applied locally and immediately; nothing is sent to the
commerce API except the product lookup when an item is first added.
"""

from typing import Optional

from flask import Blueprint, flash, redirect, url_for

from core.exceptions import CommerceAPIError, ResourceNotFoundError
from routes.common import form_data, render_view, safe_next, service
from services.session_state import load_cart, save_cart
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

cart_bp = Blueprint("cart", __name__)


def _int_field(data, name: str, default: Optional[int]) -> Optional[int]:
    try:
        return int(data.get(name, default))
    except (TypeError, ValueError):
        return default


@cart_bp.route("/cart", methods=["GET"])
def view_cart():
    """Cart page: line items, counts and the checkout summary."""
    cart = load_cart()
    totals = cart.summary()

    return render_view(
        "cart",
        items=[dict(item.to_dict(), line_total=item.line_total) for item in cart.items],
        item_count=cart.get_item_count(),
        summary=dict(totals.to_dict(), amount_to_free_shipping=totals.amount_to_free_shipping),
        is_empty=cart.is_empty,
    )


@cart_bp.route("/cart/add/<product_id>", methods=["POST"])
def add_to_cart(product_id: str):
    """
    Add a product.

    Fields:
        quantity: How many to add (default 1)
        buy_now: Truthy to go straight to the cart afterwards
        next: Local URL to return to otherwise
    """
    data = form_data()
    quantity = _int_field(data, "quantity", 1)
    fallback = url_for("products.list_products")

    if quantity < 1:
        flash("Quantity must be at least 1.", "error")
        return redirect(safe_next(data.get("next"), fallback))

    api_client = service("API_CLIENT")

    try:
        product = api_client.get_product(product_id)
    except ResourceNotFoundError:
        flash("Product not found.", "error")
        return redirect(fallback)
    except CommerceAPIError as e:
        logger.error(f"Could not add product {product_id}: {e}")
        flash("Failed to add to cart. Please try again.", "error")
        return redirect(safe_next(data.get("next"), fallback))

    if not product.in_stock:
        flash(f"{product.name} is out of stock.", "warning")
        return redirect(safe_next(data.get("next"), fallback))

    cart = load_cart()
    cart.add_item(product, quantity)
    save_cart(cart)

    flash(f"{quantity} x {product.name} added to cart!", "success")

    if str(data.get("buy_now", "")).lower() in ("1", "true", "on", "yes"):
        return redirect(url_for("cart.view_cart"))
    return redirect(safe_next(data.get("next"), fallback))


@cart_bp.route("/cart/update", methods=["POST"])
def update_quantity():
    """Set a line item's quantity; zero or less removes it."""
    data = form_data()
    product_id = data.get("product_id")
    quantity = _int_field(data, "quantity", None)

    if quantity is None:
        flash("Quantity must be a whole number.", "error")
        return redirect(url_for("cart.view_cart"))

    cart = load_cart()
    cart.update_quantity(product_id, quantity)
    save_cart(cart)

    return redirect(url_for("cart.view_cart"))


@cart_bp.route("/cart/remove", methods=["POST"])
def remove_item():
    data = form_data()

    cart = load_cart()
    cart.remove_item(data.get("product_id"))
    save_cart(cart)

    flash("Item removed from cart", "success")
    return redirect(url_for("cart.view_cart"))


@cart_bp.route("/cart/clear", methods=["POST"])
def clear_cart():
    cart = load_cart()
    cart.clear_cart()
    save_cart(cart)

    flash("Cart cleared", "success")
    return redirect(safe_next(form_data().get("next"), url_for("cart.view_cart")))
