"""
Checkout route.

Validates the shipping address, creates the order with the commerce API
and hands over to the payment step. An empty cart never reaches order
creation.
"""

from flask import Blueprint, flash, redirect, request, url_for

from core.exceptions import CheckoutValidationError, CommerceAPIError, EmptyCartError
from routes.common import form_data, login_required, render_view, service
from services.session_state import load_auth, load_cart, load_orders, save_orders
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

checkout_bp = Blueprint("checkout", __name__)


@checkout_bp.route("/checkout", methods=["GET", "POST"])
@login_required
def checkout():
    """
    GET: Order summary and an address form prefilled from the session user
    POST: Validate, create the order, redirect to payment
    """
    cart = load_cart()

    if cart.is_empty:
        flash("Your cart is empty.", "warning")
        return redirect(url_for("cart.view_cart"))

    auth = load_auth()

    if request.method == "POST":
        orders = load_orders()
        checkout_service = service("CHECKOUT_SERVICE")

        try:
            order = checkout_service.place_order(cart, auth, orders, form_data())
        except EmptyCartError:
            return redirect(url_for("cart.view_cart"))
        except CheckoutValidationError as e:
            flash(e.message, "error")
            return render_view(
                "checkout",
                status=400,
                errors=e.errors,
                summary=cart.summary().to_dict(),
            )
        except CommerceAPIError as e:
            logger.error(f"Order creation failed: {e}")
            flash("Failed to create order. Please try again.", "error")
            return redirect(url_for("checkout.checkout"))

        save_orders(orders)

        flash("Order created successfully!", "success")
        return redirect(url_for("payment.payment"))

    user = auth.user
    prefill = {
        "first_name": user.first_name if user else "",
        "last_name": user.last_name if user else "",
        "email": user.email if user else "",
    }

    return render_view(
        "checkout",
        items=[item.to_dict() for item in cart.items],
        summary=cart.summary().to_dict(),
        form=prefill,
        errors={},
    )
