"""
Payment route.

Runs the simulated payment for the order created at checkout. Without a
current order there is nothing to pay for and the flow goes back to the
cart.
"""

from flask import Blueprint, flash, redirect, request, url_for

from routes.common import form_data, login_required, render_view, service
from services.payment_service import DEFAULT_PAYMENT_METHOD, PAYMENT_METHODS
from services.session_state import load_cart, load_orders, save_cart, save_orders


payment_bp = Blueprint("payment", __name__)


@payment_bp.route("/payment", methods=["GET", "POST"])
@login_required
def payment():
    """
    GET: Order summary and the available payment methods
    POST: Simulate the payment, clear the cart, redirect to tracking
    """
    orders = load_orders()
    order = orders.current_order

    if order is None:
        flash("No order awaiting payment.", "warning")
        return redirect(url_for("cart.view_cart"))

    if request.method == "POST":
        method = form_data().get("payment_method") or DEFAULT_PAYMENT_METHOD

        if method not in PAYMENT_METHODS:
            flash(f"Unsupported payment method: {method}", "error")
            return redirect(url_for("payment.payment"))

        cart = load_cart()
        payment_service = service("PAYMENT_SERVICE")
        receipt = payment_service.complete_payment(cart, orders, method)

        save_cart(cart)
        save_orders(orders)

        flash("Payment successful!", "success")
        return redirect(url_for("orders.track_order", order_id=receipt.order_id))

    return render_view(
        "payment",
        order=order.to_dict(),
        payment_methods=[{"id": key, "name": name} for key, name in PAYMENT_METHODS.items()],
    )
