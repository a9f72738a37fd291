"""
Order history and tracking routes.

Tracking always asks the commerce API for the order's latest state. When
the order is also in this browser's cache, the cached copy is replaced by
the fresh one so the history page shows the status the collaborator last
reported.
"""

from flask import Blueprint, flash, request

from core.exceptions import CommerceAPIError, ResourceNotFoundError
from routes.common import login_required, render_not_found, render_view, service
from services.session_state import load_auth, load_orders, save_orders
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

orders_bp = Blueprint("orders", __name__)


@orders_bp.route("/orders", methods=["GET"])
@login_required
def my_orders():
    """The signed-in user's orders placed from this browser, newest first."""
    user = load_auth().user
    orders = load_orders().orders_for(user.id)

    return render_view(
        "my_orders",
        orders=[
            dict(order.to_dict(), itemCount=order.item_count)
            for order in reversed(orders)
        ],
    )


@orders_bp.route("/track", methods=["GET"])
@orders_bp.route("/track/<order_id>", methods=["GET"])
def track_order(order_id: str = None):
    """
    Tracking view for an order, by id or by ``?orderNumber=``.

    The order number wins when both are given.
    """
    order_number = request.args.get("orderNumber", "").strip()
    api_client = service("API_CLIENT")

    if not order_number and not order_id:
        return render_not_found("Order", "")

    try:
        if order_number:
            order = api_client.track_order(order_number)
        else:
            order = api_client.get_order(order_id)
    except ResourceNotFoundError as e:
        return render_not_found("Order", e.identifier)
    except CommerceAPIError as e:
        logger.error(f"Failed to load order {order_number or order_id}: {e}")
        flash("Failed to load order details", "error")
        return render_view("tracking", status=502, order=None, error=True)

    orders = load_orders()
    if orders.refresh_order(order):
        save_orders(orders)

    return render_view(
        "tracking",
        order=order.to_dict(),
        tracking=order.tracking.to_dict(),
    )
