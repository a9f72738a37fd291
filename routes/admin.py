"""
Administrative back-office routes.

Every route is admin-only. Order status changes go to the commerce API,
which is the only authority on an order's lifecycle.
"""

from flask import Blueprint, flash, redirect, request, url_for

from core.exceptions import CommerceAPIError, ResourceNotFoundError
from models.product import CATEGORIES
from models.tracking import OrderStatus
from routes.common import admin_required, form_data, render_not_found, render_view, service
from services.admin_service import (
    ALL_FILTER,
    build_product_payload,
    dashboard_stats,
    filter_orders,
    filter_products,
    recent_orders,
)
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

admin_bp = Blueprint("admin", __name__, url_prefix="/admin")


@admin_bp.route("", methods=["GET"])
@admin_required
def dashboard():
    api_client = service("API_CLIENT")

    try:
        products = api_client.list_products()
        orders = api_client.list_orders()
    except CommerceAPIError as e:
        logger.error(f"Failed to load dashboard data: {e}")
        flash("Failed to load dashboard data", "error")
        return render_view("admin_dashboard", status=502, stats=None, recent_orders=[], error=True)

    return render_view(
        "admin_dashboard",
        stats=dashboard_stats(products, orders).to_dict(),
        recent_orders=[order.to_dict() for order in recent_orders(orders)],
    )


# =============================================================================
# ORDERS
# =============================================================================

@admin_bp.route("/orders", methods=["GET"])
@admin_required
def orders():
    """Order list with ``?status=`` and ``?search=`` filters."""
    status = request.args.get("status", ALL_FILTER)
    query = request.args.get("search", "").strip()
    api_client = service("API_CLIENT")

    try:
        all_orders = api_client.list_orders()
    except CommerceAPIError as e:
        logger.error(f"Failed to load orders: {e}")
        flash("Failed to load orders", "error")
        return render_view("admin_orders", status=502, orders=[], total=0, error=True)

    filtered = filter_orders(all_orders, status=status, query=query)

    return render_view(
        "admin_orders",
        orders=[order.to_dict() for order in filtered],
        total=len(all_orders),
        statuses=[ALL_FILTER] + OrderStatus.labels(),
        filters={"status": status, "search": query},
    )


@admin_bp.route("/orders/<order_id>/status", methods=["POST"])
@admin_required
def update_order_status(order_id: str):
    status = str(form_data().get("status") or "")
    api_client = service("API_CLIENT")

    try:
        order = api_client.update_order_status(order_id, status)
    except ValueError as e:
        flash(str(e), "error")
        return redirect(url_for("admin.orders"))
    except ResourceNotFoundError:
        return render_not_found("Order", order_id)
    except CommerceAPIError as e:
        logger.error(f"Failed to update order {order_id}: {e}")
        flash("Failed to update order status", "error")
        return redirect(url_for("admin.orders"))

    logger.info(f"Order {order_id} moved to {order.status or status}")
    flash("Order status updated", "success")
    return redirect(url_for("admin.orders"))


# =============================================================================
# PRODUCTS
# =============================================================================

@admin_bp.route("/products", methods=["GET", "POST"])
@admin_required
def products():
    """
    GET: Product list with ``?category=`` and ``?search=`` filters
    POST: Create a product
    """
    api_client = service("API_CLIENT")

    if request.method == "POST":
        payload, errors = build_product_payload(form_data())
        if errors:
            flash("Please fill in all required fields", "error")
            return render_view("admin_product_form", status=400, errors=errors, product=payload)

        try:
            api_client.create_product(payload)
        except CommerceAPIError as e:
            logger.error(f"Failed to create product: {e}")
            flash("Failed to create product", "error")
            return render_view("admin_product_form", status=502, errors={}, product=payload)

        flash("Product created successfully", "success")
        return redirect(url_for("admin.products"))

    category = request.args.get("category", ALL_FILTER)
    query = request.args.get("search", "").strip()

    try:
        all_products = api_client.list_products()
    except CommerceAPIError as e:
        logger.error(f"Failed to load products: {e}")
        flash("Failed to load products", "error")
        return render_view("admin_products", status=502, products=[], total=0, error=True)

    filtered = filter_products(all_products, category=category, query=query)

    return render_view(
        "admin_products",
        products=[product.to_dict() for product in filtered],
        total=len(all_products),
        categories=[ALL_FILTER] + CATEGORIES,
        filters={"category": category, "search": query},
    )


@admin_bp.route("/products/new", methods=["GET"])
@admin_required
def new_product():
    return render_view("admin_product_form", product=None, categories=CATEGORIES, errors={})


@admin_bp.route("/products/<product_id>", methods=["GET", "POST"])
@admin_required
def edit_product(product_id: str):
    """
    GET: Product form prefilled from the catalog
    POST: Save the edit
    """
    api_client = service("API_CLIENT")

    if request.method == "POST":
        payload, errors = build_product_payload(form_data())
        if errors:
            flash("Please fill in all required fields", "error")
            return render_view("admin_product_form", status=400, errors=errors, product=payload)

        try:
            api_client.update_product(product_id, payload)
        except ResourceNotFoundError:
            return render_not_found("Product", product_id)
        except CommerceAPIError as e:
            logger.error(f"Failed to update product {product_id}: {e}")
            flash("Failed to update product", "error")
            return render_view("admin_product_form", status=502, errors={}, product=payload)

        flash("Product updated successfully", "success")
        return redirect(url_for("admin.products"))

    try:
        product = api_client.get_product(product_id)
    except ResourceNotFoundError:
        return render_not_found("Product", product_id)
    except CommerceAPIError as e:
        logger.error(f"Failed to load product {product_id}: {e}")
        flash("Failed to load product", "error")
        return redirect(url_for("admin.products"))

    product_data = product.to_dict()
    product_data["features"] = ", ".join(product.features)
    return render_view("admin_product_form", product=product_data, categories=CATEGORIES, errors={})


@admin_bp.route("/products/<product_id>/delete", methods=["POST"])
@admin_required
def delete_product(product_id: str):
    api_client = service("API_CLIENT")

    try:
        api_client.delete_product(product_id)
    except ResourceNotFoundError:
        flash("Product not found", "warning")
        return redirect(url_for("admin.products"))
    except CommerceAPIError as e:
        logger.error(f"Failed to delete product {product_id}: {e}")
        flash("Failed to delete product", "error")
        return redirect(url_for("admin.products"))

    flash("Product deleted successfully", "success")
    return redirect(url_for("admin.products"))
