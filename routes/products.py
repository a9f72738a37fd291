"""
Catalog routes.

Handles:
- /products - Listing with category, search, sort and price filters
- /products/categories - Category names
- /product/<id> - Product detail (not-found view on 404)
"""

from flask import Blueprint, flash, request

from core.exceptions import CommerceAPIError, ResourceNotFoundError
from routes.common import render_not_found, render_view, service
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

products_bp = Blueprint("products", __name__)

# Sort value meaning "collaborator's default order"
DEFAULT_SORT = "featured"


def _price_arg(name: str):
    value = request.args.get(name, "").strip()
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None


@products_bp.route("/products", methods=["GET"])
def list_products():
    """
    Product listing.

    Category, search and sort are passed to the collaborator. The price
    range is applied here as well, so the listing honours it even when the
    collaborator ignores minPrice/maxPrice.
    """
    category = request.args.get("category", "").strip()
    search = request.args.get("search", "").strip()
    sort_by = request.args.get("sort_by", "").strip()
    min_price = _price_arg("min_price")
    max_price = _price_arg("max_price")

    api_client = service("API_CLIENT")

    try:
        products = api_client.list_products(
            category=category if category and category != "All" else None,
            search=search or None,
            min_price=min_price,
            max_price=max_price,
            sort_by=sort_by if sort_by and sort_by != DEFAULT_SORT else None,
        )
    except CommerceAPIError as e:
        logger.error(f"Failed to load products: {e}")
        flash("Failed to load products. Please check if API is running.", "error")
        return render_view("products", status=502, products=[], error=True)

    if min_price is not None:
        products = [product for product in products if product.price >= min_price]
    if max_price is not None:
        products = [product for product in products if product.price <= max_price]

    return render_view(
        "products",
        products=[product.to_dict() for product in products],
        filters={
            "category": category or "All",
            "search": search,
            "sort_by": sort_by or DEFAULT_SORT,
            "min_price": min_price,
            "max_price": max_price,
        },
    )


@products_bp.route("/products/categories", methods=["GET"])
def categories():
    api_client = service("API_CLIENT")

    try:
        names = api_client.list_categories()
    except CommerceAPIError as e:
        logger.error(f"Failed to load categories: {e}")
        flash("Failed to load categories", "error")
        return render_view("categories", status=502, categories=["All"], error=True)

    return render_view("categories", categories=["All"] + names)


@products_bp.route("/product/<product_id>", methods=["GET"])
def product_detail(product_id: str):
    api_client = service("API_CLIENT")

    try:
        product = api_client.get_product(product_id)
    except ResourceNotFoundError:
        return render_not_found("Product", product_id)
    except CommerceAPIError as e:
        logger.error(f"Failed to load product {product_id}: {e}")
        flash("Failed to load product details", "error")
        return render_view("product_detail", status=502, product=None, error=True)

    product_data = product.to_dict()
    product_data["discountPercent"] = product.discount_percent
    return render_view("product_detail", product=product_data)
