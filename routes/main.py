"""
Main routes (home, health).
"""

from flask import Blueprint, current_app, jsonify

from core.exceptions import CommerceAPIError
from routes.common import render_view, service
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

main_bp = Blueprint("main", __name__)

FEATURED_COUNT = 6


@main_bp.route("/", methods=["GET"])
def index():
    """Home page with a handful of featured products."""
    api_client = service("API_CLIENT")

    try:
        products = api_client.list_products()
    except CommerceAPIError as e:
        logger.error(f"Failed to load featured products: {e}")
        products = []

    return render_view(
        "home",
        featured=[product.to_dict() for product in products[:FEATURED_COUNT]],
    )


@main_bp.route("/health", methods=["GET"])
def health():
    """Liveness check; does not call the commerce API."""
    return jsonify({
        "status": "ok",
        "environment": current_app.config.get("ENVIRONMENT"),
        "commerce_api": current_app.config.get("COMMERCE_API_URL"),
    })
