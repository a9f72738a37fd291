"""
Back-office helpers: dashboard statistics, order and product filtering,
product form handling.

All data comes from the commerce API; these functions only derive views
from it and build payloads to send back.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Mapping, Optional, Tuple

import bleach

from models.order import Order
from models.product import CATEGORIES, Product, split_features
from models.tracking import OrderStatus


ALL_FILTER = "All"

RECENT_ORDER_COUNT = 5

# Orders still needing back-office action
OPEN_STATUSES = (OrderStatus.PENDING.value, OrderStatus.PROCESSING.value)


@dataclass(frozen=True)
class DashboardStats:
    total_products: int
    total_orders: int
    total_revenue: float
    pending_orders: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def dashboard_stats(products: List[Product], orders: List[Order]) -> DashboardStats:
    return DashboardStats(
        total_products=len(products),
        total_orders=len(orders),
        total_revenue=sum(order.total for order in orders),
        pending_orders=sum(1 for order in orders if order.status in OPEN_STATUSES),
    )


def recent_orders(orders: List[Order], count: int = RECENT_ORDER_COUNT) -> List[Order]:
    """First ``count`` orders in the collaborator's order."""
    return orders[:count]


def filter_orders(orders: List[Order], status: Optional[str] = None, query: Optional[str] = None) -> List[Order]:
    """
    Filter by status label and by a search query.

    The query matches the order number case-insensitively or the id as a
    substring. ``status`` of None or "All" keeps every status.
    """
    filtered = orders

    if status and status != ALL_FILTER:
        filtered = [order for order in filtered if order.status == status]

    if query:
        needle = query.lower()
        filtered = [
            order for order in filtered
            if needle in order.order_number.lower() or query in str(order.id)
        ]

    return filtered


def filter_products(products: List[Product], category: Optional[str] = None, query: Optional[str] = None) -> List[Product]:
    """Filter by category and by a case-insensitive name/description query."""
    filtered = products

    if category and category != ALL_FILTER:
        filtered = [product for product in filtered if product.category == category]

    if query:
        needle = query.lower()
        filtered = [
            product for product in filtered
            if needle in product.name.lower() or needle in product.description.lower()
        ]

    return filtered


def _clean(value: Any) -> str:
    return bleach.clean(str(value or "").strip(), tags=[], strip=True)


def build_product_payload(form: Mapping[str, Any]) -> Tuple[Dict[str, Any], Dict[str, str]]:
    """
    Turn a product form into the collaborator's product JSON.

    Returns:
        (payload, errors). ``errors`` is empty when the form is usable.
    """
    errors: Dict[str, str] = {}

    name = _clean(form.get("name"))
    description = _clean(form.get("description"))
    category = _clean(form.get("category")) or CATEGORIES[0]

    if not name:
        errors["name"] = "Name is required"
    if not description:
        errors["description"] = "Description is required"

    price = _parse_float(form.get("price"))
    if price is None or price < 0:
        errors["price"] = "Price must be a non-negative number"

    original_price = _parse_float(form.get("original_price"))
    rating = _parse_float(form.get("rating"))
    reviews = _parse_int(form.get("reviews"))

    features = form.get("features") or ""
    if isinstance(features, str):
        features = split_features(_clean(features))

    in_stock = form.get("in_stock", True)
    if isinstance(in_stock, str):
        in_stock = in_stock.lower() in ("1", "true", "on", "yes")

    payload = {
        "name": name,
        "description": description,
        "category": category,
        "price": price,
        "originalPrice": original_price,
        "image": str(form.get("image") or ""),
        "rating": rating if rating is not None else 4.5,
        "reviews": reviews if reviews is not None else 0,
        "inStock": bool(in_stock),
        "features": list(features),
        "safety": _clean(form.get("safety")),
    }
    return payload, errors


def _parse_float(value: Any) -> Optional[float]:
    if value in (None, ""):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _parse_int(value: Any) -> Optional[int]:
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
