"""
Data models for the fireworks storefront.

This module contains:
- Product: Catalog entry as reported by the commerce API
- CartState / CartLineItem: Shopping cart aggregation
- AuthState / User: Authenticated session held across page loads
- OrderState / Order: Local read cache of placed orders
- OrderStatus / TrackingProjection: Order lifecycle for tracking display
"""

from .product import Product
from .cart import CartState, CartLineItem
from .session import AuthState, AuthResult, User
from .order import Order, OrderItem, OrderState, ShippingAddress
from .tracking import OrderStatus, TrackingProjection, step_for_status

__all__ = [
    # Catalog
    "Product",
    # Cart
    "CartState",
    "CartLineItem",
    # Session
    "AuthState",
    "AuthResult",
    "User",
    # Orders
    "Order",
    "OrderItem",
    "OrderState",
    "ShippingAddress",
    # Tracking
    "OrderStatus",
    "TrackingProjection",
    "step_for_status",
]
