"""
Flask route blueprints for the fireworks storefront.

This module contains all route handlers organized by functionality:
- main: Home page and health check
- products: Catalog listing and product detail
- cart: Cart view and mutations
- checkout: Address validation and order creation
- payment: Simulated payment
- orders: Order history and tracking
- auth: Login, admin login, registration, logout
- admin: Back-office dashboard, orders and products

Each blueprint is registered with the Flask app in create_app().
"""

from .main import main_bp
from .products import products_bp
from .cart import cart_bp
from .checkout import checkout_bp
from .payment import payment_bp
from .orders import orders_bp
from .auth import auth_bp
from .admin import admin_bp

__all__ = [
    "main_bp",
    "products_bp",
    "cart_bp",
    "checkout_bp",
    "payment_bp",
    "orders_bp",
    "auth_bp",
    "admin_bp",
]


def register_blueprints(app):
    """
    Register all blueprints with the Flask app.

    Args:
        app: Flask application instance
    """
    app.register_blueprint(main_bp)
    app.register_blueprint(products_bp)
    app.register_blueprint(cart_bp)
    app.register_blueprint(checkout_bp)
    app.register_blueprint(payment_bp)
    app.register_blueprint(orders_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(admin_bp)
