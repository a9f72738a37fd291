"""
Services layer for the fireworks storefront.

This module contains the business logic services:
- CheckoutService: Validates checkout and creates orders with the API
- PaymentSimulator: Simulated payment step
- AuthService: Login, admin login and registration
- admin_service: Back-office statistics, filters and product payloads
- session_state: Loads and saves the per-browser state containers

Request Model:
    Every request runs on one thread and mutates its own copy of the
    browser's state. Collaborator calls block the request, and state is
    committed only after they succeed.
"""

from .checkout_service import CheckoutService, build_order_draft
from .payment_service import PaymentSimulator, PaymentReceipt, PAYMENT_METHODS
from .auth_service import AuthService

__all__ = [
    "CheckoutService",
    "build_order_draft",
    "PaymentSimulator",
    "PaymentReceipt",
    "PAYMENT_METHODS",
    "AuthService",
]
