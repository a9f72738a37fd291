"""
Shared fixtures for the storefront tests.

The commerce API is always mocked; no test talks to a real server.
"""

import pytest
from unittest.mock import MagicMock

from app import create_app
from core.api_client import CommerceAPIClient
from models.product import Product
from models.session import AUTH_STORAGE_KEY, AuthResult, User


# Fixtures

@pytest.fixture
def rocket():
    """A 500-priced product."""
    return Product(id=1, name="Sky Rocket", price=500.0, category="Rockets",
                   original_price=650.0, image="rocket.png")


@pytest.fixture
def gift_box():
    """A 1200-priced product."""
    return Product(id=2, name="Diwali Gift Box", price=1200.0, category="Gift Boxes")


@pytest.fixture
def customer():
    return User(id=7, first_name="Asha", last_name="Rao", email="asha@example.com", role="Customer")


@pytest.fixture
def admin_user():
    return User(id=1, first_name="Admin", last_name="User", email="admin@example.com", role="Admin")


@pytest.fixture
def valid_address():
    """A checkout form that passes validation."""
    return {
        "first_name": "Asha",
        "last_name": "Rao",
        "email": "asha@example.com",
        "phone": "9876543210",
        "address": "12 Lake Road",
        "city": "Sivakasi",
        "state": "Tamil Nadu",
        "pincode": "626123",
        "landmark": "",
    }


@pytest.fixture
def mock_api(rocket, gift_box):
    """Mock commerce API client with a two-product catalog."""
    api = MagicMock(spec=CommerceAPIClient)
    catalog = {str(rocket.id): rocket, str(gift_box.id): gift_box}

    api.list_products.return_value = [rocket, gift_box]
    api.list_categories.return_value = ["Rockets", "Gift Boxes"]
    api.get_product.side_effect = lambda product_id: catalog[str(product_id)]
    api.create_order.return_value = {
        "id": 101,
        "orderNumber": "FW-0101",
        "status": "Pending",
        "createdAt": "2026-10-18T10:00:00Z",
    }
    return api


@pytest.fixture
def app(mock_api):
    app = create_app("config.TestingConfig", api_client=mock_api)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


def sign_in(client, user, token="test-token"):
    """Put a persisted session record into the test client's cookie session."""
    with client.session_transaction() as sess:
        sess[AUTH_STORAGE_KEY] = {
            "user": user.to_dict(),
            "token": token,
            "isAuthenticated": True,
            "isAdmin": user.role == "Admin",
        }


@pytest.fixture
def customer_client(client, customer):
    sign_in(client, customer)
    return client


@pytest.fixture
def admin_client(client, admin_user):
    sign_in(client, admin_user)
    return client


@pytest.fixture
def auth_result(customer):
    return AuthResult(user=customer, token="fresh-token")
