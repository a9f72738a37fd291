"""
Tests for the checkout, payment, auth and back-office services.
"""

import pytest
from unittest.mock import MagicMock

from core.api_client import CommerceAPIClient
from core.exceptions import (
    APIUnavailableError,
    CheckoutValidationError,
    CommerceAPIError,
    EmptyCartError,
    ValidationError,
)
from models.cart import CartState
from models.order import Order, OrderState, ShippingAddress
from models.product import Product
from models.session import AuthResult, AuthState
from services.admin_service import (
    build_product_payload,
    dashboard_stats,
    filter_orders,
    filter_products,
    recent_orders,
)
from services.auth_service import AuthService, validate_registration
from services.checkout_service import CheckoutService, build_order_draft
from services.payment_service import PaymentReceipt, PaymentSimulator


@pytest.fixture
def api():
    api = MagicMock(spec=CommerceAPIClient)
    api.create_order.return_value = {
        "id": 101,
        "orderNumber": "FW-0101",
        "status": "Pending",
        "createdAt": "2026-10-18T10:00:00Z",
    }
    return api


@pytest.fixture
def filled_cart(rocket, gift_box):
    cart = CartState()
    cart.add_item(rocket, 2)
    cart.add_item(gift_box, 1)
    return cart


@pytest.fixture
def signed_in(customer):
    auth = AuthState()
    auth.login(customer, "tok")
    return auth


# =============================================================================
# CHECKOUT
# =============================================================================

class TestBuildOrderDraft:

    def test_draft_from_cart(self, filled_cart):
        address = ShippingAddress(
            first_name="Asha", last_name="Rao", email="asha@example.com", phone="9876543210",
            address="12 Lake Road", city="Sivakasi", state="Tamil Nadu", pincode="626123",
        )

        draft = build_order_draft(filled_cart, address, user_id=7)

        assert draft["userId"] == 7
        assert draft["items"] == [
            {"productId": 1, "quantity": 2, "price": 500.0},
            {"productId": 2, "quantity": 1, "price": 1200.0},
        ]
        assert draft["subtotal"] == 2200.0
        assert draft["tax"] == pytest.approx(396.0)
        assert draft["shipping"] == 0
        assert draft["total"] == pytest.approx(2596.0)
        assert draft["paymentMethod"] == "Pending"
        assert draft["paymentStatus"] == "Pending"
        assert draft["shippingAddress"]["pincode"] == "626123"
        assert "status" not in draft


class TestCheckoutService:

    def test_place_order_success(self, api, filled_cart, signed_in, valid_address):
        orders = OrderState()

        order = CheckoutService(api).place_order(filled_cart, signed_in, orders, valid_address)

        assert order.id == 101
        assert order.order_number == "FW-0101"
        assert order.status == "Pending"
        assert order.user_id == 7
        assert order.total == pytest.approx(2596.0)
        assert orders.current_order == order
        # Cart is emptied by the payment step, not here
        assert filled_cart.get_item_count() == 3

        draft = api.create_order.call_args[0][0]
        assert draft["shippingAddress"]["city"] == "Sivakasi"

    def test_empty_cart_never_reaches_api(self, api, signed_in, valid_address):
        with pytest.raises(EmptyCartError):
            CheckoutService(api).place_order(CartState(), signed_in, OrderState(), valid_address)
        api.create_order.assert_not_called()

    def test_invalid_form_blocks_submission(self, api, filled_cart, signed_in, valid_address):
        valid_address["pincode"] = "12"
        orders = OrderState()

        with pytest.raises(CheckoutValidationError) as exc_info:
            CheckoutService(api).place_order(filled_cart, signed_in, orders, valid_address)

        assert exc_info.value.errors == {"pincode": "Pincode must be 6 digits"}
        api.create_order.assert_not_called()
        assert orders.orders == []

    def test_api_failure_leaves_state_unchanged(self, api, filled_cart, signed_in, valid_address):
        api.create_order.side_effect = APIUnavailableError("create_order", "refused")
        orders = OrderState()
        before = filled_cart.to_dict()

        with pytest.raises(CommerceAPIError):
            CheckoutService(api).place_order(filled_cart, signed_in, orders, valid_address)

        assert filled_cart.to_dict() == before
        assert orders.orders == []
        assert orders.current_order is None
        api.create_order.assert_called_once()


# =============================================================================
# PAYMENT
# =============================================================================

class TestPaymentSimulator:

    def _pending(self, orders):
        order = Order(id=101, order_number="FW-0101", status="Pending", created_at="now", total=2596.0)
        orders.add_order(order)
        return order

    def test_pay_waits_and_succeeds(self):
        sleep = MagicMock()
        order = Order(id=1, order_number="FW-0001", status="Pending", created_at="now", total=99.0)

        receipt = PaymentSimulator(delay_seconds=3.0, sleep=sleep).pay(order, "upi")

        sleep.assert_called_once_with(3.0)
        assert isinstance(receipt, PaymentReceipt)
        assert receipt.success
        assert receipt.amount == 99.0
        assert receipt.to_dict()["method_name"] == "UPI"

    def test_zero_delay_does_not_sleep(self):
        sleep = MagicMock()
        order = Order(id=1, order_number="FW-0001", status="Pending", created_at="now")
        PaymentSimulator(delay_seconds=0, sleep=sleep).pay(order, "card")
        sleep.assert_not_called()

    def test_unsupported_method(self):
        order = Order(id=1, order_number="FW-0001", status="Pending", created_at="now")
        with pytest.raises(ValueError):
            PaymentSimulator(delay_seconds=0).pay(order, "cash")

    def test_complete_payment_clears_cart_and_current_order(self, filled_cart):
        orders = OrderState()
        order = self._pending(orders)

        receipt = PaymentSimulator(delay_seconds=0).complete_payment(filled_cart, orders, "netbanking")

        assert receipt.order_id == 101
        assert filled_cart.is_empty
        assert orders.current_order is None
        # The cached order record is not edited by the payment step
        assert orders.get_order(101) == order

    def test_complete_payment_without_order(self, filled_cart):
        with pytest.raises(ValueError):
            PaymentSimulator(delay_seconds=0).complete_payment(filled_cart, OrderState(), "card")
        assert filled_cart.get_item_count() == 3


# =============================================================================
# AUTH
# =============================================================================

class TestAuthService:

    def test_login_records_session(self, api, auth_result):
        api.login.return_value = auth_result
        auth = AuthState()

        user = AuthService(api).login(auth, " asha@example.com ", "secret")

        api.login.assert_called_once_with({"email": "asha@example.com", "password": "secret"})
        api.admin_login.assert_not_called()
        assert user == auth_result.user
        assert auth.token == "fresh-token"

    def test_admin_login_uses_admin_endpoint(self, api, admin_user):
        api.admin_login.return_value = AuthResult(user=admin_user, token="adm")
        auth = AuthState()

        AuthService(api).login(auth, "admin@example.com", "secret", admin=True)

        api.admin_login.assert_called_once()
        assert auth.is_admin

    def test_rejected_login_leaves_session(self, api, signed_in, customer):
        api.login.side_effect = CommerceAPIError("Invalid email or password", status_code=401)

        with pytest.raises(CommerceAPIError):
            AuthService(api).login(signed_in, "asha@example.com", "wrong")

        assert signed_in.user == customer
        assert signed_in.token == "tok"

    def test_register_sends_payload_and_signs_in(self, api, auth_result):
        api.register.return_value = auth_result
        auth = AuthState()

        AuthService(api).register(auth, {
            "first_name": "Asha", "last_name": "Rao", "email": "asha@example.com",
            "phone": "9876543210", "password": "secret1", "confirm_password": "secret1",
        })

        api.register.assert_called_once_with({
            "firstName": "Asha", "lastName": "Rao", "email": "asha@example.com",
            "password": "secret1", "phone": "9876543210",
        })
        assert auth.is_authenticated

    def test_register_password_mismatch(self, api):
        with pytest.raises(ValidationError) as exc_info:
            AuthService(api).register(AuthState(), {"password": "secret1", "confirm_password": "secret2"})

        assert exc_info.value.message == "Passwords do not match!"
        api.register.assert_not_called()

    def test_validate_registration_short_password(self):
        errors = validate_registration({"password": "abc", "confirm_password": "abc"})
        assert errors == {"password": "Password must be at least 6 characters!"}


# =============================================================================
# BACK OFFICE
# =============================================================================

def _order(order_id, number, status, total):
    return Order(id=order_id, order_number=number, status=status, created_at="now", total=total)


@pytest.fixture
def all_orders():
    return [
        _order(1, "FW-1001", "Pending", 500.0),
        _order(2, "FW-1002", "Processing", 1500.0),
        _order(3, "FW-1003", "Shipped", 250.0),
        _order(4, "FW-1004", "Delivered", 750.0),
        _order(15, "FW-1015", "Pending", 100.0),
        _order(21, "FW-1021", "Delivered", 300.0),
    ]


class TestAdminService:

    def test_dashboard_stats(self, rocket, gift_box, all_orders):
        stats = dashboard_stats([rocket, gift_box], all_orders)

        assert stats.total_products == 2
        assert stats.total_orders == 6
        assert stats.total_revenue == 3400.0
        assert stats.pending_orders == 3

    def test_recent_orders_first_five(self, all_orders):
        assert [o.id for o in recent_orders(all_orders)] == [1, 2, 3, 4, 15]

    def test_filter_by_status(self, all_orders):
        assert [o.id for o in filter_orders(all_orders, status="Delivered")] == [4, 21]
        assert len(filter_orders(all_orders, status="All")) == 6

    def test_filter_by_search(self, all_orders):
        assert [o.id for o in filter_orders(all_orders, query="fw-1002")] == [2]
        # id substring
        assert [o.id for o in filter_orders(all_orders, query="1")] == [1, 2, 3, 4, 15, 21]
        assert [o.id for o in filter_orders(all_orders, status="Pending", query="15")] == [15]

    def test_filter_products(self, rocket, gift_box):
        products = [rocket, gift_box, Product(id=3, name="Flower Pot", price=80.0,
                                               category="Fountains", description="Gold sparkle fountain")]

        assert filter_products(products, category="Rockets") == [rocket]
        assert [p.id for p in filter_products(products, query="SPARKLE")] == [3]
        assert len(filter_products(products)) == 3

    def test_build_product_payload(self):
        payload, errors = build_product_payload({
            "name": "Sky Rocket",
            "description": "<i>Loud</i> and high",
            "price": "450",
            "original_price": "500",
            "features": "Loud, High altitude, ",
            "in_stock": "on",
        })

        assert errors == {}
        assert payload["category"] == "Rockets"
        assert payload["description"] == "Loud and high"
        assert payload["price"] == 450.0
        assert payload["originalPrice"] == 500.0
        assert payload["features"] == ["Loud", "High altitude"]
        assert payload["rating"] == 4.5
        assert payload["reviews"] == 0
        assert payload["inStock"] is True

    def test_build_product_payload_errors(self):
        _, errors = build_product_payload({"price": "abc"})
        assert set(errors) == {"name", "description", "price"}
