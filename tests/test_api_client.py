"""
Tests for CommerceAPIClient.

The requests.Session is mocked; each test scripts the HTTP response (or
transport failure) and checks the request sent and the result or error.
"""

import pytest
import requests
from unittest.mock import MagicMock

from core.api_client import CommerceAPIClient
from core.exceptions import APIUnavailableError, CommerceAPIError, ResourceNotFoundError


BASE_URL = "http://localhost:5000/api"


def make_response(status_code=200, body=None, raw=None):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    if raw is not None:
        response.content = raw
        response.json.side_effect = ValueError("bad json")
    elif body is None:
        response.content = b""
        response.json.side_effect = ValueError("empty")
    else:
        response.content = b"{...}"
        response.json.return_value = body
    return response


@pytest.fixture
def http():
    session = MagicMock()
    session.headers = {}
    return session


@pytest.fixture
def client(http):
    return CommerceAPIClient(BASE_URL + "/", http_session=http)


def sent(http):
    """(method, url, kwargs) of the last request."""
    args, kwargs = http.request.call_args
    return args[0], args[1], kwargs


class TestClientSetup:

    def test_requires_base_url(self):
        with pytest.raises(ValueError):
            CommerceAPIClient("")

    def test_trailing_slash_stripped(self, client):
        assert client.base_url == BASE_URL

    def test_json_content_type(self, http, client):
        assert http.headers["Content-Type"] == "application/json"


class TestProducts:

    def test_list_products_sends_only_set_filters(self, http, client):
        http.request.return_value = make_response(body=[
            {"id": 1, "name": "Sky Rocket", "price": 500, "category": "Rockets", "inStock": True},
        ])

        products = client.list_products(category="Rockets", sort_by="price-low")

        method, url, kwargs = sent(http)
        assert method == "GET"
        assert url == f"{BASE_URL}/products"
        assert kwargs["params"] == {"category": "Rockets", "sortBy": "price-low"}
        assert products[0].name == "Sky Rocket"
        assert products[0].price == 500.0

    def test_list_products_price_range_params(self, http, client):
        http.request.return_value = make_response(body=[])
        client.list_products(min_price=100, max_price=900, search="sparkle")

        _, _, kwargs = sent(http)
        assert kwargs["params"] == {"search": "sparkle", "minPrice": 100, "maxPrice": 900}

    def test_get_product_not_found(self, http, client):
        http.request.return_value = make_response(404, {"message": "Product not found"})

        with pytest.raises(ResourceNotFoundError) as exc_info:
            client.get_product(42)

        assert exc_info.value.resource == "Product"
        assert exc_info.value.identifier == 42
        assert exc_info.value.status_code == 404

    def test_delete_product_empty_body(self, http, client):
        http.request.return_value = make_response(204)
        assert client.delete_product(3) is None
        method, url, _ = sent(http)
        assert (method, url) == ("DELETE", f"{BASE_URL}/products/3")

    def test_categories(self, http, client):
        http.request.return_value = make_response(body=["Rockets", "Sparklers"])
        assert client.list_categories() == ["Rockets", "Sparklers"]


class TestOrders:

    def test_create_order_returns_receipt(self, http, client):
        receipt = {"id": 9, "orderNumber": "FW-0009", "status": "Pending", "createdAt": "now"}
        http.request.return_value = make_response(201, receipt)

        assert client.create_order({"items": []}) == receipt
        method, url, kwargs = sent(http)
        assert (method, url) == ("POST", f"{BASE_URL}/orders")
        assert kwargs["json"] == {"items": []}

    def test_create_order_without_id_is_error(self, http, client):
        http.request.return_value = make_response(201, {"orderNumber": "FW-0009"})
        with pytest.raises(CommerceAPIError):
            client.create_order({"items": []})

    def test_track_order_by_number(self, http, client):
        http.request.return_value = make_response(body={"id": 9, "orderNumber": "FW-0009", "status": "Shipped"})

        order = client.track_order("FW-0009")

        _, url, _ = sent(http)
        assert url == f"{BASE_URL}/orders/track/FW-0009"
        assert order.tracking.step == 3

    def test_update_order_status_rejects_unknown_label(self, http, client):
        with pytest.raises(ValueError):
            client.update_order_status(9, "Cancelled")
        http.request.assert_not_called()

    def test_update_order_status(self, http, client):
        http.request.return_value = make_response(body={"id": 9, "status": "Delivered"})

        order = client.update_order_status(9, "Delivered")

        method, url, kwargs = sent(http)
        assert (method, url) == ("PUT", f"{BASE_URL}/orders/9/status")
        assert kwargs["json"] == {"status": "Delivered"}
        assert order.status == "Delivered"


class TestAuth:

    def test_login_parses_user_with_token(self, http, client):
        http.request.return_value = make_response(body={
            "id": 7, "firstName": "Asha", "email": "asha@example.com", "role": "Customer", "token": "jwt",
        })

        result = client.login({"email": "asha@example.com", "password": "secret"})

        assert result.token == "jwt"
        assert result.user.id == 7

    def test_admin_login_endpoint(self, http, client):
        http.request.return_value = make_response(body={"id": 1, "role": "Admin", "token": "jwt"})
        client.admin_login({"email": "a", "password": "b"})
        _, url, _ = sent(http)
        assert url == f"{BASE_URL}/auth/admin/login"

    @pytest.mark.parametrize("body", [
        {"id": 7, "email": "asha@example.com"},
        {"user": {"id": 7}, "token": ""},
        {"token": "jwt"},
    ])
    def test_login_without_token_or_user_is_error(self, http, client, body):
        http.request.return_value = make_response(body=body)

        with pytest.raises(CommerceAPIError) as exc_info:
            client.login({"email": "asha@example.com", "password": "secret"})

        assert exc_info.value.operation == "login"

    def test_register_without_token_is_error(self, http, client):
        http.request.return_value = make_response(201, {"id": 8, "email": "new@example.com"})
        with pytest.raises(CommerceAPIError):
            client.register({"email": "new@example.com", "password": "secret1"})


class TestTransport:

    def test_bearer_token_attached(self, http):
        client = CommerceAPIClient(BASE_URL, http_session=http, token_provider=lambda: "tok")
        http.request.return_value = make_response(body=[])

        client.list_orders()

        _, _, kwargs = sent(http)
        assert kwargs["headers"] == {"Authorization": "Bearer tok"}

    def test_no_token_no_header(self, http):
        client = CommerceAPIClient(BASE_URL, http_session=http, token_provider=lambda: None)
        http.request.return_value = make_response(body=[])

        client.list_products()

        _, _, kwargs = sent(http)
        assert "Authorization" not in kwargs["headers"]

    def test_timeout_passed(self, http):
        client = CommerceAPIClient(BASE_URL, timeout=4, http_session=http)
        http.request.return_value = make_response(body=[])
        client.list_products()
        assert sent(http)[2]["timeout"] == 4

    @pytest.mark.parametrize("failure", [
        requests.ConnectionError("refused"),
        requests.Timeout("slow"),
    ])
    def test_unreachable(self, http, client, failure):
        http.request.side_effect = failure

        with pytest.raises(APIUnavailableError) as exc_info:
            client.list_products()

        assert exc_info.value.status_code is None
        assert "Network error" in exc_info.value.message

    def test_other_request_exception(self, http, client):
        http.request.side_effect = requests.TooManyRedirects("loop")
        with pytest.raises(CommerceAPIError) as exc_info:
            client.list_products()
        assert not isinstance(exc_info.value, APIUnavailableError)

    def test_server_message_kept(self, http, client):
        http.request.return_value = make_response(401, {"message": "Invalid email or password"})

        with pytest.raises(CommerceAPIError) as exc_info:
            client.login({"email": "x", "password": "y"})

        assert exc_info.value.message == "Invalid email or password"
        assert exc_info.value.status_code == 401
        assert exc_info.value.operation == "login"

    def test_generic_message_without_body(self, http, client):
        http.request.return_value = make_response(500, raw=b"<html>oops</html>")

        with pytest.raises(CommerceAPIError) as exc_info:
            client.list_products()

        assert exc_info.value.message == "An error occurred"

    def test_404_without_resource_is_plain_error(self, http, client):
        http.request.return_value = make_response(404, {"message": "No route"})

        with pytest.raises(CommerceAPIError) as exc_info:
            client.list_orders()

        assert not isinstance(exc_info.value, ResourceNotFoundError)
        assert exc_info.value.message == "No route"

    def test_invalid_json_body(self, http, client):
        http.request.return_value = make_response(200, raw=b"not json")
        with pytest.raises(CommerceAPIError, match="Invalid JSON"):
            client.list_categories()

    def test_close(self, http, client):
        client.close()
        http.close.assert_called_once()
