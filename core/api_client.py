"""
HTTP client for the remote commerce API.

The commerce API owns the product catalog, order records and user
accounts. This module is the only place the storefront talks to it, and
the only place collaborator failures are turned into exceptions.

ERROR MAPPING:
    - Connection errors and timeouts -> APIUnavailableError
    - HTTP 404                       -> ResourceNotFoundError
    - Any other non-2xx response     -> CommerceAPIError (server message kept)
    - Unparsable JSON body           -> CommerceAPIError

No call is retried. Callers catch these at the route and show a
notification; state containers are never touched on failure.

Usage:
    api_client = CommerceAPIClient(
        base_url="http://localhost:5000/api",
        token_provider=lambda: session_token,
    )

    products = api_client.list_products(category="Rockets", sort_by="price-low")
    created = api_client.create_order(draft)
    order = api_client.track_order("FW-1001")
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

import requests

from models.order import Order
from models.product import Product
from models.session import AuthResult
from models.tracking import OrderStatus
from .exceptions import APIUnavailableError, CommerceAPIError, ResourceNotFoundError


class CommerceAPIClient:
    """
    Thin wrapper around the commerce REST API.

    One instance is shared by the whole app. The bearer token is not stored
    on the client; ``token_provider`` is called for every request so each
    request carries the token of the session that made it.

    Attributes:
        base_url: API root, without trailing slash
        timeout: Per-request timeout in seconds
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        token_provider: Optional[Callable[[], Optional[str]]] = None,
        http_session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the API client.

        Args:
            base_url: API root (e.g., "http://localhost:5000/api")
            timeout: Per-request timeout in seconds
            token_provider: Returns the current bearer token, or None
            http_session: requests.Session to reuse (created if not provided)
            logger: Logger instance (creates default if not provided)

        Raises:
            ValueError: If base_url is empty
        """
        if not base_url:
            raise ValueError("base_url is required - set COMMERCE_API_URL")

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._token_provider = token_provider
        self._http = http_session or requests.Session()
        self._http.headers.update({"Content-Type": "application/json"})
        self._logger = logger or logging.getLogger("fireworks_storefront.core.api_client")

    # =========================================================================
    # PRODUCTS
    # =========================================================================

    def list_products(
        self,
        category: Optional[str] = None,
        search: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        sort_by: Optional[str] = None
    ) -> List[Product]:
        """
        Fetch the catalog, filtered server-side.

        Empty filters are not sent.
        """
        filters = {
            "category": category,
            "search": search,
            "minPrice": min_price,
            "maxPrice": max_price,
            "sortBy": sort_by,
        }
        params = {key: value for key, value in filters.items() if value}

        data = self._request("GET", "/products", "list_products", params=params)
        return [Product.from_api(item) for item in data or []]

    def get_product(self, product_id: Any) -> Product:
        data = self._request(
            "GET", f"/products/{product_id}", "get_product",
            not_found=("Product", product_id),
        )
        return Product.from_api(data)

    def list_categories(self) -> List[str]:
        data = self._request("GET", "/products/categories", "list_categories")
        return list(data or [])

    def create_product(self, product_data: Dict[str, Any]) -> Product:
        """Create a catalog product (admin)."""
        data = self._request("POST", "/products", "create_product", json=product_data)
        return Product.from_api(data)

    def update_product(self, product_id: Any, product_data: Dict[str, Any]) -> Product:
        """Update a catalog product (admin)."""
        data = self._request(
            "PUT", f"/products/{product_id}", "update_product",
            json=product_data, not_found=("Product", product_id),
        )
        return Product.from_api(data)

    def delete_product(self, product_id: Any) -> None:
        """Delete a catalog product (admin)."""
        self._request(
            "DELETE", f"/products/{product_id}", "delete_product",
            not_found=("Product", product_id),
        )

    # =========================================================================
    # ORDERS
    # =========================================================================

    def create_order(self, order_draft: Dict[str, Any]) -> Dict[str, Any]:
        """
        Submit an order draft.

        Returns:
            The collaborator's creation receipt: id, orderNumber, status,
            createdAt (plus anything else it chooses to echo back)

        Raises:
            CommerceAPIError: If the collaborator rejects the draft or the
                receipt lacks an id
        """
        data = self._request("POST", "/orders", "create_order", json=order_draft)

        if not isinstance(data, dict) or data.get("id") is None:
            raise CommerceAPIError(
                "Order creation returned no order id", operation="create_order"
            )

        self._logger.info(f"Order created: id={data.get('id')} number={data.get('orderNumber')}")
        return data

    def get_order(self, order_id: Any) -> Order:
        data = self._request(
            "GET", f"/orders/{order_id}", "get_order",
            not_found=("Order", order_id),
        )
        return Order.from_api(data)

    def track_order(self, order_number: str) -> Order:
        data = self._request(
            "GET", f"/orders/track/{order_number}", "track_order",
            not_found=("Order", order_number),
        )
        return Order.from_api(data)

    def list_orders(self) -> List[Order]:
        """All orders (admin)."""
        data = self._request("GET", "/orders", "list_orders")
        return [Order.from_api(item) for item in data or []]

    def update_order_status(self, order_id: Any, status: str) -> Order:
        """
        Move an order to ``status`` (admin).

        Raises:
            ValueError: If status is not one of the four lifecycle labels.
                Nothing is sent in that case.
        """
        if OrderStatus.parse(status) is None:
            raise ValueError(
                f"Invalid order status {status!r}; expected one of {OrderStatus.labels()}"
            )

        data = self._request(
            "PUT", f"/orders/{order_id}/status", "update_order_status",
            json={"status": status}, not_found=("Order", order_id),
        )
        return Order.from_api(data)

    # =========================================================================
    # AUTH
    # =========================================================================

    def login(self, credentials: Dict[str, Any]) -> AuthResult:
        data = self._request("POST", "/auth/login", "login", json=credentials)
        return self._auth_result(data, "login")

    def register(self, user_data: Dict[str, Any]) -> AuthResult:
        data = self._request("POST", "/auth/register", "register", json=user_data)
        return self._auth_result(data, "register")

    def admin_login(self, credentials: Dict[str, Any]) -> AuthResult:
        data = self._request("POST", "/auth/admin/login", "admin_login", json=credentials)
        return self._auth_result(data, "admin_login")

    @staticmethod
    def _auth_result(data: Any, operation: str) -> AuthResult:
        """
        Parse a successful auth response.

        Raises:
            CommerceAPIError: If the response carries no token or no user id
        """
        if not isinstance(data, dict) or not data.get("token"):
            raise CommerceAPIError(
                "Authentication response did not include a token", operation=operation
            )

        result = AuthResult.from_api(data)
        if result.user.id is None:
            raise CommerceAPIError(
                "Authentication response did not include a user", operation=operation
            )
        return result

    # =========================================================================
    # TRANSPORT
    # =========================================================================

    def close(self) -> None:
        """Release pooled HTTP connections."""
        self._http.close()

    def _request(
        self,
        method: str,
        path: str,
        operation: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
        not_found: Optional[tuple] = None
    ) -> Any:
        """
        Perform one request and return the decoded JSON body.

        Args:
            method: HTTP verb
            path: Path below base_url
            operation: Operation name for logs and error details
            params: Query string parameters
            json: JSON request body
            not_found: (resource, identifier) reported on HTTP 404

        Returns:
            Decoded JSON body, or None for an empty body
        """
        url = f"{self.base_url}{path}"
        headers = {}
        token = self._token_provider() if self._token_provider else None
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._logger.debug(f"{operation}: {method} {url}")

        try:
            response = self._http.request(
                method,
                url,
                params=params,
                json=json,
                headers=headers,
                timeout=self.timeout,
            )
        except (requests.ConnectionError, requests.Timeout) as e:
            self._logger.error(f"{operation}: API unreachable: {e}")
            raise APIUnavailableError(operation, str(e))
        except requests.RequestException as e:
            self._logger.error(f"{operation}: request failed: {e}")
            raise CommerceAPIError(f"Request failed: {e}", operation=operation)

        if response.status_code == 404 and not_found:
            resource, identifier = not_found
            self._logger.info(f"{operation}: {resource} {identifier} not found")
            raise ResourceNotFoundError(resource, identifier, operation)

        if not response.ok:
            message = self._error_message(response)
            self._logger.error(f"{operation}: HTTP {response.status_code}: {message}")
            raise CommerceAPIError(message, status_code=response.status_code, operation=operation)

        if not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            self._logger.error(f"{operation}: invalid JSON in response: {e}")
            raise CommerceAPIError(
                f"Invalid JSON in {operation} response",
                status_code=response.status_code,
                operation=operation,
            )

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        """Server-supplied message when present, a generic one otherwise."""
        try:
            body = response.json()
        except ValueError:
            return "An error occurred"
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return "An error occurred"
