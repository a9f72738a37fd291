"""
Order data models.

An order is created by the commerce API. The storefront keeps a
denormalized read copy of each order it placed so the payment, tracking
and order-history pages can render without a round trip.

Cache discipline:
    - OrderState appends an order only after the collaborator confirmed
      its creation
    - Cached orders are replaced wholesale by collaborator responses
      (refresh_order) and are never edited field by field locally
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from models.tracking import TrackingProjection


@dataclass(frozen=True)
class OrderItem:
    """One ordered product, priced at order-creation time."""

    product_id: Any
    quantity: int
    price: float
    """Unit price captured when the order was created."""

    def to_dict(self) -> Dict[str, Any]:
        return {"productId": self.product_id, "quantity": self.quantity, "price": self.price}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OrderItem":
        return cls(
            product_id=data.get("productId"),
            quantity=int(data.get("quantity", 0)),
            price=float(data.get("price", 0.0)),
        )


@dataclass(frozen=True)
class ShippingAddress:
    """Validated checkout address."""

    first_name: str
    last_name: str
    email: str
    phone: str
    address: str
    city: str
    state: str
    pincode: str
    landmark: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "pincode": self.pincode,
            "landmark": self.landmark,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ShippingAddress":
        return cls(
            first_name=data.get("firstName", ""),
            last_name=data.get("lastName", ""),
            email=data.get("email", ""),
            phone=data.get("phone", ""),
            address=data.get("address", ""),
            city=data.get("city", ""),
            state=data.get("state", ""),
            pincode=data.get("pincode", ""),
            landmark=data.get("landmark", "") or "",
        )

    @classmethod
    def from_form(cls, form: Dict[str, str]) -> "ShippingAddress":
        """Create from a cleaned, validated checkout form."""
        return cls(
            first_name=form["first_name"],
            last_name=form["last_name"],
            email=form["email"],
            phone=form["phone"],
            address=form["address"],
            city=form["city"],
            state=form["state"],
            pincode=form["pincode"],
            landmark=form.get("landmark", ""),
        )


@dataclass(frozen=True)
class Order:
    """
    A placed order.

    Field values come from the collaborator (id, order number, status,
    created_at) or from the draft the collaborator accepted. The wire and
    session shape is the collaborator's camelCase JSON.
    """

    id: Any
    order_number: str
    status: str
    created_at: str
    user_id: Any = None
    shipping_address: Optional[ShippingAddress] = None
    items: List[OrderItem] = field(default_factory=list)
    subtotal: float = 0.0
    tax: float = 0.0
    shipping: float = 0.0
    total: float = 0.0
    payment_method: str = "Pending"
    payment_status: str = "Pending"

    @property
    def tracking(self) -> TrackingProjection:
        return TrackingProjection.for_status(self.status)

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the collaborator's JSON shape (also used for session storage)."""
        return {
            "id": self.id,
            "orderNumber": self.order_number,
            "userId": self.user_id,
            "shippingAddress": self.shipping_address.to_dict() if self.shipping_address else None,
            "items": [item.to_dict() for item in self.items],
            "subtotal": self.subtotal,
            "tax": self.tax,
            "shipping": self.shipping,
            "total": self.total,
            "paymentMethod": self.payment_method,
            "paymentStatus": self.payment_status,
            "status": self.status,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Order":
        """Create from a collaborator response or a stored dictionary."""
        address = data.get("shippingAddress")
        return cls(
            id=data.get("id"),
            order_number=data.get("orderNumber", "") or "",
            status=data.get("status", "") or "",
            created_at=data.get("createdAt", "") or "",
            user_id=data.get("userId"),
            shipping_address=ShippingAddress.from_dict(address) if isinstance(address, dict) else None,
            items=[OrderItem.from_dict(item) for item in data.get("items") or []],
            subtotal=float(data.get("subtotal", 0) or 0),
            tax=float(data.get("tax", 0) or 0),
            shipping=float(data.get("shipping", 0) or 0),
            total=float(data.get("total", 0) or 0),
            payment_method=data.get("paymentMethod", "Pending") or "Pending",
            payment_status=data.get("paymentStatus", "Pending") or "Pending",
        )


class OrderState:
    """
    Locally cached orders plus the order currently in the payment step.

    The history is append-only from the client's side. The current order is
    owned by the checkout -> payment flow.
    """

    def __init__(self, orders: Optional[List[Order]] = None, current_order_id: Any = None):
        self._orders: List[Order] = list(orders or [])
        self._current_order_id = current_order_id

    @property
    def orders(self) -> List[Order]:
        return list(self._orders)

    @property
    def current_order(self) -> Optional[Order]:
        """The order moving through payment, or None (flow goes back to cart)."""
        if self._current_order_id is None:
            return None
        return self.get_order(self._current_order_id)

    def get_order(self, order_id: Any) -> Optional[Order]:
        for order in self._orders:
            if str(order.id) == str(order_id):
                return order
        return None

    def orders_for(self, user_id: Any) -> List[Order]:
        """Cached orders placed by ``user_id``, oldest first."""
        if user_id is None:
            return []
        return [order for order in self._orders if str(order.user_id) == str(user_id)]

    def add_order(self, order: Order) -> None:
        """Append a created order and make it the current order."""
        self._orders.append(order)
        self._current_order_id = order.id

    def refresh_order(self, order: Order) -> bool:
        """
        Replace the cached copy of ``order`` with a fresher collaborator copy.

        Returns:
            True when a cached order with the same id was replaced
        """
        for index, cached in enumerate(self._orders):
            if str(cached.id) == str(order.id):
                # Tracking responses may omit the owner; the draft recorded it
                if order.user_id is None:
                    order = replace(order, user_id=cached.user_id)
                self._orders[index] = order
                return True
        return False

    def clear_current_order(self) -> None:
        self._current_order_id = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for session storage."""
        return {
            "orders": [order.to_dict() for order in self._orders],
            "current_order_id": self._current_order_id,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "OrderState":
        """Restore from session data. Missing data yields an empty history."""
        if not data:
            return cls()
        return cls(
            orders=[Order.from_api(order) for order in data.get("orders", [])],
            current_order_id=data.get("current_order_id"),
        )
