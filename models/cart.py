"""
Shopping cart models.

The cart is an insertion-ordered mapping of product id to line item.
It lives in the browser session and never talks to the commerce API.

Invariants:
    - At most one line item per product id
    - Every stored line item has quantity >= 1; any mutation that would
      take a quantity below 1 removes the line item instead
    - Item count and subtotal are computed from the mapping on every read
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional

from models.product import Product
from modules.checkout import CheckoutTotals, compute_totals


def _key(product_id: Any) -> str:
    # Session JSON turns dict keys into strings; normalise up front so that
    # 7 and "7" address the same line item.
    return str(product_id)


@dataclass
class CartLineItem:
    """One product entry in the cart, with its own quantity."""

    product_id: Any
    name: str
    unit_price: float
    quantity: int = 1
    category: str = ""
    image_ref: str = ""
    original_unit_price: Optional[float] = None

    @property
    def line_total(self) -> float:
        """unit_price × quantity."""
        return self.unit_price * self.quantity

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for session storage."""
        return {
            "product_id": self.product_id,
            "name": self.name,
            "unit_price": self.unit_price,
            "original_unit_price": self.original_unit_price,
            "quantity": self.quantity,
            "category": self.category,
            "image_ref": self.image_ref,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CartLineItem":
        """Create from dictionary (e.g., from session)."""
        return cls(
            product_id=data.get("product_id"),
            name=data.get("name", ""),
            unit_price=float(data.get("unit_price", 0.0)),
            quantity=int(data.get("quantity", 1)),
            category=data.get("category", ""),
            image_ref=data.get("image_ref", ""),
            original_unit_price=data.get("original_unit_price"),
        )

    @classmethod
    def from_product(cls, product: Product, quantity: int) -> "CartLineItem":
        """Snapshot the catalog fields the cart needs."""
        return cls(
            product_id=product.id,
            name=product.name,
            unit_price=product.price,
            quantity=quantity,
            category=product.category,
            image_ref=product.image,
            original_unit_price=product.original_price,
        )


class CartState:
    """
    The set of selected products and their quantities.

    All operations are side-effect free on anything but the mapping itself,
    and none of them raise for an absent product id.
    """

    def __init__(self, items: Optional[List[CartLineItem]] = None):
        self._items: Dict[str, CartLineItem] = {}
        for item in items or []:
            if item.quantity >= 1:
                self._restore(item)

    def _restore(self, item: CartLineItem) -> None:
        key = _key(item.product_id)
        existing = self._items.get(key)
        if existing:
            existing.quantity += item.quantity
        else:
            self._items[key] = item

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_item(self, product: Product, quantity: int = 1) -> None:
        """
        Add ``quantity`` of ``product``.

        Increments the existing line item when the product is already in
        the cart. Non-positive quantities are ignored.
        """
        if quantity < 1:
            return

        key = _key(product.id)
        existing = self._items.get(key)
        if existing:
            existing.quantity += quantity
        else:
            self._items[key] = CartLineItem.from_product(product, quantity)

    def remove_item(self, product_id: Any) -> None:
        """Delete the line item. No-op if absent."""
        self._items.pop(_key(product_id), None)

    def update_quantity(self, product_id: Any, new_quantity: int) -> None:
        """
        Replace the stored quantity exactly.

        A quantity of zero or less removes the line item. Unknown product
        ids are ignored.
        """
        if new_quantity <= 0:
            self.remove_item(product_id)
            return

        item = self._items.get(_key(product_id))
        if item:
            item.quantity = new_quantity

    def clear_cart(self) -> None:
        self._items.clear()

    # ------------------------------------------------------------------
    # Derived reads
    # ------------------------------------------------------------------

    def get_item_count(self) -> int:
        """Sum of quantities across all line items."""
        return sum(item.quantity for item in self._items.values())

    def get_total(self) -> float:
        """Subtotal: Σ unit_price × quantity. Excludes tax and shipping."""
        return sum(item.line_total for item in self._items.values())

    def summary(self) -> CheckoutTotals:
        """Subtotal, tax, shipping and total for the current contents."""
        return compute_totals(self._items.values())

    def get(self, product_id: Any) -> Optional[CartLineItem]:
        return self._items.get(_key(product_id))

    @property
    def items(self) -> List[CartLineItem]:
        """Line items in insertion order."""
        return list(self._items.values())

    @property
    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[CartLineItem]:
        return iter(self.items)

    def __contains__(self, product_id: Any) -> bool:
        return _key(product_id) in self._items

    # ------------------------------------------------------------------
    # Session storage
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for session storage."""
        return {"items": [item.to_dict() for item in self._items.values()]}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "CartState":
        """Restore from session data. Missing data yields an empty cart."""
        if not data:
            return cls()
        return cls([CartLineItem.from_dict(item) for item in data.get("items", [])])
