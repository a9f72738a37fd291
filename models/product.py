"""
Catalog product model.

Products are owned by the commerce API. The storefront only reads them
(and, in the back-office, sends edits back). ``from_api`` accepts the
collaborator's camelCase JSON.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


CATEGORIES = [
    "Rockets",
    "Sparklers",
    "Fountains",
    "Ground Spinners",
    "Aerial Shells",
    "Gift Boxes",
]


@dataclass
class Product:
    """A firework product as listed in the catalog."""

    id: Any
    """Collaborator-assigned product id."""

    name: str
    """Display name."""

    price: float
    """Current unit price."""

    category: str = ""
    """Catalog category (e.g., 'Rockets')."""

    description: str = ""

    original_price: Optional[float] = None
    """Pre-discount price, when the product is on sale."""

    image: str = ""
    """Image URL or data URI."""

    rating: float = 0.0
    reviews: int = 0

    in_stock: bool = True
    """Stock flag reported by the catalog at read time."""

    features: List[str] = field(default_factory=list)
    safety: str = ""

    @property
    def discount_percent(self) -> int:
        """Whole-number discount against ``original_price`` (0 when not on sale)."""
        if self.original_price and self.original_price > self.price:
            return int((self.original_price - self.price) / self.original_price * 100)
        return 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the collaborator's JSON shape."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "price": self.price,
            "originalPrice": self.original_price,
            "image": self.image,
            "rating": self.rating,
            "reviews": self.reviews,
            "inStock": self.in_stock,
            "features": list(self.features),
            "safety": self.safety,
        }

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Product":
        """Create from a collaborator response."""
        original_price = data.get("originalPrice")
        features = data.get("features") or []
        if isinstance(features, str):
            features = split_features(features)

        return cls(
            id=data.get("id"),
            name=data.get("name", ""),
            price=float(data.get("price", 0) or 0),
            category=data.get("category", "") or "",
            description=data.get("description", "") or "",
            original_price=float(original_price) if original_price else None,
            image=data.get("image", "") or "",
            rating=float(data.get("rating", 0) or 0),
            reviews=int(data.get("reviews", 0) or 0),
            in_stock=bool(data.get("inStock", True)),
            features=list(features),
            safety=data.get("safety", "") or "",
        )


def split_features(raw: str) -> List[str]:
    """Split a comma-separated feature string, dropping blanks."""
    return [part.strip() for part in raw.split(",") if part.strip()]
