"""
Order lifecycle status and its tracking projection.

The status is owned by the order-management collaborator (an administrator
moves it forward). The storefront never advances it; it only projects the
last reported value onto a four-step progress display.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional


class OrderStatus(Enum):
    """
    Status of an order.

    Lifecycle:
        PENDING -> PROCESSING -> SHIPPED -> DELIVERED
    """

    PENDING = "Pending"
    """Set by the collaborator at order creation."""

    PROCESSING = "Processing"
    """Items are being prepared."""

    SHIPPED = "Shipped"
    """Order is on the way."""

    DELIVERED = "Delivered"
    """Terminal state."""

    @property
    def step(self) -> int:
        """1-based position in the lifecycle."""
        return _ORDERED.index(self) + 1

    @property
    def is_terminal(self) -> bool:
        return self is OrderStatus.DELIVERED

    @classmethod
    def labels(cls) -> List[str]:
        return [status.value for status in _ORDERED]

    @classmethod
    def parse(cls, label: Optional[str]) -> Optional["OrderStatus"]:
        """Exact label lookup. Returns None for unknown labels."""
        for status in _ORDERED:
            if status.value == label:
                return status
        return None


_ORDERED = [
    OrderStatus.PENDING,
    OrderStatus.PROCESSING,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
]

STAGE_DESCRIPTIONS = {
    OrderStatus.PENDING: "Order placed",
    OrderStatus.PROCESSING: "Preparing your items",
    OrderStatus.SHIPPED: "Order is on the way",
    OrderStatus.DELIVERED: "Order delivered successfully",
}

TOTAL_STEPS = len(_ORDERED)


def step_for_status(status: Optional[str]) -> int:
    """
    Map a reported status label to a tracking step (1-4).

    Unrecognized labels fall back to step 1 so the tracking view still
    renders. This is a display default, not a confirmed business rule.
    """
    parsed = OrderStatus.parse(status)
    return parsed.step if parsed else 1


@dataclass(frozen=True)
class TrackingStage:
    """One of the four stage markers on the tracking view."""

    step: int
    name: str
    description: str
    reached: bool
    current: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "step": self.step,
            "name": self.name,
            "description": self.description,
            "reached": self.reached,
            "current": self.current,
        }


@dataclass(frozen=True)
class TrackingProjection:
    """Position of an order within its delivery lifecycle."""

    status: str
    """Status label exactly as reported by the collaborator."""

    step: int

    @classmethod
    def for_status(cls, status: Optional[str]) -> "TrackingProjection":
        return cls(status=status or "", step=step_for_status(status))

    @property
    def progress(self) -> float:
        """Progress bar fill: (step - 1) / 3."""
        return (self.step - 1) / (TOTAL_STEPS - 1)

    @property
    def stages(self) -> List[TrackingStage]:
        """The four markers; a marker is reached iff step >= its index."""
        return [
            TrackingStage(
                step=status.step,
                name=status.value,
                description=STAGE_DESCRIPTIONS[status],
                reached=self.step >= status.step,
                current=self.step == status.step,
            )
            for status in _ORDERED
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "step": self.step,
            "progress": self.progress,
            "stages": [stage.to_dict() for stage in self.stages],
        }
