"""Helper modules for the fireworks storefront."""

__all__ = [
    "checkout",
]
