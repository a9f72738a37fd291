"""
Core module for the fireworks storefront.

Contains fundamental infrastructure components:
- exceptions: Custom exception hierarchy
- api_client: HTTP client for the remote commerce API
- storage: JSON-file storage for the durable session record
"""

from .exceptions import (
    StorefrontError,
    CommerceAPIError,
    APIUnavailableError,
    ResourceNotFoundError,
    ValidationError,
    CheckoutValidationError,
    EmptyCartError,
)
from .api_client import CommerceAPIClient
from .storage import JsonFileStorage

__all__ = [
    "StorefrontError",
    "CommerceAPIError",
    "APIUnavailableError",
    "ResourceNotFoundError",
    "ValidationError",
    "CheckoutValidationError",
    "EmptyCartError",
    "CommerceAPIClient",
    "JsonFileStorage",
]
