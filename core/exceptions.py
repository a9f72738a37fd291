"""
Custom exceptions for the fireworks storefront.

Exception Hierarchy:
    StorefrontError (base)
    ├── CommerceAPIError             - Collaborator answered with an error
    │   ├── APIUnavailableError      - Collaborator unreachable or timed out
    │   └── ResourceNotFoundError    - Product or order does not exist
    ├── ValidationError              - Submitted form has invalid fields
    │   └── CheckoutValidationError  - Checkout address form failed
    └── EmptyCartError               - Checkout attempted with an empty cart

Usage:
    Only the collaborator boundary (core.api_client) and the checkout path
    raise these. Routes catch them and turn them into notifications or a
    not-found view. The state containers never raise for expected conditions.
"""

from typing import Optional, Dict, Any


class StorefrontError(Exception):
    """
    Base exception for all storefront errors.

    All custom exceptions inherit from this class, allowing callers to catch
    all application-specific errors with a single except clause if needed.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional context for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# COLLABORATOR ERRORS - surfaced as notifications, never retried
# =============================================================================

class CommerceAPIError(StorefrontError):
    """
    The remote commerce API rejected a request.

    Carries the HTTP status code (None when no response was received) and
    the server's own message when it sent one.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        operation: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        error_details = details or {}
        if status_code is not None:
            error_details["status_code"] = status_code
        if operation:
            error_details["operation"] = operation
        super().__init__(message, error_details)
        self.status_code = status_code
        self.operation = operation


class APIUnavailableError(CommerceAPIError):
    """
    The commerce API could not be reached.

    Typical causes:
    - API server not running
    - Wrong COMMERCE_API_URL in .env
    - Request timed out
    """

    def __init__(self, operation: str, reason: str = ""):
        message = "Network error. Please check if the API server is running."
        details = {
            "reason": reason,
            "resolution": "Ensure the commerce API is running and COMMERCE_API_URL is correct in .env"
        }
        super().__init__(message, None, operation, details)


class ResourceNotFoundError(CommerceAPIError):
    """
    A product or order does not exist on the collaborator.

    Rendered as an explicit "not found" view, distinct from a transient
    network failure.
    """

    def __init__(self, resource: str, identifier: Any, operation: Optional[str] = None):
        message = f"{resource} not found: {identifier}"
        details = {"resource": resource, "identifier": str(identifier)}
        super().__init__(message, 404, operation, details)
        self.resource = resource
        self.identifier = identifier


# =============================================================================
# FORM ERRORS - block submission, leave state untouched
# =============================================================================

class ValidationError(StorefrontError):
    """
    A submitted form has one or more invalid fields.

    ``errors`` maps each offending field name to a single message.
    """

    def __init__(self, errors: Dict[str, str], message: str = "Please correct the highlighted fields"):
        super().__init__(message, {"fields": sorted(errors)})
        self.errors = dict(errors)


class CheckoutValidationError(ValidationError):
    """The checkout address form failed validation."""

    def __init__(self, errors: Dict[str, str]):
        super().__init__(errors, "Please fill all required fields correctly")


class EmptyCartError(StorefrontError):
    """Checkout was attempted with nothing in the cart."""

    def __init__(self, message: str = "Your cart is empty"):
        super().__init__(message)
