"""
Custom exception classes for the storefront service.

Each exception carries a human-readable message plus a details dict, and a
stable ``error_code`` that the HTTP layer puts in error responses.
"""

from typing import Any, Dict, Optional


class StorefrontException(Exception):
    """
    Base exception for all storefront service errors.

    All custom exceptions should inherit from this class
    for consistent error handling.
    """

    error_code = "storefront_error"

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Initialize storefront exception.

        Args:
            message: Human-readable error message
            details: Additional context about the error
        """
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationException(StorefrontException):
    """Raised when input validation fails."""

    error_code = "validation_error"

    def __init__(
        self,
        field_name: str,
        value: Any,
        reason: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Initialize validation exception.

        Args:
            field_name: Name of the field that failed validation
            value: The invalid value
            reason: Explanation of why validation failed
            details: Additional context about the error
        """
        self.field_name = field_name
        self.value = value
        self.reason = reason
        message = f"Validation failed for '{field_name}': {reason}"
        super().__init__(message, details)


class ProductNotFoundException(StorefrontException):
    """Raised when a product is neither in the backend nor in the sample catalog."""

    error_code = "product_not_found"

    def __init__(self, product_id: str) -> None:
        self.product_id = str(product_id)
        super().__init__(
            f"Product not found: {product_id}", {"product_id": self.product_id}
        )


class CartItemNotFoundException(StorefrontException):
    """Raised when updating or removing a product that is not in the cart."""

    error_code = "cart_item_not_found"

    def __init__(self, product_id: str) -> None:
        self.product_id = str(product_id)
        super().__init__("Item not found in cart", {"product_id": self.product_id})


class OrderNotFoundException(StorefrontException):
    """Raised when an order id matches no stored order."""

    error_code = "order_not_found"

    def __init__(self, order_id: str) -> None:
        self.order_id = str(order_id)
        super().__init__(f"Order not found: {order_id}", {"order_id": self.order_id})


class WishlistItemExistsException(StorefrontException):
    """Raised when a product is already on the wishlist."""

    error_code = "wishlist_item_exists"

    def __init__(self, product_id: str) -> None:
        self.product_id = str(product_id)
        super().__init__("Item already in wishlist", {"product_id": self.product_id})


class BackendUnavailableException(StorefrontException):
    """
    Raised when a call to the hosted backend fails.

    Services catch this to fall back to local storage or sample data.
    """

    error_code = "backend_unavailable"

    def __init__(self, operation: str, reason: Optional[str] = None) -> None:
        """
        Initialize backend unavailable exception.

        Args:
            operation: Name of the backend operation that failed
            reason: Underlying error message
        """
        self.operation = operation
        self.reason = reason
        message = f"Backend operation '{operation}' failed"
        if reason:
            message += f": {reason}"
        super().__init__(message, {"operation": operation, "reason": reason})


class BackendRejectedException(StorefrontException):
    """Raised when a stored procedure answers ``{"success": false, "error": ...}``."""

    error_code = "backend_rejected"

    def __init__(self, operation: str, reason: Optional[str] = None) -> None:
        self.operation = operation
        self.reason = reason
        super().__init__(
            reason or f"Backend rejected '{operation}'",
            {"operation": operation, "reason": reason},
        )


class AuthenticationException(StorefrontException):
    """Raised when the bearer token is missing, expired or malformed."""

    error_code = "authentication_failed"

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class PermissionDeniedException(StorefrontException):
    """Raised when an authenticated user lacks the role an endpoint requires."""

    error_code = "permission_denied"

    def __init__(self, required_role: str) -> None:
        self.required_role = required_role
        super().__init__(
            f"This action requires the '{required_role}' role",
            {"required_role": required_role},
        )


class CartOwnerRequiredException(StorefrontException):
    """Raised when a request carries neither a bearer token nor a guest session."""

    error_code = "cart_owner_required"

    def __init__(self) -> None:
        super().__init__("Sign in or send an X-Guest-Session header")
