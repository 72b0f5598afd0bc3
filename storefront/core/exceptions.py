# storefront/core/exceptions.py

from enum import Enum
from typing import Optional, Dict, Any, List
import logging

logger = logging.getLogger(__name__)


class ErrorCode(Enum):
    """Standardized error codes for the application."""

    # Input validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Lookup errors
    NOT_FOUND = "NOT_FOUND"

    # Cart and checkout errors
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"
    EMPTY_CART = "EMPTY_CART"
    INVALID_STATE = "INVALID_STATE"

    # Authentication errors
    AUTH_REQUIRED = "AUTH_REQUIRED"
    INVALID_TOKEN = "INVALID_TOKEN"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    CONFLICT = "CONFLICT"

    # System errors
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


STATUS_CODES: Dict[ErrorCode, int] = {
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.INSUFFICIENT_STOCK: 400,
    ErrorCode.EMPTY_CART: 400,
    ErrorCode.INVALID_STATE: 400,
    ErrorCode.AUTH_REQUIRED: 401,
    ErrorCode.INVALID_TOKEN: 403,
    ErrorCode.INVALID_CREDENTIALS: 401,
    ErrorCode.CONFLICT: 409,
    ErrorCode.INTERNAL_SERVER_ERROR: 500,
}


class StorefrontError(Exception):
    """Base exception for all storefront domain errors."""

    def __init__(
        self,
        code: ErrorCode,
        user_message: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.code = code
        self.user_message = user_message
        self.context = context or {}

        logger.info(
            f"Storefront error: {code.value}",
            extra={"error_code": code.value, "user_message": user_message, "context": self.context},
        )

        super().__init__(self.user_message)

    @property
    def status_code(self) -> int:
        return STATUS_CODES.get(self.code, 400)

    def to_response(self) -> Dict[str, Any]:
        """Convert to the API error envelope."""
        return {"success": False, "error": self.user_message}


class ValidationError(StorefrontError):
    """Malformed or missing input."""

    def __init__(self, user_message: str, fields: Optional[List[str]] = None):
        context = {"fields": fields} if fields else None
        super().__init__(ErrorCode.VALIDATION_ERROR, user_message, context)
        self.fields = fields or []


class NotFoundError(StorefrontError):
    """Referenced entity is absent or belongs to another user."""

    def __init__(self, entity: str, entity_id: Optional[str] = None):
        super().__init__(
            ErrorCode.NOT_FOUND,
            f"{entity} not found",
            {"entity": entity, "id": entity_id},
        )
        self.entity = entity
        self.entity_id = entity_id


class InsufficientStockError(StorefrontError):
    """Requested quantity exceeds the product's live stock."""

    def __init__(self, product_name: str, requested: int, available: int):
        super().__init__(
            ErrorCode.INSUFFICIENT_STOCK,
            f"Insufficient stock for {product_name}",
            {"product": product_name, "requested": requested, "available": available},
        )
        self.product_name = product_name
        self.requested = requested
        self.available = available


class EmptyCartError(StorefrontError):
    def __init__(self):
        super().__init__(ErrorCode.EMPTY_CART, "Cart is empty")


class InvalidStateError(StorefrontError):
    """Operation not allowed in the entity's current state."""

    def __init__(self, user_message: str, current_state: Optional[str] = None):
        super().__init__(ErrorCode.INVALID_STATE, user_message, {"state": current_state})
        self.current_state = current_state


class AuthError(StorefrontError):
    """Missing (401) or rejected (403) credentials."""

    def __init__(self, user_message: str, code: ErrorCode = ErrorCode.INVALID_TOKEN):
        super().__init__(code, user_message)


class ConflictError(StorefrontError):
    def __init__(self, user_message: str):
        super().__init__(ErrorCode.CONFLICT, user_message)


# Convenience functions for common errors
def raise_missing_token():
    """Raise the 401 returned when no bearer token was presented."""
    raise AuthError("Access token required", code=ErrorCode.AUTH_REQUIRED)


def raise_invalid_token():
    """Raise the 403 returned for invalid, expired or revoked tokens."""
    raise AuthError("Invalid or expired token", code=ErrorCode.INVALID_TOKEN)
