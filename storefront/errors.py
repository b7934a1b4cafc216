"""
Common Error Constants

User-facing messages shared between services and routers.
"""

# Auth errors
ERROR_UNAUTHORIZED = "Unauthorized"
ERROR_NOT_ADMIN = "You do not have administrative privileges."
ERROR_UNKNOWN = "An unknown error occurred"
ERROR_SERVICE_ROLE_REQUIRED = "Service role credential required"

# Role assignment errors
ERROR_ROLE_FIELDS_REQUIRED = "User ID and role are required"
ERROR_ROLE_INVALID = "Unknown role"
MESSAGE_ROLE_ALREADY_SET = "Role already set"

# Cart errors
ERROR_CART_SYNC_TITLE = "Cart sync failed"
ERROR_CART_SYNC_DESCRIPTION = "Your cart changes may not be saved."

# Account errors
ERROR_PROFILE_NOT_FOUND = "Profile not found"
ERROR_ADDRESS_NOT_FOUND = "Address not found"

# Generic errors
ERROR_INVALID_REQUEST = "Invalid request"
ERROR_INTERNAL = "Internal server error"
ERROR_NOT_FOUND = "Not found"


class StorefrontError(Exception):
    """Base class for errors surfaced to the storefront user."""


class AdminAccessDenied(StorefrontError):
    """Raised when an admin-flagged sign-in has no admin role."""

    def __init__(self, message: str = ERROR_NOT_ADMIN) -> None:
        super().__init__(message)


def describe_error(error: BaseException | None) -> str:
    """Human-readable message for a caught exception."""
    if error is None:
        return ERROR_UNKNOWN
    message = getattr(error, "message", None) or str(error)
    return message or ERROR_UNKNOWN


class NotAuthenticated(StorefrontError):
    """Raised when an account operation runs without a signed-in user."""

    def __init__(self, message: str = ERROR_UNAUTHORIZED) -> None:
        super().__init__(message)
