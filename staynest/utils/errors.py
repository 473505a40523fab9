"""
Exception hierarchy shared by the stores and the API layer.
"""
from typing import Optional, Dict, Any


class MarketplaceError(Exception):
    """Base class for all marketplace errors."""

    error_code = "MARKETPLACE_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(MarketplaceError):
    """Input rejected before any remote write."""
    error_code = "VALIDATION_ERROR"


class NotFoundError(MarketplaceError):
    """Referenced document does not exist."""
    error_code = "NOT_FOUND"


class ConflictError(MarketplaceError):
    """Write conflicts with existing state."""
    error_code = "CONFLICT"


class EmailAlreadyRegistered(ConflictError):
    error_code = "EMAIL_ALREADY_REGISTERED"


class AlreadyReviewed(ConflictError):
    error_code = "ALREADY_REVIEWED"


class Unauthorized(MarketplaceError):
    """Actor lacks the capability required by an operation."""
    error_code = "UNAUTHORIZED"


class VerificationRequired(Unauthorized):
    error_code = "VERIFICATION_REQUIRED"


class AuthenticationError(MarketplaceError):
    """Login failed."""
    error_code = "AUTHENTICATION_FAILED"


class UserNotFound(AuthenticationError):
    error_code = "USER_NOT_FOUND"


class AccountDisabled(AuthenticationError):
    error_code = "ACCOUNT_DISABLED"


class IncorrectPassword(AuthenticationError):
    error_code = "INCORRECT_PASSWORD"


class StorageError(MarketplaceError):
    """Document store is unavailable or rejected an operation."""
    error_code = "STORAGE_ERROR"


class RecommendationError(MarketplaceError):
    """Recommendation service call failed."""
    error_code = "RECOMMENDATION_FAILED"
