"""
Error Definitions

Defines the exception hierarchy raised by the token repository.
"""

from typing import Any, Optional


class TokenRepositoryError(Exception):
    """
    Repository Base Exception

    Base class for all custom exceptions, containing error message, type, and code.
    """

    def __init__(
        self,
        message: str,
        error_type: str = "repository_error",
        code: str = "internal_error",
        details: Optional[dict[str, Any]] = None,
    ):
        """
        Initialize exception

        Args:
            message: Error message
            error_type: Error type
            code: Error code
            details: Extra error details
        """
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.code = code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to dictionary format (for structured logs and API responses)

        Returns:
            dict: Error information dictionary
        """
        result = {
            "error": {
                "message": self.message,
                "type": self.error_type,
                "code": self.code,
            }
        }
        if self.details:
            result["error"]["details"] = self.details
        return result


class ValidationError(TokenRepositoryError):
    """
    Validation Error

    Raised locally, before any network call, when an argument is unacceptable.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        code: str = "validation_error",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            error_type="validation_error",
            code=code,
            details=details,
        )


class ExpiredTokenError(ValidationError):
    """
    Expired Token Error

    Raised by insert and update when the token's expiry is not in the future.
    """

    def __init__(
        self,
        message: str = "Token has already expired",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message=message, code="token_expired", details=details)


class TransportError(TokenRepositoryError):
    """
    Transport Error

    Raised when Redis is unreachable, times out, or rejects a command.
    The underlying exception is chained as __cause__.
    """

    def __init__(
        self,
        message: str = "Redis transport error",
        code: str = "transport_error",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            error_type="transport_error",
            code=code,
            details=details,
        )


class TokenIntegrityError(TokenRepositoryError):
    """
    Integrity Error

    Raised when a stored value cannot be decoded or does not belong to the
    proxy it was read through. Never treated as a cache miss.
    """

    def __init__(
        self,
        message: str = "Stored token is corrupt",
        code: str = "integrity_error",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            error_type="integrity_error",
            code=code,
            details=details,
        )


class ConfigurationError(TokenRepositoryError):
    """
    Configuration Error

    Raised when connection settings are incomplete or malformed.
    """

    def __init__(
        self,
        message: str = "Invalid configuration",
        code: str = "configuration_error",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            error_type="configuration_error",
            code=code,
            details=details,
        )
