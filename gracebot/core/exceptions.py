"""Custom exceptions for the application."""

from typing import Any


class AppException(Exception):
    """Base exception for application errors."""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}


class ConfigurationError(AppException):
    """Raised when there's a configuration problem."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, code="CONFIGURATION_ERROR", details=details)


class ValidationError(AppException):
    """Raised when a required activity field is missing during conversion."""

    def __init__(self, field: str, source: str = "activity") -> None:
        super().__init__(
            f"Missing required field '{field}' on {source}",
            code="VALIDATION_ERROR",
            details={"field": field, "source": source},
        )
        self.field = field


class StorageError(AppException):
    """Raised when the record store fails to commit."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
        code: str = "STORAGE_ERROR",
    ) -> None:
        super().__init__(
            message,
            code=code,
            details={**({"operation": operation} if operation else {}), **(details or {})},
        )


class DuplicateRecordError(StorageError):
    """Raised when a record with the same identifier is already stored."""

    def __init__(self, record_id: str) -> None:
        super().__init__(
            f"Record already exists: {record_id}",
            operation="insert",
            details={"record_id": record_id},
            code="DUPLICATE_RECORD",
        )
        self.record_id = record_id


class ChannelError(AppException):
    """Raised when channel operations fail."""

    def __init__(
        self,
        message: str,
        channel: str,
        details: dict[str, Any] | None = None,
        code: str = "CHANNEL_ERROR",
    ) -> None:
        super().__init__(
            message,
            code=code,
            details={"channel": channel, **(details or {})},
        )


class InvalidActivityError(ChannelError):
    """Raised when an inbound payload is not a valid activity."""

    def __init__(self, message: str, channel: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, channel=channel, details=details, code="INVALID_ACTIVITY")


class ClassificationError(AppException):
    """Raised when the intent classification service fails."""

    def __init__(self, message: str, provider: str | None = None) -> None:
        super().__init__(
            message,
            code="CLASSIFICATION_ERROR",
            details={"provider": provider} if provider else {},
        )
