"""Core module - configuration and utilities."""

from gracebot.core.config import Settings, get_settings
from gracebot.core.exceptions import (
    AppException,
    ChannelError,
    ClassificationError,
    ConfigurationError,
    DuplicateRecordError,
    InvalidActivityError,
    StorageError,
    ValidationError,
)
from gracebot.core.logging import configure_logging

__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
    "AppException",
    "ChannelError",
    "ClassificationError",
    "ConfigurationError",
    "DuplicateRecordError",
    "InvalidActivityError",
    "StorageError",
    "ValidationError",
]
