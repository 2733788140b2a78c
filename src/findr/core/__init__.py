"""Core configuration, errors and logging.

The ``Findr`` composition root lives in ``findr.core.app`` and is
re-exported from the top-level package.
"""

from findr.core.config import Settings, get_settings, is_placeholder
from findr.core.exceptions import (
    ClassificationError,
    DuplicateEmailError,
    DuplicateUsernameError,
    FindrError,
    InvalidCredentialsError,
    NotConfiguredError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from findr.core.logging import configure_logging

__all__ = [
    # Configuration
    "Settings",
    "get_settings",
    "is_placeholder",
    "configure_logging",
    # Errors
    "ClassificationError",
    "DuplicateEmailError",
    "DuplicateUsernameError",
    "FindrError",
    "InvalidCredentialsError",
    "NotConfiguredError",
    "NotFoundError",
    "StorageError",
    "ValidationError",
]
