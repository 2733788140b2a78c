"""Custom exceptions.

Findr services raise a small hierarchy of exceptions. Transport-level
detail never reaches callers; it is wrapped into one of these with a
plain message.

Example:
    >>> from findr.core.exceptions import FindrError, NotConfiguredError
    >>> isinstance(NotConfiguredError("no store"), FindrError)
    True
    >>> try:
    ...     raise DuplicateEmailError("Email already registered")
    ... except ValidationError as e:
    ...     print(f"Caught: {type(e).__name__}")
    Caught: DuplicateEmailError
"""

from __future__ import annotations


class FindrError(Exception):
    """Base exception for Findr.

    Example:
        >>> from findr.core.exceptions import FindrError
        >>> str(FindrError("something went wrong"))
        'something went wrong'
    """


class StorageError(FindrError):
    """Hosted store or object storage operation failed."""


class NotConfiguredError(StorageError):
    """Backend credentials are missing or still placeholders.

    Example:
        >>> from findr.core.exceptions import NotConfiguredError
        >>> raise NotConfiguredError("Supabase not configured")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        NotConfiguredError: Supabase not configured
    """


class NotFoundError(StorageError):
    """Requested row does not exist."""


class ClassificationError(FindrError):
    """Image could not be classified.

    Covers timeouts, encoding failures, transport errors and unparseable
    model replies. Callers offer manual entry instead.
    """


class ValidationError(FindrError):
    """User-facing rejection with no partial effect."""


class DuplicateEmailError(ValidationError):
    """Email is already registered on this device."""


class DuplicateUsernameError(ValidationError):
    """Username is already taken on this device."""


class InvalidCredentialsError(ValidationError):
    """Email/password pair does not match the local credential store."""


__all__ = [
    "FindrError",
    "StorageError",
    "NotConfiguredError",
    "NotFoundError",
    "ClassificationError",
    "ValidationError",
    "DuplicateEmailError",
    "DuplicateUsernameError",
    "InvalidCredentialsError",
]
