from __future__ import annotations


class VaultError(Exception):
    """Base class for vault storage errors."""


class AuthenticationRequiredError(VaultError):
    """Raised when a cloud vault operation runs without an active identity."""

    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__(message)


class StorageUnavailableError(VaultError):
    """Raised when the backing store cannot be reached or written.

    Wraps filesystem permission/IO errors and PostgREST/network failures. Never retried.
    """


class InvalidInputError(VaultError, ValueError):
    """Raised when a caller-supplied title or note id cannot address a note."""


class InvalidTitleError(InvalidInputError):
    """Raised when a title reduces to an empty slug."""


class InvalidNoteIdError(InvalidInputError):
    """Raised when a note id is not a safe storage key."""
