"""Custom exceptions for the gesedels package."""

from __future__ import annotations


class GesedelsError(Exception):
    """Base exception for all gesedels errors."""


class StoreError(GesedelsError):
    """Raised when an embedded store operation fails."""

    def __init__(self, operation: str, detail: str = "") -> None:
        self.operation = operation
        msg = f"Store error during '{operation}'"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class TxNotWritableError(StoreError):
    """Raised when a write is attempted inside a read-only transaction."""

    def __init__(self, operation: str) -> None:
        super().__init__(operation, "transaction is read-only")


class InvalidUserError(GesedelsError):
    """Raised when a user identifier contains the key separator."""

    def __init__(self, user: str) -> None:
        self.user = user
        super().__init__(f"user {user!r} must not contain ':'")
