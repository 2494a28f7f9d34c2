"""Error taxonomy for vaultprune.

Raw third-party exceptions (hvac, requests) never leave :mod:`vaultprune.store`;
they are caught there and re-raised as one of the classes below.

Hierarchy
---------
SecretStoreError
├── NotFoundError
├── MalformedValueError
├── DecodeFailureError
├── TransportError
├── DepthExceededError
└── EmptyResultError
"""

from __future__ import annotations


class SecretStoreError(Exception):
    """Base exception for every vaultprune error.

    *action* and *path* name the attempted operation so the CLI error
    boundary can print something an operator can act on.
    """

    def __init__(self, message: str, *, action: str | None = None, path: str | None = None) -> None:
        super().__init__(message)
        self.action = action
        self.path = path


class NotFoundError(SecretStoreError):
    """Raised when no value exists at the requested path."""


class MalformedValueError(SecretStoreError):
    """Raised when a value exists but its envelope field is missing or not text."""


class DecodeFailureError(SecretStoreError):
    """Raised when the envelope field is text but not valid base64."""


class TransportError(SecretStoreError):
    """Raised when the underlying store call fails (network, auth, backend)."""

    def __init__(self, action: str, path: str, store: str, cause: str) -> None:
        super().__init__(
            f"failed to {action} key '{path}' from {store}: {cause}",
            action=action,
            path=path,
        )
        self.store = store
        self.cause = cause


class DepthExceededError(SecretStoreError):
    """Raised when recursive listing descends past the depth limit."""

    def __init__(self, path: str, depth: int, limit: int) -> None:
        super().__init__(
            f"maximum recurse depth {limit} exceeded at '{path}' (depth {depth})",
            action="listRecurse",
            path=path,
        )
        self.depth = depth
        self.limit = limit


class EmptyResultError(SecretStoreError):
    """Raised when a recursive delete finds no leaves under its root."""

    def __init__(self, path: str) -> None:
        super().__init__(f"can't find keys to delete: {path}", action="deleteAll", path=path)
