"""
rxstore Errors
==============

Every usage violation in rxstore raises one of these. The store never
recovers from them internally, so callers can rely on "no exception" meaning
"the operation fully happened".
"""

from typing import Any, Tuple


class StoreError(Exception):
    """Base class for all rxstore errors."""

    pass


class InvalidKeyPathError(StoreError, ValueError):
    """Raised when a key cannot be turned into a non-empty key path."""

    def __init__(self, key: Any):
        self.key = key
        super().__init__(f"Invalid key path: {key!r}")


class DuplicateInitializationError(StoreError):
    """Raised when initialize() targets a key path that is already taken."""

    def __init__(self, key_path: Tuple[str, ...], message: str = ""):
        self.key_path = key_path
        super().__init__(
            message or f"Observable at {format_key_path(key_path)} is already initialized."
        )


class KeyPathConflictError(DuplicateInitializationError):
    """Raised when a prefix of the key path already holds an observable."""

    def __init__(self, key_path: Tuple[str, ...], conflict: Tuple[str, ...]):
        self.conflict = conflict
        super().__init__(
            key_path,
            f"Cannot initialize {format_key_path(key_path)}: "
            f"{format_key_path(conflict)} is already an observable.",
        )


class UnknownObservableError(StoreError, KeyError):
    """Raised when publish() or subscribe() names a key path with no observable."""

    def __init__(self, key_path: Tuple[str, ...]):
        self.key_path = key_path
        super().__init__(f"No observable initialized at {format_key_path(key_path)}.")

    def __str__(self) -> str:
        # KeyError would repr() the message
        return self.args[0]


class NotSubscribedError(StoreError):
    """Raised when unsubscribe() is called for a subscriber with no subscriptions."""

    def __init__(self, subscriber: Any):
        self.subscriber = subscriber
        super().__init__(f"{subscriber!r} has no active subscriptions.")


def format_key_path(key_path: Tuple[str, ...]) -> str:
    return ".".join(key_path)
