"""
rxstore - Keyed Observable Store

An in-process publish/subscribe registry of named observables. Components
initialize observables under key paths, publish values into them and
subscribe with per-subscriber filters. Observables are RxPY subjects by
default.
"""

from .errors import (
    DuplicateInitializationError,
    InvalidKeyPathError,
    KeyPathConflictError,
    NotSubscribedError,
    StoreError,
    UnknownObservableError,
)
from .factories import (
    Disposable,
    ObservableFactory,
    ObservableStream,
    behavior_subject_factory,
    subject_factory,
)
from .keypath import KeyPath, get_in, has_in, set_in, to_path
from .store import Store, SubscriptionConfig, pass_through

__all__ = [
    # Registry
    "Store",
    "SubscriptionConfig",
    "pass_through",
    # Factories
    "behavior_subject_factory",
    "subject_factory",
    "ObservableFactory",
    "ObservableStream",
    "Disposable",
    # Key paths
    "KeyPath",
    "to_path",
    "get_in",
    "has_in",
    "set_in",
    # Exceptions
    "StoreError",
    "DuplicateInitializationError",
    "KeyPathConflictError",
    "UnknownObservableError",
    "NotSubscribedError",
    "InvalidKeyPathError",
]
