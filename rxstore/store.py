"""
rxstore Store - Keyed Observable Registry
=========================================

A Store owns a set of named observables and tracks who is subscribed to
them. Components initialize observables under key paths, publish new values
into them, and subscribe with a list of configs describing what to do with
each value.

Basic Usage
-----------

```python
from rxstore import Store, SubscriptionConfig

store = Store()
store.initialize("todos.items", [])

class TodoList:
    def render(self, items): ...

view = TodoList()
store.subscribe(view, [
    SubscriptionConfig(
        observable_key="todos.items",
        on_value=lambda view, items: view.render(items),
        filter=lambda view, items: [i for i in items if not i["done"]],
    ),
])

store.publish("todos.items", [{"title": "write docs", "done": False}])
store.unsubscribe(view)
```

Subscription Semantics
----------------------

- Each config subscribes a dispatch procedure: ``filter`` (if any) then
  ``on_value``, both called with the subscriber first.
- ``subscribe()`` replaces, it never layers. Subscribing a subscriber that is
  already subscribed disposes its old handles first.
- ``publish()`` is synchronous. Every dispatch procedure of the key path runs
  before it returns, in subscription order.
- After ``unsubscribe()`` returns, the subscriber receives nothing more, even
  from a publish that is still dispatching.
- Whether a new subscriber immediately receives the current value is up to
  the factory. The default ``BehaviorSubject`` factory replays it.

Configs can also live on the subscriber's class, which is convenient for
component classes that always subscribe the same way:

```python
class Counter:
    subscriptions = [
        {"observable_key": "counter", "on_value": lambda c, v: c.show(v)},
    ]

store.subscribe(Counter())
```

Subscribers are tracked by identity, so any object works, hashable or not.
"""

import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from .errors import (
    DuplicateInitializationError,
    KeyPathConflictError,
    NotSubscribedError,
    UnknownObservableError,
)
from .factories import (
    Disposable,
    ObservableFactory,
    ObservableStream,
    behavior_subject_factory,
)
from .keypath import KeyLike, KeyPath, blocking_prefix, get_in, has_in, set_in, to_path

OnValue = Callable[[Any, Any], None]
Filter = Callable[[Any, Any], Any]

_MISSING = object()


def pass_through(subscriber: Any, value: Any) -> Any:
    return value


@dataclass(frozen=True)
class SubscriptionConfig:
    """
    One observable a subscriber listens to.

    Attributes:
        observable_key: key path of an initialized observable
        on_value: called as on_value(subscriber, value) for every value
        filter: optional filter(subscriber, raw_value) -> value applied first
    """

    observable_key: KeyLike
    on_value: OnValue
    filter: Optional[Filter] = None

    @classmethod
    def coerce(cls, config: Any) -> "SubscriptionConfig":
        """Accept a SubscriptionConfig or a mapping with the same fields."""
        if isinstance(config, cls):
            return config
        if isinstance(config, Mapping):
            key = config.get("observable_key", config.get("observableKey", _MISSING))
            on_value = config.get("on_value", config.get("onValue", _MISSING))
            if key is _MISSING or on_value is _MISSING:
                raise TypeError(
                    f"Subscription config needs observable_key and on_value: {config!r}"
                )
            return cls(key, on_value, config.get("filter"))
        raise TypeError(f"Not a subscription config: {config!r}")


class _Namespace(dict):
    """Intermediate node of the observable table."""

    pass


class _SubscriptionSet:
    """Handles created by one subscribe() call for one subscriber."""

    __slots__ = ("subscriber", "handles", "active")

    def __init__(self, subscriber: Any):
        self.subscriber = subscriber
        self.handles: List[Disposable] = []
        self.active = True

    def dispose(self) -> None:
        """Dispose every handle, then re-raise the first failure, if any."""
        self.active = False
        handles, self.handles = self.handles, []
        error: Optional[Exception] = None
        for handle in handles:
            try:
                handle.dispose()
            except Exception as e:
                if error is None:
                    error = e
        if error is not None:
            raise error


def _observe(
    stream: ObservableStream, subscription_set: _SubscriptionSet, config: SubscriptionConfig
) -> Disposable:
    subscriber = subscription_set.subscriber
    on_value = config.on_value
    value_filter = config.filter or pass_through

    def dispatch(value: Any) -> None:
        # Stays silent once disposed, even mid-publish.
        if subscription_set.active:
            on_value(subscriber, value_filter(subscriber, value))

    return stream.subscribe(dispatch)


class Store:
    """
    Registry of keyed observables and the subscriptions attached to them.

    Args:
        factory: called as factory(key_path, default_value) by initialize()
            to build each observable. Defaults to a replay-latest
            BehaviorSubject.
    """

    def __init__(self, factory: ObservableFactory = behavior_subject_factory):
        self._factory = factory
        self._observables: _Namespace = _Namespace()
        self._subscriptions: Dict[int, _SubscriptionSet] = {}
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        return (
            f"Store(factory={getattr(self._factory, '__name__', self._factory)!r}, "
            f"subscribers={len(self._subscriptions)})"
        )

    def initialize(self, key: KeyLike, default_value: Any = None) -> None:
        """
        Create the observable at key, seeded with default_value.

        Raises DuplicateInitializationError if key is already taken, either
        by an observable or by observables nested beneath it, and
        KeyPathConflictError if a prefix of key is an observable.
        """
        path = to_path(key)
        with self._lock:
            if has_in(self._observables, path):
                raise DuplicateInitializationError(path)
            conflict = blocking_prefix(self._observables, path)
            if conflict is not None:
                raise KeyPathConflictError(path, conflict)

            stream = self._factory(path, default_value)
            set_in(self._observables, path, stream, factory=_Namespace)
        logging.debug(f"Initialized observable at {key!r} with {default_value!r}")

    def is_initialized(self, key: KeyLike) -> bool:
        """True if an observable lives at exactly this key path."""
        node = get_in(self._observables, to_path(key), _MISSING)
        return node is not _MISSING and not isinstance(node, _Namespace)

    def subscribe(self, subscriber: Any, configs: Optional[Iterable[Any]] = None) -> None:
        """
        Attach subscriber to the observables named in configs.

        Replaces any subscriptions the subscriber already has. When configs
        is omitted, they are read from ``type(subscriber).subscriptions``.
        Raises UnknownObservableError, before touching existing
        subscriptions, if any config names an uninitialized key path.
        """
        if configs is None:
            configs = getattr(type(subscriber), "subscriptions", None)
            if configs is None:
                raise TypeError(
                    f"{type(subscriber).__name__} has no subscriptions attribute "
                    "and no configs were given"
                )

        with self._lock:
            resolved: List[Tuple[ObservableStream, SubscriptionConfig]] = []
            for config in configs:
                config = SubscriptionConfig.coerce(config)
                resolved.append((self._lookup(to_path(config.observable_key)), config))

            previous = self._subscriptions.pop(id(subscriber), None)
            if previous is not None:
                previous.dispose()

            # Only subscribers with at least one subscription are tracked
            if not resolved:
                logging.debug(f"Cleared subscriptions of {type(subscriber).__name__}")
                return

            subscription_set = _SubscriptionSet(subscriber)
            self._subscriptions[id(subscriber)] = subscription_set
            try:
                for stream, config in resolved:
                    handle = _observe(stream, subscription_set, config)
                    if not subscription_set.active:
                        # Unsubscribed or replaced by its own replayed value.
                        handle.dispose()
                        break
                    subscription_set.handles.append(handle)
            except Exception:
                if self._subscriptions.get(id(subscriber)) is subscription_set:
                    del self._subscriptions[id(subscriber)]
                subscription_set.dispose()
                raise
        logging.debug(
            f"Subscribed {type(subscriber).__name__} to {len(resolved)} observable(s)"
        )

    def unsubscribe(self, subscriber: Any) -> None:
        """
        Dispose every subscription of subscriber.

        Raises NotSubscribedError if subscriber has no active subscriptions.
        """
        with self._lock:
            subscription_set = self._subscriptions.pop(id(subscriber), None)
            if subscription_set is None:
                raise NotSubscribedError(subscriber)
            count = len(subscription_set.handles)
            subscription_set.dispose()
        logging.debug(f"Unsubscribed {type(subscriber).__name__} ({count} handle(s))")

    def has_subscriptions(self, subscriber: Any) -> bool:
        return id(subscriber) in self._subscriptions

    def publish(self, key: KeyLike, next_value: Any) -> None:
        """
        Emit next_value to the observable at key.

        Every subscriber's filter and on_value run synchronously before this
        returns. Raises UnknownObservableError if key has no observable.
        """
        path = to_path(key)
        with self._lock:
            stream = self._lookup(path)
        logging.debug(f"Publishing to {key!r}")
        stream.on_next(next_value)

    def _lookup(self, path: KeyPath) -> ObservableStream:
        node = get_in(self._observables, path, _MISSING)
        if node is _MISSING or isinstance(node, _Namespace):
            raise UnknownObservableError(path)
        return node
