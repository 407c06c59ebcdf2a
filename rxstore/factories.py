"""
rxstore Observable Factories
============================

A Store never builds observables itself. It calls a factory with the
normalized key path and the default value passed to ``initialize()`` and
stores whatever comes back. Anything satisfying the ObservableStream protocol
works; RxPY subjects do out of the box.

- behavior_subject_factory: replay-latest. New subscribers immediately
  receive the current value (the default, or the last published one).
- subject_factory: plain hot subject. Subscribers only see values published
  after they subscribed, and the default value is ignored.

Swap factories for test doubles or other broadcast semantics:

```python
store = Store(factory=subject_factory)
```
"""

from typing import Any, Callable, Protocol, runtime_checkable

from rx.subject import BehaviorSubject, Subject

from .keypath import KeyPath


@runtime_checkable
class Disposable(Protocol):
    """Handle returned by ObservableStream.subscribe()."""

    def dispose(self) -> None: ...


@runtime_checkable
class ObservableStream(Protocol):
    """Hot, multicast stream the store publishes into."""

    def subscribe(self, on_next: Callable[[Any], None]) -> Disposable: ...

    def on_next(self, value: Any) -> None: ...


ObservableFactory = Callable[[KeyPath, Any], ObservableStream]


def behavior_subject_factory(key_path: KeyPath, default_value: Any) -> BehaviorSubject:
    return BehaviorSubject(default_value)


def subject_factory(key_path: KeyPath, default_value: Any) -> Subject:
    return Subject()
