"""
Shared pytest fixtures and test doubles for rxstore tests.
"""

import pytest

from rxstore import Store, subject_factory


class FakeDisposable:
    def __init__(self, stream, callback):
        self._stream = stream
        self._callback = callback
        self.dispose_count = 0

    def dispose(self):
        self.dispose_count += 1
        if self._callback in self._stream.callbacks:
            self._stream.callbacks.remove(self._callback)

    @property
    def disposed(self):
        return self.dispose_count > 0


class FakeStream:
    """Hot stream without replay that records everything done to it."""

    def __init__(self, key_path, default_value):
        self.key_path = key_path
        self.default_value = default_value
        self.callbacks = []
        self.handles = []
        self.emitted = []

    def subscribe(self, on_next):
        self.callbacks.append(on_next)
        handle = FakeDisposable(self, on_next)
        self.handles.append(handle)
        return handle

    def on_next(self, value):
        self.emitted.append(value)
        for callback in list(self.callbacks):
            callback(value)


class FakeFactory:
    def __init__(self):
        self.calls = []
        self.streams = {}

    def __call__(self, key_path, default_value):
        self.calls.append((key_path, default_value))
        stream = self.streams[key_path] = FakeStream(key_path, default_value)
        return stream


class Recorder:
    """on_value callback that remembers who received what."""

    def __init__(self):
        self.calls = []

    def __call__(self, subscriber, value):
        self.calls.append((subscriber, value))

    @property
    def values(self):
        return [value for _, value in self.calls]


class Subscriber:
    """Plain object used as a subscriber identity."""

    def __init__(self, name="subscriber"):
        self.name = name

    def __repr__(self):
        return f"Subscriber({self.name!r})"


@pytest.fixture
def store():
    """Store with the default replay-latest BehaviorSubject factory."""
    return Store()


@pytest.fixture
def subject_store():
    """Store whose observables do not replay on subscribe."""
    return Store(factory=subject_factory)


@pytest.fixture
def fake_factory():
    return FakeFactory()


@pytest.fixture
def fake_store(fake_factory):
    return Store(factory=fake_factory)


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def make_recorder():
    return Recorder


@pytest.fixture
def make_subscriber():
    return Subscriber
