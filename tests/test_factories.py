"""Tests for the built-in observable factories."""

from rx.subject import BehaviorSubject, Subject

from rxstore import (
    Disposable,
    ObservableStream,
    Store,
    behavior_subject_factory,
    subject_factory,
)


def test_behavior_subject_factory_seeds_default_value():
    stream = behavior_subject_factory(("counter",), 42)
    received = []

    stream.subscribe(received.append)

    assert isinstance(stream, BehaviorSubject)
    assert received == [42]


def test_subject_factory_ignores_default_value():
    stream = subject_factory(("counter",), 42)
    received = []

    stream.subscribe(received.append)
    stream.on_next(1)

    assert isinstance(stream, Subject)
    assert not isinstance(stream, BehaviorSubject)
    assert received == [1]


def test_factories_produce_observable_streams():
    for factory in (behavior_subject_factory, subject_factory):
        stream = factory(("key",), None)
        handle = stream.subscribe(lambda value: None)

        assert isinstance(stream, ObservableStream)
        assert isinstance(handle, Disposable)


def test_each_initialize_gets_its_own_stream():
    created = []

    def tracking_factory(key_path, default_value):
        stream = behavior_subject_factory(key_path, default_value)
        created.append(stream)
        return stream

    store = Store(factory=tracking_factory)
    store.initialize("a", 0)
    store.initialize("b", 0)

    assert len(created) == 2
    assert created[0] is not created[1]


def test_custom_factory_controls_replay():
    """A store is only as replaying as the streams its factory builds"""

    def replay_nothing(key_path, default_value):
        return Subject()

    log = []
    store = Store(factory=replay_nothing)
    store.initialize("counter", 0)
    store.subscribe(object(), [{"observable_key": "counter", "on_value": lambda s, v: log.append(v)}])

    assert log == []
