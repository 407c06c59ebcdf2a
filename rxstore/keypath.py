"""
rxstore Key Paths - Nested Mapping Access
=========================================

A key path names one slot inside a nested mapping. Keys can be written two
ways and both normalize to the same tuple of string segments:

```python
to_path("user.profile.name")        # ("user", "profile", "name")
to_path(["user", "profile", "name"])  # ("user", "profile", "name")
to_path('items[0]["first.name"]')   # ("items", "0", "first.name")
```

String keys use property-path syntax: ``.`` separates segments, ``[n]`` is a
numeric segment and ``["..."]`` / ``['...']`` is a quoted segment that may
contain dots. Sequence keys are taken literally, one segment per element, so
``("a.b",)`` is a single segment named ``a.b``.

Parsed strings are memoized in a bounded LRU cache since stores look up the
same handful of keys on every publish.
"""

import re
import threading
from collections.abc import Mapping, MutableMapping
from typing import Any, Callable, Optional, Sequence, Tuple, Union

from cachetools import LRUCache, cached

from .errors import InvalidKeyPathError, KeyPathConflictError

KeyPath = Tuple[str, ...]
KeyLike = Union[str, int, Sequence[Any]]

_MISSING = object()

_NAME = re.compile(r"[^.\[\]]+")
_INDEX = re.compile(r"""\[(?:(-?\d+)|(["'])((?:(?!\2)[^\\]|\\.)*?)\2)\]""")
_ESCAPE = re.compile(r"\\(.)")


@cached(cache=LRUCache(maxsize=1024), lock=threading.RLock())
def _parse(key: str) -> KeyPath:
    segments = []
    pos, end = 0, len(key)
    while True:
        bracket = _INDEX.match(key, pos)
        if bracket:
            index, _, quoted = bracket.groups()
            segments.append(index if index is not None else _ESCAPE.sub(r"\1", quoted))
            pos = bracket.end()
        else:
            if segments:
                if not key.startswith(".", pos):
                    raise InvalidKeyPathError(key)
                pos += 1
            name = _NAME.match(key, pos)
            if name is None:
                raise InvalidKeyPathError(key)
            segments.append(name.group())
            pos = name.end()
        if pos == end:
            return tuple(segments)


def to_path(key: KeyLike) -> KeyPath:
    """
    Normalize a key into a tuple of string segments.

    Raises InvalidKeyPathError for empty keys, malformed path strings and
    values that are neither strings, integers nor sequences.
    """
    if isinstance(key, str):
        return _parse(key)
    if isinstance(key, (bool, bytes, bytearray)):
        raise InvalidKeyPathError(key)
    if isinstance(key, int):
        return (str(key),)
    if isinstance(key, Sequence):
        if not key:
            raise InvalidKeyPathError(key)
        return tuple(str(segment) for segment in key)
    raise InvalidKeyPathError(key)


def get_in(mapping: Mapping, key: KeyLike, default: Any = None) -> Any:
    """Return the value at key inside a nested mapping, or default."""
    node: Any = mapping
    for segment in to_path(key):
        if not isinstance(node, Mapping):
            return default
        node = node.get(segment, _MISSING)
        if node is _MISSING:
            return default
    return node


def has_in(mapping: Mapping, key: KeyLike) -> bool:
    """True if the key path resolves to anything, leaf or nested mapping."""
    return get_in(mapping, key, _MISSING) is not _MISSING


def blocking_prefix(mapping: Mapping, key: KeyLike) -> Optional[KeyPath]:
    """
    Return the shortest strict prefix of key that holds a non-mapping value.

    Such a prefix makes the key unreachable: nothing can be stored beneath a
    leaf. Returns None when every existing intermediate node is a mapping.
    """
    path = to_path(key)
    node: Any = mapping
    for index, segment in enumerate(path[:-1]):
        node = node.get(segment, _MISSING)
        if node is _MISSING:
            return None
        if not isinstance(node, Mapping):
            return path[: index + 1]
    return None


def set_in(
    mapping: MutableMapping,
    key: KeyLike,
    value: Any,
    factory: Callable[[], MutableMapping] = dict,
) -> None:
    """
    Store value at key inside a nested mapping.

    Missing intermediate mappings are created with factory. Raises
    KeyPathConflictError, leaving mapping untouched, when a prefix of key
    already holds a non-mapping value.
    """
    path = to_path(key)
    conflict = blocking_prefix(mapping, path)
    if conflict is not None:
        raise KeyPathConflictError(path, conflict)

    node = mapping
    for segment in path[:-1]:
        child = node.get(segment, _MISSING)
        if child is _MISSING:
            child = node[segment] = factory()
        node = child
    node[path[-1]] = value
