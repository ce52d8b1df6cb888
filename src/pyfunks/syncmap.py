"""A small concurrent key/value map and an enumeration-based size helper."""

from __future__ import annotations

import threading
from collections.abc import Callable, Hashable
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class RangeableMap(Protocol):
    """Anything that can enumerate its entries through a callback."""

    def range(self, fn: Callable[[Any, Any], bool], /) -> None: ...


class SyncMap:
    """Thread-safe map whose enumeration never blocks writers.

    ``range`` walks a snapshot taken under the lock, so entries stored or
    deleted while it runs may or may not be visited.
    """

    def __init__(self) -> None:
        self._data: dict[Hashable, Any] = {}
        self._lock = threading.Lock()

    def store(self, key: Hashable, value: Any) -> None:
        with self._lock:
            self._data[key] = value

    def load(self, key: Hashable) -> tuple[Any, bool]:
        """Return ``(value, True)`` if present, else ``(None, False)``."""
        with self._lock:
            if key in self._data:
                return self._data[key], True
            return None, False

    def load_or_store(self, key: Hashable, value: Any) -> tuple[Any, bool]:
        """Return the existing value and True, or store ``value`` and return it with False."""
        with self._lock:
            if key in self._data:
                return self._data[key], True
            self._data[key] = value
            return value, False

    def delete(self, key: Hashable) -> None:
        with self._lock:
            self._data.pop(key, None)

    def range(self, fn: Callable[[Any, Any], bool], /) -> None:
        """Call ``fn(key, value)`` for each entry until it returns False."""
        with self._lock:
            snapshot = list(self._data.items())
        for key, value in snapshot:
            if not fn(key, value):
                break


def sync_map_size(m: RangeableMap) -> int:
    """Count the entries of ``m`` by enumerating it.

    The count reflects the entries visited during this call; concurrent
    writers may have changed the map by the time it is returned.
    """
    count = 0

    def _count(key: Any, value: Any) -> bool:
        nonlocal count
        count += 1
        return True

    m.range(_count)
    return count
