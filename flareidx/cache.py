"""A map cache that can drop every entry read since the last purge."""

from __future__ import annotations

import threading
from typing import Generic, Hashable, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class Cache(Generic[K, V]):
    """Key/value cache that remembers which keys were read.

    Reading a key with :meth:`get` marks it as accessed; a later call to
    :meth:`remove_accessed` evicts every marked key.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._items: dict[K, V] = {}
        self._accessed: list[K] = []

    def add(self, key: K, value: V) -> None:
        """Store ``value`` under ``key``."""
        with self._lock:
            self._items[key] = value

    def get(self, key: K) -> V:
        """Return the value for ``key`` and mark it as accessed.

        Raises KeyError when the key is not cached.
        """
        with self._lock:
            value = self._items[key]
            self._accessed.append(key)
            return value

    def remove_accessed(self) -> None:
        """Evict every key read since the previous call."""
        with self._lock:
            for key in self._accessed:
                self._items.pop(key, None)
            self._accessed = []

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)