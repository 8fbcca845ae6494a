from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager


class StoreLockRegistry:
    """One lock per store id; wraps the read-check-write of a booking."""

    def __init__(self) -> None:
        self._locks: dict[str, threading.Lock] = {}
        self._lock_lock = threading.Lock()  # guards the locks dict

    def _get_lock(self, store_id: str) -> threading.Lock:
        with self._lock_lock:
            if store_id not in self._locks:
                self._locks[store_id] = threading.Lock()
            return self._locks[store_id]

    @contextmanager
    def hold(self, store_id: str) -> Iterator[None]:
        lock = self._get_lock(store_id)
        with lock:
            yield
