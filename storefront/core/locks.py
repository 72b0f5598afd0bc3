# storefront/core/locks.py

import threading
from contextlib import contextmanager
from typing import Dict, Iterator


class KeyedLocks:
    """
    Registry of re-entrant locks addressed by string keys.

    Cart mutations hold ``user:<id>``; checkout and cancellation then also
    hold ``product:<id>`` for every product whose stock they adjust. The order
    is always the caller's user key first, then product keys; keys passed to a
    single ``hold`` call are taken in sorted order.

    The HTTP routes are ``async def``, so under uvicorn handlers run one at a
    time on the event loop thread and never contend here. The locks serialize
    services called from other threads: worker threads, scripts and tests.
    The default in-memory engine shares one connection between sessions and
    depends on that single-threaded request handling.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.RLock] = {}

    def _lock_for(self, key: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.RLock()
            return lock

    @contextmanager
    def hold(self, *keys: str) -> Iterator[None]:
        ordered = sorted(set(keys))
        acquired = []
        try:
            for key in ordered:
                lock = self._lock_for(key)
                lock.acquire()
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()


def user_key(user_id: str) -> str:
    return f"user:{user_id}"


def product_key(product_id: str) -> str:
    return f"product:{product_id}"


locks = KeyedLocks()
