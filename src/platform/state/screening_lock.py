"""
Per-screening mutual exclusion

One anyio.Lock per screening id. Requests against the same screening queue on
the same lock; requests against different screenings never contend.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
import threading
import time

import anyio

from src.platform.logging.loguru_io import Logger


class ScreeningLockRegistry:
    """
    Lock registry keyed by screening id

    Locks are created lazily and live as long as the registry; a screening has
    a bounded number of seats, so the registry grows with screenings only.
    """

    def __init__(self, *, slow_wait_warning_seconds: float = 1.0) -> None:
        self._locks: dict[int, anyio.Lock] = {}
        self._guard = threading.Lock()
        self._slow_wait_warning_seconds = slow_wait_warning_seconds

    def lock_for(self, screening_id: int) -> anyio.Lock:
        with self._guard:
            lock = self._locks.get(screening_id)
            if lock is None:
                lock = anyio.Lock()
                self._locks[screening_id] = lock
            return lock

    @asynccontextmanager
    async def hold(self, screening_id: int) -> AsyncIterator[None]:
        lock = self.lock_for(screening_id)
        started = time.perf_counter()
        async with lock:
            waited = time.perf_counter() - started
            if waited >= self._slow_wait_warning_seconds:
                Logger.base.warning(
                    f'⏳ [LOCK] Waited {waited:.2f}s for screening {screening_id} lock'
                )
            yield

    def is_locked(self, screening_id: int) -> bool:
        with self._guard:
            lock = self._locks.get(screening_id)
        return lock is not None and lock.locked()
