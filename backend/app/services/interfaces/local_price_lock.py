"""
In-process price lock - one asyncio.Lock per package id.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator

from app.services.interfaces.price_lock import PackagePriceLock


class LocalPackagePriceLock(PackagePriceLock):
    """
    Per-package asyncio locks.

    Use when:
    - a single API worker process
    - development and tests
    Locks are created lazily and dropped once nobody holds or awaits them.
    """

    def __init__(self):
        self._locks: dict[int, asyncio.Lock] = {}
        self._waiters: dict[int, int] = {}

    @asynccontextmanager
    async def hold(self, package_id: int) -> AsyncIterator[None]:
        lock = self._locks.setdefault(package_id, asyncio.Lock())
        self._waiters[package_id] = self._waiters.get(package_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._waiters[package_id] -= 1
            if self._waiters[package_id] == 0:
                del self._waiters[package_id]
                self._locks.pop(package_id, None)

    def active_packages(self) -> set[int]:
        return set(self._locks)
