"""
Redis-backed package price lock.
Implements PackagePriceLock for deployments with several API workers.

Circuit Breaker Pattern:
  On Redis failure, the lock "fails open" to the in-process lock.
  A Redis outage must not block menu edits; recomputation is idempotent
  (it always re-sums the stored items), so the worst case during an outage
  is the same last-write-wins race a single unlocked worker would have.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from redis.exceptions import LockError, RedisError

from app.core.config import get_settings
from app.core.exceptions import PriceRecalculationBusy
from app.core.logging import get_logger
from app.core.metrics import redis_circuit_breaker_open, redis_connection_errors
from app.infrastructure.redis_client import get_redis
from app.services.interfaces.local_price_lock import LocalPackagePriceLock
from app.services.interfaces.price_lock import PackagePriceLock

logger = get_logger(__name__)


class RedisPackagePriceLock(PackagePriceLock):
    """
    Distributed lock keyed by package id.

    Use when:
    - more than one API worker/process edits menus
    - item imports run next to interactive edits
    """

    def __init__(self, fallback: Optional[LocalPackagePriceLock] = None):
        self.settings = get_settings()
        self.fallback = fallback or LocalPackagePriceLock()

    @staticmethod
    def _key(package_id: int) -> str:
        return f"lock:menu-package-price:{package_id}"

    @asynccontextmanager
    async def hold(self, package_id: int) -> AsyncIterator[None]:
        client = await get_redis()
        if client is None:
            async with self.fallback.hold(package_id):
                yield
            return

        lock = client.lock(
            self._key(package_id),
            timeout=self.settings.PRICE_LOCK_TIMEOUT,
            blocking_timeout=self.settings.PRICE_LOCK_BLOCKING_TIMEOUT,
        )
        try:
            acquired = await lock.acquire()
        except RedisError as e:
            # Circuit breaker: fall back to the process-local lock
            redis_connection_errors.inc()
            redis_circuit_breaker_open.set(1)
            logger.warning("price_lock_redis_unavailable", package_id=package_id, error=str(e))
            async with self.fallback.hold(package_id):
                yield
            return

        if not acquired:
            logger.warning("price_lock_timeout", package_id=package_id)
            raise PriceRecalculationBusy(package_id)

        redis_circuit_breaker_open.set(0)
        try:
            yield
        finally:
            try:
                await lock.release()
            except LockError:
                # Held longer than PRICE_LOCK_TIMEOUT; the key already expired
                logger.warning("price_lock_expired_before_release", package_id=package_id)
