"""
Price lock strategy factory.
Configures which lock serializes package price recomputation.
"""

from typing import Optional

from app.core.config import get_settings
from app.services.interfaces.price_lock import PackagePriceLock
from app.services.interfaces.local_price_lock import LocalPackagePriceLock
from app.services.price_lock_service import RedisPackagePriceLock


def get_price_lock_strategy() -> PackagePriceLock:
    """
    Build the configured lock strategy.

    - "local" (default): in-process asyncio locks
    - "redis": distributed lock, falling back to local when Redis is down

    Selected by the PRICE_LOCK_BACKEND setting.
    """
    backend = get_settings().PRICE_LOCK_BACKEND.lower()

    if backend == 'redis':
        return RedisPackagePriceLock()
    return LocalPackagePriceLock()


# Singleton instance
_strategy: Optional[PackagePriceLock] = None


def get_price_lock() -> PackagePriceLock:
    """Get price lock strategy singleton."""
    global _strategy
    if _strategy is None:
        _strategy = get_price_lock_strategy()
    return _strategy


def reset_price_lock() -> None:
    """Drop the singleton so the next call re-reads settings."""
    global _strategy
    _strategy = None
