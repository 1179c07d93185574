"""
Tests for the package price lock strategies.
"""

import asyncio

import pytest
from httpx import AsyncClient
from prometheus_client import REGISTRY
from redis.exceptions import ConnectionError as RedisConnectionError, LockError

from app.core.config import get_settings
from app.core.exceptions import PriceRecalculationBusy
from app.services import price_lock_service
from app.services.interfaces.local_price_lock import LocalPackagePriceLock
from app.services.price_lock_service import RedisPackagePriceLock
from app.services.strategy_factory import get_price_lock, reset_price_lock


async def _critical_section(lock, package_id, log, name):
    async with lock.hold(package_id):
        log.append(f"{name}:enter")
        await asyncio.sleep(0.01)
        log.append(f"{name}:exit")


@pytest.mark.asyncio
async def test_local_lock_serializes_same_package():
    lock = LocalPackagePriceLock()
    log: list[str] = []

    await asyncio.gather(
        _critical_section(lock, 1, log, "a"),
        _critical_section(lock, 1, log, "b"),
    )

    assert log == ["a:enter", "a:exit", "b:enter", "b:exit"]
    assert lock.active_packages() == set()


@pytest.mark.asyncio
async def test_local_lock_allows_different_packages_concurrently():
    lock = LocalPackagePriceLock()
    log: list[str] = []

    await asyncio.gather(
        _critical_section(lock, 1, log, "a"),
        _critical_section(lock, 2, log, "b"),
    )

    assert log[:2] == ["a:enter", "b:enter"]


@pytest.mark.asyncio
async def test_redis_lock_falls_back_when_redis_disabled():
    lock = RedisPackagePriceLock()
    log: list[str] = []

    await asyncio.gather(
        _critical_section(lock, 1, log, "a"),
        _critical_section(lock, 1, log, "b"),
    )

    assert log == ["a:enter", "a:exit", "b:enter", "b:exit"]


def test_factory_selects_backend(monkeypatch):
    settings = get_settings()

    monkeypatch.setattr(settings, "PRICE_LOCK_BACKEND", "redis")
    reset_price_lock()
    assert isinstance(get_price_lock(), RedisPackagePriceLock)

    monkeypatch.setattr(settings, "PRICE_LOCK_BACKEND", "local")
    reset_price_lock()
    lock = get_price_lock()
    assert isinstance(lock, LocalPackagePriceLock)
    assert get_price_lock() is lock


class FakeRedisLock:
    def __init__(self, acquired=True, acquire_error=None, release_error=None):
        self.acquired = acquired
        self.acquire_error = acquire_error
        self.release_error = release_error
        self.released = False

    async def acquire(self):
        if self.acquire_error:
            raise self.acquire_error
        return self.acquired

    async def release(self):
        if self.release_error:
            raise self.release_error
        self.released = True


class FakeRedis:
    def __init__(self, lock: FakeRedisLock):
        self._lock = lock
        self.requested = []

    def lock(self, name, timeout=None, blocking_timeout=None):
        self.requested.append((name, timeout, blocking_timeout))
        return self._lock


@pytest.fixture
def fake_redis(monkeypatch):
    """Install a fake Redis client for RedisPackagePriceLock; returns a setter."""

    def install(lock: FakeRedisLock) -> FakeRedis:
        client = FakeRedis(lock)

        async def _get_redis():
            return client

        monkeypatch.setattr(price_lock_service, "get_redis", _get_redis)
        return client

    return install


@pytest.mark.asyncio
async def test_redis_lock_acquires_and_releases(fake_redis):
    redis_lock = FakeRedisLock()
    client = fake_redis(redis_lock)
    settings = get_settings()

    async with RedisPackagePriceLock().hold(5):
        assert redis_lock.released is False

    assert redis_lock.released is True
    assert client.requested == [
        ("lock:menu-package-price:5", settings.PRICE_LOCK_TIMEOUT, settings.PRICE_LOCK_BLOCKING_TIMEOUT),
    ]
    assert REGISTRY.get_sample_value("redis_circuit_breaker_open") == 0


@pytest.mark.asyncio
async def test_redis_lock_timeout_raises_busy(fake_redis):
    fake_redis(FakeRedisLock(acquired=False))

    with pytest.raises(PriceRecalculationBusy) as exc_info:
        async with RedisPackagePriceLock().hold(5):
            pytest.fail("body must not run without the lock")

    assert exc_info.value.status_code == 409


@pytest.mark.asyncio
async def test_redis_error_fails_open_to_local_lock(fake_redis):
    fake_redis(FakeRedisLock(acquire_error=RedisConnectionError("connection refused")))
    errors_before = REGISTRY.get_sample_value("redis_connection_errors_total") or 0
    lock = RedisPackagePriceLock()
    log: list[str] = []

    await asyncio.gather(
        _critical_section(lock, 1, log, "a"),
        _critical_section(lock, 1, log, "b"),
    )

    assert log == ["a:enter", "a:exit", "b:enter", "b:exit"]
    assert REGISTRY.get_sample_value("redis_circuit_breaker_open") == 1
    assert REGISTRY.get_sample_value("redis_connection_errors_total") == errors_before + 2


@pytest.mark.asyncio
async def test_expired_redis_lock_on_release_is_tolerated(fake_redis):
    fake_redis(FakeRedisLock(release_error=LockError("Cannot release an unlocked lock")))
    entered = False

    async with RedisPackagePriceLock().hold(5):
        entered = True

    assert entered


@pytest.mark.asyncio
async def test_busy_redis_lock_returns_409(client: AsyncClient, veg_package, fake_redis, monkeypatch):
    fake_redis(FakeRedisLock(acquired=False))
    monkeypatch.setattr(get_settings(), "PRICE_LOCK_BACKEND", "redis")
    reset_price_lock()

    response = await client.post(f"/api/menus/packages/{veg_package.id}/recalculate-price")
    assert response.status_code == 409
    assert response.json()["package_id"] == veg_package.id
