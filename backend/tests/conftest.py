"""
Pytest fixtures for test database, client, and seeded bookings/menus.

Each test gets its own in-memory SQLite database (aiosqlite + StaticPool so
every connection sees the same memory DB), created and dropped per test for
isolation and speed.
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db.base import Base
from app.db.session import get_db
from app.models.menu import MenuItem, MenuPackage
from app.services.strategy_factory import reset_price_lock

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables, yield session, then drop tables for isolation."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture(autouse=True)
def fresh_price_lock():
    """Price locks hold asyncio primitives; never share them across tests."""
    reset_price_lock()
    yield
    reset_price_lock()


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the DB dependency with the test session."""

    async def override_get_db():
        try:
            yield db_session
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def booking_payload() -> dict:
    """A single-day dinner in Hall A, 18:00-22:00."""
    return {
        "client_name": "Priya Sharma",
        "contact_number": "+91 98765 43210",
        "email": "priya@example.com",
        "event_type": "Wedding Reception",
        "event_date": "2026-12-12",
        "confirmed_pax": 250,
        "status": "booked",
        "sessions": [
            {
                "session_name": "Dinner",
                "venue": "Hall A",
                "start_time": "18:00",
                "end_time": "22:00",
                "session_date": "2026-12-12",
                "pax_count": 250,
            }
        ],
    }


@pytest_asyncio.fixture
async def veg_package(db_session: AsyncSession) -> MenuPackage:
    """A veg package with three items priced 300, 450 and 250 (total 1000)."""
    package = MenuPackage(name="Classic Veg", type="veg", category="Buffet", price=1000.0)
    db_session.add(package)
    await db_session.flush()

    for category, name, price, extra in [
        ("Starters", "Paneer Tikka", 300.0, 120.0),
        ("Main Course", "Dal Makhani", 450.0, 150.0),
        ("Desserts", "Gulab Jamun", 250.0, 80.0),
    ]:
        db_session.add(MenuItem(
            package_id=package.id,
            category=category,
            name=name,
            price=price,
            additional_price=extra,
            quantity=1,
            is_veg=True,
        ))
    await db_session.commit()
    await db_session.refresh(package)
    # Detach so a request's rollback on the shared session cannot expire it
    db_session.expunge(package)
    return package
