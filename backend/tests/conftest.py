"""
Test Configuration — Fixtures for async DB, test client, and mock data.

Each test gets its own in-memory SQLite database built from the ORM metadata,
so commits made by the routers never leak between tests.
"""

from datetime import datetime, timedelta

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine

from api.deps import get_current_user, get_db
from api.main import app
from db.session import Base

# Use in-memory SQLite for tests (aiosqlite keeps one shared connection per engine).
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def test_engine():
    """Create a test database engine and build all tables."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def test_db(test_engine):
    """Session bound to the per-test database."""
    async with AsyncSession(test_engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
async def seeded_db(test_db):
    """Seed users (one per role) and a few products."""
    from db.models import Product, User

    now = datetime.utcnow()
    admin = User(
        email="admin@example.com",
        full_name="Ada Admin",
        role="admin",
        assigned_channels=["amazon", "d2c"],
        created_at=now - timedelta(days=3),
    )
    analyst = User(
        email="analyst@example.com",
        full_name="Ari Analyst",
        role="analyst",
        assigned_channels=["b2b"],
        created_at=now - timedelta(days=2),
    )
    viewer = User(
        email="viewer@example.com",
        full_name="Val Viewer",
        role="viewer",
        assigned_channels=[],
        created_at=now - timedelta(days=1),
    )
    test_db.add_all([admin, analyst, viewer])

    ring = Product(sku="RING-AIR-8", name="Ring Air Size 8", category="wearables")
    charger = Product(sku="CHG-01", name="Charging Dock", category="accessories")
    band = Product(sku="BAND-M", name="Blood Vision Band", category="wearables")
    test_db.add_all([ring, charger, band])

    await test_db.flush()
    await test_db.commit()

    return {
        "admin": admin,
        "analyst": analyst,
        "viewer": viewer,
        "ring": ring,
        "charger": charger,
        "band": band,
    }


def caller_for(user) -> dict:
    """Authenticated-caller payload, as produced by get_current_user."""
    return {
        "id": user.user_id,
        "email": user.email,
        "name": user.full_name,
        "role": user.role,
    }


@pytest.fixture
def mock_user(seeded_db):
    """Mock authenticated user (the seeded admin)."""
    return caller_for(seeded_db["admin"])


@pytest.fixture
def act_as(mock_user):
    """Switch the authenticated caller for the rest of a test."""
    state = {"user": mock_user}

    def _act_as(user) -> dict:
        state["user"] = caller_for(user)
        return state["user"]

    _act_as.state = state
    return _act_as


@pytest.fixture
async def client(test_db, act_as):
    """Create an async test client with dependency overrides."""

    async def override_get_db():
        yield test_db

    def override_get_current_user():
        return act_as.state["user"]

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = override_get_current_user

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def anon_client(test_db):
    """Client that goes through real bearer-token authentication."""

    async def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
