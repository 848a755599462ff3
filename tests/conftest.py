"""Shared fixtures: a throwaway SQLite database per test and a TestClient."""

import asyncio
from datetime import datetime
from typing import Optional

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.db.session import Database
from app.models.trip import Trip
from app.models.user import User
from app.core.security import hash_password


# ============================================
# Test Configuration
# ============================================

@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a fresh SQLite file."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        debug=False,
        jwt_access_secret="test-access-secret",
        jwt_refresh_secret="test-refresh-secret",
        cookie_secure=False,
        cookie_samesite="lax",
    )


@pytest_asyncio.fixture
async def database(settings):
    db = Database(settings.database_url)
    await db.create_all()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def db(database):
    async with database.session() as session:
        yield session


@pytest.fixture
def client(settings):
    from main import create_app

    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


def run_against(settings: Settings, work):
    """Run ``await work(session)`` on its own event loop, outside the app."""

    async def _run():
        database = Database(settings.database_url)
        await database.create_all()
        try:
            async with database.session() as session:
                return await work(session)
        finally:
            await database.dispose()

    return asyncio.run(_run())


async def make_user(db, email: str = "driver@fleetco.com", password: str = "secret1", role: str = "user") -> User:
    user = User(email=email, name="Driver", password_hash=hash_password(password), role=role)
    db.add(user)
    await db.commit()
    return user


async def make_trip(
    db,
    vehicle_id: str,
    user_id: str,
    start: datetime,
    end: Optional[datetime] = None,
    **fields,
) -> Trip:
    trip = Trip(vehicle_id=vehicle_id, user_id=user_id, start_time=start, end_time=end, **fields)
    db.add(trip)
    await db.commit()
    return trip
