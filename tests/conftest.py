"""Shared test fixtures for the land registry."""

import os
import pytest
from httpx import ASGITransport, AsyncClient

from land_registry.common.config import RegistrySettings
from land_registry.common.database import DatabaseManager
from land_registry.users.models import UserRole


SECRET_KEY = "test-secret-key-for-unit-tests"
PASSWORD = "secret123"


def make_settings(**overrides) -> RegistrySettings:
    defaults = {"secret_key": SECRET_KEY, "db_url": "sqlite+aiosqlite://"}
    defaults.update(overrides)
    return RegistrySettings(**defaults)


async def create_user(session, username: str, role: UserRole):
    from land_registry.users.service import UserService
    return await UserService().create_user(
        session,
        username=username,
        email=f"{username}@example.com",
        password=PASSWORD,
        full_name=username.title(),
        role=role,
    )


# ── Service-level fixtures ──


@pytest.fixture
async def db():
    manager = DatabaseManager(make_settings())
    await manager.init()
    await manager.create_all()
    yield manager
    await manager.close()


@pytest.fixture
async def users(db):
    """One user per role plus a second buyer, keyed by name."""
    async with db.get_session() as session:
        return {
            "owner": await create_user(session, "owner", UserRole.LANDOWNER),
            "buyer": await create_user(session, "buyer", UserRole.BUYER),
            "buyer2": await create_user(session, "buyer2", UserRole.BUYER),
            "verifier": await create_user(session, "verifier", UserRole.VERIFIER),
            "admin": await create_user(session, "admin", UserRole.ADMIN),
        }


# ── API fixtures ──


@pytest.fixture
def app():
    """Create a test app with in-memory DB."""
    os.environ["LAND_REGISTRY_DB_URL"] = "sqlite+aiosqlite://"
    os.environ["LAND_REGISTRY_SECRET_KEY"] = SECRET_KEY

    # Clear caches and singletons so new env vars take effect
    from land_registry.common.config import get_settings
    get_settings.cache_clear()

    from land_registry.deps import reset_singletons
    reset_singletons()

    from land_registry.app import create_app
    return create_app()


@pytest.fixture
async def client(app):
    # Manually init DB since ASGITransport doesn't run lifespan
    from land_registry.deps import get_db
    db = get_db()
    await db.init()
    await db.create_all()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    await db.close()


async def signup(client, username: str, role: str = "landowner") -> dict:
    """Self-register over the API and return bearer headers."""
    resp = await client.post("/api/register", json={
        "username": username,
        "email": f"{username}@example.com",
        "password": PASSWORD,
        "fullName": username.title(),
        "role": role,
    })
    assert resp.status_code == 201, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}


async def staff_headers(client, username: str, role: UserRole) -> dict:
    """Create a verifier or admin directly in the store, then log in over the API."""
    from land_registry.deps import get_db
    async with get_db().get_session() as session:
        await create_user(session, username, role)
    resp = await client.post("/api/login", json={"username": username, "password": PASSWORD})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}


@pytest.fixture
async def owner_headers(client):
    return await signup(client, "owner", "landowner")


@pytest.fixture
async def buyer_headers(client):
    return await signup(client, "buyer", "buyer")


@pytest.fixture
async def verifier_headers(client):
    return await staff_headers(client, "verifier", UserRole.VERIFIER)


@pytest.fixture
async def admin_headers(client):
    return await staff_headers(client, "admin", UserRole.ADMIN)


LAND_DETAILS = {
    "title": "Riverside Plot",
    "description": "Two acres by the river",
    "area": 87120,
    "address": "12 River Road",
    "city": "Springfield",
    "state": "IL",
    "postalCode": "62701",
    "propertyType": "agricultural",
    "documents": ["deed.pdf", "survey.pdf"],
}


@pytest.fixture
def land_details():
    return dict(LAND_DETAILS)
