"""Test fixtures — a fresh database per test, real tokens per role.

Learn: Testing pattern for async SQLAlchemy + FastAPI:

1. Each test gets its own engine and schema (SQLite file under tmp_path
   by default, or SKETCHROOM_TEST_DATABASE_URL to run against Postgres).
2. The app's get_db is overridden so every request opens its own session
   on that engine, just like production.
3. Users are created through UserService and authenticated with real
   JWTs, so the whole auth pipeline runs in every API test.
"""

import os

# Settings are read at import time and the signing secret is mandatory.
os.environ.setdefault(
    "SKETCHROOM_JWT_SECRET", "test-only-signing-secret-0123456789abcdef"
)
os.environ.setdefault("SKETCHROOM_BCRYPT_ROUNDS", "4")

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker  # noqa: E402

from sketchroom.auth.jwt import issue_token  # noqa: E402
from sketchroom.db.engine import build_engine, get_db  # noqa: E402
from sketchroom.db.models import Base  # noqa: E402
from sketchroom.main import app  # noqa: E402
from sketchroom.services.user_service import UserService  # noqa: E402

PASSWORD = "correct-horse-battery"


def bearer(user) -> dict:
    """Authorization header carrying a fresh token for `user`."""
    token = issue_token(user.id, user.email, user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture()
async def db_engine(tmp_path):
    url = os.environ.get("SKETCHROOM_TEST_DATABASE_URL") or (
        f"sqlite+aiosqlite:///{tmp_path / 'sketchroom.db'}"
    )
    engine = build_engine(url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        await engine.dispose()


@pytest_asyncio.fixture()
async def session_factory(db_engine):
    return async_sessionmaker(db_engine, expire_on_commit=False)


@pytest_asyncio.fixture()
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture()
async def client(session_factory):
    """HTTP client with the app's get_db pointed at the test database.

    Auth is NOT overridden — pass headers from the *_headers fixtures.
    """

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ─── Users ──────────────────────────────────────────────


@pytest_asyncio.fixture()
async def admin_user(db_session):
    return await UserService(db_session).create_user(
        "admin@example.com", PASSWORD, "Ada Admin", role="admin"
    )


@pytest_asyncio.fixture()
async def member_user(db_session):
    return await UserService(db_session).create_user(
        "member@example.com", PASSWORD, "Mel Member", role="user"
    )


@pytest_asyncio.fixture()
async def outsider_user(db_session):
    return await UserService(db_session).create_user(
        "outsider@example.com", PASSWORD, "Otto Outsider", role="user"
    )


@pytest_asyncio.fixture()
async def admin_headers(admin_user):
    return bearer(admin_user)


@pytest_asyncio.fixture()
async def member_headers(member_user):
    return bearer(member_user)


@pytest_asyncio.fixture()
async def outsider_headers(outsider_user):
    return bearer(outsider_user)


# ─── Rooms ──────────────────────────────────────────────


@pytest_asyncio.fixture()
async def room(client, admin_headers):
    """A room created by the admin, with no grants."""
    r = await client.post(
        "/api/v1/rooms",
        json={"name": "Sprint Planning", "description": "Weekly board"},
        headers=admin_headers,
    )
    assert r.status_code == 201
    return r.json()


@pytest_asyncio.fixture()
async def granted_room(client, admin_headers, room, member_user):
    """`room`, with member_user granted access."""
    r = await client.post(
        f"/api/v1/rooms/{room['id']}/access",
        json={"user_id": member_user.id},
        headers=admin_headers,
    )
    assert r.status_code == 200
    return room
