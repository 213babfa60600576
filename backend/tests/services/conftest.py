"""Service test fixtures — async DB, seed helpers, and FastAPI test client.

Invariants:
    - Every test gets a fresh SQLite database file under tmp_path
    - get_db dependency overridden to use the test session factory
    - db_manager patched for the readiness probe
    - The email client is always backed by httpx.MockTransport

Design Decisions:
    - File-based SQLite over :memory: so that two sessions in one test see
      each other's commits through separate connections (race scenarios)
    - Users seeded directly with a placeholder hash; only login tests pay for bcrypt
"""

import httpx
import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from gigmarket.api.dependencies import get_email_client
from gigmarket.config import get_settings
from gigmarket.core.domain_types import (
    ApplicationStatus, CallerIdentity, GigStatus, UserRole,
)
from gigmarket.db.base import Base
from gigmarket.infrastructure.database import get_db, DatabaseSessionManager
from gigmarket.infrastructure.email_client import ResendEmailClient
from gigmarket.infrastructure.security import create_access_token
from gigmarket.models.application import Application
from gigmarket.models.gig import Gig
from gigmarket.models.user import User
import gigmarket.infrastructure.database as db_module
from gigmarket.main import app


@pytest.fixture
async def test_engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


# ─── Email ───────────────────────────────────────────────────────

@pytest.fixture
def email_outbox():
    """Requests seen by the fake Resend API, plus a switch to make it fail."""
    return {"sent": [], "status_code": 200}


@pytest.fixture
def email_client(email_outbox):
    def handler(request: httpx.Request) -> httpx.Response:
        email_outbox["sent"].append(request)
        return httpx.Response(email_outbox["status_code"], json={"id": "email_1"})

    return ResendEmailClient(
        api_key="re_test",
        api_url="https://api.resend.test/emails",
        sender="Freelance App <noreply@example.com>",
        app_url="http://localhost:3000",
        transport=httpx.MockTransport(handler),
    )


# ─── Seed helpers ────────────────────────────────────────────────

async def _persist(session_factory, entity):
    """Commit through a throwaway session so the object under test starts
    detached and services load it fresh."""
    async with session_factory() as session:
        session.add(entity)
        await session.commit()


@pytest.fixture
def fresh(test_session_factory):
    """Re-read rows through a new session, bypassing any identity map."""
    async def _get(model, entity_id):
        async with test_session_factory() as session:
            return await session.get(model, entity_id)

    return _get


@pytest.fixture
def make_user(test_session_factory):
    counter = {"n": 0}

    async def _make(role=UserRole.CLIENT, is_active=True, **fields) -> User:
        counter["n"] += 1
        user = User(
            name=fields.pop("name", f"User {counter['n']}"),
            email=fields.pop("email", f"user{counter['n']}@example.com"),
            password_hash=fields.pop("password_hash", "not-a-real-hash"),
            role=role.value,
            is_active=is_active,
            **fields,
        )
        await _persist(test_session_factory, user)
        return user

    return _make


@pytest.fixture
def make_gig(test_session_factory):
    async def _make(owner: User, status=GigStatus.OPEN, **fields) -> Gig:
        gig = Gig(
            owner_id=owner.id,
            title=fields.pop("title", "Build an API"),
            description=fields.pop("description", "REST API with auth and tests"),
            skills=fields.pop("skills", ["Python"]),
            status=status.value,
            **fields,
        )
        await _persist(test_session_factory, gig)
        return gig

    return _make


@pytest.fixture
def make_application(test_session_factory):
    async def _make(
        gig: Gig, author: User, status=ApplicationStatus.PENDING,
    ) -> Application:
        application = Application(
            gig_id=gig.id, author_id=author.id,
            message="I have done this many times before", status=status.value,
        )
        await _persist(test_session_factory, application)
        return application

    return _make


def caller_for(user: User) -> CallerIdentity:
    return CallerIdentity(user_id=user.id, role=UserRole(user.role))


@pytest.fixture
def as_caller():
    return caller_for


@pytest.fixture
def auth_headers():
    settings = get_settings()

    def _headers(user: User) -> dict[str, str]:
        token = create_access_token(
            user.id, UserRole(user.role),
            settings.jwt_secret_key, settings.jwt_algorithm,
        )
        return {"Authorization": f"Bearer {token}"}

    return _headers


# ─── HTTP client ─────────────────────────────────────────────────

@pytest.fixture
async def client(test_engine, test_session_factory, email_client):
    """FastAPI test client with DB and email dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_email_client] = lambda: email_client

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
