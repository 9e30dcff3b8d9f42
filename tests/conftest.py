"""
Test configuration for pytest
"""

import os

# Test environment variables, set before the application is imported
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-jwt-secret"
os.environ["ALLOWED_ORIGINS"] = ""

from dataclasses import dataclass
from typing import AsyncGenerator, Dict

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from kadi.core.auth import create_access_token, hash_password
from kadi.core.config import Settings
from kadi.core.database import build_engine, get_session, init_db
from kadi.main import create_app
from kadi.models.profile import Profile
from kadi.models.user import User
from kadi.repositories.users import ProfileRepository, UserRepository

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_PASSWORD = "secret123"


@dataclass
class Account:
    user: User
    profile: Profile
    headers: Dict[str, str]


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        DATABASE_URL=TEST_DATABASE_URL,
        JWT_SECRET_KEY="test-jwt-secret",
        ALLOWED_ORIGINS="",
        UPLOAD_FOLDER=str(tmp_path / "uploads"),
        GEMINI_API_KEY=None,
        SMTP_HOST=None,
    )


@pytest.fixture
async def session_factory():
    """Fresh in-memory database per test, shared by every session through one connection"""
    engine = build_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_db(engine)

    yield async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    # Cleanup
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def app(settings, session_factory):
    app = create_app(settings)

    async def override_get_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    return app


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://testserver") as http_client:
        yield http_client


@pytest.fixture
def make_account(session_factory, settings):
    """Create a principal with its tenant and profile, returning bearer headers"""

    async def _make_account(email: str, company: str = None) -> Account:
        async with session_factory() as session:
            user = await UserRepository(session).create(email, hash_password(TEST_PASSWORD), company)
            profile = await ProfileRepository(session).upsert(user, company)
        token = create_access_token(user.id, user.email, settings=settings)
        return Account(user=user, profile=profile, headers={"Authorization": f"Bearer {token}"})

    return _make_account


@pytest.fixture
async def account(make_account) -> Account:
    return await make_account("owner@acme.cd", "Acme SARL")


@pytest.fixture
async def other_account(make_account) -> Account:
    return await make_account("owner@globex.cd", "Globex")
