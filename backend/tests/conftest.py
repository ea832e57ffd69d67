"""
Travel Journal Backend — Test Configuration (conftest.py)
===========================================================

What:  Shared pytest fixtures for the entire test suite.
How:   A fresh in-memory SQLite database (aiosqlite) per test, a temporary
       uploads directory, and an HTTPX client wired to the FastAPI app with
       its session and asset dependencies overridden.

Fixture Hierarchy (all function-scoped):
    ├── db_engine → session_factory → db_session
    ├── uploads_dir → asset_service
    ├── credential_service, blog_service, token_service
    ├── sample_image_bytes
    └── test_client (uses session_factory + asset_service)
"""

import os
import tempfile

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Must run before anything imports app.config
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["ACCESS_TOKEN_SECRET"] = "test-secret-that-is-at-least-32-bytes-long"
os.environ["UPLOADS_DIR"] = tempfile.mkdtemp(prefix="travel_journal_uploads_")
os.environ["ASSETS_DIR"] = tempfile.mkdtemp(prefix="travel_journal_assets_")
os.environ["PUBLIC_BASE_URL"] = "http://test"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import AsyncGenerator  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.database import Base, get_db_session  # noqa: E402
from app.dependencies import get_asset_service  # noqa: E402
from app.models.travel_blog import TravelBlog  # noqa: E402,F401
from app.models.user import User  # noqa: E402,F401
from app.services.asset_service import AssetService  # noqa: E402
from app.services.credential_service import CredentialService  # noqa: E402
from app.services.token_service import TokenService  # noqa: E402
from app.services.travel_blog_service import TravelBlogService  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Database
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """
    In-memory SQLite engine with the full schema.

    StaticPool keeps a single connection so every session sees the same
    in-memory database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


# ══════════════════════════════════════════════════════════════════════════
# Services
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def uploads_dir(tmp_path):
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def asset_service(uploads_dir):
    return AssetService(uploads_root=str(uploads_dir), public_base_url="http://test")


@pytest.fixture
def credential_service(db_session):
    return CredentialService(db_session)


@pytest.fixture
def blog_service(db_session, asset_service):
    return TravelBlogService(db_session, asset_service)


@pytest.fixture
def token_service():
    return TokenService(secret="unit-test-secret-with-plenty-of-bytes")


@pytest.fixture
def sample_image_bytes():
    """Smallest valid PNG (1x1 transparent pixel)."""
    return (
        b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"
        b"\x08\x06\x00\x00\x00\x1f\x15\xc4\x89\x00\x00\x00\rIDATx\x9cc\xf8\xff"
        b"\xff?\x00\x05\xfe\x02\xfe\xa75\x81\x84\x00\x00\x00\x00IEND\xaeB`\x82"
    )


# ══════════════════════════════════════════════════════════════════════════
# HTTP Client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(session_factory, asset_service):
    """
    HTTPX AsyncClient talking to a fresh app instance.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from app.main import create_app

    app = create_app()

    async def override_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_db_session
    app.dependency_overrides[get_asset_service] = lambda: asset_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
