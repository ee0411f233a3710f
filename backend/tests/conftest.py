"""
Shared test fixtures — in-memory SQLite async database + FastAPI client.

Strategy:
1. Set DATABASE_URL to SQLite before anything from riskgov loads
2. Build a dedicated test engine (StaticPool keeps one in-memory DB)
3. Override the get_session dependency so routers use the test session
"""
import os
from collections.abc import AsyncGenerator
from datetime import datetime

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# ── 1. Environment ──
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["DEBUG"] = "false"
os.environ["STRICT_STATUS_TRANSITIONS"] = "false"

# ── 2. Test engine (SQLite in-memory) ──
TEST_ENGINE = create_async_engine(
    "sqlite+aiosqlite://",
    echo=False,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestSession = async_sessionmaker(
    TEST_ENGINE,
    class_=AsyncSession,
    expire_on_commit=False,
)

# ── 3. Import the app and point it at the test session ──
from riskgov.database import get_session  # noqa: E402
from riskgov.main import app as fastapi_app  # noqa: E402
from riskgov.models import Base  # noqa: E402
from riskgov.schemas.readiness import (  # noqa: E402
    Category,
    ItemDefinition,
    ReadinessSubmission,
    ReadinessTemplate,
)


async def _test_get_session() -> AsyncGenerator[AsyncSession, None]:
    async with TestSession() as session:
        yield session


fastapi_app.dependency_overrides[get_session] = _test_get_session


# ── Fixtures ──

@pytest_asyncio.fixture(autouse=True)
async def setup_database():
    """Create all tables before each test, drop after."""
    async with TEST_ENGINE.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with TEST_ENGINE.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=fastapi_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def db() -> AsyncGenerator[AsyncSession, None]:
    async with TestSession() as session:
        yield session


@pytest.fixture
def small_template() -> ReadinessTemplate:
    return ReadinessTemplate(
        assessment_type="project_readiness",
        version="test",
        categories=(
            Category(id="administrative", title="Dokumen Administratif", icon_ref="FileText", items=(
                ItemDefinition(id="a", title="A"),
                ItemDefinition(id="b", title="B"),
            )),
            Category(id="personnel", title="Personel Proyek", icon_ref="Users", items=(
                ItemDefinition(id="p1", title="CV Tim"),
            )),
        ),
    )


@pytest.fixture
def submission() -> ReadinessSubmission:
    return ReadinessSubmission(
        project_id="PRJ-001",
        project_name="Pembangunan Gardu Induk",
        submitted_by="Budi Santoso",
        submitted_at=datetime(2026, 1, 5, 8, 0),
    )
