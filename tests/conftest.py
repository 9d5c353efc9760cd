"""Pytest configuration and fixtures for debt-cases.

Uses app.main:app for HTTP tests. HTTP and repository tests run against an
in-memory SQLite database (aiosqlite) swapped in through dependency overrides,
and a per-test storage root under tmp_path. All imports use app.*.
"""

import os
import tempfile
from collections.abc import AsyncIterator, Callable, Iterator
from pathlib import Path

# Settings are read when app.main is imported; set test values first.
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-debt-cases")
os.environ.setdefault("STORAGE_ROOT", tempfile.mkdtemp(prefix="debt-cases-storage-"))
os.environ.pop("DATABASE_URL", None)

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.api.v1.dependencies.storage import get_safe_storage_root
from app.infrastructure.external.storage import SafeStorageRoot
from app.infrastructure.persistence.database import Base, get_db, get_db_transactional
# Importing the models package registers every table on Base
from app.infrastructure.persistence.models import Employee
from app.infrastructure.security.jwt import create_access_token
from app.main import app


@pytest.fixture
async def client() -> AsyncIterator[AsyncClient]:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def storage_root(tmp_path: Path) -> Iterator[SafeStorageRoot]:
    """Safe storage root under tmp_path, also used by the app for this test."""
    root = SafeStorageRoot(tmp_path / "storage")
    root.ensure_exists()
    app.dependency_overrides[get_safe_storage_root] = lambda: root
    yield root
    app.dependency_overrides.pop(get_safe_storage_root, None)


@pytest.fixture
async def session_factory() -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    """In-memory SQLite schema; get_db and get_db_transactional are overridden to use it."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)

    async def _get_db():
        async with factory() as session:
            yield session

    async def _get_db_transactional():
        async with factory() as session:
            async with session.begin():
                yield session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_db_transactional] = _get_db_transactional
    yield factory
    app.dependency_overrides.pop(get_db, None)
    app.dependency_overrides.pop(get_db_transactional, None)
    await engine.dispose()


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """Session for repository tests. Rolls back after test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def employees(session_factory: async_sessionmaker[AsyncSession]) -> dict[str, Employee]:
    """Officers across two branches and departments."""
    rows = {
        "NV001": Employee(
            employee_code="NV001", fullname="Nguyễn Văn A", role="employee",
            dept="KHCN", branch_code="6421",
        ),
        "NV002": Employee(
            employee_code="NV002", fullname="Trần Thị B", role="employee",
            dept="KHDN", branch_code="6421",
        ),
        "NV003": Employee(
            employee_code="NV003", fullname="Lê Văn C", role="employee",
            dept="KHCN", branch_code="7800",
        ),
        "TP001": Employee(
            employee_code="TP001", fullname="Phạm Trưởng Phòng", role="manager",
            dept="KHCN", branch_code="6421",
        ),
    }
    async with session_factory() as session:
        session.add_all(rows.values())
        await session.commit()
    return rows


@pytest.fixture
def make_headers() -> Callable[..., dict[str, str]]:
    """Build Authorization headers for a caller with the given claims."""

    def _make(
        employee_code: str = "NV001",
        role: str = "employee",
        fullname: str | None = "Nguyễn Văn A",
        dept: str | None = "KHCN",
        branch_code: str | None = "6421",
    ) -> dict[str, str]:
        token = create_access_token(
            {
                "sub": employee_code,
                "fullname": fullname,
                "role": role,
                "dept": dept,
                "branch_code": branch_code,
            }
        )
        return {"Authorization": f"Bearer {token}"}

    return _make
