"""
Pytest fixtures for certflow tests.

Each test gets its own SQLite file database under tmp_path.
"""

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select, func

from certflow.core.config import get_settings
from certflow.core.database import build_engine, build_session_factory, create_tables, get_session
from certflow.models.profile import Profile, ProfileRole
from certflow.models.project import Project, ProjectStatus
from certflow.models.certificate_request import CertificateRequest, CertificateRequestStatus


BASE_TIME = datetime(2025, 9, 1, 9, 0, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """Create a test database engine with all tables."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'certflow_test.db'}")
    await create_tables(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return build_session_factory(db_engine)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def settings(monkeypatch):
    """The cached settings instance; attribute changes are undone after the test."""
    current = get_settings()
    monkeypatch.setattr(current, "enforce_single_decision", False)
    return current


@pytest_asyncio.fixture
async def make_profile(db_session: AsyncSession):
    async def _make(full_name: str, role: ProfileRole, organization: str = None) -> Profile:
        profile = Profile(full_name=full_name, role=role, organization=organization)
        db_session.add(profile)
        await db_session.commit()
        await db_session.refresh(profile)
        return profile
    return _make


@pytest_asyncio.fixture
async def submitter(make_profile) -> Profile:
    return await make_profile("Asha Verma", ProfileRole.SUBMITTER, "Green Earth Collective")


@pytest_asyncio.fixture
async def verifier(make_profile) -> Profile:
    return await make_profile("Daniel Okafor", ProfileRole.VERIFIER, "Independent Verification Bureau")


@pytest_asyncio.fixture
async def requester(make_profile) -> Profile:
    return await make_profile("Meera Pillai", ProfileRole.NGO, "Coastal Restoration Trust")


@pytest_asyncio.fixture
async def make_project(db_session: AsyncSession, submitter: Profile):
    """Insert a project directly, bypassing the submission flow."""
    counter = {"n": 0}

    async def _make(
        title: str = None,
        status: ProjectStatus = ProjectStatus.PENDING,
        estimated_credits: float = 500,
        submitted_at: datetime = None,
        verifier_id: int = None,
        submitter_id: int = None
    ) -> Project:
        counter["n"] += 1
        project = Project(
            title=title or f"Project {counter['n']}",
            location="West Bengal, India",
            area_hectares=120.5,
            description="Mangrove belt replanting",
            estimated_credits=estimated_credits,
            submitter_id=submitter_id or submitter.id,
            status=status,
            submitted_at=submitted_at or BASE_TIME + timedelta(hours=counter["n"]),
            verifier_id=verifier_id
        )
        db_session.add(project)
        await db_session.commit()
        await db_session.refresh(project)
        return project
    return _make


@pytest_asyncio.fixture
async def make_request(db_session: AsyncSession, requester: Profile):
    """Insert a certificate request directly."""
    async def _make(
        project: Project,
        requested_at: datetime = None,
        status: CertificateRequestStatus = CertificateRequestStatus.PENDING
    ) -> CertificateRequest:
        request = CertificateRequest(
            project_id=project.id,
            requester_id=requester.id,
            status=status,
            requested_at=requested_at or BASE_TIME
        )
        db_session.add(request)
        await db_session.commit()
        await db_session.refresh(request)
        return request
    return _make


@pytest.fixture
def count_rows(db_session: AsyncSession):
    """Count rows of a model, optionally filtered by column equality."""
    async def _count(model, **filters) -> int:
        statement = select(func.count()).select_from(model)
        for column, value in filters.items():
            statement = statement.where(getattr(model, column) == value)
        result = await db_session.execute(statement)
        return result.scalar_one()
    return _count


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app with sessions bound to the test database."""
    from main import app

    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
