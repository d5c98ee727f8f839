"""
Profile registration and project submission handler.
"""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from certflow.models.profile import Profile, ProfileCreate
from certflow.models.project import Project, ProjectCreate, ProjectStatus
from certflow.handlers.audit import audit_entry
from certflow.core.exceptions import ProfileNotFoundError, PersistenceError
from certflow.core.logging import get_logger

logger = get_logger(__name__)


async def create_profile(
    session: AsyncSession,
    profile_data: ProfileCreate
) -> Profile:
    """Register a new profile."""
    profile = Profile(**profile_data.model_dump())
    session.add(profile)
    try:
        await session.flush()
        session.add(audit_entry(
            action="profile_created",
            entity_type="profile",
            entity_id=profile.id,
            payload=profile_data.model_dump()
        ))
        await session.commit()
        await session.refresh(profile)
    except SQLAlchemyError as e:
        await session.rollback()
        raise PersistenceError(f"Failed to create profile: {e}") from e

    return profile


async def get_profile(session: AsyncSession, profile_id: int) -> Profile:
    """Load a profile or raise ProfileNotFoundError."""
    try:
        profile = await session.get(Profile, profile_id)
    except SQLAlchemyError as e:
        raise PersistenceError(f"Failed to load profile {profile_id}: {e}") from e
    if profile is None:
        raise ProfileNotFoundError(profile_id)
    return profile


async def submit_project(
    session: AsyncSession,
    project_data: ProjectCreate
) -> Project:
    """Submit a project for review. It starts out pending."""
    await get_profile(session, project_data.submitter_id)

    project = Project(**project_data.model_dump(), status=ProjectStatus.PENDING)
    session.add(project)
    try:
        await session.flush()
        session.add(audit_entry(
            action="project_submitted",
            entity_type="project",
            entity_id=project.id,
            payload=project_data.model_dump(),
            actor_id=project_data.submitter_id
        ))
        await session.commit()
        await session.refresh(project)
    except SQLAlchemyError as e:
        await session.rollback()
        raise PersistenceError(f"Failed to submit project: {e}") from e

    logger.info("Project submitted", extra={"project_id": project.id})
    return project
