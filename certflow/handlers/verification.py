"""
Project verification handler.

A verifier approves or rejects a pending project. Approval issues carbon
credits to the submitter and, best effort, an auto-generated certificate.
"""

import warnings
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import update
from sqlmodel import select, func
from typing import List, Optional

from certflow.models.project import (
    Project,
    ProjectStatus,
    ProjectDecision,
    ProjectRead,
    ProjectDecisionResult,
    PendingProjectRead,
    SubmitterSummary,
)
from certflow.models.profile import Profile
from certflow.models.credit import CarbonCreditRead
from certflow.models.certificate import CertificateRead
from certflow.models.report import VerifierStats
from certflow.handlers.audit import audit_entry
from certflow.handlers.carbon import issue_carbon_credit
from certflow.handlers.certificates import issue_certificate, build_auto_certificate_url
from certflow.core.config import get_settings
from certflow.core.constants import OPEN_PROJECT_STATUSES
from certflow.core.exceptions import (
    ProjectNotFoundError,
    PersistenceError,
    FatalOperationError,
    DecisionConflictError,
    PartialFailureWarning,
)
from certflow.core.logging import get_logger
from certflow.utils.time import utc_now

logger = get_logger(__name__)

OPEN_STATUSES = [ProjectStatus(value) for value in OPEN_PROJECT_STATUSES]


async def get_project(session: AsyncSession, project_id: int) -> Project:
    """Load a project or raise ProjectNotFoundError."""
    try:
        project = await session.get(Project, project_id)
    except SQLAlchemyError as e:
        raise PersistenceError(f"Failed to load project {project_id}: {e}") from e
    if project is None:
        raise ProjectNotFoundError(project_id)
    return project


def _decision_message(decision: ProjectDecision, certificate: Optional[CertificateRead]) -> str:
    if decision is ProjectDecision.REJECTED:
        return "Project rejected successfully"
    if certificate is not None:
        return "Project verified successfully and certificate auto-generated"
    return "Project verified successfully"


async def decide_project(
    session: AsyncSession,
    project_id: int,
    decision: ProjectDecision,
    notes: Optional[str],
    verifier_id: int
) -> ProjectDecisionResult:
    """
    Record a verifier's decision on a project.

    Steps, each committed on its own:
    1. Write status, verifier, notes and verified_at to the project
    2. On verification, issue a carbon credit for the estimated credits
    3. On verification, auto-generate a certificate (best effort)

    A failed status write leaves nothing behind (PersistenceError). A failed
    credit write raises FatalOperationError with the project already decided.
    A failed certificate write only issues a PartialFailureWarning.

    Either side-effect failure rolls the session back, which expires every
    ORM instance the caller holds in that session; refresh before reading.

    Repeating a decision re-applies it and issues side effects again unless
    ENFORCE_SINGLE_DECISION is set, in which case the status write only
    matches open projects and DecisionConflictError is raised otherwise.

    Args:
        session: Database session
        project_id: Project to decide
        decision: VERIFIED or REJECTED
        notes: Verifier notes, stored as given
        verifier_id: Profile recording the decision

    Returns:
        ProjectDecisionResult with the updated project and issued records
    """
    decision = ProjectDecision(decision)
    settings = get_settings()
    project = await get_project(session, project_id)

    verified = decision is ProjectDecision.VERIFIED
    statement = (
        update(Project)
        .where(Project.id == project_id)
        .values(
            status=ProjectStatus(decision.value),
            verifier_id=verifier_id,
            verification_notes=notes,
            verified_at=utc_now() if verified else None
        )
        .execution_options(synchronize_session=False)
    )
    if settings.enforce_single_decision:
        statement = statement.where(Project.status.in_(OPEN_STATUSES))

    try:
        result = await session.execute(statement)
        if result.rowcount == 0:
            await session.rollback()
            raise DecisionConflictError("Project", project_id)

        session.add(audit_entry(
            action=f"project_{decision.value}",
            entity_type="project",
            entity_id=project_id,
            payload={"status": decision.value, "notes": notes},
            actor_id=verifier_id
        ))
        await session.commit()
        await session.refresh(project)
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(
            "Project status update failed",
            extra={"project_id": project_id, "decision": decision.value, "error": str(e)}
        )
        raise PersistenceError(f"Failed to update project {project_id}: {e}") from e

    # Snapshot now; a rollback in a later step expires the ORM instance
    project_read = ProjectRead.model_validate(project)
    logger.info(
        "Project decided",
        extra={"project_id": project_id, "decision": decision.value, "verifier_id": verifier_id}
    )

    if not verified:
        return ProjectDecisionResult(
            decision=decision,
            project=project_read,
            message=_decision_message(decision, None)
        )

    try:
        credit = await issue_carbon_credit(session, project, issued_by=verifier_id)
    except SQLAlchemyError as e:
        await session.rollback()
        logger.exception(
            "Credit issuance failed after project was verified",
            extra={"project_id": project_id}
        )
        raise FatalOperationError(
            f"Project {project_id} was verified but its carbon credits could not be issued: {e}",
            entity_type="project",
            entity_id=project_id
        ) from e
    credit_read = CarbonCreditRead.model_validate(credit)

    certificate_read = None
    partial_failures: List[str] = []
    try:
        certificate = await issue_certificate(
            session,
            project_id=project_id,
            generated_by=verifier_id,
            certificate_url=build_auto_certificate_url(project_id),
            source="verification"
        )
        certificate_read = CertificateRead.model_validate(certificate)
    except SQLAlchemyError as e:
        await session.rollback()
        message = f"Auto-generated certificate for project {project_id} was not saved: {e}"
        logger.warning(message, extra={"project_id": project_id})
        warnings.warn(message, PartialFailureWarning, stacklevel=2)
        partial_failures.append(message)

    return ProjectDecisionResult(
        decision=decision,
        project=project_read,
        credit=credit_read,
        certificate=certificate_read,
        warnings=partial_failures,
        message=_decision_message(decision, certificate_read)
    )


async def list_pending_projects(session: AsyncSession) -> List[PendingProjectRead]:
    """
    Projects awaiting review, oldest submission first, with submitter summary.

    Read failures are logged and yield an empty list.
    """
    statement = (
        select(Project, Profile)
        .outerjoin(Profile, Project.submitter_id == Profile.id)
        .where(Project.status.in_(OPEN_STATUSES))
        .order_by(Project.submitted_at.asc(), Project.id.asc())
    )
    try:
        result = await session.execute(statement)
        rows = result.all()
    except SQLAlchemyError:
        logger.exception("Failed to load pending projects")
        return []

    return [
        PendingProjectRead(
            **ProjectRead.model_validate(project).model_dump(),
            submitter=SubmitterSummary(
                full_name=submitter.full_name,
                organization=submitter.organization
            ) if submitter else None
        )
        for project, submitter in rows
    ]


async def compute_verifier_stats(session: AsyncSession) -> VerifierStats:
    """
    Derive review counters from the current project set.

    Verified and rejected counts cover projects that carry a verifier.
    Read failures are logged and yield all-zero stats.
    """
    pending_statement = select(func.count(Project.id)).where(
        Project.status.in_(OPEN_STATUSES)
    )
    reviewed_statement = (
        select(Project.status, func.count(Project.id))
        .where(Project.verifier_id.is_not(None))
        .group_by(Project.status)
    )
    try:
        pending_result = await session.execute(pending_statement)
        pending_count = pending_result.scalar() or 0
        reviewed_result = await session.execute(reviewed_statement)
        reviewed = {status: count for status, count in reviewed_result.all()}
    except SQLAlchemyError:
        logger.exception("Failed to compute verifier stats")
        return VerifierStats()

    return VerifierStats(
        pending_reviews=pending_count,
        verified_projects=reviewed.get(ProjectStatus.VERIFIED, 0),
        rejected_projects=reviewed.get(ProjectStatus.REJECTED, 0)
    )
