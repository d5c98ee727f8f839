"""
Report and aggregation handlers for the verifier dashboard.
"""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from certflow.models.report import VerifierDashboard, ProjectIssuance
from certflow.models.credit import CarbonCreditRead
from certflow.models.certificate import CertificateRead
from certflow.handlers.verification import (
    get_project,
    list_pending_projects,
    compute_verifier_stats,
)
from certflow.handlers.certificate_requests import list_pending_requests
from certflow.handlers.carbon import get_credits_by_project
from certflow.handlers.certificates import get_certificates_by_project
from certflow.core.exceptions import PersistenceError


async def get_verifier_dashboard(session: AsyncSession) -> VerifierDashboard:
    """
    Everything the verifier dashboard shows, read fresh.

    Each part fails open on its own, so a broken query degrades one panel
    rather than the whole view.
    """
    pending_projects = await list_pending_projects(session)
    pending_requests = await list_pending_requests(session)
    stats = await compute_verifier_stats(session)

    return VerifierDashboard(
        stats=stats,
        pending_projects=pending_projects,
        pending_requests=pending_requests
    )


async def get_project_issuance(
    session: AsyncSession,
    project_id: int
) -> ProjectIssuance:
    """
    Credits and certificates issued for a project.

    Raises:
        ProjectNotFoundError: unknown project
    """
    await get_project(session, project_id)

    try:
        credits = await get_credits_by_project(session, project_id)
        certificates = await get_certificates_by_project(session, project_id)
    except SQLAlchemyError as e:
        raise PersistenceError(f"Failed to load issuance for project {project_id}: {e}") from e

    return ProjectIssuance(
        project_id=project_id,
        credits=[CarbonCreditRead.model_validate(c) for c in credits],
        certificates=[CertificateRead.model_validate(c) for c in certificates],
        total_credits=round(sum(c.credits_amount for c in credits), 2)
    )
