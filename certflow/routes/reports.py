"""
Report and aggregation endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from certflow.core.database import get_session
from certflow.core.exceptions import NotFoundError, PersistenceError
from certflow.models.report import VerifierStats, VerifierDashboard, ProjectIssuance
from certflow.handlers.verification import compute_verifier_stats
from certflow.handlers.reports import get_verifier_dashboard, get_project_issuance

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/verifier/stats", response_model=VerifierStats)
async def verifier_stats_endpoint(
    session: AsyncSession = Depends(get_session)
):
    """
    Review counters.

    Returns:
        - pending_reviews
        - verified_projects
        - rejected_projects
        - total_reviewed
    """
    return await compute_verifier_stats(session)


@router.get("/verifier/dashboard", response_model=VerifierDashboard)
async def verifier_dashboard_endpoint(
    session: AsyncSession = Depends(get_session)
):
    """Stats plus pending projects and pending certificate requests."""
    return await get_verifier_dashboard(session)


@router.get("/projects/{project_id}/issuance", response_model=ProjectIssuance)
async def project_issuance_endpoint(
    project_id: int,
    session: AsyncSession = Depends(get_session)
):
    """Credits and certificates issued for a project."""
    try:
        return await get_project_issuance(session, project_id)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except PersistenceError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )
