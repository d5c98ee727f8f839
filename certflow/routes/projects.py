"""
Project submission and verification endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from certflow.core.database import get_session
from certflow.core.exceptions import (
    NotFoundError,
    PersistenceError,
    DecisionConflictError,
)
from certflow.models.project import (
    ProjectCreate,
    ProjectRead,
    PendingProjectRead,
    ProjectDecisionCreate,
    ProjectDecisionResult,
)
from certflow.handlers.submissions import submit_project
from certflow.handlers.verification import (
    get_project,
    decide_project,
    list_pending_projects,
)

router = APIRouter(prefix="/projects", tags=["projects"])


@router.post("/", response_model=ProjectRead, status_code=status.HTTP_201_CREATED)
async def submit_project_endpoint(
    project: ProjectCreate,
    session: AsyncSession = Depends(get_session)
):
    """Submit a project for verification."""
    try:
        return await submit_project(session, project)
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


@router.get("/pending", response_model=List[PendingProjectRead])
async def list_pending_projects_endpoint(
    session: AsyncSession = Depends(get_session)
):
    """Projects awaiting review, oldest submission first."""
    return await list_pending_projects(session)


@router.get("/{project_id}", response_model=ProjectRead)
async def get_project_endpoint(
    project_id: int,
    session: AsyncSession = Depends(get_session)
):
    """Get project by ID."""
    try:
        return await get_project(session, project_id)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )


@router.post("/{project_id}/decision", response_model=ProjectDecisionResult)
async def decide_project_endpoint(
    project_id: int,
    body: ProjectDecisionCreate,
    session: AsyncSession = Depends(get_session)
):
    """
    Verify or reject a project.

    Verification issues carbon credits to the submitter and auto-generates
    a certificate. A certificate failure is reported in `warnings`; a credit
    failure returns 500 even though the project is already verified.
    """
    try:
        return await decide_project(
            session,
            project_id,
            body.decision,
            body.notes,
            body.verifier_id
        )
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except DecisionConflictError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )
    except PersistenceError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )
