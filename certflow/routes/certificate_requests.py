"""
Certificate request endpoints.
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
from certflow.models.certificate_request import (
    CertificateRequestCreate,
    CertificateRequestRead,
    PendingCertificateRequestRead,
    RequestDecisionCreate,
    RequestDecisionResult,
)
from certflow.handlers.certificate_requests import (
    create_certificate_request,
    decide_request,
    list_pending_requests,
)

router = APIRouter(prefix="/certificate-requests", tags=["certificate-requests"])


@router.post("/", response_model=CertificateRequestRead, status_code=status.HTTP_201_CREATED)
async def create_certificate_request_endpoint(
    request: CertificateRequestCreate,
    session: AsyncSession = Depends(get_session)
):
    """File a certificate request for a project."""
    try:
        return await create_certificate_request(session, request)
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


@router.get("/pending", response_model=List[PendingCertificateRequestRead])
async def list_pending_requests_endpoint(
    session: AsyncSession = Depends(get_session)
):
    """Pending certificate requests, oldest first."""
    return await list_pending_requests(session)


@router.post("/{request_id}/decision", response_model=RequestDecisionResult)
async def decide_request_endpoint(
    request_id: int,
    body: RequestDecisionCreate,
    session: AsyncSession = Depends(get_session)
):
    """
    Approve or reject a certificate request.

    Approval generates a certificate; if that fails the request stays
    approved and 500 is returned.
    """
    try:
        return await decide_request(
            session,
            request_id,
            body.decision,
            body.notes,
            processor_id=body.processor_id
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
