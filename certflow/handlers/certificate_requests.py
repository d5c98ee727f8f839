"""
Certificate request handler.

Stakeholders file requests for a project certificate; a verifier or admin
approves or rejects each one. Approval issues a certificate.
"""

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased
from sqlmodel import select
from typing import List, Optional

from certflow.models.certificate_request import (
    CertificateRequest,
    CertificateRequestCreate,
    CertificateRequestRead,
    CertificateRequestStatus,
    PendingCertificateRequestRead,
    ProjectSummary,
    RequesterSummary,
    RequestDecision,
    RequestDecisionResult,
)
from certflow.models.certificate import CertificateRead
from certflow.models.profile import Profile
from certflow.models.project import Project
from certflow.handlers.audit import audit_entry
from certflow.handlers.certificates import issue_certificate
from certflow.handlers.submissions import get_profile
from certflow.handlers.verification import get_project
from certflow.core.config import get_settings
from certflow.core.constants import DEFAULT_REJECTION_NOTE
from certflow.core.exceptions import (
    CertificateRequestNotFoundError,
    PersistenceError,
    FatalOperationError,
    DecisionConflictError,
)
from certflow.core.logging import get_logger
from certflow.utils.time import utc_now

logger = get_logger(__name__)


async def create_certificate_request(
    session: AsyncSession,
    request_data: CertificateRequestCreate
) -> CertificateRequest:
    """File a pending certificate request for an existing project."""
    await get_project(session, request_data.project_id)
    await get_profile(session, request_data.requester_id)

    request = CertificateRequest(**request_data.model_dump())
    session.add(request)
    try:
        await session.flush()
        session.add(audit_entry(
            action="certificate_request_created",
            entity_type="certificate_request",
            entity_id=request.id,
            payload=request_data.model_dump(),
            actor_id=request_data.requester_id
        ))
        await session.commit()
        await session.refresh(request)
    except SQLAlchemyError as e:
        await session.rollback()
        raise PersistenceError(f"Failed to create certificate request: {e}") from e

    return request


async def get_certificate_request(
    session: AsyncSession,
    request_id: int
) -> CertificateRequest:
    """Load a certificate request or raise CertificateRequestNotFoundError."""
    try:
        request = await session.get(CertificateRequest, request_id)
    except SQLAlchemyError as e:
        raise PersistenceError(f"Failed to load certificate request {request_id}: {e}") from e
    if request is None:
        raise CertificateRequestNotFoundError(request_id)
    return request


async def decide_request(
    session: AsyncSession,
    request_id: int,
    decision: RequestDecision,
    notes: Optional[str] = None,
    *,
    processor_id: int
) -> RequestDecisionResult:
    """
    Approve or reject a certificate request.

    The status write commits first. On approval a certificate for the
    request's project follows; if that write fails the request stays
    approved and FatalOperationError is raised, after a rollback that
    expires every ORM instance the caller holds in the session.

    processor_id is required and recorded as processed_by.

    The referenced project's own review status is not checked.
    """
    decision = RequestDecision(decision)
    settings = get_settings()
    request = await get_certificate_request(session, request_id)

    if notes is None and decision is RequestDecision.REJECTED:
        notes = DEFAULT_REJECTION_NOTE

    statement = (
        update(CertificateRequest)
        .where(CertificateRequest.id == request_id)
        .values(
            status=CertificateRequestStatus(decision.value),
            processed_at=utc_now(),
            processed_by=processor_id,
            notes=notes
        )
        .execution_options(synchronize_session=False)
    )
    if settings.enforce_single_decision:
        statement = statement.where(CertificateRequest.status == CertificateRequestStatus.PENDING)

    try:
        result = await session.execute(statement)
        if result.rowcount == 0:
            await session.rollback()
            raise DecisionConflictError("Certificate request", request_id)

        session.add(audit_entry(
            action=f"certificate_request_{decision.value}",
            entity_type="certificate_request",
            entity_id=request_id,
            payload={"status": decision.value, "notes": notes},
            actor_id=processor_id
        ))
        await session.commit()
        await session.refresh(request)
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(
            "Certificate request update failed",
            extra={"request_id": request_id, "decision": decision.value, "error": str(e)}
        )
        raise PersistenceError(f"Failed to update certificate request {request_id}: {e}") from e

    request_read = CertificateRequestRead.model_validate(request)
    logger.info(
        "Certificate request decided",
        extra={"request_id": request_id, "decision": decision.value, "processor_id": processor_id}
    )

    certificate_read = None
    if decision is RequestDecision.APPROVED:
        try:
            certificate = await issue_certificate(
                session,
                project_id=request_read.project_id,
                generated_by=processor_id,
                source="certificate_request"
            )
        except SQLAlchemyError as e:
            await session.rollback()
            logger.exception(
                "Certificate issuance failed after request was approved",
                extra={"request_id": request_id, "project_id": request_read.project_id}
            )
            raise FatalOperationError(
                f"Certificate request {request_id} was approved but the certificate could not be generated: {e}",
                entity_type="certificate_request",
                entity_id=request_id
            ) from e
        certificate_read = CertificateRead.model_validate(certificate)

    return RequestDecisionResult(
        decision=decision,
        request=request_read,
        certificate=certificate_read,
        message=f"Certificate request has been {decision.value}"
    )


async def list_pending_requests(session: AsyncSession) -> List[PendingCertificateRequestRead]:
    """
    Pending certificate requests, oldest first, with project and requester.

    Read failures are logged and yield an empty list.
    """
    requester = aliased(Profile)
    statement = (
        select(CertificateRequest, Project, requester)
        .outerjoin(Project, CertificateRequest.project_id == Project.id)
        .outerjoin(requester, CertificateRequest.requester_id == requester.id)
        .where(CertificateRequest.status == CertificateRequestStatus.PENDING)
        .order_by(CertificateRequest.requested_at.asc(), CertificateRequest.id.asc())
    )
    try:
        result = await session.execute(statement)
        rows = result.all()
    except SQLAlchemyError:
        logger.exception("Failed to load pending certificate requests")
        return []

    pending = []
    for request, project, profile in rows:
        pending.append(PendingCertificateRequestRead(
            **CertificateRequestRead.model_validate(request).model_dump(),
            project=ProjectSummary(
                id=project.id,
                title=project.title,
                location=project.location,
                area_hectares=project.area_hectares,
                estimated_credits=project.estimated_credits,
                verified_at=project.verified_at
            ) if project else None,
            requester=RequesterSummary(
                full_name=profile.full_name,
                organization=profile.organization,
                role=profile.role
            ) if profile else None
        ))
    return pending
