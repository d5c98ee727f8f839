"""
Certificate issuance handler.

A certificate here is only the issuance record; document rendering is
someone else's job.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select
from typing import List, Optional

from certflow.models.certificate import Certificate
from certflow.handlers.audit import audit_entry
from certflow.core.constants import AUTO_CERTIFICATE_URL_TEMPLATE
from certflow.utils.time import utc_now, epoch_millis


def build_auto_certificate_url(project_id: int) -> str:
    """Reference for a certificate generated automatically on verification."""
    return AUTO_CERTIFICATE_URL_TEMPLATE.format(
        project_id=project_id,
        timestamp_ms=epoch_millis(utc_now())
    )


async def issue_certificate(
    session: AsyncSession,
    project_id: int,
    generated_by: Optional[int],
    certificate_url: Optional[str] = None,
    source: str = "verification"
) -> Certificate:
    """Create and commit a certificate record. Database errors propagate."""
    certificate = Certificate(
        project_id=project_id,
        generated_by=generated_by,
        certificate_url=certificate_url
    )
    session.add(certificate)
    await session.flush()

    session.add(audit_entry(
        action="certificate_generated",
        entity_type="certificate",
        entity_id=certificate.id,
        payload={
            "project_id": project_id,
            "certificate_url": certificate_url,
            "source": source
        },
        actor_id=generated_by
    ))
    await session.commit()
    await session.refresh(certificate)

    return certificate


async def get_certificates_by_project(
    session: AsyncSession,
    project_id: int
) -> List[Certificate]:
    """Get all certificates for a project, oldest first."""
    statement = select(Certificate).where(
        Certificate.project_id == project_id
    ).order_by(Certificate.generated_at, Certificate.id)

    result = await session.execute(statement)
    return list(result.scalars().all())
