"""
Certificate request model - a stakeholder's ask for a certificate on a project.
"""

from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum

from certflow.models.certificate import CertificateRead
from certflow.models.profile import ProfileRole
from certflow.utils.time import utc_now


class CertificateRequestStatus(str, Enum):
    """Certificate request lifecycle. APPROVED and REJECTED are terminal."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class RequestDecision(str, Enum):
    """Outcomes a processor can record for a certificate request."""
    APPROVED = "approved"
    REJECTED = "rejected"


class CertificateRequestBase(SQLModel):
    """Base certificate request schema."""
    project_id: int = Field(..., foreign_key="projects.id", ondelete="CASCADE", index=True)
    requester_id: int = Field(..., foreign_key="profiles.id", ondelete="CASCADE", index=True)


class CertificateRequest(CertificateRequestBase, table=True):
    """Certificate request database table."""
    __tablename__ = "certificate_requests"

    id: Optional[int] = Field(default=None, primary_key=True)
    status: CertificateRequestStatus = Field(default=CertificateRequestStatus.PENDING, index=True)
    requested_at: datetime = Field(default_factory=utc_now)
    processed_at: Optional[datetime] = Field(default=None)
    processed_by: Optional[int] = Field(default=None, foreign_key="profiles.id", ondelete="SET NULL")
    notes: Optional[str] = Field(default=None)


class CertificateRequestCreate(CertificateRequestBase):
    """Schema for filing a certificate request."""
    pass


class CertificateRequestRead(CertificateRequestBase):
    """Schema for reading a certificate request."""
    id: int
    status: CertificateRequestStatus
    requested_at: datetime
    processed_at: Optional[datetime] = None
    processed_by: Optional[int] = None
    notes: Optional[str] = None


class ProjectSummary(SQLModel):
    """Project fields joined onto a pending certificate request."""
    id: int
    title: str
    location: str
    area_hectares: float
    estimated_credits: float
    verified_at: Optional[datetime] = None


class RequesterSummary(SQLModel):
    """Requester fields joined onto a pending certificate request."""
    full_name: str
    organization: Optional[str] = None
    role: ProfileRole


class PendingCertificateRequestRead(CertificateRequestRead):
    """A pending certificate request with its project and requester."""
    project: Optional[ProjectSummary] = None
    requester: Optional[RequesterSummary] = None


class RequestDecisionCreate(SQLModel):
    """Processor decision on a certificate request."""
    decision: RequestDecision
    notes: Optional[str] = None
    processor_id: int


class RequestDecisionResult(SQLModel):
    """Outcome of a certificate request decision."""
    decision: RequestDecision
    request: CertificateRequestRead
    certificate: Optional[CertificateRead] = None
    message: str
