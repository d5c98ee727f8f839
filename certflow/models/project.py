"""
Project model - a submitted environmental initiative and its review outcome.
"""

from sqlmodel import SQLModel, Field
from typing import List, Optional
from datetime import datetime
from enum import Enum

from certflow.models.credit import CarbonCreditRead
from certflow.models.certificate import CertificateRead
from certflow.utils.time import utc_now


class ProjectStatus(str, Enum):
    """Project review lifecycle. VERIFIED and REJECTED are terminal."""
    PENDING = "pending"
    UNDER_REVIEW = "under_review"
    VERIFIED = "verified"
    REJECTED = "rejected"


class ProjectDecision(str, Enum):
    """Outcomes a verifier can record for a project."""
    VERIFIED = "verified"
    REJECTED = "rejected"


class ProjectBase(SQLModel):
    """Base project schema."""
    title: str = Field(..., min_length=1)
    location: str = Field(...)
    area_hectares: float = Field(..., gt=0, description="Project area in hectares")
    description: str = Field(default="")
    estimated_credits: float = Field(..., ge=0, description="Credits to issue on verification")


class Project(ProjectBase, table=True):
    """Project database table."""
    __tablename__ = "projects"

    id: Optional[int] = Field(default=None, primary_key=True)
    submitter_id: int = Field(..., foreign_key="profiles.id", index=True)
    status: ProjectStatus = Field(default=ProjectStatus.PENDING, index=True)
    submitted_at: datetime = Field(default_factory=utc_now)

    # Review fields, written only by the verification engine
    verifier_id: Optional[int] = Field(default=None, foreign_key="profiles.id")
    verification_notes: Optional[str] = Field(default=None)
    verified_at: Optional[datetime] = Field(default=None)


class ProjectCreate(ProjectBase):
    """Schema for submitting a project."""
    submitter_id: int


class ProjectRead(ProjectBase):
    """Schema for reading a project."""
    id: int
    submitter_id: int
    status: ProjectStatus
    submitted_at: datetime
    verifier_id: Optional[int] = None
    verification_notes: Optional[str] = None
    verified_at: Optional[datetime] = None


class SubmitterSummary(SQLModel):
    """Submitter fields joined onto a pending project."""
    full_name: str
    organization: Optional[str] = None


class PendingProjectRead(ProjectRead):
    """A project awaiting review together with its submitter."""
    submitter: Optional[SubmitterSummary] = None


class ProjectDecisionCreate(SQLModel):
    """Verifier decision on a project."""
    decision: ProjectDecision
    notes: Optional[str] = None
    verifier_id: int


class ProjectDecisionResult(SQLModel):
    """Outcome of a project decision, including issuance side effects."""
    decision: ProjectDecision
    project: ProjectRead
    credit: Optional[CarbonCreditRead] = None
    certificate: Optional[CertificateRead] = None
    warnings: List[str] = Field(default_factory=list)
    message: str
