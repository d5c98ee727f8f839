"""
Certificate model - issuance record for a verified project or an approved request.
"""

from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime

from certflow.utils.time import utc_now


class CertificateBase(SQLModel):
    """Base certificate schema."""
    project_id: int = Field(..., foreign_key="projects.id", index=True)
    generated_by: Optional[int] = Field(default=None, foreign_key="profiles.id")
    certificate_url: Optional[str] = Field(
        default=None,
        description="Opaque document reference; rendering happens elsewhere"
    )


class Certificate(CertificateBase, table=True):
    """Certificate database table - append-only."""
    __tablename__ = "certificates"

    id: Optional[int] = Field(default=None, primary_key=True)
    generated_at: datetime = Field(default_factory=utc_now)


class CertificateRead(CertificateBase):
    """Schema for reading a certificate."""
    id: int
    generated_at: datetime
