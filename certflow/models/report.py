"""
Report schemas - derived read-only views for the verifier dashboard.
"""

from pydantic import BaseModel, computed_field
from typing import List

from certflow.models.project import PendingProjectRead
from certflow.models.certificate_request import PendingCertificateRequestRead
from certflow.models.credit import CarbonCreditRead
from certflow.models.certificate import CertificateRead


class VerifierStats(BaseModel):
    """Review counters, recomputed on every read."""
    pending_reviews: int = 0
    verified_projects: int = 0
    rejected_projects: int = 0

    @computed_field
    @property
    def total_reviewed(self) -> int:
        return self.verified_projects + self.rejected_projects


class VerifierDashboard(BaseModel):
    """Everything the verifier dashboard renders in one read."""
    stats: VerifierStats
    pending_projects: List[PendingProjectRead]
    pending_requests: List[PendingCertificateRequestRead]


class ProjectIssuance(BaseModel):
    """Credits and certificates issued for one project."""
    project_id: int
    credits: List[CarbonCreditRead]
    certificates: List[CertificateRead]
    total_credits: float
