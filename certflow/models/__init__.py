# SQLModel database models

from certflow.models.profile import Profile
from certflow.models.project import Project
from certflow.models.credit import CarbonCredit
from certflow.models.certificate import Certificate
from certflow.models.certificate_request import CertificateRequest
from certflow.models.audit import AuditLog

__all__ = [
    "Profile",
    "Project",
    "CarbonCredit",
    "Certificate",
    "CertificateRequest",
    "AuditLog",
]
