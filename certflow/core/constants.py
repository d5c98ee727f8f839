"""
Workflow constants for project verification and certificate issuance.
"""

# Project statuses a verifier may still decide on
OPEN_PROJECT_STATUSES = ("pending", "under_review")

# Note stored when a certificate request is rejected without one
DEFAULT_REJECTION_NOTE = "Certificate request rejected"

# Auto-generated certificate reference: project id + epoch milliseconds
AUTO_CERTIFICATE_URL_TEMPLATE = "auto_cert_{project_id}_{timestamp_ms}.pdf"
