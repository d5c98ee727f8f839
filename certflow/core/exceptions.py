"""
Workflow error taxonomy.

Routes translate these into HTTP responses; engines raise them at the
point a gateway call or a precondition fails.
"""


class CertflowError(Exception):
    """Base class for all workflow errors."""


class NotFoundError(CertflowError, LookupError):
    """Referenced entity does not exist."""


class ProjectNotFoundError(NotFoundError):
    def __init__(self, project_id: int):
        super().__init__(f"Project {project_id} not found")
        self.project_id = project_id


class CertificateRequestNotFoundError(NotFoundError):
    def __init__(self, request_id: int):
        super().__init__(f"Certificate request {request_id} not found")
        self.request_id = request_id


class ProfileNotFoundError(NotFoundError):
    def __init__(self, profile_id: int):
        super().__init__(f"Profile {profile_id} not found")
        self.profile_id = profile_id


class PersistenceError(CertflowError):
    """A read or write against the database failed."""


class FatalOperationError(PersistenceError):
    """
    A side-effect write failed after the status write was committed.

    The entity keeps its new status; the caller must reconcile manually.
    """

    def __init__(self, message: str, *, entity_type: str, entity_id: int):
        super().__init__(message)
        self.entity_type = entity_type
        self.entity_id = entity_id


class DecisionConflictError(CertflowError):
    """The entity was no longer open when the decision was written."""

    def __init__(self, entity_type: str, entity_id: int):
        super().__init__(f"{entity_type} {entity_id} has already been decided")
        self.entity_type = entity_type
        self.entity_id = entity_id


class PartialFailureWarning(UserWarning):
    """The auto-generated certificate for a verified project was not written."""
