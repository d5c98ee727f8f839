"""Tests for the certificate request engine."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import SQLAlchemyError

from certflow.core.constants import DEFAULT_REJECTION_NOTE
from certflow.core.exceptions import (
    CertificateRequestNotFoundError,
    DecisionConflictError,
    FatalOperationError,
    PersistenceError,
    ProfileNotFoundError,
    ProjectNotFoundError,
)
from certflow.handlers import certificate_requests
from certflow.handlers.certificate_requests import (
    create_certificate_request,
    decide_request,
    list_pending_requests,
)
from certflow.models.certificate import Certificate
from certflow.models.certificate_request import (
    CertificateRequestCreate,
    CertificateRequestStatus,
    RequestDecision,
)
from certflow.models.profile import ProfileRole
from certflow.models.project import ProjectStatus

REQUESTED = datetime(2025, 9, 10, 12, 0, tzinfo=timezone.utc)


async def _fail(*args, **kwargs):
    raise SQLAlchemyError("database unavailable")


class TestDecideRequest:

    async def test_approve_issues_one_certificate(
        self, db_session, make_project, make_request, verifier, count_rows
    ):
        project = await make_project(status=ProjectStatus.VERIFIED, verifier_id=verifier.id)
        request = await make_request(project)

        result = await decide_request(
            db_session, request.id, RequestDecision.APPROVED, processor_id=verifier.id
        )

        assert result.decision == RequestDecision.APPROVED
        assert result.request.status == CertificateRequestStatus.APPROVED
        assert result.request.processed_by == verifier.id
        assert result.request.processed_at is not None
        assert result.request.notes is None
        assert result.certificate is not None
        assert result.certificate.project_id == project.id
        assert result.certificate.generated_by == verifier.id
        assert result.message == "Certificate request has been approved"

        assert await count_rows(Certificate, project_id=project.id) == 1

    async def test_reject_without_notes_uses_default_note(
        self, db_session, make_project, make_request, verifier, count_rows
    ):
        project = await make_project()
        request = await make_request(project)

        result = await decide_request(
            db_session, request.id, RequestDecision.REJECTED, processor_id=verifier.id
        )

        assert result.request.status == CertificateRequestStatus.REJECTED
        assert result.request.notes == DEFAULT_REJECTION_NOTE
        assert result.request.processed_by == verifier.id
        assert result.request.processed_at is not None
        assert result.certificate is None
        assert result.message == "Certificate request has been rejected"
        assert await count_rows(Certificate) == 0

    async def test_reject_keeps_given_notes(self, db_session, make_project, make_request, verifier):
        request = await make_request(await make_project())

        result = await decide_request(
            db_session, request.id, "rejected", "Duplicate of an earlier request",
            processor_id=verifier.id
        )

        assert result.request.notes == "Duplicate of an earlier request"

    async def test_approval_does_not_require_verified_project(
        self, db_session, make_project, make_request, verifier, count_rows
    ):
        project = await make_project(status=ProjectStatus.PENDING)
        request = await make_request(project)

        result = await decide_request(
            db_session, request.id, RequestDecision.APPROVED, processor_id=verifier.id
        )

        assert result.request.status == CertificateRequestStatus.APPROVED
        assert await count_rows(Certificate, project_id=project.id) == 1

    async def test_certificate_failure_is_fatal(
        self, db_session, make_project, make_request, verifier, count_rows, monkeypatch
    ):
        request = await make_request(await make_project())
        monkeypatch.setattr(certificate_requests, "issue_certificate", _fail)

        with pytest.raises(FatalOperationError) as exc_info:
            await decide_request(
                db_session, request.id, RequestDecision.APPROVED, processor_id=verifier.id
            )

        assert exc_info.value.entity_type == "certificate_request"
        await db_session.refresh(request)
        assert request.status == CertificateRequestStatus.APPROVED
        assert await count_rows(Certificate) == 0

    async def test_processor_is_required(self, db_session, make_project, make_request):
        request = await make_request(await make_project())

        with pytest.raises(TypeError):
            await decide_request(db_session, request.id, RequestDecision.APPROVED)

        await db_session.refresh(request)
        assert request.status == CertificateRequestStatus.PENDING
        assert request.processed_by is None

    async def test_status_write_failure_leaves_request_pending(
        self, db_session, make_project, make_request, verifier, count_rows, monkeypatch
    ):
        request = await make_request(await make_project())
        monkeypatch.setattr(db_session, "execute", _fail)

        with pytest.raises(PersistenceError):
            await decide_request(
                db_session, request.id, RequestDecision.APPROVED, processor_id=verifier.id
            )

        monkeypatch.undo()
        await db_session.refresh(request)
        assert request.status == CertificateRequestStatus.PENDING
        assert request.processed_by is None
        assert request.processed_at is None
        assert await count_rows(Certificate) == 0

    async def test_unknown_request(self, db_session, verifier):
        with pytest.raises(CertificateRequestNotFoundError):
            await decide_request(db_session, 4242, RequestDecision.APPROVED, processor_id=verifier.id)

    async def test_repeated_approval_duplicates_certificates(
        self, db_session, make_project, make_request, verifier, count_rows, settings
    ):
        request = await make_request(await make_project())

        await decide_request(db_session, request.id, RequestDecision.APPROVED, processor_id=verifier.id)
        await decide_request(db_session, request.id, RequestDecision.APPROVED, processor_id=verifier.id)

        assert await count_rows(Certificate) == 2

    async def test_single_decision_guard(
        self, db_session, make_project, make_request, verifier, count_rows, settings, monkeypatch
    ):
        monkeypatch.setattr(settings, "enforce_single_decision", True)
        request = await make_request(await make_project())

        await decide_request(db_session, request.id, RequestDecision.APPROVED, processor_id=verifier.id)
        with pytest.raises(DecisionConflictError):
            await decide_request(db_session, request.id, RequestDecision.REJECTED, processor_id=verifier.id)

        await db_session.refresh(request)
        assert request.status == CertificateRequestStatus.APPROVED
        assert await count_rows(Certificate) == 1


class TestListPendingRequests:

    async def test_oldest_first_with_joined_summaries(
        self, db_session, make_project, make_request, requester, verifier
    ):
        project = await make_project(
            title="Mangrove Restoration", status=ProjectStatus.VERIFIED, verifier_id=verifier.id
        )
        later = await make_request(project, requested_at=REQUESTED + timedelta(days=2))
        earlier = await make_request(project, requested_at=REQUESTED)
        await make_request(project, status=CertificateRequestStatus.APPROVED)

        pending = await list_pending_requests(db_session)

        assert [r.id for r in pending] == [earlier.id, later.id]
        first = pending[0]
        assert first.status == CertificateRequestStatus.PENDING
        assert first.project.id == project.id
        assert first.project.title == "Mangrove Restoration"
        assert first.project.area_hectares == project.area_hectares
        assert first.project.estimated_credits == project.estimated_credits
        assert first.requester.full_name == requester.full_name
        assert first.requester.organization == requester.organization
        assert first.requester.role == ProfileRole.NGO

    async def test_processed_request_leaves_the_list(
        self, db_session, make_project, make_request, verifier
    ):
        request = await make_request(await make_project())

        await decide_request(db_session, request.id, RequestDecision.REJECTED, processor_id=verifier.id)

        assert await list_pending_requests(db_session) == []

    async def test_read_failure_returns_empty_list(self, db_session, monkeypatch):
        monkeypatch.setattr(db_session, "execute", _fail)

        assert await list_pending_requests(db_session) == []


class TestCreateCertificateRequest:

    async def test_creates_pending_request(self, db_session, make_project, requester):
        project = await make_project()

        request = await create_certificate_request(
            db_session, CertificateRequestCreate(project_id=project.id, requester_id=requester.id)
        )

        assert request.id is not None
        assert request.status == CertificateRequestStatus.PENDING
        assert request.processed_at is None
        assert request.processed_by is None

    async def test_unknown_project(self, db_session, requester):
        with pytest.raises(ProjectNotFoundError):
            await create_certificate_request(
                db_session, CertificateRequestCreate(project_id=77, requester_id=requester.id)
            )

    async def test_unknown_requester(self, db_session, make_project):
        project = await make_project()

        with pytest.raises(ProfileNotFoundError):
            await create_certificate_request(
                db_session, CertificateRequestCreate(project_id=project.id, requester_id=77)
            )
