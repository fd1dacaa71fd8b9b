"""Tests for the submission coordinator."""

import asyncio
from decimal import Decimal

import pytest

from sanad_core.models import ApplicationDraft, CandidateFile, StagedDocument
from sanad_wizard.config import SubmissionConfig
from sanad_wizard.interfaces import SubmissionStatus
from sanad_wizard.submission import (
    MISSING_IDENTIFIER_WARNING,
    UNREADABLE_RESPONSE_WARNING,
    SubmissionCoordinator,
)


def _document(name="id-card.pdf", byte_size=2048, mime_type="application/pdf"):
    return StagedDocument.from_candidate(
        CandidateFile(name=name, byte_size=byte_size, mime_type=mime_type)
    )


class TestSubmitSuccess:
    """Test suite for successful submissions."""

    def test_returns_request_id(self, creation_service, valid_draft):
        coordinator = SubmissionCoordinator(creation_service)

        outcome = asyncio.run(coordinator.submit(valid_draft))

        assert outcome.status == SubmissionStatus.SUCCESS
        assert outcome.is_success
        assert outcome.request_id == "abc123"
        assert outcome.message == "Your application has been submitted successfully!"
        assert outcome.errors == {}
        assert coordinator.is_submitting is False

    def test_sends_payload(self, creation_service, valid_draft):
        valid_draft.title = "  Emergency roof repair  "
        valid_draft.tags = ["housing", "storm"]
        valid_draft.documents = [_document()]
        coordinator = SubmissionCoordinator(creation_service)

        asyncio.run(coordinator.submit(valid_draft))

        assert len(creation_service.payloads) == 1
        request = creation_service.payloads[0].to_request()
        assert request["title"] == "Emergency roof repair"
        assert request["requestedAmount"] == 2500.0
        assert request["category"] == "emergency_assistance"
        assert request["urgencyLevel"] == "urgent"
        assert request["tags"] == ["housing", "storm"]
        assert "documents" not in request

    def test_custom_success_message(self, creation_service, valid_draft):
        config = SubmissionConfig(success_message="Merci!")
        coordinator = SubmissionCoordinator(creation_service, config=config)

        outcome = asyncio.run(coordinator.submit(valid_draft))

        assert outcome.message == "Merci!"

    @pytest.mark.parametrize(
        "response, expected",
        [
            ({"_id": "65f0c1"}, "65f0c1"),
            ({"id": 42}, "42"),
            ({"requestId": "req-7"}, "req-7"),
            ({"message": "Request created successfully", "demande": {"_id": "65f0c1"}}, "65f0c1"),
            ({"demande": {"id": 7}}, "7"),
            ({"message": "req-9"}, None),
            ({}, None),
        ],
    )
    def test_accepts_mapping_responses(self, make_service, valid_draft, response, expected):
        service = make_service(response=response)
        coordinator = SubmissionCoordinator(service)

        outcome = asyncio.run(coordinator.submit(valid_draft))

        assert outcome.is_success
        assert outcome.request_id == expected

    def test_message_is_only_a_reference(self, make_service, valid_draft):
        service = make_service(response={"message": "Request created successfully"})
        coordinator = SubmissionCoordinator(service)

        outcome = asyncio.run(coordinator.submit(valid_draft))

        assert outcome.request_id is None
        assert outcome.reference == "Request created successfully"

    def test_reference_is_the_identifier_when_present(self, make_service, valid_draft):
        service = make_service(
            response={"message": "Request created successfully", "demande": {"_id": "65f0c1"}}
        )
        coordinator = SubmissionCoordinator(service)

        outcome = asyncio.run(coordinator.submit(valid_draft))

        assert outcome.reference == "65f0c1"

    @pytest.mark.parametrize(
        "response",
        [
            {"_id": "65f0c1", "message": {"text": "ok"}},
            {"demande": "65f0c1"},
            "created",
        ],
    )
    def test_unreadable_response_is_still_a_success(self, make_service, valid_draft, response):
        """The request exists once create() returns, so no retry is asked for."""
        service = make_service(response=response)
        coordinator = SubmissionCoordinator(service)

        outcome = asyncio.run(coordinator.submit(valid_draft))

        assert outcome.status == SubmissionStatus.SUCCESS
        assert outcome.errors == {}
        assert outcome.request_id is None
        assert outcome.warnings == [UNREADABLE_RESPONSE_WARNING]
        assert len(service.payloads) == 1
        assert coordinator.is_submitting is False


class TestSubmitFailure:
    """Test suite for failed and rejected submissions."""

    def test_service_error_becomes_submit_error(self, failing_service, valid_draft):
        before = valid_draft.model_copy(deep=True)
        coordinator = SubmissionCoordinator(failing_service)

        outcome = asyncio.run(coordinator.submit(valid_draft))

        assert outcome.status == SubmissionStatus.FAILED
        assert outcome.errors == {"submit": "Failed to submit application. Please try again."}
        assert outcome.request_id is None
        assert valid_draft == before
        assert coordinator.is_submitting is False

    def test_unexpected_exception_is_caught(self, make_service, valid_draft):
        service = make_service(fail_with=RuntimeError("connection reset"))
        coordinator = SubmissionCoordinator(service)

        outcome = asyncio.run(coordinator.submit(valid_draft))

        assert outcome.errors == {"submit": "Failed to submit application. Please try again."}

    def test_retry_after_failure(self, make_service, valid_draft):
        service = make_service(fail_with=RuntimeError("timeout"))
        coordinator = SubmissionCoordinator(service)
        asyncio.run(coordinator.submit(valid_draft))

        service.fail_with = None
        outcome = asyncio.run(coordinator.submit(valid_draft))

        assert outcome.is_success
        assert len(service.payloads) == 2

    def test_invalid_draft_makes_no_call(self, creation_service):
        draft = ApplicationDraft(title="Help", requested_amount=Decimal("0"))
        coordinator = SubmissionCoordinator(creation_service)

        outcome = asyncio.run(coordinator.submit(draft))

        assert outcome.status == SubmissionStatus.INVALID
        assert set(outcome.errors) == {"description", "requestedAmount"}
        assert creation_service.payloads == []

    def test_amount_over_cap_makes_no_call(self, creation_service, valid_draft):
        valid_draft.requested_amount = Decimal("3500")
        coordinator = SubmissionCoordinator(creation_service)

        outcome = asyncio.run(coordinator.submit(valid_draft))

        assert outcome.errors == {
            "requestedAmount": "Amount cannot exceed 3,000 DA for this category"
        }
        assert creation_service.payloads == []


class TestConcurrentSubmit:
    """Test suite for the in-flight guard."""

    def test_second_submit_is_ignored(self, creation_service, valid_draft):
        coordinator = SubmissionCoordinator(creation_service)

        async def scenario():
            creation_service.release = asyncio.Event()
            first = asyncio.create_task(coordinator.submit(valid_draft))
            await asyncio.sleep(0)
            assert coordinator.is_submitting
            second = await coordinator.submit(valid_draft)
            creation_service.release.set()
            return await first, second

        first, second = asyncio.run(scenario())

        assert first.is_success
        assert second.status == SubmissionStatus.IN_PROGRESS
        assert len(creation_service.payloads) == 1
        assert coordinator.is_submitting is False


class TestDocumentUpload:
    """Test suite for the follow-up document upload."""

    def test_uploads_staged_documents(self, creation_service, uploader, valid_draft):
        valid_draft.documents = [_document(), _document("lease.jpg", 4096, "image/jpeg")]
        coordinator = SubmissionCoordinator(creation_service, document_uploader=uploader)

        outcome = asyncio.run(coordinator.submit(valid_draft))

        assert outcome.is_success
        assert outcome.warnings == []
        assert len(uploader.uploads) == 1
        request_id, documents = uploader.uploads[0]
        assert request_id == "abc123"
        assert [d.name for d in documents] == ["id-card.pdf", "lease.jpg"]

    def test_no_upload_without_documents(self, creation_service, uploader, valid_draft):
        coordinator = SubmissionCoordinator(creation_service, document_uploader=uploader)

        asyncio.run(coordinator.submit(valid_draft))

        assert uploader.uploads == []

    def test_upload_failure_is_a_warning(self, creation_service, failing_uploader, valid_draft):
        valid_draft.documents = [_document()]
        coordinator = SubmissionCoordinator(
            creation_service,
            document_uploader=failing_uploader,
        )

        outcome = asyncio.run(coordinator.submit(valid_draft))

        assert outcome.is_success
        assert outcome.request_id == "abc123"
        assert len(outcome.warnings) == 1
        assert "Upload rejected" in outcome.warnings[0]

    def test_upload_skipped_without_identifier(self, make_service, uploader, valid_draft):
        valid_draft.documents = [_document()]
        service = make_service(response={})
        coordinator = SubmissionCoordinator(service, document_uploader=uploader)

        outcome = asyncio.run(coordinator.submit(valid_draft))

        assert outcome.is_success
        assert uploader.uploads == []
        assert outcome.warnings == [MISSING_IDENTIFIER_WARNING]

    def test_uploads_with_nested_request_identifier(self, make_service, uploader, valid_draft):
        valid_draft.documents = [_document()]
        service = make_service(
            response={
                "message": "Request created successfully",
                "demande": {"_id": "65f0c1", "title": "Emergency roof repair"},
            }
        )
        coordinator = SubmissionCoordinator(service, document_uploader=uploader)

        outcome = asyncio.run(coordinator.submit(valid_draft))

        assert [request_id for request_id, _ in uploader.uploads] == ["65f0c1"]
        assert outcome.warnings == []

    def test_message_never_used_as_upload_identifier(self, make_service, uploader, valid_draft):
        valid_draft.documents = [_document()]
        service = make_service(response={"message": "Request created successfully"})
        coordinator = SubmissionCoordinator(service, document_uploader=uploader)

        outcome = asyncio.run(coordinator.submit(valid_draft))

        assert uploader.uploads == []
        assert outcome.warnings == [MISSING_IDENTIFIER_WARNING]

    def test_unreadable_response_skips_upload(self, make_service, uploader, valid_draft):
        valid_draft.documents = [_document()]
        service = make_service(response={"_id": "65f0c1", "message": {"text": "ok"}})
        coordinator = SubmissionCoordinator(service, document_uploader=uploader)

        outcome = asyncio.run(coordinator.submit(valid_draft))

        assert uploader.uploads == []
        assert outcome.warnings == [UNREADABLE_RESPONSE_WARNING, MISSING_IDENTIFIER_WARNING]
