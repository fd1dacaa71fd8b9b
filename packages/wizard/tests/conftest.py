"""Shared fixtures and in-memory collaborators for wizard tests."""

from decimal import Decimal

import pytest

from sanad_core.exceptions import SubmissionError
from sanad_core.models import ApplicationDraft, Category, OpportunityContext, UrgencyLevel
from sanad_wizard.interfaces import CreationResponse, NavigationRequest


class FakeCreationService:
    """Records payloads and returns a fixed identifier, or fails."""

    def __init__(self, request_id="abc123", *, fail_with=None, response=None):
        self.request_id = request_id
        self.fail_with = fail_with
        self.response = response
        self.payloads = []
        self.release = None

    async def create(self, payload):
        self.payloads.append(payload)
        if self.release is not None:
            await self.release.wait()
        if self.fail_with is not None:
            raise self.fail_with
        if self.response is not None:
            return self.response
        return CreationResponse(id=self.request_id)


class FakeUploader:
    """Records uploads, optionally failing."""

    def __init__(self, fail_with=None):
        self.fail_with = fail_with
        self.uploads = []

    async def upload(self, request_id, documents):
        if self.fail_with is not None:
            raise self.fail_with
        self.uploads.append((request_id, list(documents)))


class RecordingNavigator:
    """Collects navigation requests."""

    def __init__(self):
        self.requests: list[NavigationRequest] = []

    def navigate(self, request):
        self.requests.append(request)


@pytest.fixture
def creation_service() -> FakeCreationService:
    return FakeCreationService()


@pytest.fixture
def failing_service() -> FakeCreationService:
    return FakeCreationService(
        fail_with=SubmissionError("Service unavailable", stage="create", status_code=503)
    )


@pytest.fixture
def navigator() -> RecordingNavigator:
    return RecordingNavigator()


@pytest.fixture
def valid_draft() -> ApplicationDraft:
    """A draft that passes the pre-submit checks."""
    return ApplicationDraft(
        title="Emergency roof repair",
        description="Storm damage left the roof open to rain.",
        requested_amount=Decimal("2500"),
        category=Category.EMERGENCY_ASSISTANCE,
        urgency_level=UrgencyLevel.URGENT,
    )


@pytest.fixture
def service_context() -> OpportunityContext:
    """Context from a service card, with a category."""
    return OpportunityContext.model_validate(
        {
            "serviceCategory": "housing_support",
            "programType": "Content",
            "programId": "svc-housing",
            "serviceName": "Housing Support",
        }
    )


@pytest.fixture
def uploader() -> FakeUploader:
    return FakeUploader()


@pytest.fixture
def failing_uploader() -> FakeUploader:
    return FakeUploader(fail_with=SubmissionError("Upload rejected", stage="upload"))


@pytest.fixture
def make_service():
    """Factory for creation services with a custom response or failure."""
    return FakeCreationService
