#!/usr/bin/env python3
"""
Application Wizard Demonstration

This script walks one applicant through the complete wizard:
1. Open the wizard from an announcement page
2. Fill in the details and attach documents
3. Review and submit to an in-memory creation service

Run: python examples/apply_demo.py
"""

import asyncio
from collections.abc import Sequence
from datetime import date
from uuid import uuid4

from sanad_core import CandidateFile, OpportunityContext, StagedDocument, SubmissionPayload
from sanad_core.exceptions import SubmissionError
from sanad_wizard import ApplicationWizard, SanadConfig, configure_logging
from sanad_wizard.interfaces import NavigationRequest


class InMemoryCreationService:
    """Stores payloads and answers the way the portal's server does."""

    def __init__(self, max_requests: int = 100):
        self.max_requests = max_requests
        self.requests: dict[str, dict] = {}

    async def create(self, payload: SubmissionPayload) -> dict:
        if len(self.requests) >= self.max_requests:
            raise SubmissionError(
                "Too many open requests",
                stage="create",
                status_code=429,
            )
        request_id = uuid4().hex[:12]
        self.requests[request_id] = payload.to_request()
        return {
            "message": "Request created successfully",
            "demande": {"_id": request_id, **self.requests[request_id]},
        }


class InMemoryDocumentStore:
    """Keeps uploaded documents per request, up to a total byte quota."""

    def __init__(self, quota: int = 2 * 1024 * 1024):
        self.quota = quota
        self.documents: dict[str, list[StagedDocument]] = {}

    async def upload(self, request_id: str, documents: Sequence[StagedDocument]) -> None:
        total = sum(doc.byte_size for doc in documents)
        if total > self.quota:
            raise SubmissionError(
                f"Upload quota exceeded ({total} bytes)",
                stage="upload",
                status_code=413,
                request_id=request_id,
            )
        self.documents[request_id] = list(documents)


class PrintingNavigator:
    def navigate(self, request: NavigationRequest) -> None:
        print(f"  -> navigate to {request.path} {request.state}")


def create_context() -> OpportunityContext:
    """Context as sent by an announcement page."""
    return OpportunityContext.model_validate(
        {
            "programType": "Announcement",
            "programId": "ann-2025-014",
            "serviceCategory": "emergency_relief",
            "announcementData": {
                "title": "Winter Relief 2025",
                "description": "One-off support for households hit by the cold spell.",
                "deadline": date(2025, 2, 28).isoformat(),
                "requirements": ["National ID", "Proof of residence"],
                "type": "emergency_relief",
                "budget": "500000",
            },
        }
    )


async def run_demo() -> None:
    config = SanadConfig()
    configure_logging(config)

    service = InMemoryCreationService()
    wizard = ApplicationWizard(
        service,
        context=create_context(),
        config=config,
        navigator=PrintingNavigator(),
        document_uploader=InMemoryDocumentStore(),
    )

    # Step 1: Service selection
    print("Step 1: Service selection")
    print(f"  - Title:    {wizard.draft.title}")
    print(f"  - Category: {wizard.draft.category.value}")
    print(f"  - Urgency:  {wizard.draft.urgency_level.value}")
    wizard.next_step()
    print()

    # Step 2: Details
    print("Step 2: Application details")
    wizard.update_details(
        description="Our heating was cut off after a job loss.",
        requested_amount="3 500",
    )
    transition = wizard.next_step()
    for field, message in transition.errors.items():
        print(f"  - {field}: {message}")

    wizard.update_details(requested_amount="2,800")
    transition = wizard.next_step()
    print(f"  - Amount corrected, now on step {int(transition.step)}")
    print()

    # Step 3: Documents
    print("Step 3: Upload documents")
    report = wizard.add_documents(
        [
            CandidateFile(name="national-id.pdf", byte_size=240_000, mime_type="application/pdf"),
            CandidateFile(name="bill.jpg", byte_size=1_800_000, mime_type="image/jpeg"),
            CandidateFile(name="walkthrough.mp4", byte_size=40_000_000, mime_type="video/mp4"),
        ]
    )
    print(f"  - Accepted: {len(report.accepted)}")
    for rejection in report.rejected:
        print(f"  - Rejected: {rejection.message}")
    wizard.next_step()
    print()

    # Step 4: Review and submit
    print("Step 4: Review & submit")
    review = wizard.review()
    print(f"  - {review.category_label} / {review.urgency_label}")
    print(f"  - Requested {review.requested_amount} (max {review.max_amount})")
    for doc in review.documents:
        print(f"  - Document {doc.index + 1}: {doc.name} ({doc.size})")

    outcome = await wizard.submit()
    print(f"  - Outcome: {outcome.status.value}, request {outcome.request_id}")
    for warning in outcome.warnings:
        print(f"  - Warning: {warning}")


def main():
    """Run the application wizard demonstration."""
    print("=" * 70)
    print("SANAD - Application Wizard Demo")
    print("=" * 70)
    print()

    asyncio.run(run_demo())

    print()
    print("=" * 70)
    print("Demo complete!")
    print("=" * 70)


if __name__ == "__main__":
    main()
