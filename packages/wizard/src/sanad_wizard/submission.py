"""Final submission of an application draft.

The coordinator re-validates the draft, builds the creation payload, awaits
the creation service and converts whatever happens into a
SubmissionOutcome. It never raises for a failed submission; the draft is
left untouched so the applicant can retry.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional, Union

import structlog
from pydantic import ValidationError as PydanticValidationError

from sanad_core.models import ApplicationDraft
from sanad_core.validation import ValidationEngine

from .config import SubmissionConfig
from .interfaces import (
    CreationResponse,
    CreationService,
    DocumentUploader,
    SubmissionOutcome,
)
from .steps import WizardStep

logger = structlog.get_logger()

UNREADABLE_RESPONSE_WARNING = (
    "Your application was created but its confirmation could not be read."
)
MISSING_IDENTIFIER_WARNING = "Documents were not uploaded: the request has no identifier."


class SubmissionCoordinator:
    """Submits drafts to the creation service, one at a time.

    Attachment upload is a follow-up to creation and only happens when a
    ``document_uploader`` is given. Its failure does not undo the created
    request; it is reported as a warning on the successful outcome.

    Args:
        creation_service: Collaborator that creates the request
        validator: Engine used for the pre-submit gate
        document_uploader: Optional collaborator for staged documents
        config: Messages used in outcomes
    """

    def __init__(
        self,
        creation_service: CreationService,
        *,
        validator: Optional[ValidationEngine] = None,
        document_uploader: Optional[DocumentUploader] = None,
        config: Optional[SubmissionConfig] = None,
    ):
        self.creation_service = creation_service
        self.config = config or SubmissionConfig()
        self.validator = validator or ValidationEngine(currency=self.config.currency_label)
        self.document_uploader = document_uploader
        self.is_submitting = False

    async def submit(self, draft: ApplicationDraft) -> SubmissionOutcome:
        """Submit the draft.

        Returns:
            ``in_progress`` if another submission is running, ``invalid``
            with the field errors if pre-submit validation fails, ``failed``
            with a single ``submit`` error if the creation call raises,
            otherwise ``success``. Once the creation call has returned the
            outcome is a success even if the response cannot be read.
        """
        if self.is_submitting:
            logger.warning("submission_ignored_in_flight")
            return SubmissionOutcome.in_progress()

        errors = self.validator.validate(WizardStep.REVIEW_AND_SUBMIT, draft)
        if errors:
            logger.info("submission_blocked", fields=sorted(errors))
            return SubmissionOutcome.invalid(errors)

        self.is_submitting = True
        try:
            payload = draft.to_payload()
            logger.info(
                "submission_started",
                category=payload.category.value,
                urgency=payload.urgency_level.value,
                documents=len(draft.documents),
            )

            try:
                raw_response = await self.creation_service.create(payload)
            except Exception as e:
                logger.error("submission_failed", error=str(e), error_type=type(e).__name__)
                return SubmissionOutcome.failure(self.config.failure_message)

            warnings: list[str] = []
            try:
                response = self._coerce_response(raw_response)
            except PydanticValidationError as e:
                # The request exists; only its echo is unreadable.
                logger.warning(
                    "creation_response_unreadable",
                    error_count=e.error_count(),
                    response_type=type(raw_response).__name__,
                )
                response = CreationResponse()
                warnings.append(UNREADABLE_RESPONSE_WARNING)

            request_id = response.request_id
            warnings.extend(await self._upload_documents(request_id, draft))

            logger.info("submission_succeeded", request_id=request_id)
            return SubmissionOutcome.success(
                request_id,
                self.config.success_message,
                reference=response.reference,
                warnings=warnings,
            )
        finally:
            self.is_submitting = False

    async def _upload_documents(
        self,
        request_id: Optional[str],
        draft: ApplicationDraft,
    ) -> list[str]:
        if self.document_uploader is None or not draft.documents:
            return []
        if not request_id:
            logger.warning("document_upload_skipped", reason="missing_request_id")
            return [MISSING_IDENTIFIER_WARNING]

        try:
            await self.document_uploader.upload(request_id, list(draft.documents))
        except Exception as e:
            logger.warning(
                "document_upload_failed",
                request_id=request_id,
                documents=len(draft.documents),
                error=str(e),
            )
            return [f"Your application was created but its documents could not be uploaded: {e}"]

        logger.info("documents_uploaded", request_id=request_id, documents=len(draft.documents))
        return []

    @staticmethod
    def _coerce_response(
        response: Union[CreationResponse, Mapping[str, Any], None],
    ) -> CreationResponse:
        if isinstance(response, CreationResponse):
            return response
        if response is None:
            return CreationResponse()
        if isinstance(response, Mapping):
            response = dict(response)
        return CreationResponse.model_validate(response)


__all__ = ["SubmissionCoordinator"]
