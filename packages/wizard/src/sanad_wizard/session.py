"""One applicant's pass through the assistance application wizard.

ApplicationWizard ties the pieces together: it seeds the draft from the
optional opportunity context, routes field edits and attachments into the
draft, drives the step controller, and hands the draft to the submission
coordinator at the last step. When the wizard navigates away (after a
successful submission, or when the entry guard fires) the session closes.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any, Optional, Union

import structlog
from pydantic import BaseModel, Field

from sanad_core.attachments import AttachmentStager, StagingReport
from sanad_core.catalog import CATEGORY_CATALOG, CategoryCatalog, urgency_option_for
from sanad_core.exceptions import WizardClosedError
from sanad_core.formatters import format_amount, format_file_size
from sanad_core.models import (
    ApplicationDraft,
    CandidateFile,
    Category,
    OpportunityContext,
    UrgencyLevel,
    parse_amount,
)
from sanad_core.opportunity import draft_from_context
from sanad_core.validation import ValidationEngine

from .config import SanadConfig
from .interfaces import (
    CreationService,
    DocumentUploader,
    NavigationRequest,
    Navigator,
    SubmissionOutcome,
)
from .steps import StepController, StepTransition, WizardStep
from .submission import SubmissionCoordinator

logger = structlog.get_logger()


class DocumentSummary(BaseModel):
    """A staged document as shown on the review step."""

    index: int
    name: str
    mime_type: str
    size: str


class ApplicationReview(BaseModel):
    """Read-only summary of the draft shown before submitting."""

    title: str
    description: str
    category: Category
    category_label: str
    urgency_level: UrgencyLevel
    urgency_label: str
    requested_amount: str
    max_amount: str
    program_type: str
    program_id: str
    tags: list[str] = Field(default_factory=list)
    documents: list[DocumentSummary] = Field(default_factory=list)
    errors: dict[str, str] = Field(default_factory=dict)

    @property
    def is_ready(self) -> bool:
        """True when the draft passes the pre-submit checks."""
        return not self.errors


class ApplicationWizard:
    """A single wizard session over one application draft.

    Args:
        creation_service: Collaborator that creates the request on submit
        context: Optional opportunity context; read once, here
        config: Wizard configuration; loaded from the environment if omitted
        navigator: Optional page shell that receives navigation requests
        document_uploader: Optional collaborator for staged documents
        catalog: Category catalog
        initial_step: Step to open on (deep links)
    """

    def __init__(
        self,
        creation_service: CreationService,
        *,
        context: Optional[Union[OpportunityContext, Mapping[str, Any]]] = None,
        config: Optional[SanadConfig] = None,
        navigator: Optional[Navigator] = None,
        document_uploader: Optional[DocumentUploader] = None,
        catalog: CategoryCatalog = CATEGORY_CATALOG,
        initial_step: int = WizardStep.SERVICE_SELECTION,
    ):
        if context is not None and not isinstance(context, OpportunityContext):
            context = OpportunityContext.model_validate(context)

        self.config = config or SanadConfig()
        self.catalog = catalog
        self.navigator = navigator
        self.exit: Optional[NavigationRequest] = None
        self.last_staging: Optional[StagingReport] = None

        currency = self.config.submission.currency_label
        validator = ValidationEngine(catalog, currency=currency)

        self.draft = draft_from_context(context)
        self.stager = AttachmentStager(
            accepted_mime_types=self.config.staging.accepted_mime_types,
            max_file_size=self.config.staging.max_file_size,
        )
        self.steps = StepController(
            self.draft,
            has_category_context=context is not None and context.has_category_context,
            catalog=catalog,
            validator=validator,
            category_selection_path=self.config.submission.category_selection_path,
            initial_step=initial_step,
        )
        self.coordinator = SubmissionCoordinator(
            creation_service,
            validator=validator,
            document_uploader=document_uploader,
            config=self.config.submission,
        )

        redirect = self.steps.entry_guard()
        if redirect is not None:
            self._leave(redirect)

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def current_step(self) -> WizardStep:
        return self.steps.current_step

    @property
    def errors(self) -> dict[str, str]:
        return self.steps.errors

    @property
    def is_closed(self) -> bool:
        return self.exit is not None

    @property
    def is_submitting(self) -> bool:
        return self.coordinator.is_submitting

    def _ensure_open(self) -> None:
        if self.exit is not None:
            raise WizardClosedError(
                "This wizard session has already ended",
                exit_path=self.exit.path,
            )

    def _leave(self, request: NavigationRequest) -> None:
        self.exit = request
        if self.navigator is not None:
            self.navigator.navigate(request)

    # -------------------------------------------------------------------------
    # Step 1 and 2: category and details
    # -------------------------------------------------------------------------

    def select_category(self, category: Union[Category, str]) -> Category:
        self._ensure_open()
        return self.steps.select_category(category)

    def update_details(
        self,
        *,
        title: Optional[str] = None,
        description: Optional[str] = None,
        requested_amount: Optional[Union[Decimal, int, float, str]] = None,
        urgency_level: Optional[Union[UrgencyLevel, str]] = None,
    ) -> None:
        """Edit the free-text fields, the amount and the urgency.

        Every value is parsed before any is applied, so a rejected edit
        leaves the draft unchanged.

        Raises:
            ValidationError: For a negative or non-numeric amount, or an
                unknown urgency level.
        """
        self._ensure_open()
        amount = parse_amount(requested_amount) if requested_amount is not None else None
        urgency = UrgencyLevel.parse(urgency_level) if urgency_level is not None else None

        if title is not None:
            self.draft.title = title
        if description is not None:
            self.draft.description = description
        if amount is not None:
            self.draft.requested_amount = amount
        if urgency is not None:
            self.draft.urgency_level = urgency

    def add_tag(self, tag: str) -> list[str]:
        self._ensure_open()
        self.draft.tags = [*self.draft.tags, tag]
        return self.draft.tags

    def remove_tag(self, tag: str) -> list[str]:
        self._ensure_open()
        self.draft.tags = [t for t in self.draft.tags if t != tag]
        return self.draft.tags

    # -------------------------------------------------------------------------
    # Step 3: documents
    # -------------------------------------------------------------------------

    def add_documents(self, candidates: Iterable[CandidateFile]) -> StagingReport:
        """Stage candidate files onto the draft.

        Rejected files are left out of the draft and listed on the report.
        """
        self._ensure_open()
        report = self.stager.stage_with_report(candidates, self.draft.documents)
        self.draft.documents = report.documents
        self.last_staging = report
        return report

    def remove_document(self, index: int) -> None:
        self._ensure_open()
        self.draft.documents = self.stager.remove(self.draft.documents, index)

    # -------------------------------------------------------------------------
    # Navigation between steps
    # -------------------------------------------------------------------------

    def next_step(self) -> StepTransition:
        self._ensure_open()
        transition = self.steps.advance()
        if transition.redirect is not None:
            self._leave(transition.redirect)
        return transition

    def previous_step(self) -> StepTransition:
        self._ensure_open()
        return self.steps.retreat()

    # -------------------------------------------------------------------------
    # Step 4: review and submit
    # -------------------------------------------------------------------------

    def review(self) -> ApplicationReview:
        """Summarize the draft for the review step."""
        draft = self.draft
        option = self.catalog.option_for(draft.category)
        currency = self.config.submission.currency_label

        return ApplicationReview(
            title=draft.title.strip(),
            description=draft.description.strip(),
            category=draft.category,
            category_label=option.label,
            urgency_level=draft.urgency_level,
            urgency_label=urgency_option_for(draft.urgency_level).label,
            requested_amount=format_amount(draft.requested_amount, currency),
            max_amount=format_amount(option.max_amount, currency),
            program_type=draft.program.type.value,
            program_id=draft.program.id,
            tags=list(draft.tags),
            documents=[
                DocumentSummary(
                    index=i,
                    name=doc.name,
                    mime_type=doc.mime_type,
                    size=format_file_size(doc.byte_size),
                )
                for i, doc in enumerate(draft.documents)
            ],
            errors=self.steps.validator.validate(WizardStep.REVIEW_AND_SUBMIT, draft),
        )

    async def submit(self) -> SubmissionOutcome:
        """Submit the draft from the review step.

        On success the session navigates to the success page, carrying the
        confirmation message and request identifier, and closes. On failure
        the session stays on the review step with the draft intact.
        """
        self._ensure_open()
        outcome = await self.coordinator.submit(self.draft)

        if outcome.is_success:
            self._leave(
                NavigationRequest(
                    path=self.config.submission.success_path,
                    state={"message": outcome.message, "requestId": outcome.reference},
                )
            )
        elif outcome.has_errors:
            self.steps.errors = dict(outcome.errors)

        return outcome


__all__ = [
    "DocumentSummary",
    "ApplicationReview",
    "ApplicationWizard",
]
