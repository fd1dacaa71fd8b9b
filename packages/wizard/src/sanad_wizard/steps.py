"""Step state machine for the four-step application wizard.

The controller owns the current step and the draft of one wizard session.
Moving forward is gated on the validation engine; moving back never is.
Selecting a category resets the amount and applies the category's default
urgency.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Optional, Union

import structlog
from pydantic import BaseModel, Field

from sanad_core.catalog import CATEGORY_CATALOG, CategoryCatalog
from sanad_core.exceptions import ValidationError
from sanad_core.models import ApplicationDraft, Category
from sanad_core.validation import ValidationEngine

from .interfaces import NavigationRequest

logger = structlog.get_logger()


class WizardStep(IntEnum):
    """The wizard's steps, in order."""

    SERVICE_SELECTION = 1
    APPLICATION_DETAILS = 2
    UPLOAD_DOCUMENTS = 3
    REVIEW_AND_SUBMIT = 4

    @property
    def title(self) -> str:
        return _STEP_TEXT[self][0]

    @property
    def description(self) -> str:
        return _STEP_TEXT[self][1]

    @classmethod
    def from_number(cls, number: int) -> WizardStep:
        """Convert a step number, rejecting values outside the wizard."""
        try:
            return cls(number)
        except ValueError:
            raise ValidationError(
                f"Unknown wizard step: {number}",
                field="step",
                value=number,
                constraint=f"Must be between {cls.first()} and {cls.last()}",
            ) from None

    @classmethod
    def first(cls) -> WizardStep:
        return cls.SERVICE_SELECTION

    @classmethod
    def last(cls) -> WizardStep:
        return cls.REVIEW_AND_SUBMIT


_STEP_TEXT = {
    WizardStep.SERVICE_SELECTION: (
        "Service Selection",
        "Choose the type of assistance you need",
    ),
    WizardStep.APPLICATION_DETAILS: (
        "Application Details",
        "Tell us about your situation",
    ),
    WizardStep.UPLOAD_DOCUMENTS: (
        "Upload Documents",
        "Provide supporting documents",
    ),
    WizardStep.REVIEW_AND_SUBMIT: (
        "Review & Submit",
        "Review your application before submitting",
    ),
}


class StepTransition(BaseModel):
    """Result of an attempt to change step."""

    moved: bool
    step: WizardStep
    errors: dict[str, str] = Field(default_factory=dict)
    redirect: Optional[NavigationRequest] = None


class StepController:
    """Drives the step state machine over one draft.

    Args:
        draft: The session's draft, mutated in place
        has_category_context: Whether the wizard was opened with a service
            category supplied by its origin
        catalog: Catalog used for caps and category defaults
        validator: Validation engine; defaults to one bound to ``catalog``
        category_selection_path: Where the entry guard sends applicants
        initial_step: Step to start on
    """

    def __init__(
        self,
        draft: ApplicationDraft,
        *,
        has_category_context: bool = False,
        catalog: CategoryCatalog = CATEGORY_CATALOG,
        validator: Optional[ValidationEngine] = None,
        category_selection_path: str = "/services",
        initial_step: int = WizardStep.SERVICE_SELECTION,
    ):
        self.draft = draft
        self.has_category_context = has_category_context
        self.catalog = catalog
        self.validator = validator or ValidationEngine(catalog)
        self.category_selection_path = category_selection_path
        self.current_step = WizardStep.from_number(initial_step)
        self.errors: dict[str, str] = {}

    @property
    def is_first_step(self) -> bool:
        return self.current_step == WizardStep.first()

    @property
    def is_last_step(self) -> bool:
        return self.current_step == WizardStep.last()

    def validate_current(self) -> dict[str, str]:
        """Validate the draft for the current step without moving."""
        return self.validator.validate(self.current_step, self.draft)

    def advance(self) -> StepTransition:
        """Move to the next step if the current one validates.

        On failure the step is unchanged and the errors are returned (and
        kept on ``self.errors`` for inline display).
        """
        errors = self.validate_current()
        self.errors = errors

        if errors:
            logger.info(
                "step_blocked",
                step=int(self.current_step),
                fields=sorted(errors),
            )
            return StepTransition(moved=False, step=self.current_step, errors=errors)

        previous = self.current_step
        self.current_step = WizardStep(min(previous + 1, WizardStep.last()))
        logger.info("step_advanced", from_step=int(previous), to_step=int(self.current_step))

        return StepTransition(
            moved=self.current_step != previous,
            step=self.current_step,
            redirect=self.entry_guard(),
        )

    def retreat(self) -> StepTransition:
        """Go back one step. Never validates."""
        previous = self.current_step
        self.current_step = WizardStep(max(previous - 1, WizardStep.first()))
        self.errors = {}
        return StepTransition(moved=self.current_step != previous, step=self.current_step)

    def entry_guard(self) -> Optional[NavigationRequest]:
        """Redirect to category selection when a later step lacks context.

        Prevents deep-linking into the middle of the wizard without a
        service category from the navigation origin.
        """
        if not self.has_category_context and self.current_step > WizardStep.first():
            logger.info(
                "wizard_redirected",
                step=int(self.current_step),
                path=self.category_selection_path,
            )
            return NavigationRequest(path=self.category_selection_path)
        return None

    def select_category(self, category: Union[Category, str]) -> Category:
        """Select a category and apply its defaults.

        The amount is reset to zero and the urgency set from the category's
        default on every call, including re-selecting the same category.

        Raises:
            ValidationError: If ``category`` does not name a category.
        """
        option = self.catalog.option_for(category)

        self.draft.category = option.value
        self.draft.urgency_level = option.default_urgency
        self.draft.requested_amount = 0
        self.errors.pop("category", None)

        logger.info(
            "category_selected",
            category=option.value.value,
            urgency=option.default_urgency.value,
            max_amount=str(option.max_amount),
        )
        return option.value


__all__ = [
    "WizardStep",
    "StepTransition",
    "StepController",
]
