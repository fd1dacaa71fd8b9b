"""Per-step validation of an application draft.

Validation here is a UX gate: it decides whether the wizard may move past a
step and which inline messages to show. The result is a mapping from wire
field name to message; an empty mapping means the step passes. Nothing in
this module mutates the draft or raises for invalid drafts.
"""

from .catalog import CATEGORY_CATALOG, CategoryCatalog
from .exceptions import ValidationError
from .formatters import DEFAULT_CURRENCY, format_amount
from .models import ApplicationDraft

FIRST_STEP = 1
LAST_STEP = 4

CATEGORY_REQUIRED = "Please select a service category"
TITLE_REQUIRED = "Please provide a title for your application"
DESCRIPTION_REQUIRED = "Please describe your situation"
AMOUNT_INVALID = "Please enter a valid amount"
AMOUNT_OVER_CAP = "Amount cannot exceed {cap} for this category"


class ValidationEngine:
    """Validates drafts against a category catalog.

    Args:
        catalog: Catalog holding the per-category amount caps
        currency: Currency label used in the cap message
    """

    def __init__(
        self,
        catalog: CategoryCatalog = CATEGORY_CATALOG,
        currency: str = DEFAULT_CURRENCY,
    ):
        self.catalog = catalog
        self.currency = currency

    def validate(self, step: int, draft: ApplicationDraft) -> dict[str, str]:
        """Validate the draft for the given step.

        Steps 2 and 4 check the application details, step 1 the category,
        and step 3 (attachments) always passes.

        Raises:
            ValidationError: If the step number is outside the wizard.
        """
        step = int(step)
        if step == 1:
            return self._validate_category(draft)
        if step in (2, 4):
            return self._validate_details(draft)
        if step == 3:
            return {}
        raise ValidationError(
            f"Unknown wizard step: {step}",
            field="step",
            value=step,
            constraint=f"Must be between {FIRST_STEP} and {LAST_STEP}",
        )

    def _validate_category(self, draft: ApplicationDraft) -> dict[str, str]:
        if draft.category is None:
            return {"category": CATEGORY_REQUIRED}
        return {}

    def _validate_details(self, draft: ApplicationDraft) -> dict[str, str]:
        errors: dict[str, str] = {}

        if not draft.title.strip():
            errors["title"] = TITLE_REQUIRED
        if not draft.description.strip():
            errors["description"] = DESCRIPTION_REQUIRED

        amount = draft.requested_amount
        if amount <= 0:
            errors["requestedAmount"] = AMOUNT_INVALID
        else:
            cap = self.catalog.max_amount_for(draft.category)
            if amount > cap:
                errors["requestedAmount"] = AMOUNT_OVER_CAP.format(
                    cap=format_amount(cap, self.currency)
                )

        return errors


def validate(
    step: int,
    draft: ApplicationDraft,
    catalog: CategoryCatalog = CATEGORY_CATALOG,
) -> dict[str, str]:
    """Validate a draft for a step against a catalog."""
    return ValidationEngine(catalog).validate(step, draft)


__all__ = [
    "FIRST_STEP",
    "LAST_STEP",
    "CATEGORY_REQUIRED",
    "TITLE_REQUIRED",
    "DESCRIPTION_REQUIRED",
    "AMOUNT_INVALID",
    "AMOUNT_OVER_CAP",
    "ValidationEngine",
    "validate",
]
