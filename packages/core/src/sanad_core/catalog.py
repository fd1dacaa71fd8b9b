"""Assistance category catalog and its business rules.

Every category has a fixed maximum requestable amount and a default urgency
applied when the applicant selects it. The table below is the single source
of truth for the amount cap checked before submission.

Amounts are in DA.
"""

from decimal import Decimal
from typing import Iterator, Union

from pydantic import BaseModel, Field

from .models import Category, UrgencyLevel


# =============================================================================
# CATALOG ENTRIES
# =============================================================================


class CategoryOption(BaseModel):
    """One selectable assistance category."""

    model_config = {"frozen": True}

    value: Category
    label: str
    description: str
    max_amount: Decimal = Field(gt=0, description="Maximum requestable amount")
    urgent_by_default: bool = False

    @property
    def default_urgency(self) -> UrgencyLevel:
        """Urgency applied when this category is selected."""
        return UrgencyLevel.URGENT if self.urgent_by_default else UrgencyLevel.ROUTINE


class UrgencyOption(BaseModel):
    """One selectable urgency level with its display text."""

    model_config = {"frozen": True}

    value: UrgencyLevel
    label: str
    description: str


# =============================================================================
# CATEGORY TABLE
# =============================================================================
# Display order matches the service selection step.

CATEGORY_OPTIONS: tuple[CategoryOption, ...] = (
    CategoryOption(
        value=Category.EMERGENCY_ASSISTANCE,
        label="Emergency Assistance",
        description="Urgent financial help for unexpected situations",
        max_amount=Decimal("3000"),
        urgent_by_default=True,
    ),
    CategoryOption(
        value=Category.HOUSING_SUPPORT,
        label="Housing Support",
        description="Help with rent, utilities, or housing costs",
        max_amount=Decimal("2000"),
    ),
    CategoryOption(
        value=Category.MEDICAL_ASSISTANCE,
        label="Medical Assistance",
        description="Support for medical bills and healthcare costs",
        max_amount=Decimal("1500"),
    ),
    CategoryOption(
        value=Category.EDUCATIONAL_SUPPORT,
        label="Educational Support",
        description="Assistance with school fees and educational expenses",
        max_amount=Decimal("1000"),
    ),
    CategoryOption(
        value=Category.FOOD_ASSISTANCE,
        label="Food Assistance",
        description="Help with food and nutrition needs",
        max_amount=Decimal("500"),
    ),
    CategoryOption(
        value=Category.EMPLOYMENT_SUPPORT,
        label="Employment Support",
        description="Job training and unemployment assistance",
        max_amount=Decimal("1200"),
    ),
    CategoryOption(
        value=Category.ELDERLY_CARE,
        label="Elderly Care",
        description="Support services for senior citizens",
        max_amount=Decimal("800"),
    ),
    CategoryOption(
        value=Category.DISABILITY_SUPPORT,
        label="Disability Support",
        description="Assistance for individuals with disabilities",
        max_amount=Decimal("2500"),
    ),
    CategoryOption(
        value=Category.OTHER,
        label="Other",
        description="Other types of social assistance",
        max_amount=Decimal("1000"),
    ),
)


# =============================================================================
# URGENCY TABLE
# =============================================================================

URGENCY_OPTIONS: tuple[UrgencyOption, ...] = (
    UrgencyOption(
        value=UrgencyLevel.ROUTINE,
        label="Routine",
        description="Standard processing time",
    ),
    UrgencyOption(
        value=UrgencyLevel.IMPORTANT,
        label="Important",
        description="Needs attention but not urgent",
    ),
    UrgencyOption(
        value=UrgencyLevel.URGENT,
        label="Urgent",
        description="Time-sensitive situation",
    ),
    UrgencyOption(
        value=UrgencyLevel.CRITICAL,
        label="Critical",
        description="Emergency requiring immediate attention",
    ),
)

_URGENCY_BY_VALUE = {option.value: option for option in URGENCY_OPTIONS}


def urgency_option_for(level: Union[UrgencyLevel, str]) -> UrgencyOption:
    """Get the display entry for an urgency level."""
    return _URGENCY_BY_VALUE[UrgencyLevel.parse(level)]


# =============================================================================
# CATALOG
# =============================================================================


class CategoryCatalog:
    """Read-only lookup over a table of category options.

    The catalog must hold exactly one entry per Category so that
    ``option_for`` is total.
    """

    def __init__(self, options: tuple[CategoryOption, ...] = CATEGORY_OPTIONS):
        by_value = {option.value: option for option in options}
        missing = [c.value for c in Category if c not in by_value]
        if missing or len(by_value) != len(options):
            raise ValueError(
                "Catalog needs exactly one option per category; "
                f"missing={missing}, entries={len(options)}"
            )
        self._options = tuple(options)
        self._by_value = by_value

    def option_for(self, category: Union[Category, str]) -> CategoryOption:
        """Get the option for a category.

        Raises:
            ValidationError: If a string does not name a category.
        """
        return self._by_value[Category.parse(category)]

    def all(self) -> tuple[CategoryOption, ...]:
        """All options in display order."""
        return self._options

    def max_amount_for(self, category: Union[Category, str]) -> Decimal:
        return self.option_for(category).max_amount

    def default_urgency_for(self, category: Union[Category, str]) -> UrgencyLevel:
        return self.option_for(category).default_urgency

    def __iter__(self) -> Iterator[CategoryOption]:
        return iter(self._options)

    def __len__(self) -> int:
        return len(self._options)


CATEGORY_CATALOG = CategoryCatalog()


__all__ = [
    "CategoryOption",
    "UrgencyOption",
    "CATEGORY_OPTIONS",
    "URGENCY_OPTIONS",
    "CategoryCatalog",
    "CATEGORY_CATALOG",
    "urgency_option_for",
]
