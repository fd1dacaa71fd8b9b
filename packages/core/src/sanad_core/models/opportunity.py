"""Opportunity context handed to the wizard by its navigation origin.

A service card or an announcement page can open the wizard with context
about what the applicant is applying for. The context is read once, when the
draft is seeded, and never consulted again.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from sanad_core.models.application import WIRE_MODEL_CONFIG, ProgramType


class AnnouncementData(BaseModel):
    """Summary of the announcement the applicant came from."""

    model_config = {**WIRE_MODEL_CONFIG, "frozen": True}

    title: str
    description: str = ""
    deadline: Optional[date] = None
    requirements: list[str] = Field(default_factory=list)
    type: str = Field(description="Announcement type, e.g. 'scholarship'")
    budget: Optional[Decimal] = Field(default=None, ge=0)


class OpportunityContext(BaseModel):
    """Optional pre-fill configuration for a new wizard session.

    Accepts the camelCase keys sent by the navigation origin
    (``serviceCategory``, ``programType``, ``announcementData``, ...).
    Unknown keys are ignored.
    """

    model_config = {**WIRE_MODEL_CONFIG, "frozen": True, "extra": "ignore"}

    service_category: Optional[str] = Field(
        default=None,
        description="Category or opportunity type chosen at the origin",
    )
    program_type: Optional[ProgramType] = None
    program_id: Optional[str] = None
    service_name: Optional[str] = None
    max_amount: Optional[Decimal] = Field(default=None, ge=0)
    announcement_data: Optional[AnnouncementData] = None

    @property
    def has_category_context(self) -> bool:
        """True when the origin supplied a service category."""
        return bool(self.service_category and self.service_category.strip())

    @property
    def opportunity_type(self) -> Optional[str]:
        """The value category inference runs over."""
        if self.service_category:
            return self.service_category
        if self.announcement_data:
            return self.announcement_data.type
        return None


__all__ = [
    "AnnouncementData",
    "OpportunityContext",
]
