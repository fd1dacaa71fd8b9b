"""Map external opportunity context onto a new application draft.

Announcements and service cards describe opportunities with their own type
vocabulary (``scholarship``, ``job_opportunity``, ...). This module turns
that vocabulary into an assistance category and seeds a fresh draft from
the context the wizard was opened with.
"""

from typing import Any, Optional

import structlog

from .models import ApplicationDraft, Category, OpportunityContext, Program, ProgramType

logger = structlog.get_logger()


OPPORTUNITY_CATEGORY_MAP: dict[str, Category] = {
    "scholarship": Category.EDUCATIONAL_SUPPORT,
    "job_opportunity": Category.EMPLOYMENT_SUPPORT,
    "training": Category.EDUCATIONAL_SUPPORT,
    "housing_assistance": Category.HOUSING_SUPPORT,
    "medical_aid": Category.MEDICAL_ASSISTANCE,
    "emergency_relief": Category.EMERGENCY_ASSISTANCE,
}

APPLICATION_TITLE_PREFIX = "Application for: "


def map_to_category(opportunity_type: Optional[Any]) -> Category:
    """Map an opportunity type to an assistance category.

    Known opportunity types use the fixed table above. A value that already
    names a category (as sent by a service card) maps to itself. Anything
    else, including None, maps to ``Category.OTHER``. Never raises.

    Args:
        opportunity_type: Opportunity type or category name, or None

    Returns:
        The inferred category
    """
    if not isinstance(opportunity_type, str):
        return Category.OTHER

    key = opportunity_type.strip().lower()
    if key in OPPORTUNITY_CATEGORY_MAP:
        return OPPORTUNITY_CATEGORY_MAP[key]

    for category in Category:
        if category.value == key:
            return category

    return Category.OTHER


def draft_from_context(context: Optional[OpportunityContext] = None) -> ApplicationDraft:
    """Create the draft for a new wizard session.

    With context, the category is inferred from the service category (or the
    announcement type), the program is taken over, and announcement data
    pre-fills the title and seeds the tags. Without context an empty generic
    draft is returned.
    """
    if context is None:
        return ApplicationDraft()

    announcement = context.announcement_data
    title = f"{APPLICATION_TITLE_PREFIX}{announcement.title}" if announcement else ""
    tags = [announcement.type] if announcement else []

    draft = ApplicationDraft(
        title=title,
        category=map_to_category(context.opportunity_type),
        program=Program(
            type=context.program_type or ProgramType.CONTENT,
            id=context.program_id or "",
        ),
        tags=tags,
    )

    logger.info(
        "draft_seeded",
        category=draft.category.value,
        program_type=draft.program.type.value,
        has_program=not draft.program.is_generic,
        from_announcement=announcement is not None,
    )
    return draft


__all__ = [
    "OPPORTUNITY_CATEGORY_MAP",
    "APPLICATION_TITLE_PREFIX",
    "map_to_category",
    "draft_from_context",
]
