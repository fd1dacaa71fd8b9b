"""Data models for sanad-core.

This package provides the structures shared by the wizard components:
- Application draft, enumerations and submission payload (application.py)
- Opportunity context used to pre-seed a draft (opportunity.py)
"""

from sanad_core.models.application import (
    # Enumerations
    Category,
    UrgencyLevel,
    ProgramType,
    # Draft
    Program,
    CandidateFile,
    StagedDocument,
    ApplicationDraft,
    SubmissionPayload,
    # Helpers
    parse_amount,
)
from sanad_core.models.opportunity import (
    AnnouncementData,
    OpportunityContext,
)

__all__ = [
    # Enumerations
    "Category",
    "UrgencyLevel",
    "ProgramType",
    # Draft
    "Program",
    "CandidateFile",
    "StagedDocument",
    "ApplicationDraft",
    "SubmissionPayload",
    "parse_amount",
    # Opportunity context
    "AnnouncementData",
    "OpportunityContext",
]
