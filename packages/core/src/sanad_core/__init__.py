"""Sanad Core - Assistance application rules, validation and staging."""

__version__ = "0.1.0"

from .attachments import AttachmentStager, StagingReport
from .catalog import CATEGORY_CATALOG, CategoryCatalog, CategoryOption
from .models import (
    ApplicationDraft,
    CandidateFile,
    Category,
    OpportunityContext,
    Program,
    ProgramType,
    StagedDocument,
    SubmissionPayload,
    UrgencyLevel,
)
from .opportunity import draft_from_context, map_to_category
from .validation import ValidationEngine, validate

__all__ = [
    "AttachmentStager",
    "StagingReport",
    "CATEGORY_CATALOG",
    "CategoryCatalog",
    "CategoryOption",
    "ApplicationDraft",
    "CandidateFile",
    "Category",
    "OpportunityContext",
    "Program",
    "ProgramType",
    "StagedDocument",
    "SubmissionPayload",
    "UrgencyLevel",
    "draft_from_context",
    "map_to_category",
    "ValidationEngine",
    "validate",
]
