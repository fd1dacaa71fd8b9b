"""Application draft models for the assistance request wizard.

This module provides the data structures the wizard reads and writes:
- Enumerations for assistance categories, urgency levels and program types
- The mutable ApplicationDraft edited across the four wizard steps
- Staged attachments and the raw candidate files they are built from
- The submission payload sent to the creation service

Field names are snake_case in Python and camelCase on the wire; every model
accepts both spellings on input.
"""

import mimetypes
from decimal import Decimal, InvalidOperation
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from sanad_core.exceptions import ValidationError


WIRE_MODEL_CONFIG = {
    "alias_generator": to_camel,
    "populate_by_name": True,
}


# =============================================================================
# ENUMERATIONS
# =============================================================================


class Category(str, Enum):
    """Assistance categories an application can be filed under."""

    EMERGENCY_ASSISTANCE = "emergency_assistance"
    EDUCATIONAL_SUPPORT = "educational_support"
    MEDICAL_ASSISTANCE = "medical_assistance"
    HOUSING_SUPPORT = "housing_support"
    FOOD_ASSISTANCE = "food_assistance"
    EMPLOYMENT_SUPPORT = "employment_support"
    ELDERLY_CARE = "elderly_care"
    DISABILITY_SUPPORT = "disability_support"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Union["Category", str]) -> "Category":
        """Strictly convert a value to a Category.

        Raises:
            ValidationError: If the value does not name a category.
        """
        return _parse_enum(cls, value, field="category")


class UrgencyLevel(str, Enum):
    """How quickly an application needs attention."""

    ROUTINE = "routine"
    IMPORTANT = "important"
    URGENT = "urgent"
    CRITICAL = "critical"

    @classmethod
    def parse(cls, value: Union["UrgencyLevel", str]) -> "UrgencyLevel":
        """Strictly convert a value to an UrgencyLevel.

        Raises:
            ValidationError: If the value does not name an urgency level.
        """
        return _parse_enum(cls, value, field="urgencyLevel")


class ProgramType(str, Enum):
    """Kind of offering an application targets."""

    CONTENT = "Content"
    ANNOUNCEMENT = "Announcement"


def _parse_enum(enum_cls, value, *, field: str):
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        for member in enum_cls:
            if member.value.lower() == normalized:
                return member
    raise ValidationError(
        f"Invalid {field}: {value!r}",
        field=field,
        value=value,
        constraint="Must be one of: " + ", ".join(m.value for m in enum_cls),
    )


# =============================================================================
# PROGRAM AND ATTACHMENTS
# =============================================================================


class Program(BaseModel):
    """The offering (content page or announcement) an application targets."""

    model_config = {"frozen": True}

    type: ProgramType = Field(
        default=ProgramType.CONTENT,
        description="Whether the program is a content page or an announcement",
    )
    id: str = Field(
        default="",
        description="Program identifier; empty for a generic request",
    )

    @property
    def is_generic(self) -> bool:
        """True when the application does not target a specific program."""
        return not self.id


class CandidateFile(BaseModel):
    """A file selected by the applicant, before the type/size filter runs."""

    model_config = {**WIRE_MODEL_CONFIG, "frozen": True}

    name: str = Field(description="File name as selected by the applicant")
    byte_size: int = Field(ge=0, description="File size in bytes")
    mime_type: str = Field(
        default="application/octet-stream",
        description="Reported MIME type of the file",
    )
    source: Optional[Path] = Field(
        default=None,
        description="Local path of the file, when it came from disk",
    )

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "CandidateFile":
        """Build a candidate from a file on disk.

        Only metadata is read: the size comes from ``stat`` and the MIME type
        is guessed from the extension.
        """
        path = Path(path)
        mime_type, _ = mimetypes.guess_type(path.name)
        return cls(
            name=path.name,
            byte_size=path.stat().st_size,
            mime_type=mime_type or "application/octet-stream",
            source=path,
        )


class StagedDocument(BaseModel):
    """An attachment accepted by the stager, pending upload.

    Documents have no identity beyond their position in the draft.
    """

    model_config = {**WIRE_MODEL_CONFIG, "frozen": True}

    name: str
    byte_size: int = Field(ge=0)
    mime_type: str
    source: Optional[Path] = None

    @classmethod
    def from_candidate(cls, candidate: CandidateFile) -> "StagedDocument":
        return cls(
            name=candidate.name,
            byte_size=candidate.byte_size,
            mime_type=candidate.mime_type,
            source=candidate.source,
        )


# =============================================================================
# DRAFT
# =============================================================================


def coerce_amount(v: Any) -> Any:
    """Coerce form input to something Decimal validation accepts.

    Blank strings count as zero; other strings are stripped and may use
    thousands separators.
    """
    if isinstance(v, str):
        cleaned = v.strip().replace(",", "").replace(" ", "")
        if not cleaned:
            return Decimal("0")
        try:
            return Decimal(cleaned)
        except InvalidOperation:
            return v
    if isinstance(v, float):
        return Decimal(str(v))
    return v


def parse_amount(value: Any) -> Decimal:
    """Parse a requested amount from form input.

    Raises:
        ValidationError: If the value is not a finite, non-negative number.
    """
    candidate = coerce_amount(value)
    try:
        amount = candidate if isinstance(candidate, Decimal) else Decimal(candidate)
    except (InvalidOperation, TypeError, ValueError):
        amount = None

    if amount is None or isinstance(candidate, bool) or not amount.is_finite() or amount < 0:
        raise ValidationError(
            f"Invalid requestedAmount: {value!r}",
            field="requestedAmount",
            value=value,
            constraint="Must be a non-negative number",
        )
    return amount


def normalize_tags(tags: Optional[list[str]]) -> list[str]:
    """Strip tags, drop blanks and duplicates, keep first-seen order."""
    seen: list[str] = []
    for tag in tags or []:
        cleaned = str(tag).strip()
        if cleaned and cleaned not in seen:
            seen.append(cleaned)
    return seen


class ApplicationDraft(BaseModel):
    """The in-progress application held by one wizard session.

    Assignments are validated, so an unknown category, an unknown urgency
    level or a negative amount is rejected as soon as it is set.
    """

    model_config = {
        **WIRE_MODEL_CONFIG,
        "validate_assignment": True,
        "json_schema_extra": {
            "examples": [
                {
                    "title": "Application for: Winter Relief 2025",
                    "description": "Our heating was cut off after a job loss.",
                    "requestedAmount": "2500",
                    "category": "emergency_assistance",
                    "urgencyLevel": "urgent",
                    "program": {"type": "Announcement", "id": "ann-42"},
                    "documents": [],
                    "tags": ["emergency_relief"],
                }
            ]
        },
    }

    title: str = Field(default="", description="Short summary of the request")
    description: str = Field(
        default="",
        description="Applicant's description of their situation",
    )
    requested_amount: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Requested amount in DA",
    )
    category: Category = Field(
        default=Category.OTHER,
        description="Assistance category; drives the amount cap",
    )
    urgency_level: UrgencyLevel = Field(
        default=UrgencyLevel.ROUTINE,
        description="Urgency, defaulted from the category on selection",
    )
    program: Program = Field(default_factory=Program)
    documents: list[StagedDocument] = Field(
        default_factory=list,
        description="Accepted attachments, in acceptance order",
    )
    tags: list[str] = Field(
        default_factory=list,
        description="Free-form labels, unique and in insertion order",
    )

    @field_validator("requested_amount", mode="before")
    @classmethod
    def coerce_requested_amount(cls, v):
        """Coerce string and float amounts to Decimal."""
        return coerce_amount(v)

    @field_validator("tags", mode="before")
    @classmethod
    def dedupe_tags(cls, v):
        """Keep tags set-like while preserving order."""
        return normalize_tags(v)

    def to_payload(self) -> "SubmissionPayload":
        """Build the creation payload. Documents are not included."""
        return SubmissionPayload(
            title=self.title.strip(),
            description=self.description.strip(),
            requested_amount=self.requested_amount,
            category=self.category,
            urgency_level=self.urgency_level,
            program=self.program,
            tags=list(self.tags),
        )


class SubmissionPayload(BaseModel):
    """Body of the creation call for a new assistance request."""

    model_config = {**WIRE_MODEL_CONFIG, "frozen": True}

    title: str
    description: str
    requested_amount: Decimal
    category: Category
    urgency_level: UrgencyLevel
    program: Program
    tags: list[str] = Field(default_factory=list)

    @field_serializer("requested_amount", when_used="json")
    def serialize_amount(self, amount: Decimal) -> float:
        """Amounts travel as JSON numbers."""
        return float(amount)

    def to_request(self) -> dict[str, Any]:
        """Return the JSON-ready camelCase request body."""
        return self.model_dump(mode="json", by_alias=True)


__all__ = [
    "Category",
    "UrgencyLevel",
    "ProgramType",
    "Program",
    "CandidateFile",
    "StagedDocument",
    "ApplicationDraft",
    "SubmissionPayload",
    "coerce_amount",
    "parse_amount",
    "normalize_tags",
]
