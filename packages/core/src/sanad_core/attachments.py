"""Staging of supporting documents for an application.

Applicants attach files in step 3. Each candidate is checked against an
accepted MIME type list and a size limit; accepted candidates become
StagedDocuments appended to the draft in selection order. Rejected
candidates never enter the draft. The report form of ``stage`` explains
each rejection so callers can show a reason; the plain form drops them
silently.
"""

from collections.abc import Iterable, Sequence
from enum import Enum
from typing import Optional

import structlog
from pydantic import BaseModel, Field

from .formatters import format_file_size
from .models import CandidateFile, StagedDocument

logger = structlog.get_logger()


ACCEPTED_MIME_TYPES: frozenset[str] = frozenset(
    {"image/jpeg", "image/jpg", "image/png", "application/pdf"}
)
MAX_FILE_SIZE = 5 * 1024 * 1024  # 5 MB


class RejectionReason(str, Enum):
    """Why a candidate file was not staged."""

    UNSUPPORTED_TYPE = "unsupported_type"
    TOO_LARGE = "too_large"


class StagingRejection(BaseModel):
    """A candidate file that failed the type/size filter."""

    model_config = {"frozen": True}

    name: str
    reason: RejectionReason
    message: str


class StagingReport(BaseModel):
    """Outcome of staging a batch of candidate files."""

    documents: list[StagedDocument] = Field(
        default_factory=list,
        description="Existing documents followed by the newly accepted ones",
    )
    accepted: list[StagedDocument] = Field(default_factory=list)
    rejected: list[StagingRejection] = Field(default_factory=list)

    @property
    def has_rejections(self) -> bool:
        return len(self.rejected) > 0


class AttachmentStager:
    """Filters, accumulates and removes staged documents.

    Args:
        accepted_mime_types: MIME types allowed through the filter
        max_file_size: Largest accepted file, in bytes (inclusive)
    """

    def __init__(
        self,
        accepted_mime_types: Optional[Iterable[str]] = None,
        max_file_size: int = MAX_FILE_SIZE,
    ):
        types = ACCEPTED_MIME_TYPES if accepted_mime_types is None else accepted_mime_types
        self.accepted_mime_types = frozenset(t.lower() for t in types)
        self.max_file_size = max_file_size

    def check(self, candidate: CandidateFile) -> Optional[StagingRejection]:
        """Return the rejection for a candidate, or None if it is accepted."""
        if candidate.mime_type.lower() not in self.accepted_mime_types:
            return StagingRejection(
                name=candidate.name,
                reason=RejectionReason.UNSUPPORTED_TYPE,
                message=(
                    f'File "{candidate.name}" has an unsupported format. '
                    f"Accepted formats: {', '.join(sorted(self.accepted_mime_types))}."
                ),
            )
        if candidate.byte_size > self.max_file_size:
            return StagingRejection(
                name=candidate.name,
                reason=RejectionReason.TOO_LARGE,
                message=(
                    f'File "{candidate.name}" is too large. '
                    f"Maximum size is {format_file_size(self.max_file_size)}."
                ),
            )
        return None

    def stage_with_report(
        self,
        candidates: Iterable[CandidateFile],
        current: Sequence[StagedDocument] = (),
    ) -> StagingReport:
        """Stage candidates and report which were rejected and why."""
        report = StagingReport(documents=list(current))

        for candidate in candidates:
            rejection = self.check(candidate)
            if rejection is not None:
                logger.warning(
                    "attachment_rejected",
                    reason=rejection.reason.value,
                    mime_type=candidate.mime_type,
                    byte_size=candidate.byte_size,
                )
                report.rejected.append(rejection)
                continue

            document = StagedDocument.from_candidate(candidate)
            report.accepted.append(document)
            report.documents.append(document)

        logger.info(
            "attachments_staged",
            accepted=len(report.accepted),
            rejected=len(report.rejected),
            total=len(report.documents),
        )
        return report

    def stage(
        self,
        candidates: Iterable[CandidateFile],
        current: Sequence[StagedDocument] = (),
    ) -> list[StagedDocument]:
        """Append accepted candidates, in input order, after ``current``.

        Rejected candidates are dropped without error.
        """
        return self.stage_with_report(candidates, current).documents

    @staticmethod
    def remove(current: Sequence[StagedDocument], index: int) -> list[StagedDocument]:
        """Return the documents without the one at ``index``.

        An out-of-range index (negative included) leaves the list unchanged.
        """
        if index < 0 or index >= len(current):
            return list(current)
        return [doc for i, doc in enumerate(current) if i != index]


__all__ = [
    "ACCEPTED_MIME_TYPES",
    "MAX_FILE_SIZE",
    "RejectionReason",
    "StagingRejection",
    "StagingReport",
    "AttachmentStager",
]
