"""Collaborator contracts and result types for the wizard.

The wizard talks to three external collaborators: the creation service that
turns a submission payload into an assistance request, an optional uploader
for staged documents, and the navigation shell. They are defined here as
structural protocols (typing.Protocol), so any object with matching methods
is compatible without inheriting from anything.

Example Usage:
    ```python
    class HttpCreationService:
        async def create(self, payload: SubmissionPayload) -> CreationResponse:
            response = await client.post("/demandes", json=payload.to_request())
            return CreationResponse.model_validate(response.json())

    coordinator = SubmissionCoordinator(HttpCreationService())
    ```
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any, Optional, Protocol, Union, runtime_checkable

from pydantic import AliasChoices, BaseModel, Field, model_validator

from sanad_core.models import StagedDocument, SubmissionPayload


# =============================================================================
# NAVIGATION
# =============================================================================

class NavigationRequest(BaseModel):
    """A request to leave the wizard for another page."""

    model_config = {"frozen": True}

    path: str = Field(description="Destination path in the page shell")
    state: dict[str, Any] = Field(
        default_factory=dict,
        description="State handed to the destination page",
    )


# =============================================================================
# CREATION RESPONSE
# =============================================================================

class CreatedRequest(BaseModel):
    """The created request as echoed back by the service."""

    model_config = {"extra": "allow", "populate_by_name": True}

    id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("id", "_id"),
    )

    @model_validator(mode="before")
    @classmethod
    def stringify_identifier(cls, data: Any) -> Any:
        return _stringify_ids(data, ("id", "_id"))


class CreationResponse(BaseModel):
    """Response of the creation service.

    Services disagree on where they put the new request's identifier: at the
    top level (``id``, ``_id``, ``requestId``) or inside the echoed request
    (``{"message": ..., "demande": {"_id": ...}}``). ``request_id`` only
    returns a real identifier; ``message`` is never used as one.
    """

    model_config = {"extra": "allow", "populate_by_name": True}

    id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("id", "_id", "requestId", "request_id"),
    )
    message: Optional[str] = None
    request: Optional[CreatedRequest] = Field(
        default=None,
        validation_alias=AliasChoices("demande", "request"),
    )

    @model_validator(mode="before")
    @classmethod
    def stringify_identifier(cls, data: Any) -> Any:
        """Accept numeric identifiers."""
        return _stringify_ids(data, ("id", "_id", "requestId", "request_id"))

    @property
    def request_id(self) -> Optional[str]:
        """The created request's identifier, if the response carried one."""
        if self.id:
            return self.id
        if self.request is not None and self.request.id:
            return self.request.id
        return None

    @property
    def reference(self) -> Optional[str]:
        """What to show the applicant: the identifier, else the message."""
        return self.request_id or self.message or None


def _stringify_ids(data: Any, keys: tuple[str, ...]) -> Any:
    if isinstance(data, Mapping):
        data = dict(data)
        for key in keys:
            if isinstance(data.get(key), int):
                data[key] = str(data[key])
    return data


# =============================================================================
# SUBMISSION OUTCOME
# =============================================================================

class SubmissionStatus(str, Enum):
    """Result codes for a submission attempt."""

    SUCCESS = "success"
    """The creation service accepted the application."""

    FAILED = "failed"
    """The creation call raised; the draft is unchanged and may be retried."""

    INVALID = "invalid"
    """Pre-submit validation failed; no call was made."""

    IN_PROGRESS = "in_progress"
    """Another submission is still in flight; no call was made."""


class SubmissionOutcome(BaseModel):
    """Standardized result of ``SubmissionCoordinator.submit``.

    Attributes:
        status: What happened to the attempt
        request_id: Identifier of the created request, when the service sent one
        reference: What the applicant is shown for the request: its identifier,
            or the service message when there is none
        message: Confirmation message on success
        errors: Field-scoped errors, or a single ``submit`` error
        warnings: Non-fatal issues, such as a failed document upload
    """

    status: SubmissionStatus
    request_id: Optional[str] = None
    reference: Optional[str] = None
    message: Optional[str] = None
    errors: dict[str, str] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)

    @property
    def is_success(self) -> bool:
        return self.status == SubmissionStatus.SUCCESS

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0

    @classmethod
    def success(
        cls,
        request_id: Optional[str],
        message: str,
        *,
        reference: Optional[str] = None,
        warnings: Optional[list[str]] = None,
    ) -> SubmissionOutcome:
        return cls(
            status=SubmissionStatus.SUCCESS,
            request_id=request_id,
            reference=reference or request_id,
            message=message,
            warnings=warnings or [],
        )

    @classmethod
    def failure(cls, message: str) -> SubmissionOutcome:
        """Create a failed outcome with a single top-level ``submit`` error."""
        return cls(status=SubmissionStatus.FAILED, errors={"submit": message})

    @classmethod
    def invalid(cls, errors: Mapping[str, str]) -> SubmissionOutcome:
        return cls(status=SubmissionStatus.INVALID, errors=dict(errors))

    @classmethod
    def in_progress(cls) -> SubmissionOutcome:
        return cls(status=SubmissionStatus.IN_PROGRESS)


# =============================================================================
# COLLABORATOR PROTOCOLS
# =============================================================================

@runtime_checkable
class CreationService(Protocol):
    """Creates an assistance request from a submission payload.

    Implementations may raise any exception on transport or application
    failure; the coordinator converts it into a ``submit`` error.
    """

    async def create(
        self,
        payload: SubmissionPayload,
    ) -> Union[CreationResponse, Mapping[str, Any]]:
        ...


@runtime_checkable
class DocumentUploader(Protocol):
    """Uploads staged documents for an already created request."""

    async def upload(
        self,
        request_id: str,
        documents: Sequence[StagedDocument],
    ) -> None:
        ...


@runtime_checkable
class Navigator(Protocol):
    """The page shell that performs navigation away from the wizard."""

    def navigate(self, request: NavigationRequest) -> None:
        ...


__all__ = [
    "NavigationRequest",
    "CreatedRequest",
    "CreationResponse",
    "SubmissionStatus",
    "SubmissionOutcome",
    "CreationService",
    "DocumentUploader",
    "Navigator",
]
