"""Custom exceptions for the Sanad application wizard.

This module provides a hierarchy of exception classes for errors that are
not part of the normal wizard flow. Field-level validation results are plain
mappings returned by the validation engine and are never raised; the
exceptions below cover bad input at the model boundary, failing external
collaborators, and misuse of a finished wizard session. All of them inherit
from SanadError.

Example:
    try:
        category = Category.parse(raw_value)
    except ValidationError as e:
        logger.warning("rejected_category", field=e.field, value=e.value)
    except SanadError as e:
        logger.error("wizard_error", error=str(e))
"""

from typing import Any, Optional


class SanadError(Exception):
    """Base exception for all Sanad application errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
        recoverable: Whether the error is potentially recoverable.

    Example:
        >>> raise SanadError("Something went wrong", details={"step": 2})
        SanadError: Something went wrong
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize SanadError.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context about the error.
            recoverable: Whether the error can be recovered from by retrying
                or correcting input. Defaults to False.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        """Return string representation of the error."""
        return self.message

    def __repr__(self) -> str:
        """Return detailed representation of the error."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"recoverable={self.recoverable!r})"
        )


class ValidationError(SanadError):
    """Error raised when a value is rejected at the model boundary.

    Raised for values that cannot be represented at all, such as an unknown
    category or urgency level passed to a strict parser, or a step number
    outside the wizard. Recoverable business-rule failures (missing title,
    amount over the cap) are reported as error mappings instead.

    Attributes:
        field: The field that failed validation.
        value: The invalid value.
        constraint: The validation constraint that was violated.

    Example:
        >>> raise ValidationError(
        ...     "Unknown category",
        ...     field="category",
        ...     value="pets",
        ...     constraint="Must be one of: emergency_assistance, ...",
        ... )
        ValidationError: Unknown category
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        """Initialize ValidationError.

        Args:
            message: Human-readable error description.
            field: The name of the field that failed validation.
            value: The invalid value.
            constraint: Description of the validation rule violated.
            details: Optional dictionary with additional context.
            recoverable: Whether the error can be fixed by user correction.
                Defaults to True.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.field = field
        self.value = value
        self.constraint = constraint

        if field:
            self.details["field"] = field
        if value is not None:
            self.details["value"] = value
        if constraint:
            self.details["constraint"] = constraint


class SubmissionError(SanadError):
    """Error raised by a collaborator when an application cannot be submitted.

    The wizard never raises this itself. It is the error type for the
    creation-service and upload adapters an application plugs into the
    wizard, raised for transport or application failures. The submission
    coordinator turns a creation failure into a single top-level ``submit``
    error and an upload failure into a warning, so callers of the wizard
    never see it directly.

    Attributes:
        stage: The submission stage that failed ("create" or "upload").
        status_code: Status code reported by the remote service, if any.
        request_id: Identifier of the created request, for upload failures.

    Example:
        >>> raise SubmissionError(
        ...     "Creation service unavailable",
        ...     stage="create",
        ...     status_code=503,
        ... )
        SubmissionError: Creation service unavailable
    """

    def __init__(
        self,
        message: str,
        *,
        stage: Optional[str] = None,
        status_code: Optional[int] = None,
        request_id: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        """Initialize SubmissionError.

        Args:
            message: Human-readable error description.
            stage: The submission stage that failed.
            status_code: Status code from the remote service.
            request_id: Identifier of an already created request.
            details: Optional dictionary with additional context.
            recoverable: Whether the submission may be retried. Defaults to
                True since the draft is left intact.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.stage = stage
        self.status_code = status_code
        self.request_id = request_id

        if stage:
            self.details["stage"] = stage
        if status_code is not None:
            self.details["status_code"] = status_code
        if request_id:
            self.details["request_id"] = request_id


class WizardClosedError(SanadError):
    """Error raised when a finished wizard session is used again.

    A session closes once it navigates away, either after a successful
    submission or when the entry guard redirects to category selection.

    Attributes:
        exit_path: Where the session navigated to when it closed.
    """

    def __init__(
        self,
        message: str,
        *,
        exit_path: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details=details, recoverable=False)
        self.exit_path = exit_path

        if exit_path:
            self.details["exit_path"] = exit_path


__all__ = [
    "SanadError",
    "ValidationError",
    "SubmissionError",
    "WizardClosedError",
]
