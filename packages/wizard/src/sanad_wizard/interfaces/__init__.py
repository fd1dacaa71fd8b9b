"""Collaborator interfaces for the application wizard.

Available Interfaces:
    CreationService: Creates an assistance request from a payload
    DocumentUploader: Uploads staged documents after creation
    Navigator: Performs navigation away from the wizard

Result Types:
    CreatedRequest: The request echoed back by the creation service
    CreationResponse: Response of the creation service
    SubmissionOutcome: Result of a submission attempt
    SubmissionStatus: Enum of submission result codes
    NavigationRequest: A request to leave the wizard
"""

from sanad_wizard.interfaces.base import (
    # Navigation
    NavigationRequest,
    # Results
    CreatedRequest,
    CreationResponse,
    SubmissionStatus,
    SubmissionOutcome,
    # Protocols
    CreationService,
    DocumentUploader,
    Navigator,
)

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
