"""Sanad Wizard - Guided submission flow for assistance applications."""

from sanad_wizard.config import (
    SanadConfig,
    StagingConfig,
    SubmissionConfig,
    configure_logging,
)
from sanad_wizard.session import ApplicationReview, ApplicationWizard
from sanad_wizard.steps import StepController, StepTransition, WizardStep
from sanad_wizard.submission import SubmissionCoordinator

__version__ = "0.1.0"

__all__ = [
    "SanadConfig",
    "StagingConfig",
    "SubmissionConfig",
    "configure_logging",
    "ApplicationReview",
    "ApplicationWizard",
    "StepController",
    "StepTransition",
    "WizardStep",
    "SubmissionCoordinator",
]
