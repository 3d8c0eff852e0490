from studio.wizard.controller import WizardController
from studio.wizard.draft import SECTIONS, WizardDraft, training_key_for
from studio.wizard.steps import (
    BASIC_INFO,
    CERTIFICATE,
    DEFAULT_FLOW,
    DISTRIBUTION,
    REVIEW,
    REWARDS,
    WizardStep,
)

__all__ = [
    "BASIC_INFO",
    "CERTIFICATE",
    "DEFAULT_FLOW",
    "DISTRIBUTION",
    "REVIEW",
    "REWARDS",
    "SECTIONS",
    "WizardController",
    "WizardDraft",
    "WizardStep",
    "training_key_for",
]
