"""
Wizard flows as data: an ordered list of step descriptors, each with its own gate.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Tuple

from studio.wizard.draft import WizardDraft

Gate = Callable[[WizardDraft], bool]


def always(_draft: WizardDraft) -> bool:
    return True


def basic_info_complete(draft: WizardDraft) -> bool:
    return bool(draft.basic.name.strip()) and bool(draft.basic.category)


@dataclass(frozen=True)
class WizardStep:
    id: str
    title: str
    can_proceed: Gate = always


BASIC_INFO = WizardStep("basic_info", "Basic info", basic_info_complete)
DISTRIBUTION = WizardStep("distribution", "Distribution")
REWARDS = WizardStep("rewards", "Rewards")
CERTIFICATE = WizardStep("certificate", "Certification")
REVIEW = WizardStep("review", "Review")

DEFAULT_FLOW: Tuple[WizardStep, ...] = (BASIC_INFO, DISTRIBUTION, REWARDS, CERTIFICATE, REVIEW)
