"""Routine application step: a real-world action with a deadline and evidence."""

from typing import Literal

from pydantic import Field

from studio.step_configs.base import StepConfigSpec, StepPayload

EvidenceType = Literal["checkin", "text", "file", "link"]


class RoutineApplicationPayload(StepPayload):
    action_description: str = ""
    expected_impact: str = ""
    deadline_days: int = Field(default=7, ge=1, le=30)
    evidence_type: EvidenceType = "text"
    # Deadline becomes an accountable commitment with automatic alerts.
    is_real_commitment: bool = True
    auto_reminders: bool = True
    notify_manager: bool = False
    can_generate_daily_mission: bool = False
    can_generate_challenge: bool = False
    skill_name: str = ""
    pdi_goal_name: str = ""


SPEC = StepConfigSpec(
    tag="routine_application",
    label="Routine application",
    description="Apply it in the daily routine",
    payload_model=RoutineApplicationPayload,
)
