"""Guided reading step: a book excerpt or summary framed by an objective."""

from pydantic import Field

from studio.step_configs.base import StepConfigSpec, StepPayload


class GuidedReadingPayload(StepPayload):
    chapter_title: str = ""
    excerpt_text: str = ""
    summary: str = ""
    learning_objective: str = ""
    context_why_matters: str = ""
    estimated_reading_minutes: int = Field(default=5, ge=1)
    skill_name: str = ""
    pdi_goal_name: str = ""


SPEC = StepConfigSpec(
    tag="guided_reading",
    label="Guided reading",
    description="Reading with context",
    payload_model=GuidedReadingPayload,
)
