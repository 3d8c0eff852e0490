"""
AI reflection step.

The AI interviewer uses the chapter content and prompts as reference and scores
the learner's answers against `comprehension_threshold`. When
`reflection_prompts` is empty the AI generates its own questions.
"""

from typing import Any, List

from pydantic import Field, field_validator

from studio.step_configs.base import StepConfigSpec, StepPayload


class AIReflectionPayload(StepPayload):
    chapter_title: str = ""
    chapter_content: str = ""
    learning_objective: str = ""
    context_why_matters: str = ""
    reflection_prompts: List[str] = Field(default_factory=list)
    min_response_characters: int = Field(default=50, ge=20, le=500)
    comprehension_threshold: int = Field(default=60, ge=40, le=100)
    max_ai_questions: int = Field(default=5, ge=3, le=10)
    require_practical_example: bool = True
    skill_name: str = ""
    pdi_goal_context: str = ""

    @field_validator("reflection_prompts", mode="before")
    @classmethod
    def _one_prompt_per_line(cls, value: Any) -> Any:
        # The editor sends one prompt per line; blank lines are dropped.
        if isinstance(value, str):
            value = value.split("\n")
        if isinstance(value, list):
            return [p.strip() for p in value if isinstance(p, str) and p.strip()]
        return value


SPEC = StepConfigSpec(
    tag="ai_reflection",
    label="AI reflection",
    description="AI-guided reflection",
    payload_model=AIReflectionPayload,
)
