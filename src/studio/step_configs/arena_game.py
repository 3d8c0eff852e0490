"""Arena game step: links the module to a game from the arena catalog."""

from typing import Literal, Optional

from pydantic import Field

from studio.step_configs.base import StepConfigSpec, StepPayload


class ArenaGamePayload(StepPayload):
    game_type: Optional[str] = None
    min_score: int = Field(default=70, ge=0, le=100)
    difficulty: Optional[Literal["easy", "medium", "hard"]] = None
    time_limit: int = Field(default=10, ge=1, le=60)  # minutes


SPEC = StepConfigSpec(
    tag="arena_game",
    label="Game",
    description="Arena game",
    payload_model=ArenaGamePayload,
)
