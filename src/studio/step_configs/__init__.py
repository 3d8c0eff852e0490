"""
Step configuration registry: step type tag -> payload shape and merge function.

Example:
    from studio.step_configs import build_step_registry
    registry = build_step_registry()
    config = registry.merge("quiz", module.step_config, {"shuffleQuestions": True})
"""

from functools import lru_cache

from studio.step_configs import (
    ai_reflection,
    arena_game,
    content,
    guided_reading,
    placeholder,
    quiz,
    routine_application,
    validation,
)
from studio.step_configs.base import StepConfigSpec, StepPayload, shallow_merge
from studio.step_configs.registry import StepConfigRegistry

DEFAULT_STEP_TYPE = "content"


def build_step_registry() -> StepConfigRegistry:
    registry = StepConfigRegistry()

    # Selector order matches the editor: classic types first, then book-guided ones.
    registry.register(content.SPEC)
    registry.register(quiz.SPEC)
    registry.register(arena_game.SPEC)
    for spec in placeholder.SPECS:
        registry.register(spec)
    registry.register(guided_reading.SPEC)
    registry.register(ai_reflection.SPEC)
    registry.register(routine_application.SPEC)
    registry.register(validation.SPEC)

    return registry


@lru_cache(maxsize=1)
def default_registry() -> StepConfigRegistry:
    """Shared registry for callers that do not build their own."""
    return build_step_registry()


__all__ = [
    "DEFAULT_STEP_TYPE",
    "StepConfigRegistry",
    "StepConfigSpec",
    "StepPayload",
    "build_step_registry",
    "default_registry",
    "shallow_merge",
]
