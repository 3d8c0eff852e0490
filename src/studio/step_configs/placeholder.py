"""Step types without a structured editor yet. Their config passes through as-is."""

from studio.step_configs.base import StepConfigSpec, StepPayload


class PlaceholderPayload(StepPayload):
    pass


PLACEHOLDER_TYPES = (
    ("cognitive_test", "Cognitive test", "Cognitive assessment"),
    ("simulation", "Simulation", "Practical simulation"),
    ("practical_challenge", "Challenge", "Practical challenge"),
    ("commitment", "Commitment", "Personal commitment"),
    ("reflection", "Reflection", "Reflection checkpoint"),
)

SPECS = [
    StepConfigSpec(tag=tag, label=label, description=description, payload_model=PlaceholderPayload)
    for tag, label, description in PLACEHOLDER_TYPES
]
