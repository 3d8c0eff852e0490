from typing import Any, Dict, List, Optional

from studio.step_configs.base import StepConfigSpec, StepPayload


class StepConfigRegistry:
    def __init__(self):
        self._specs: Dict[str, StepConfigSpec] = {}

    def register(self, spec: StepConfigSpec) -> None:
        if spec.tag in self._specs:
            raise ValueError(f"Step type {spec.tag} already registered")
        self._specs[spec.tag] = spec

    def get(self, tag: str) -> StepConfigSpec:
        if tag not in self._specs:
            raise ValueError(f"Step type {tag} not registered")
        return self._specs[tag]

    def is_registered(self, tag: str) -> bool:
        return tag in self._specs

    def list_tags(self) -> List[str]:
        return list(self._specs.keys())

    def describe(self) -> List[Dict[str, str]]:
        """Options for a step type selector, in registration order."""
        return [
            {"value": spec.tag, "label": spec.label, "description": spec.description}
            for spec in self._specs.values()
        ]

    def defaults(self, tag: str) -> Dict[str, Any]:
        return self.get(tag).defaults()

    def view(self, tag: str, config: Optional[Dict[str, Any]]) -> StepPayload:
        return self.get(tag).view(config)

    def merge(self, tag: str, existing: Optional[Dict[str, Any]], updates: Dict[str, Any]) -> Dict[str, Any]:
        return self.get(tag).merge(existing, updates)
