"""
Two-level module tree stored flat (arena + index).

Every node lives in one dict keyed by id and carries `parent_id` and
`order_index`; the rendered hierarchy is derived by grouping on `parent_id`.
Top-level nodes are chapters, their children are steps; children never have
children of their own.

Mutations are total: an id that is not in the tree is a silent no-op.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional

from pydantic import ValidationError

from studio.core.module import (
    DEFAULT_CHECKPOINT_MIN_SCORE,
    STRUCTURAL_FIELDS,
    ModuleUpdate,
    TrainingModule,
    new_module_id,
)
from studio.errors import FieldValidationError
from studio.step_configs import StepConfigRegistry, default_registry, shallow_merge

logger = logging.getLogger(__name__)

DEFAULT_MODULE_NAME = "New module"
DEFAULT_STEP_NAME = "New step"


@dataclass
class ModuleNode:
    """Rendered view of one node and its ordered children."""
    module: TrainingModule
    children: List["ModuleNode"] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {**self.module.payload(), "children": [c.to_dict() for c in self.children]}


class ModuleTree:
    def __init__(
        self,
        training_id: str,
        modules: Iterable[TrainingModule] = (),
        registry: Optional[StepConfigRegistry] = None,
    ):
        self.training_id = training_id
        self.registry = registry or default_registry()
        self._nodes: Dict[str, TrainingModule] = {}
        for m in modules:
            self._nodes[m.id] = m.model_copy(deep=True)
        self._normalize()

    @classmethod
    def from_modules(
        cls,
        training_id: str,
        modules: Iterable[TrainingModule],
        registry: Optional[StepConfigRegistry] = None,
    ) -> "ModuleTree":
        return cls(training_id, modules, registry=registry)

    def copy(self) -> "ModuleTree":
        """Deep copy; the two trees share nothing but the registry."""
        return ModuleTree(self.training_id, self._nodes.values(), registry=self.registry)

    #-----Queries-----

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, module_id: object) -> bool:
        return module_id in self._nodes

    def __iter__(self) -> Iterator[TrainingModule]:
        return iter(self.flatten())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ModuleTree):
            return NotImplemented
        return self.training_id == other.training_id and self.snapshot() == other.snapshot()

    def contains(self, module_id: Optional[str]) -> bool:
        return module_id is not None and module_id in self._nodes

    def get(self, module_id: Optional[str]) -> Optional[TrainingModule]:
        if module_id is None:
            return None
        return self._nodes.get(module_id)

    def children_of(self, parent_id: Optional[str]) -> List[TrainingModule]:
        """Sibling group under `parent_id` (None = top level), in render order."""
        group = [m for m in self._nodes.values() if m.parent_id == parent_id]
        group.sort(key=lambda m: m.order_index)
        return group

    def top_level(self) -> List[TrainingModule]:
        return self.children_of(None)

    def flatten(self) -> List[TrainingModule]:
        """All nodes in render order: each top-level module followed by its children."""
        out: List[TrainingModule] = []
        for parent in self.top_level():
            out.append(parent)
            out.extend(self.children_of(parent.id))
        return out

    def nested(self) -> List[ModuleNode]:
        return [
            ModuleNode(module=parent, children=[ModuleNode(module=c) for c in self.children_of(parent.id)])
            for parent in self.top_level()
        ]

    def snapshot(self) -> Dict[str, Dict[str, Any]]:
        """id -> full node state, for diffing."""
        return {m.id: m.model_dump() for m in self._nodes.values()}

    #-----Mutations-----

    def add_module(self, parent_id: Optional[str] = None) -> Optional[str]:
        """Append a new node at the end of its sibling group and return its id."""
        if parent_id is not None:
            parent = self._nodes.get(parent_id)
            if parent is None or not parent.is_top_level:
                logger.debug("add_module ignored parent_id=%s (unknown or not top-level)", parent_id)
                return None

        module = TrainingModule(
            training_id=self.training_id,
            parent_id=parent_id,
            order_index=len(self.children_of(parent_id)),
            level=0 if parent_id is None else 1,
            name=DEFAULT_MODULE_NAME if parent_id is None else DEFAULT_STEP_NAME,
        )
        self._nodes[module.id] = module
        self.renumber()
        return module.id

    def delete_module(self, module_id: str) -> List[str]:
        """Remove a node (and its children when top-level); return the removed ids."""
        module = self._nodes.get(module_id)
        if module is None:
            logger.debug("delete_module ignored unknown id=%s", module_id)
            return []

        removed = [module_id]
        if module.is_top_level:
            removed.extend(c.id for c in self.children_of(module_id))
        for rid in removed:
            del self._nodes[rid]

        self._resequence(module.parent_id)
        self.renumber()
        return removed

    def duplicate_module(self, module_id: str) -> Optional[str]:
        """Clone a node (not its children) to the end of the same sibling group."""
        source = self._nodes.get(module_id)
        if source is None:
            logger.debug("duplicate_module ignored unknown id=%s", module_id)
            return None

        clone = source.model_copy(
            deep=True,
            update={"id": new_module_id(), "order_index": len(self.children_of(source.parent_id))},
        )
        self._nodes[clone.id] = clone
        self.renumber()
        return clone.id

    def update_module(self, module_id: str, partial: Mapping[str, Any]) -> bool:
        """
        Apply a partial edit. Returns False when nothing was applied (unknown id or
        empty partial). Raises FieldValidationError, leaving the node untouched, if
        any supplied field is invalid.

        `step_config` in the partial is merged into the existing config through the
        registry entry of the (possibly new) step type; it never replaces it.
        """
        module = self._nodes.get(module_id)
        if module is None:
            logger.debug("update_module ignored unknown id=%s", module_id)
            return False

        editable = {k: v for k, v in dict(partial).items() if k not in STRUCTURAL_FIELDS}
        if not editable:
            return False
        try:
            changes = ModuleUpdate.model_validate(editable).changes()
        except ValidationError as exc:
            raise FieldValidationError.from_pydantic("module update", exc) from exc

        self._apply_requirement_toggle(changes)

        step_type = changes.get("step_type", module.step_type)
        if "step_type" in changes and not self.registry.is_registered(step_type):
            raise FieldValidationError(f"Unknown step type: {step_type}")

        if "step_config" in changes:
            if self.registry.is_registered(step_type):
                changes["step_config"] = self.registry.merge(step_type, module.step_config, changes["step_config"])
            else:
                changes["step_config"] = shallow_merge(module.step_config, changes["step_config"])

        # A checkpoint always carries a score threshold.
        is_checkpoint = changes.get("is_checkpoint", module.is_checkpoint)
        if is_checkpoint and changes.get("min_score", module.min_score) is None:
            changes["min_score"] = DEFAULT_CHECKPOINT_MIN_SCORE

        for key, value in changes.items():
            setattr(module, key, copy.deepcopy(value))
        return bool(changes)

    def renumber(self) -> None:
        """Recompute levels and display labels ("1", "1.2", ...) from order_index."""
        for parent in self.top_level():
            parent.level = 0
            parent.numbering = str(parent.order_index + 1)
            for child in self.children_of(parent.id):
                child.level = 1
                child.numbering = f"{parent.numbering}.{child.order_index + 1}"

    #-----Internals-----

    @staticmethod
    def _apply_requirement_toggle(changes: Dict[str, Any]) -> None:
        # is_required and is_optional are two views of one flag.
        has_required = "is_required" in changes
        has_optional = "is_optional" in changes
        if has_required and has_optional:
            if changes["is_required"] == changes["is_optional"]:
                raise FieldValidationError("is_required and is_optional are mutually exclusive")
        elif has_required:
            changes["is_optional"] = not changes["is_required"]
        elif has_optional:
            changes["is_required"] = not changes["is_optional"]

    def _resequence(self, parent_id: Optional[str]) -> None:
        for index, module in enumerate(self.children_of(parent_id)):
            module.order_index = index

    def _normalize(self) -> None:
        # Nodes pointing at a missing parent, or nested deeper than two levels, render at top level.
        for module in self._nodes.values():
            if module.parent_id is None:
                continue
            parent = self._nodes.get(module.parent_id)
            if parent is None or parent.parent_id is not None:
                logger.warning("module id=%s promoted to top level (parent_id=%s)", module.id, module.parent_id)
                module.parent_id = None

        # Stable sort keeps stored order for ties, then indices are made contiguous.
        self._resequence(None)
        for parent in self.top_level():
            self._resequence(parent.id)
        self.renumber()
