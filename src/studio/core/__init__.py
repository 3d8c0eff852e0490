from studio.core.module import (
    DEFAULT_CHECKPOINT_MIN_SCORE,
    STRUCTURAL_FIELDS,
    ModuleUpdate,
    TrainingModule,
    UnlockConditionType,
    new_module_id,
)
from studio.core.reorder import ReorderError, reorder_siblings, sibling_group_of
from studio.core.tree import DEFAULT_MODULE_NAME, DEFAULT_STEP_NAME, ModuleNode, ModuleTree

__all__ = [
    "DEFAULT_CHECKPOINT_MIN_SCORE",
    "DEFAULT_MODULE_NAME",
    "DEFAULT_STEP_NAME",
    "STRUCTURAL_FIELDS",
    "ModuleNode",
    "ModuleTree",
    "ModuleUpdate",
    "ReorderError",
    "TrainingModule",
    "UnlockConditionType",
    "new_module_id",
    "reorder_siblings",
    "sibling_group_of",
]
