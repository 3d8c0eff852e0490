"""
Module node and its data-entry update shape.

TrainingModule is deliberately permissive so any persisted snapshot loads;
bounds are enforced on edits through ModuleUpdate.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_CHECKPOINT_MIN_SCORE = 70

# Fields owned by the tree; edits through update_module never touch them.
STRUCTURAL_FIELDS = frozenset({"id", "training_id", "parent_id", "order_index", "level", "numbering"})


class UnlockConditionType(str, Enum):
    """When a learner may start a module."""
    NONE = "none"
    PREVIOUS_COMPLETE = "previous_complete"
    PREVIOUS_SCORE = "previous_score"


def new_module_id() -> str:
    return str(uuid4())


class TrainingModule(BaseModel):
    """One node of a training's content tree: a top-level module or a child step."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(default_factory=new_module_id)
    training_id: str
    parent_id: Optional[str] = None
    order_index: int = 0
    level: int = 0
    numbering: Optional[str] = None

    name: str = ""
    description: Optional[str] = None
    step_type: str = "content"
    step_config: Dict[str, Any] = Field(default_factory=lambda: {"content_type": "text"})

    time_minutes: int = 5
    xp_reward: int = 10
    coins_reward: int = 5
    is_required: bool = True
    is_optional: bool = False
    is_checkpoint: bool = False
    min_score: Optional[int] = None
    unlock_condition: Dict[str, Any] = Field(
        default_factory=lambda: {"type": UnlockConditionType.PREVIOUS_COMPLETE.value}
    )
    is_preview_available: bool = False
    skill_ids: List[str] = Field(default_factory=list)

    @property
    def is_top_level(self) -> bool:
        return self.parent_id is None

    @property
    def effective_min_score(self) -> Optional[int]:
        """Score gate applied to learners; only meaningful on checkpoints."""
        if not self.is_checkpoint:
            return None
        return self.min_score if self.min_score is not None else DEFAULT_CHECKPOINT_MIN_SCORE

    def payload(self) -> Dict[str, Any]:
        """Full node state as a JSON-safe dict."""
        return self.model_dump(mode="json")


class ModuleUpdate(BaseModel):
    """Partial edit of a module, validated field by field."""

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    description: Optional[str] = None
    step_type: Optional[str] = None
    step_config: Optional[Dict[str, Any]] = None
    time_minutes: Optional[int] = Field(default=None, ge=1, le=180)
    xp_reward: Optional[int] = Field(default=None, ge=0, le=500)
    coins_reward: Optional[int] = Field(default=None, ge=0, le=200)
    is_required: Optional[bool] = None
    is_optional: Optional[bool] = None
    is_checkpoint: Optional[bool] = None
    min_score: Optional[int] = Field(default=None, ge=0, le=100)
    unlock_condition: Optional[Dict[str, Any]] = None
    is_preview_available: Optional[bool] = None
    skill_ids: Optional[List[str]] = None

    @field_validator("unlock_condition")
    @classmethod
    def _known_unlock_type(cls, value: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        if value is None:
            return value
        kind = value.get("type", UnlockConditionType.PREVIOUS_COMPLETE.value)
        UnlockConditionType(kind)  # raises ValueError for unknown tags
        return {**value, "type": kind}

    def changes(self) -> Dict[str, Any]:
        """Only the fields the caller actually supplied. Explicit None only clears nullable fields."""
        supplied = self.model_dump(exclude_unset=True)
        return {k: v for k, v in supplied.items() if v is not None or k in NULLABLE_FIELDS}


NULLABLE_FIELDS = frozenset({"description", "min_score"})
