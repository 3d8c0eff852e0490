from pydantic import BaseModel, Field
from typing import Any, Optional


class ModuleResponse(BaseModel):
    id: str
    training_id: str
    parent_id: Optional[str] = None
    order_index: int
    level: int
    numbering: Optional[str] = None
    name: str
    description: Optional[str] = None
    step_type: str
    step_config: dict[str, Any]
    time_minutes: int
    xp_reward: int
    coins_reward: int
    is_required: bool
    is_optional: bool
    is_checkpoint: bool
    min_score: Optional[int] = None
    unlock_condition: dict[str, Any]
    is_preview_available: bool
    skill_ids: list[str] = []
    children: list["ModuleResponse"] = []


class EditorStateResponse(BaseModel):
    training_id: str
    dirty: bool
    has_changes: bool
    saving: bool
    selected_id: Optional[str] = None
    modules: list[ModuleResponse]


class AddModuleRequest(BaseModel):
    parent_id: Optional[str] = None


class AddModuleResponse(BaseModel):
    module_id: Optional[str] = None
    state: EditorStateResponse


class DeleteModuleResponse(BaseModel):
    deleted_ids: list[str]
    state: EditorStateResponse


class ReorderRequest(BaseModel):
    ordered_ids: list[str] = Field(min_length=1)


class SelectRequest(BaseModel):
    module_id: Optional[str] = None


class SaveResponse(BaseModel):
    created: int
    updated: int
    deleted: int
    state: EditorStateResponse


class StepTypeResponse(BaseModel):
    value: str
    label: str
    description: str


class StepTypeListResponse(BaseModel):
    step_types: list[StepTypeResponse]


ModuleResponse.model_rebuild()
