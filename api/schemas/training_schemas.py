from pydantic import BaseModel
from typing import Any, Optional

from api.schemas.editor_schemas import ModuleResponse


class TrainingResponse(BaseModel):
    id: str
    training_key: str
    name: str
    description: Optional[str] = None
    icon: str
    color: Optional[str] = None
    category: str
    difficulty: str
    estimated_hours: float
    xp_reward: int
    coins_reward: int
    thumbnail_url: Optional[str] = None
    training_type: str
    is_active: bool
    is_onboarding: bool
    certificate_enabled: bool
    certificate_min_score: int
    require_full_completion: bool
    insignia_reward_id: Optional[str] = None
    evolution_template_id: Optional[str] = None
    created_at: Optional[str] = None


class TrainingListResponse(BaseModel):
    trainings: list[TrainingResponse]


class DistributionResponse(BaseModel):
    requirement_type: str
    team_ids: list[str]
    deadline_days: Optional[int] = None
    xp_multiplier: float
    coins_multiplier: float


class TrainingDetailResponse(BaseModel):
    training: TrainingResponse
    distribution: Optional[DistributionResponse] = None
    modules: list[ModuleResponse]


class WizardStepResponse(BaseModel):
    id: str
    title: str


class WizardStateResponse(BaseModel):
    id: str
    steps: list[WizardStepResponse]
    current_step: str
    step_number: int
    completed_steps: list[str]
    can_proceed: bool
    is_last: bool
    draft: dict[str, Any]


class WizardBackResponse(BaseModel):
    closed: bool
    state: WizardStateResponse


class WizardSummaryResponse(BaseModel):
    summary: dict[str, Any]


class WizardSubmitResponse(BaseModel):
    training_id: str


class WizardThumbnailResponse(BaseModel):
    thumbnail_url: Optional[str] = None
    state: WizardStateResponse


class CatalogEntryResponse(BaseModel):
    id: str
    name: str
    icon: Optional[str] = None


class CatalogResponse(BaseModel):
    kind: str
    entries: list[CatalogEntryResponse]
