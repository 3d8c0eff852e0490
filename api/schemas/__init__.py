"""
API schemas package. Import from submodules or from this package.

Example:
    from api.schemas import EditorStateResponse, WizardStateResponse
    from api.schemas.editor_schemas import ModuleResponse
"""

from api.schemas.editor_schemas import (
    AddModuleRequest,
    AddModuleResponse,
    DeleteModuleResponse,
    EditorStateResponse,
    ModuleResponse,
    ReorderRequest,
    SaveResponse,
    SelectRequest,
    StepTypeListResponse,
    StepTypeResponse,
)
from api.schemas.training_schemas import (
    CatalogEntryResponse,
    CatalogResponse,
    DistributionResponse,
    TrainingDetailResponse,
    TrainingListResponse,
    TrainingResponse,
    WizardBackResponse,
    WizardStateResponse,
    WizardStepResponse,
    WizardSubmitResponse,
    WizardSummaryResponse,
    WizardThumbnailResponse,
)

__all__ = [
    "AddModuleRequest",
    "AddModuleResponse",
    "DeleteModuleResponse",
    "EditorStateResponse",
    "ModuleResponse",
    "ReorderRequest",
    "SaveResponse",
    "SelectRequest",
    "StepTypeListResponse",
    "StepTypeResponse",
    "CatalogEntryResponse",
    "CatalogResponse",
    "DistributionResponse",
    "TrainingDetailResponse",
    "TrainingListResponse",
    "TrainingResponse",
    "WizardBackResponse",
    "WizardStateResponse",
    "WizardStepResponse",
    "WizardSubmitResponse",
    "WizardSummaryResponse",
    "WizardThumbnailResponse",
]
