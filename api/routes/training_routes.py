"""
Read-only training, catalog and step type endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from studio.core.tree import ModuleTree
from studio.step_configs import default_registry
from studio.store import ContentStore
from api.bootstrap import get_content_store
from api.config import get_db
from api.schemas.editor_schemas import StepTypeListResponse, StepTypeResponse
from api.schemas.training_schemas import (
    CatalogEntryResponse,
    CatalogResponse,
    TrainingDetailResponse,
    TrainingListResponse,
)
from api.utils.common import distribution_response, module_response, training_response
from infra.catalog.sql_catalog import SqlReferenceCatalog

training_routes = APIRouter()

CATALOG_KINDS = ("games", "skills", "badges")


@training_routes.get("/trainings", response_model=TrainingListResponse)
async def list_trainings(store: ContentStore = Depends(get_content_store)) -> TrainingListResponse:
    """All trainings, newest first."""
    records = await store.list_trainings()
    return TrainingListResponse(trainings=[training_response(r) for r in records])


@training_routes.get("/trainings/{training_id}", response_model=TrainingDetailResponse)
async def get_training(
    training_id: str,
    store: ContentStore = Depends(get_content_store),
) -> TrainingDetailResponse:
    """Persisted state only; unsaved editor changes are not included."""
    record = await store.get_training(training_id)
    tree = ModuleTree.from_modules(training_id, await store.fetch(training_id))
    return TrainingDetailResponse(
        training=training_response(record),
        distribution=distribution_response(await store.get_distribution(training_id)),
        modules=[module_response(n) for n in tree.nested()],
    )


@training_routes.get("/catalog/{kind}", response_model=CatalogResponse)
async def list_catalog(kind: str, db: Session = Depends(get_db)) -> CatalogResponse:
    if kind not in CATALOG_KINDS:
        raise HTTPException(status_code=404, detail=f"Unknown catalog: {kind}")
    catalog = SqlReferenceCatalog(db)
    entries = {"games": catalog.list_games, "skills": catalog.list_skills, "badges": catalog.list_badges}[kind]()
    return CatalogResponse(kind=kind, entries=[CatalogEntryResponse(**e.model_dump()) for e in entries])


@training_routes.get("/step-types", response_model=StepTypeListResponse)
async def list_step_types() -> StepTypeListResponse:
    """Step type selector options, in display order."""
    return StepTypeListResponse(step_types=[StepTypeResponse(**d) for d in default_registry().describe()])


@training_routes.get("/step-types/{tag}/defaults")
async def step_type_defaults(tag: str) -> dict:
    registry = default_registry()
    if not registry.is_registered(tag):
        raise HTTPException(status_code=404, detail=f"Unknown step type: {tag}")
    return {"step_type": tag, "defaults": registry.defaults(tag)}
