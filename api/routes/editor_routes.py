"""
Editor session endpoints. Every mutation touches only the working copy until save.
"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from api.bootstrap import get_editor_service
from api.schemas.editor_schemas import (
    AddModuleRequest,
    AddModuleResponse,
    DeleteModuleResponse,
    EditorStateResponse,
    ReorderRequest,
    SaveResponse,
    SelectRequest,
)
from api.services.editor_service import EditorService
from api.utils.common import editor_state, save_response

editor_routes = APIRouter()


@editor_routes.post("/editor/{training_id}/open", response_model=EditorStateResponse)
async def open_editor(
    training_id: str,
    service: EditorService = Depends(get_editor_service),
) -> EditorStateResponse:
    """Load the training's module tree into a fresh edit session."""
    session = await service.open(training_id)
    return editor_state(session)


@editor_routes.get("/editor/{training_id}", response_model=EditorStateResponse)
async def get_editor(
    training_id: str,
    service: EditorService = Depends(get_editor_service),
) -> EditorStateResponse:
    return editor_state(service.get(training_id))


@editor_routes.post("/editor/{training_id}/modules", response_model=AddModuleResponse)
async def add_module(
    training_id: str,
    req: AddModuleRequest,
    service: EditorService = Depends(get_editor_service),
) -> AddModuleResponse:
    """Append a module (or a step under `parent_id`). module_id is null when the parent cannot take children."""
    session = service.get(training_id)
    module_id = session.add_module(req.parent_id)
    return AddModuleResponse(module_id=module_id, state=editor_state(session))


@editor_routes.patch("/editor/{training_id}/modules/{module_id}", response_model=EditorStateResponse)
async def update_module(
    training_id: str,
    module_id: str,
    partial: Dict[str, Any] = Body(...),
    service: EditorService = Depends(get_editor_service),
) -> EditorStateResponse:
    session = service.get(training_id)
    session.update_module(module_id, partial)
    return editor_state(session)


@editor_routes.patch("/editor/{training_id}/modules/{module_id}/step-config", response_model=EditorStateResponse)
async def update_step_config(
    training_id: str,
    module_id: str,
    updates: Dict[str, Any] = Body(...),
    service: EditorService = Depends(get_editor_service),
) -> EditorStateResponse:
    """Merge `updates` into the module's step_config; existing keys not named are kept."""
    session = service.get(training_id)
    session.update_step_config(module_id, updates)
    return editor_state(session)


@editor_routes.post("/editor/{training_id}/modules/{module_id}/duplicate", response_model=AddModuleResponse)
async def duplicate_module(
    training_id: str,
    module_id: str,
    service: EditorService = Depends(get_editor_service),
) -> AddModuleResponse:
    session = service.get(training_id)
    clone_id = session.duplicate_module(module_id)
    return AddModuleResponse(module_id=clone_id, state=editor_state(session))


@editor_routes.delete("/editor/{training_id}/modules/{module_id}", response_model=DeleteModuleResponse)
async def delete_module(
    training_id: str,
    module_id: str,
    service: EditorService = Depends(get_editor_service),
) -> DeleteModuleResponse:
    session = service.get(training_id)
    removed = session.delete_module(module_id)
    return DeleteModuleResponse(deleted_ids=removed, state=editor_state(session))


@editor_routes.post("/editor/{training_id}/reorder", response_model=EditorStateResponse)
async def reorder_modules(
    training_id: str,
    req: ReorderRequest,
    service: EditorService = Depends(get_editor_service),
) -> EditorStateResponse:
    """`ordered_ids` must be the full id list of one sibling group, in the new order."""
    session = service.get(training_id)
    session.reorder_siblings(req.ordered_ids)
    return editor_state(session)


@editor_routes.post("/editor/{training_id}/select", response_model=EditorStateResponse)
async def select_module(
    training_id: str,
    req: SelectRequest,
    service: EditorService = Depends(get_editor_service),
) -> EditorStateResponse:
    session = service.get(training_id)
    session.select(req.module_id)
    return editor_state(session)


@editor_routes.post("/editor/{training_id}/save", response_model=SaveResponse)
async def save_editor(
    training_id: str,
    service: EditorService = Depends(get_editor_service),
) -> SaveResponse:
    deltas = await service.save(training_id)
    return save_response(service.get(training_id), deltas)


@editor_routes.post("/editor/{training_id}/discard", response_model=EditorStateResponse)
async def discard_editor(
    training_id: str,
    service: EditorService = Depends(get_editor_service),
) -> EditorStateResponse:
    session = service.get(training_id)
    session.discard()
    return editor_state(session)


@editor_routes.delete("/editor/{training_id}")
async def close_editor(
    training_id: str,
    service: EditorService = Depends(get_editor_service),
) -> dict:
    return {"closed": service.close(training_id)}
