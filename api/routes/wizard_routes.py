"""
Training creation wizard endpoints. Nothing is persisted before submit.
"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, File, UploadFile
from sqlalchemy.orm import Session

from api.bootstrap import get_wizard_service
from api.config import get_db
from api.schemas.training_schemas import (
    WizardBackResponse,
    WizardStateResponse,
    WizardSubmitResponse,
    WizardSummaryResponse,
    WizardThumbnailResponse,
)
from api.services.wizard_service import WizardService
from infra.catalog.sql_catalog import SqlReferenceCatalog

wizard_routes = APIRouter()


@wizard_routes.post("/wizards", response_model=WizardStateResponse)
async def create_wizard(
    service: WizardService = Depends(get_wizard_service),
) -> WizardStateResponse:
    wizard = service.create()
    return WizardStateResponse(**wizard.state())


@wizard_routes.get("/wizards/{wizard_id}", response_model=WizardStateResponse)
async def get_wizard(
    wizard_id: str,
    service: WizardService = Depends(get_wizard_service),
) -> WizardStateResponse:
    return WizardStateResponse(**service.get(wizard_id).state())


@wizard_routes.get("/wizards/{wizard_id}/summary", response_model=WizardSummaryResponse)
async def wizard_summary(
    wizard_id: str,
    service: WizardService = Depends(get_wizard_service),
    db: Session = Depends(get_db),
) -> WizardSummaryResponse:
    """Review data with skill and insignia names resolved."""
    wizard = service.get(wizard_id)
    return WizardSummaryResponse(summary=wizard.summary(catalog=SqlReferenceCatalog(db)))


@wizard_routes.patch("/wizards/{wizard_id}/{section}", response_model=WizardStateResponse)
async def update_wizard_section(
    wizard_id: str,
    section: str,
    fields: Dict[str, Any] = Body(...),
    service: WizardService = Depends(get_wizard_service),
) -> WizardStateResponse:
    wizard = service.get(wizard_id)
    wizard.update(section, **fields)
    return WizardStateResponse(**wizard.state())


@wizard_routes.post("/wizards/{wizard_id}/next", response_model=WizardStateResponse)
async def wizard_next(
    wizard_id: str,
    service: WizardService = Depends(get_wizard_service),
) -> WizardStateResponse:
    wizard = service.get(wizard_id)
    wizard.next()
    return WizardStateResponse(**wizard.state())


@wizard_routes.post("/wizards/{wizard_id}/back", response_model=WizardBackResponse)
async def wizard_back(
    wizard_id: str,
    service: WizardService = Depends(get_wizard_service),
) -> WizardBackResponse:
    """Back from the first step cancels: the draft is reset and `closed` is true."""
    wizard = service.get(wizard_id)
    moved = wizard.back()
    return WizardBackResponse(closed=not moved, state=WizardStateResponse(**wizard.state()))


@wizard_routes.post("/wizards/{wizard_id}/goto/{step_id}", response_model=WizardStateResponse)
async def wizard_go_to(
    wizard_id: str,
    step_id: str,
    service: WizardService = Depends(get_wizard_service),
) -> WizardStateResponse:
    wizard = service.get(wizard_id)
    wizard.go_to(step_id)
    return WizardStateResponse(**wizard.state())


@wizard_routes.post("/wizards/{wizard_id}/thumbnail", response_model=WizardThumbnailResponse)
async def wizard_thumbnail(
    wizard_id: str,
    file: UploadFile = File(...),
    service: WizardService = Depends(get_wizard_service),
) -> WizardThumbnailResponse:
    wizard = service.get(wizard_id)
    data = await file.read()
    url = await wizard.upload_thumbnail(file.filename or "thumbnail", data, file.content_type)
    return WizardThumbnailResponse(thumbnail_url=url, state=WizardStateResponse(**wizard.state()))


@wizard_routes.post("/wizards/{wizard_id}/submit", response_model=WizardSubmitResponse)
async def wizard_submit(
    wizard_id: str,
    service: WizardService = Depends(get_wizard_service),
) -> WizardSubmitResponse:
    wizard = service.get(wizard_id)
    training_id = await wizard.submit()
    service.close(wizard_id)
    return WizardSubmitResponse(training_id=training_id)


@wizard_routes.delete("/wizards/{wizard_id}")
async def cancel_wizard(
    wizard_id: str,
    service: WizardService = Depends(get_wizard_service),
) -> dict:
    return {"cancelled": service.close(wizard_id)}
