"""
Common utility functions used across multiple routes.
"""

from datetime import datetime, timezone
from typing import Optional

from studio.core.tree import ModuleNode
from studio.session import EditSession
from studio.store import DistributionConfig, ModuleDeltaSet, TrainingRecord

from api.schemas.editor_schemas import EditorStateResponse, ModuleResponse, SaveResponse
from api.schemas.training_schemas import DistributionResponse, TrainingResponse


def iso_format(dt: Optional[datetime]) -> Optional[str]:
    """Format datetime as ISO string with Z suffix."""
    if dt is None:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt.isoformat() + "Z"


def module_response(node: ModuleNode) -> ModuleResponse:
    return ModuleResponse(
        **node.module.payload(),
        children=[module_response(c) for c in node.children],
    )


def editor_state(session: EditSession) -> EditorStateResponse:
    return EditorStateResponse(
        training_id=session.training_id,
        dirty=session.dirty,
        has_changes=session.has_changes,
        saving=session.saving,
        selected_id=session.selected_id,
        modules=[module_response(n) for n in session.working.nested()],
    )


def save_response(session: EditSession, deltas: ModuleDeltaSet) -> SaveResponse:
    return SaveResponse(
        created=len(deltas.created),
        updated=len(deltas.updated),
        deleted=len(deltas.deleted_ids),
        state=editor_state(session),
    )


def training_response(record: TrainingRecord) -> TrainingResponse:
    data = record.model_dump(exclude={"created_at"})
    return TrainingResponse(**data, created_at=iso_format(record.created_at))


def distribution_response(config: Optional[DistributionConfig]) -> Optional[DistributionResponse]:
    if config is None:
        return None
    return DistributionResponse(**config.model_dump())
