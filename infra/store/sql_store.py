from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional
from uuid import uuid4

from sqlalchemy.orm import Session

from api.models.models import (
    Training,
    TrainingConfig,
    TrainingInsigniaRelation,
    TrainingModule as ModuleRow,
    TrainingRewardItem,
    TrainingSkillImpact,
)
from studio.core.module import TrainingModule
from studio.errors import FieldValidationError, TrainingNotFoundError
from studio.store import (
    ContentStore,
    DistributionConfig,
    MaterializedTraining,
    ModuleDelta,
    TrainingRecord,
)

logger = logging.getLogger(__name__)

# Distribution wording in the wizard vs. the values stored in training_configs.
REQUIREMENT_TO_STORED = {"mandatory": "required", "recommended": "suggested", "optional": "optional"}
REQUIREMENT_FROM_STORED = {v: k for k, v in REQUIREMENT_TO_STORED.items()}

MODULE_COLUMNS = (
    "training_id", "parent_id", "order_index", "level", "numbering", "name", "description",
    "step_type", "step_config", "time_minutes", "xp_reward", "coins_reward", "is_required",
    "is_optional", "is_checkpoint", "min_score", "unlock_condition", "is_preview_available", "skill_ids",
)

TRAINING_COLUMNS = tuple(
    name for name in TrainingRecord.model_fields if name not in ("id", "created_at")
)


class SqlContentStore(ContentStore):
    """
    SQLAlchemy-backed ContentStore.

    Takes a session factory rather than a session: an edit session outlives any
    single request, so every call opens and closes its own unit of work.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    async def fetch(self, training_id: str) -> List[TrainingModule]:
        with self.session_factory() as db:
            self._require_training(db, training_id)
            rows = (
                db.query(ModuleRow)
                .filter(ModuleRow.training_id == training_id)
                .order_by(ModuleRow.level.asc(), ModuleRow.order_index.asc())
                .all()
            )
            return [_module_from_row(r) for r in rows]

    async def upsert_modules(self, training_id: str, deltas: List[ModuleDelta]) -> None:
        with self.session_factory() as db:
            self._require_training(db, training_id)
            try:
                for delta in deltas:
                    row = db.get(ModuleRow, delta.module.id)
                    if row is None:
                        row = ModuleRow(id=delta.module.id)
                        db.add(row)
                    for column in MODULE_COLUMNS:
                        setattr(row, column, getattr(delta.module, column))
                    row.training_id = training_id
                    row.updated_at = datetime.now(timezone.utc)
                db.commit()
            except Exception:
                db.rollback()
                raise
        logger.info("upserted modules training=%s count=%s", training_id, len(deltas))

    async def delete_modules(self, ids: List[str]) -> None:
        if not ids:
            return
        with self.session_factory() as db:
            try:
                db.query(ModuleRow).filter(ModuleRow.id.in_(list(ids))).delete(synchronize_session=False)
                db.commit()
            except Exception:
                db.rollback()
                raise
        logger.info("deleted modules count=%s", len(ids))

    async def create_training(self, materialized: MaterializedTraining) -> str:
        record = materialized.training
        with self.session_factory() as db:
            taken = db.query(Training).filter(Training.training_key == record.training_key).first()
            if taken is not None:
                raise FieldValidationError(f"training_key already in use: {record.training_key}")

            training_id = record.id or str(uuid4())
            try:
                training = Training(id=training_id, **{c: getattr(record, c) for c in TRAINING_COLUMNS})
                db.add(training)

                dist = materialized.distribution
                db.add(TrainingConfig(
                    id=str(uuid4()),
                    training_id=training_id,
                    requirement_type=REQUIREMENT_TO_STORED[dist.requirement_type],
                    team_ids=list(dist.team_ids),
                    deadline_days=dist.deadline_days,
                    xp_multiplier=dist.xp_multiplier,
                    coins_multiplier=dist.coins_multiplier,
                ))
                for impact in materialized.skill_impacts:
                    db.add(TrainingSkillImpact(
                        id=str(uuid4()), training_id=training_id, skill_id=impact.skill_id, weight=impact.weight,
                    ))
                for rel in materialized.insignia_relations:
                    db.add(TrainingInsigniaRelation(
                        id=str(uuid4()), training_id=training_id,
                        insignia_id=rel.insignia_id, relation_type=rel.relation_type,
                    ))
                for item in materialized.reward_items:
                    db.add(TrainingRewardItem(
                        id=str(uuid4()), training_id=training_id,
                        item_id=item.item_id, category=item.category, unlock_mode=item.unlock_mode,
                    ))
                for module in materialized.modules:
                    row = ModuleRow(id=module.id)
                    for column in MODULE_COLUMNS:
                        setattr(row, column, getattr(module, column))
                    row.training_id = training_id
                    db.add(row)
                db.commit()
            except Exception:
                db.rollback()
                raise
        logger.info("created training id=%s key=%s", training_id, record.training_key)
        return training_id

    async def get_training(self, training_id: str) -> TrainingRecord:
        with self.session_factory() as db:
            return _record_from_row(self._require_training(db, training_id))

    async def list_trainings(self) -> List[TrainingRecord]:
        with self.session_factory() as db:
            rows = db.query(Training).order_by(Training.created_at.desc()).all()
            return [_record_from_row(r) for r in rows]

    async def get_distribution(self, training_id: str) -> Optional[DistributionConfig]:
        with self.session_factory() as db:
            self._require_training(db, training_id)
            config = db.query(TrainingConfig).filter(TrainingConfig.training_id == training_id).first()
            if config is None:
                return None
            return DistributionConfig(
                requirement_type=REQUIREMENT_FROM_STORED.get(config.requirement_type, "optional"),
                team_ids=list(config.team_ids or []),
                deadline_days=config.deadline_days,
                xp_multiplier=config.xp_multiplier,
                coins_multiplier=config.coins_multiplier,
            )

    @staticmethod
    def _require_training(db: Session, training_id: str) -> Training:
        training = db.get(Training, training_id)
        if training is None:
            raise TrainingNotFoundError(f"Training not found: {training_id}")
        return training


def _module_from_row(row: ModuleRow) -> TrainingModule:
    data = {column: getattr(row, column) for column in MODULE_COLUMNS}
    data["id"] = row.id
    # Columns may hold NULL for rows written by older tools; let the model defaults apply.
    return TrainingModule.model_validate({k: v for k, v in data.items() if v is not None or k in ("parent_id", "min_score", "description")})


def _record_from_row(row: Training) -> TrainingRecord:
    data = {c: getattr(row, c) for c in TRAINING_COLUMNS}
    return TrainingRecord(id=row.id, created_at=row.created_at, **{k: v for k, v in data.items() if v is not None})
