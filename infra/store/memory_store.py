from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional
from uuid import uuid4

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


@dataclass
class InMemoryContentStore(ContentStore):
    """
    Dict-backed ContentStore for tests and local tooling.

    Everything going in or out is deep-copied so callers never share state with the store.
    """

    trainings: Dict[str, TrainingRecord] = field(default_factory=dict)
    modules: Dict[str, TrainingModule] = field(default_factory=dict)
    materialized: Dict[str, MaterializedTraining] = field(default_factory=dict)

    def add_training(self, record: TrainingRecord, modules: Optional[List[TrainingModule]] = None) -> str:
        """Seed a training directly, bypassing the wizard."""
        training_id = record.id or str(uuid4())
        self.trainings[training_id] = record.model_copy(update={"id": training_id, "created_at": datetime.now(timezone.utc)})
        for module in modules or []:
            self.modules[module.id] = module.model_copy(deep=True, update={"training_id": training_id})
        return training_id

    async def fetch(self, training_id: str) -> List[TrainingModule]:
        self._require(training_id)
        return [m.model_copy(deep=True) for m in self.modules.values() if m.training_id == training_id]

    async def upsert_modules(self, training_id: str, deltas: List[ModuleDelta]) -> None:
        self._require(training_id)
        for delta in deltas:
            self.modules[delta.module.id] = delta.module.model_copy(deep=True, update={"training_id": training_id})

    async def delete_modules(self, ids: List[str]) -> None:
        for module_id in ids:
            self.modules.pop(module_id, None)

    async def create_training(self, materialized: MaterializedTraining) -> str:
        key = materialized.training.training_key
        if any(t.training_key == key for t in self.trainings.values()):
            raise FieldValidationError(f"training_key already in use: {key}")
        training_id = self.add_training(materialized.training, materialized.modules)
        self.materialized[training_id] = materialized.model_copy(deep=True)
        logger.info("created training id=%s key=%s", training_id, key)
        return training_id

    async def get_training(self, training_id: str) -> TrainingRecord:
        return self._require(training_id).model_copy()

    async def list_trainings(self) -> List[TrainingRecord]:
        return [t.model_copy() for t in self.trainings.values()]

    async def get_distribution(self, training_id: str) -> Optional[DistributionConfig]:
        self._require(training_id)
        materialized = self.materialized.get(training_id)
        return materialized.distribution.model_copy() if materialized else None

    def _require(self, training_id: str) -> TrainingRecord:
        record = self.trainings.get(training_id)
        if record is None:
            raise TrainingNotFoundError(f"Training not found: {training_id}")
        return record
