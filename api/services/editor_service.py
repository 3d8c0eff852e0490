"""
Editor service: one EditSession per open training, kept in process memory.
"""

from typing import Dict, Optional

from fastapi import HTTPException

from studio.session import EditSession
from studio.step_configs import StepConfigRegistry, default_registry
from studio.store import ContentStore
from api.utils.logger import configure_logging, log_request

logger = configure_logging()


class EditorService:
    """Open, look up and close edit sessions. Single user: opening again replaces the session."""

    def __init__(self, store: ContentStore, registry: Optional[StepConfigRegistry] = None):
        self.store = store
        self.registry = registry or default_registry()
        self._sessions: Dict[str, EditSession] = {}

    async def open(self, training_id: str) -> EditSession:
        session = EditSession(training_id, self.store, registry=self.registry)
        with log_request(logger, f"open editor training={training_id}"):
            await session.load()
        self._sessions[training_id] = session
        return session

    def get(self, training_id: str) -> EditSession:
        session = self._sessions.get(training_id)
        if session is None:
            raise HTTPException(status_code=404, detail="Editor session not open")
        return session

    async def save(self, training_id: str):
        session = self.get(training_id)
        with log_request(logger, f"save editor training={training_id}"):
            return await session.save()

    def close(self, training_id: str) -> bool:
        session = self._sessions.pop(training_id, None)
        if session is not None and session.dirty:
            logger.warning("editor closed with unsaved changes training=%s", training_id)
        return session is not None
