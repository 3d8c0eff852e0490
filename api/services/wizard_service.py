"""
Wizard service: creation wizards in flight, keyed by wizard id.
"""

from typing import Dict, Optional

from fastapi import HTTPException

from studio.store import AssetStore, ContentStore
from studio.wizard import DEFAULT_FLOW, WizardController
from api.utils.logger import configure_logging

logger = configure_logging()


class WizardService:
    def __init__(self, store: ContentStore, assets: Optional[AssetStore] = None):
        self.store = store
        self.assets = assets
        self._wizards: Dict[str, WizardController] = {}

    def create(self) -> WizardController:
        wizard = WizardController(self.store, steps=DEFAULT_FLOW, assets=self.assets)
        self._wizards[wizard.id] = wizard
        logger.info("wizard created id=%s steps=%d", wizard.id, len(DEFAULT_FLOW))
        return wizard

    def get(self, wizard_id: str) -> WizardController:
        wizard = self._wizards.get(wizard_id)
        if wizard is None:
            raise HTTPException(status_code=404, detail="Wizard not found")
        return wizard

    def close(self, wizard_id: str) -> bool:
        """Cancel and forget a wizard; its draft is discarded."""
        wizard = self._wizards.pop(wizard_id, None)
        if wizard is None:
            return False
        wizard.cancel()
        return True
