from functools import lru_cache

from studio.step_configs import default_registry
from studio.store import AssetStore, ContentStore

from api.config import SessionLocal, settings
from api.services.editor_service import EditorService
from api.services.wizard_service import WizardService
from infra.assets.local_store import LocalAssetStore
from infra.store.sql_store import SqlContentStore


@lru_cache(maxsize=1)
def get_content_store() -> ContentStore:
    return SqlContentStore(SessionLocal)


@lru_cache(maxsize=1)
def get_asset_store() -> AssetStore:
    return LocalAssetStore(root_dir=settings.ASSET_DIR, base_url=settings.ASSET_BASE_URL)


@lru_cache(maxsize=1)
def get_editor_service() -> EditorService:
    return EditorService(store=get_content_store(), registry=default_registry())


@lru_cache(maxsize=1)
def get_wizard_service() -> WizardService:
    return WizardService(store=get_content_store(), assets=get_asset_store())
