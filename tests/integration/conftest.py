"""
Integration test fixtures. Points every API dependency at an in-memory DB and a temp asset dir.
"""
import pytest

from tests.helpers import TRAINING_ID


@pytest.fixture
def override_get_db(session_factory):
    """get_db replacement bound to the test's in-memory engine."""
    def _get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    return _get_db


@pytest.fixture
def sql_store(session_factory):
    from infra.store.sql_store import SqlContentStore
    return SqlContentStore(session_factory)


@pytest.fixture
def seeded_training(db_session, sample_modules):
    """The `sample_modules` tree stored under TRAINING_ID, plus a few catalog rows."""
    from api.models.models import Insignia, Skill, Training, TrainingModule as ModuleRow
    from infra.store.sql_store import MODULE_COLUMNS

    db_session.add(Training(id=TRAINING_ID, training_key="sales_basics", name="Sales Basics"))
    for module in sample_modules:
        row = ModuleRow(id=module.id)
        for column in MODULE_COLUMNS:
            setattr(row, column, getattr(module, column))
        db_session.add(row)
    db_session.add_all([
        Skill(id="sk-neg", name="Negotiation"),
        Skill(id="sk-old", name="Retired skill", is_active=False),
        Insignia(id="ins-closer", name="Closer"),
    ])
    db_session.commit()
    return TRAINING_ID


@pytest.fixture
def api_client(override_get_db, sql_store, tmp_path):
    """FastAPI TestClient with in-memory DB, fresh services and a temp asset dir."""
    from fastapi.testclient import TestClient
    from api.api import app
    from api.bootstrap import get_asset_store, get_content_store, get_editor_service, get_wizard_service
    from api.config import get_db
    from api.services.editor_service import EditorService
    from api.services.wizard_service import WizardService
    from infra.assets.local_store import LocalAssetStore

    assets = LocalAssetStore(root_dir=str(tmp_path / "assets"), base_url="/assets")
    editor_service = EditorService(store=sql_store)
    wizard_service = WizardService(store=sql_store, assets=assets)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_content_store] = lambda: sql_store
    app.dependency_overrides[get_asset_store] = lambda: assets
    app.dependency_overrides[get_editor_service] = lambda: editor_service
    app.dependency_overrides[get_wizard_service] = lambda: wizard_service
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
