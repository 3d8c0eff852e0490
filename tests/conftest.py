"""
Pytest configuration and shared fixtures for the test suite.
Ensures proper Python path and provides common fixtures for unit and integration tests.
"""
import sys
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add project root and src to Python path for imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))
src_path = project_root / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))


from tests.helpers import TRAINING_ID, make_module


@pytest.fixture
def sample_modules():
    """Two chapters: m1 with steps s1, s2; m2 with step s3; plus a lone chapter m3."""
    return [
        make_module("m1", order_index=0),
        make_module("m2", order_index=1),
        make_module("m3", order_index=2),
        make_module("s1", parent_id="m1", order_index=0),
        make_module("s2", parent_id="m1", order_index=1),
        make_module("s3", parent_id="m2", order_index=0),
    ]


@pytest.fixture
def sample_tree(sample_modules):
    from studio.core.tree import ModuleTree
    return ModuleTree.from_modules(TRAINING_ID, sample_modules)


@pytest.fixture
def memory_store(sample_modules):
    """InMemoryContentStore seeded with one training holding `sample_modules`."""
    from infra.store.memory_store import InMemoryContentStore
    from studio.store import TrainingRecord
    store = InMemoryContentStore()
    store.add_training(
        TrainingRecord(id=TRAINING_ID, training_key="sales_basics", name="Sales Basics"),
        sample_modules,
    )
    return store


# ----- In-memory DB (for tests that need DB without touching real DB) -----
@pytest.fixture
def in_memory_engine():
    """Single-connection in-memory SQLite engine, shared across sessions of one test."""
    return create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture
def session_factory(in_memory_engine):
    """Session factory bound to the in-memory engine, with all tables created."""
    from api.config import Base
    import api.models  # noqa: F401
    Base.metadata.create_all(in_memory_engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=in_memory_engine)


@pytest.fixture
def db_session(session_factory):
    """Create an in-memory database session. Uses api.config.Base for schema."""
    session = session_factory()
    yield session
    session.close()
