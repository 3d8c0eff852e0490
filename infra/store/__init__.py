"""
ContentStore implementations live here (infra adapters).

NOTE: `sql_store` pulls in the SQLAlchemy models and engine config. Import
adapters directly from their module (e.g., `infra.store.memory_store import
InMemoryContentStore`) so tests of the core never touch the database layer.
"""

__all__ = []
