"""
Unit test fixtures. In-memory collaborators only; no real DB or network.
"""
import pytest


@pytest.fixture
def registry():
    """A fresh registry, so tests can register extra step types without leaking."""
    from studio.step_configs import build_step_registry
    return build_step_registry()


class FlakyContentStore:
    """Wraps a ContentStore; the next N writes raise."""

    def __init__(self, inner, failures=1, exc=None):
        self.inner = inner
        self.failures = failures
        self.exc = exc or ConnectionError("store unavailable")
        self.calls = []

    def _maybe_fail(self, name):
        self.calls.append(name)
        if self.failures > 0:
            self.failures -= 1
            raise self.exc

    async def fetch(self, training_id):
        return await self.inner.fetch(training_id)

    async def upsert_modules(self, training_id, deltas):
        self._maybe_fail("upsert_modules")
        return await self.inner.upsert_modules(training_id, deltas)

    async def delete_modules(self, ids):
        self._maybe_fail("delete_modules")
        return await self.inner.delete_modules(ids)

    async def create_training(self, materialized):
        self._maybe_fail("create_training")
        return await self.inner.create_training(materialized)


@pytest.fixture
def flaky_store(memory_store):
    return FlakyContentStore(memory_store)
