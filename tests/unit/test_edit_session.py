"""Unit tests for EditSession: load, mutate, save, discard and selection."""
import asyncio

import pytest

from infra.store.memory_store import InMemoryContentStore
from studio.core.reorder import ReorderError
from studio.core.tree import ModuleTree
from studio.errors import FieldValidationError, PersistenceError, SaveInProgressError, TrainingNotFoundError
from studio.session import EditSession, compute_deltas
from tests.helpers import TRAINING_ID, make_module


async def open_session(store, registry=None):
    session = EditSession(TRAINING_ID, store, registry=registry)
    await session.load()
    return session


@pytest.mark.unit
class TestLoad:
    @pytest.mark.asyncio
    async def test_load_builds_clean_trees(self, memory_store):
        session = await open_session(memory_store)
        assert len(session.working) == 6
        assert session.working == session.loaded
        assert session.working is not session.loaded
        assert session.dirty is False
        assert session.has_changes is False

    @pytest.mark.asyncio
    async def test_unknown_training(self):
        session = EditSession("missing", InMemoryContentStore())
        with pytest.raises(TrainingNotFoundError):
            await session.load()

    @pytest.mark.asyncio
    async def test_fetch_failure_wrapped(self, memory_store):
        async def broken_fetch(training_id):
            raise ConnectionError("db down")

        memory_store.fetch = broken_fetch
        session = EditSession(TRAINING_ID, memory_store)
        with pytest.raises(PersistenceError):
            await session.load()
        assert len(session.working) == 0

    @pytest.mark.asyncio
    async def test_reload_resets_draft(self, memory_store):
        session = await open_session(memory_store)
        session.delete_module("m3")
        await session.load()
        assert "m3" in session.working
        assert session.dirty is False


@pytest.mark.unit
class TestMutations:
    @pytest.mark.asyncio
    async def test_every_mutation_marks_dirty(self, memory_store):
        session = await open_session(memory_store)
        session.update_module("m1", {"name": "m1"})
        assert session.dirty is True
        assert session.has_changes is False

    @pytest.mark.asyncio
    async def test_loaded_untouched_by_mutations(self, memory_store):
        session = await open_session(memory_store)
        before = session.loaded.snapshot()
        session.update_module("s1", {"name": "Renamed"})
        session.add_module("m2")
        session.delete_module("m3")
        assert session.loaded.snapshot() == before
        assert session.has_changes is True

    @pytest.mark.asyncio
    async def test_add_selects_new_node(self, memory_store):
        session = await open_session(memory_store)
        new_id = session.add_module("m1")
        assert session.selected_id == new_id
        assert session.selected.parent_id == "m1"

    @pytest.mark.asyncio
    async def test_duplicate_selects_clone(self, memory_store):
        session = await open_session(memory_store)
        clone_id = session.duplicate_module("s1")
        assert session.selected_id == clone_id
        assert session.selected.name == "s1"

    @pytest.mark.asyncio
    async def test_failed_mutation_leaves_session_clean(self, memory_store):
        session = await open_session(memory_store)
        with pytest.raises(FieldValidationError):
            session.update_module("m1", {"xp_reward": 501})
        with pytest.raises(ReorderError):
            session.reorder_siblings(["m1"])
        assert session.dirty is False
        assert session.working == session.loaded

    @pytest.mark.asyncio
    async def test_set_step_type_and_config(self, memory_store):
        session = await open_session(memory_store)
        session.set_step_type("s1", "arena_game")
        session.update_step_config("s1", {"game_type": "quiz_battle"})
        module = session.working.get("s1")
        assert module.step_type == "arena_game"
        assert module.step_config == {"content_type": "text", "game_type": "quiz_battle"}

    @pytest.mark.asyncio
    async def test_reorder(self, memory_store):
        session = await open_session(memory_store)
        session.reorder_siblings(["m3", "m1", "m2"])
        assert [m.id for m in session.working.top_level()] == ["m3", "m1", "m2"]
        assert session.dirty is True


@pytest.mark.unit
class TestSelection:
    @pytest.mark.asyncio
    async def test_select_unknown_is_ignored(self, memory_store):
        session = await open_session(memory_store)
        assert session.select("s2") is True
        assert session.select("ghost") is False
        assert session.selected_id == "s2"

    @pytest.mark.asyncio
    async def test_select_none_clears(self, memory_store):
        session = await open_session(memory_store)
        session.select("m1")
        session.select(None)
        assert session.selected is None

    @pytest.mark.asyncio
    async def test_deleting_selected_clears_selection(self, memory_store):
        session = await open_session(memory_store)
        session.select("s1")
        session.delete_module("m1")
        assert session.selected_id is None

    @pytest.mark.asyncio
    async def test_discard_clears_selection_of_unsaved_node(self, memory_store):
        session = await open_session(memory_store)
        session.add_module()
        session.discard()
        assert session.selected_id is None


@pytest.mark.unit
class TestDiscard:
    @pytest.mark.asyncio
    async def test_discard_restores_loaded(self, memory_store):
        session = await open_session(memory_store)
        before = session.loaded.snapshot()
        session.delete_module("m1")
        session.update_module("m2", {"is_checkpoint": True})
        session.discard()
        assert session.working.snapshot() == before
        assert session.dirty is False

    @pytest.mark.asyncio
    async def test_discard_makes_no_store_calls(self, flaky_store):
        session = await open_session(flaky_store)
        session.add_module()
        session.discard()
        assert flaky_store.calls == []


@pytest.mark.unit
class TestSave:
    @pytest.mark.asyncio
    async def test_save_persists_and_cleans(self, memory_store):
        session = await open_session(memory_store)
        new_id = session.add_module("m2")
        session.update_module("s1", {"name": "Intro"})
        session.delete_module("m3")

        deltas = await session.save()

        assert [m.id for m in deltas.created] == [new_id]
        assert [m.id for m in deltas.updated] == ["s1"]
        assert deltas.deleted_ids == ["m3"]
        assert session.dirty is False
        assert session.loaded == session.working

        reopened = await open_session(memory_store)
        assert reopened.working.get("s1").name == "Intro"
        assert new_id in reopened.working
        assert "m3" not in reopened.working

    @pytest.mark.asyncio
    async def test_save_without_changes_sends_nothing(self, flaky_store):
        session = await open_session(flaky_store)
        session.update_module("m1", {"name": "m1"})
        deltas = await session.save()
        assert deltas.is_empty()
        assert flaky_store.calls == []
        assert session.dirty is False

    @pytest.mark.asyncio
    async def test_failed_save_keeps_draft(self, flaky_store):
        session = await open_session(flaky_store)
        session.update_module("s2", {"xp_reward": 50})
        loaded_before = session.loaded.snapshot()
        working_before = session.working.snapshot()

        with pytest.raises(PersistenceError):
            await session.save()

        assert session.dirty is True
        assert session.saving is False
        assert session.loaded.snapshot() == loaded_before
        assert session.working.snapshot() == working_before

    @pytest.mark.asyncio
    async def test_retry_after_failure(self, flaky_store, memory_store):
        session = await open_session(flaky_store)
        session.update_module("s2", {"xp_reward": 50})
        with pytest.raises(PersistenceError):
            await session.save()

        await session.save()
        assert session.dirty is False
        assert memory_store.modules["s2"].xp_reward == 50

    @pytest.mark.asyncio
    async def test_concurrent_save_rejected(self, memory_store):
        gate = asyncio.Event()
        upsert = memory_store.upsert_modules

        async def slow_upsert(training_id, deltas):
            await gate.wait()
            await upsert(training_id, deltas)

        memory_store.upsert_modules = slow_upsert
        session = await open_session(memory_store)
        session.update_module("m1", {"name": "Slow"})

        first = asyncio.create_task(session.save())
        await asyncio.sleep(0)
        assert session.saving is True
        with pytest.raises(SaveInProgressError):
            await session.save()

        gate.set()
        await first
        assert session.saving is False

    @pytest.mark.asyncio
    async def test_edit_during_save_stays_dirty(self, memory_store):
        gate = asyncio.Event()
        upsert = memory_store.upsert_modules

        async def slow_upsert(training_id, deltas):
            await gate.wait()
            await upsert(training_id, deltas)

        memory_store.upsert_modules = slow_upsert
        session = await open_session(memory_store)
        session.update_module("m1", {"name": "First"})

        pending = asyncio.create_task(session.save())
        await asyncio.sleep(0)
        session.update_module("m2", {"name": "Second"})
        gate.set()
        await pending

        assert session.dirty is True
        assert session.loaded.get("m1").name == "First"
        assert session.loaded.get("m2").name == "m2"
        assert [d.module.id for d in session.deltas().upserts] == ["m2"]

    @pytest.mark.asyncio
    async def test_state_snapshot(self, memory_store):
        session = await open_session(memory_store)
        session.select("s3")
        state = session.state()
        assert state["selected_id"] == "s3"
        assert [n["id"] for n in state["modules"]] == ["m1", "m2", "m3"]
        assert [c["id"] for c in state["modules"][0]["children"]] == ["s1", "s2"]


@pytest.mark.unit
class TestComputeDeltas:
    def test_parents_before_children(self, sample_tree):
        working = sample_tree.copy()
        new_parent = working.add_module()
        new_child = working.add_module(new_parent)
        deltas = compute_deltas(sample_tree, working)
        ids = [m.id for m in deltas.created]
        assert ids.index(new_parent) < ids.index(new_child)

    def test_cascade_delete_listed(self, sample_tree):
        working = sample_tree.copy()
        working.delete_module("m1")
        deltas = compute_deltas(sample_tree, working)
        assert sorted(deltas.deleted_ids) == ["m1", "s1", "s2"]

    def test_resequenced_siblings_are_updates(self, sample_tree):
        working = sample_tree.copy()
        working.delete_module("m1")
        updated = {m.id for m in compute_deltas(sample_tree, working).updated}
        # m2 and m3 shift up; their children get new numbering
        assert {"m2", "m3", "s3"} <= updated

    def test_identical_trees(self):
        tree = ModuleTree.from_modules(TRAINING_ID, [make_module("a")])
        assert compute_deltas(tree, tree.copy()).is_empty()
