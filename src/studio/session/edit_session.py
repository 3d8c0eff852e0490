"""
Edit session for one open training.

Holds two owned trees: `loaded` (last fetched or saved) and `working` (the live
draft). Every mutation goes through `mutate`, touches only `working`, and marks
the session dirty whether or not a value actually changed. `has_changes` is the
value-diffed counterpart, for display only.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, TypeVar

from studio.core.module import TrainingModule
from studio.core.reorder import reorder_siblings
from studio.core.tree import ModuleTree
from studio.errors import PersistenceError, SaveInProgressError, StudioError
from studio.session.delta import compute_deltas
from studio.step_configs import StepConfigRegistry, default_registry
from studio.store import ContentStore, ModuleDeltaSet

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EditSession:
    def __init__(
        self,
        training_id: str,
        store: ContentStore,
        registry: Optional[StepConfigRegistry] = None,
    ):
        self.training_id = training_id
        self.store = store
        self.registry = registry or default_registry()

        self._loaded = ModuleTree(training_id, registry=self.registry)
        self._working = self._loaded.copy()
        self.dirty = False
        self.selected_id: Optional[str] = None

        self._saving = False
        self._revision = 0

    #-----State-----

    @property
    def loaded(self) -> ModuleTree:
        return self._loaded

    @property
    def working(self) -> ModuleTree:
        return self._working

    @property
    def saving(self) -> bool:
        return self._saving

    @property
    def selected(self) -> Optional[TrainingModule]:
        return self._working.get(self.selected_id)

    @property
    def has_changes(self) -> bool:
        return self._working != self._loaded

    def select(self, module_id: Optional[str]) -> bool:
        """Point the selection at a node of `working`, or clear it with None."""
        if module_id is not None and not self._working.contains(module_id):
            logger.debug("select ignored unknown id=%s training=%s", module_id, self.training_id)
            return False
        self.selected_id = module_id
        return True

    def deltas(self) -> ModuleDeltaSet:
        return compute_deltas(self._loaded, self._working)

    def state(self) -> Dict[str, Any]:
        """Snapshot of what a presentation layer needs to render the editor."""
        return {
            "training_id": self.training_id,
            "dirty": self.dirty,
            "has_changes": self.has_changes,
            "saving": self._saving,
            "selected_id": self.selected_id,
            "modules": [node.to_dict() for node in self._working.nested()],
        }

    #-----Load / save / discard-----

    async def load(self) -> None:
        """Fetch the tree. On failure the previous snapshots stay in place."""
        try:
            modules = await self.store.fetch(self.training_id)
        except StudioError:
            raise
        except Exception as exc:
            logger.exception("load failed training=%s", self.training_id)
            raise PersistenceError(f"Could not load training {self.training_id}") from exc

        self._loaded = ModuleTree.from_modules(self.training_id, modules, registry=self.registry)
        self._working = self._loaded.copy()
        self.dirty = False
        self._reconcile_selection()
        logger.info("loaded training=%s modules=%s", self.training_id, len(self._loaded))

    async def save(self) -> ModuleDeltaSet:
        """
        Send created/updated/deleted nodes to the store.

        Success: `loaded` becomes the tree that was sent and the session is clean,
        unless it was mutated while the save was in flight. Failure: nothing changes
        and PersistenceError is raised; calling save again retries.
        """
        if self._saving:
            raise SaveInProgressError(f"Save already in progress for training {self.training_id}")

        self._saving = True
        try:
            revision = self._revision
            sent = self._working.copy()
            deltas = compute_deltas(self._loaded, sent)

            if not deltas.is_empty():
                try:
                    if deltas.upserts:
                        await self.store.upsert_modules(self.training_id, deltas.upserts)
                    if deltas.deleted_ids:
                        await self.store.delete_modules(deltas.deleted_ids)
                except Exception as exc:
                    logger.warning("save failed training=%s: %s", self.training_id, exc)
                    raise PersistenceError(f"Could not save training {self.training_id}") from exc

            self._loaded = sent
            self.dirty = self._revision != revision
            logger.info(
                "saved training=%s upserts=%s deleted=%s",
                self.training_id, len(deltas.upserts), len(deltas.deleted_ids),
            )
            return deltas
        finally:
            self._saving = False

    def discard(self) -> None:
        self._working = self._loaded.copy()
        self.dirty = False
        self._revision += 1
        self._reconcile_selection()
        logger.info("discarded draft training=%s", self.training_id)

    #-----Mutations-----

    def mutate(self, op: Callable[[ModuleTree], T]) -> T:
        """Run a tree operation against `working`. A raising op leaves the session as it was."""
        result = op(self._working)
        self.dirty = True
        self._revision += 1
        self._reconcile_selection()
        return result

    def add_module(self, parent_id: Optional[str] = None) -> Optional[str]:
        new_id = self.mutate(lambda tree: tree.add_module(parent_id))
        if new_id is not None:
            self.selected_id = new_id
        return new_id

    def delete_module(self, module_id: str) -> List[str]:
        return self.mutate(lambda tree: tree.delete_module(module_id))

    def duplicate_module(self, module_id: str) -> Optional[str]:
        clone_id = self.mutate(lambda tree: tree.duplicate_module(module_id))
        if clone_id is not None:
            self.selected_id = clone_id
        return clone_id

    def update_module(self, module_id: str, partial: Mapping[str, Any]) -> bool:
        return self.mutate(lambda tree: tree.update_module(module_id, partial))

    def set_step_type(self, module_id: str, step_type: str) -> bool:
        return self.update_module(module_id, {"step_type": step_type})

    def update_step_config(self, module_id: str, updates: Mapping[str, Any]) -> bool:
        return self.update_module(module_id, {"step_config": dict(updates)})

    def reorder_siblings(self, ordered_ids: Sequence[str]) -> None:
        self.mutate(lambda tree: reorder_siblings(tree, ordered_ids))

    def _reconcile_selection(self) -> None:
        if self.selected_id is not None and not self._working.contains(self.selected_id):
            self.selected_id = None
