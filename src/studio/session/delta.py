from __future__ import annotations

from studio.core.tree import ModuleTree
from studio.store import ModuleDelta, ModuleDeltaSet


def compute_deltas(loaded: ModuleTree, working: ModuleTree) -> ModuleDeltaSet:
    """
    Per-node differences between the persisted and the working tree.

    Upserts come in render order so parents are written before their children;
    nodes equal in both trees are not sent.
    """
    before = loaded.snapshot()
    upserts = []
    for module in working.flatten():
        previous = before.get(module.id)
        if previous is None:
            upserts.append(ModuleDelta(kind="created", module=module.model_copy(deep=True)))
        elif previous != module.model_dump():
            upserts.append(ModuleDelta(kind="updated", module=module.model_copy(deep=True)))

    deleted_ids = [m.id for m in loaded.flatten() if not working.contains(m.id)]
    return ModuleDeltaSet(upserts=upserts, deleted_ids=deleted_ids)
