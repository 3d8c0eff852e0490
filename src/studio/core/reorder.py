"""
Reorder engine: turn a permutation of one sibling group into order indices.

Only one homogeneous group is accepted per call (the top-level list, or the
children of one parent). Moving a node to another parent is not supported.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from studio.core.tree import ModuleTree
from studio.errors import StudioError

logger = logging.getLogger(__name__)


class ReorderError(StudioError, ValueError):
    """The ids given are not a permutation of exactly one sibling group."""


def sibling_group_of(tree: ModuleTree, ordered_ids: Sequence[str]) -> Optional[str]:
    """Parent id shared by `ordered_ids` (None = top level). Raises ReorderError if mixed or unknown."""
    parents = set()
    for module_id in ordered_ids:
        module = tree.get(module_id)
        if module is None:
            raise ReorderError(f"Unknown module id in reorder: {module_id}")
        parents.add(module.parent_id)
    if len(parents) != 1:
        raise ReorderError("Reorder ids span more than one sibling group")
    return parents.pop()


def reorder_siblings(tree: ModuleTree, ordered_ids: Sequence[str]) -> ModuleTree:
    """Set `order_index := position` for each id; other groups are untouched. O(n) in group size."""
    if not ordered_ids:
        return tree

    parent_id = sibling_group_of(tree, ordered_ids)
    current = {m.id for m in tree.children_of(parent_id)}
    if len(ordered_ids) != len(current) or set(ordered_ids) != current:
        raise ReorderError("Reorder ids must be a permutation of the whole sibling group")

    for position, module_id in enumerate(ordered_ids):
        tree.get(module_id).order_index = position
    tree.renumber()
    logger.debug("reordered group parent_id=%s size=%s", parent_id, len(ordered_ids))
    return tree
