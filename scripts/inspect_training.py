#!/usr/bin/env python3
"""
Print a training's module tree as stored in the database.

Run: python scripts/inspect_training.py <training_id>
     python scripts/inspect_training.py <training_id> -o tree.json
     python scripts/inspect_training.py --list

Uses DATABASE_URL from the environment / .env.
"""
from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

_project_root = Path(__file__).resolve().parent.parent
for _p in (_project_root, _project_root / "src"):
    if str(_p) not in sys.path:
        sys.path.insert(0, str(_p))


async def main() -> int:
    parser = argparse.ArgumentParser(description="Inspect a stored training tree.")
    parser.add_argument("training_id", nargs="?", help="Training id")
    parser.add_argument("--list", action="store_true", help="List trainings instead")
    parser.add_argument("--output", "-o", default=None, help="Write the nested tree to a JSON file")
    args = parser.parse_args()

    from api.config import SessionLocal
    from infra.store.sql_store import SqlContentStore
    from studio.core.tree import ModuleTree
    from studio.errors import TrainingNotFoundError

    store = SqlContentStore(SessionLocal)

    if args.list or not args.training_id:
        for record in await store.list_trainings():
            print(f"{record.id}  {record.training_key:<30} {record.name}")
        return 0

    try:
        record = await store.get_training(args.training_id)
        modules = await store.fetch(args.training_id)
    except TrainingNotFoundError as e:
        print(str(e), file=sys.stderr)
        return 1

    tree = ModuleTree.from_modules(args.training_id, modules)
    print(f"{record.icon} {record.name} ({record.training_key}) modules={len(tree)}")
    for module in tree.flatten():
        indent = "  " * (module.level + 1)
        flags = []
        if module.is_checkpoint:
            flags.append(f"checkpoint>={module.effective_min_score}")
        if module.is_optional:
            flags.append("optional")
        suffix = f" [{', '.join(flags)}]" if flags else ""
        print(f"{indent}{module.numbering}. {module.name} <{module.step_type}> {module.time_minutes}min{suffix}")

    if args.output:
        out = {
            "training": record.model_dump(mode="json"),
            "modules": [node.to_dict() for node in tree.nested()],
        }
        Path(args.output).write_text(json.dumps(out, indent=2, ensure_ascii=False), encoding="utf-8")
        print(f"\nSaved to {args.output}")

    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
