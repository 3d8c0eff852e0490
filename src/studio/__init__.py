"""
Training studio core library.

Subpackages:
- studio.core: module tree model and reorder engine
- studio.errors: error taxonomy
- studio.step_configs: per-step-type configuration registry
- studio.session: edit session (loaded/working snapshots, dirty tracking, save/discard)
- studio.wizard: gated creation wizard
- studio.store: contracts for the content store, asset store and reference catalogs
"""

__all__ = []
