"""Builders shared by unit and integration tests."""

TRAINING_ID = "training-1"


def make_module(module_id, parent_id=None, order_index=0, **fields):
    """TrainingModule with a fixed id, for building trees by hand."""
    from studio.core.module import TrainingModule
    return TrainingModule(
        id=module_id,
        training_id=fields.pop("training_id", TRAINING_ID),
        parent_id=parent_id,
        order_index=order_index,
        name=fields.pop("name", module_id),
        **fields,
    )
