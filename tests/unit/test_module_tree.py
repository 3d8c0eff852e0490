"""Unit tests for the two-level module tree."""
import pytest

from studio.core.module import DEFAULT_CHECKPOINT_MIN_SCORE
from studio.core.tree import DEFAULT_MODULE_NAME, DEFAULT_STEP_NAME, ModuleTree
from studio.errors import FieldValidationError
from tests.helpers import TRAINING_ID, make_module


def sibling_orders(tree, parent_id):
    return [(m.id, m.order_index) for m in tree.children_of(parent_id)]


@pytest.mark.unit
class TestQueries:
    def test_flatten_is_render_order(self, sample_tree: ModuleTree):
        assert [m.id for m in sample_tree.flatten()] == ["m1", "s1", "s2", "m2", "s3", "m3"]

    def test_children_of_sorted(self, sample_tree: ModuleTree):
        assert [m.id for m in sample_tree.children_of("m1")] == ["s1", "s2"]
        assert sample_tree.children_of("m3") == []
        assert sample_tree.children_of("missing") == []

    def test_numbering(self, sample_tree: ModuleTree):
        numbers = {m.id: m.numbering for m in sample_tree.flatten()}
        assert numbers == {"m1": "1", "s1": "1.1", "s2": "1.2", "m2": "2", "s3": "2.1", "m3": "3"}

    def test_levels(self, sample_tree: ModuleTree):
        assert sample_tree.get("m1").level == 0
        assert sample_tree.get("s3").level == 1

    def test_nested(self, sample_tree: ModuleTree):
        nested = sample_tree.nested()
        assert [n.module.id for n in nested] == ["m1", "m2", "m3"]
        assert [c.module.id for c in nested[0].children] == ["s1", "s2"]
        as_dict = nested[1].to_dict()
        assert as_dict["id"] == "m2"
        assert [c["id"] for c in as_dict["children"]] == ["s3"]

    def test_get_and_contains(self, sample_tree: ModuleTree):
        assert sample_tree.get("s1").parent_id == "m1"
        assert sample_tree.get("nope") is None
        assert sample_tree.get(None) is None
        assert sample_tree.contains("m2")
        assert not sample_tree.contains(None)
        assert "m3" in sample_tree
        assert len(sample_tree) == 6


@pytest.mark.unit
class TestFromModules:
    def test_gaps_in_order_index_are_closed(self):
        tree = ModuleTree.from_modules(TRAINING_ID, [
            make_module("a", order_index=4),
            make_module("b", order_index=9),
            make_module("c", order_index=1),
        ])
        assert sibling_orders(tree, None) == [("c", 0), ("a", 1), ("b", 2)]

    def test_orphan_child_becomes_top_level(self):
        tree = ModuleTree.from_modules(TRAINING_ID, [
            make_module("a", order_index=0),
            make_module("lost", parent_id="ghost", order_index=0),
        ])
        assert tree.get("lost").parent_id is None
        assert tree.get("lost").level == 0
        assert [m.id for m in tree.top_level()] == ["a", "lost"]

    def test_third_level_is_flattened(self):
        tree = ModuleTree.from_modules(TRAINING_ID, [
            make_module("a"),
            make_module("b", parent_id="a"),
            make_module("c", parent_id="b"),
        ])
        assert tree.get("c").parent_id is None

    def test_inputs_are_copied(self, sample_modules):
        tree = ModuleTree.from_modules(TRAINING_ID, sample_modules)
        sample_modules[0].name = "changed outside"
        assert tree.get("m1").name == "m1"


@pytest.mark.unit
class TestAddModule:
    def test_add_top_level_appends(self, sample_tree: ModuleTree):
        new_id = sample_tree.add_module(None)
        module = sample_tree.get(new_id)
        assert module.order_index == 3
        assert module.name == DEFAULT_MODULE_NAME
        assert module.numbering == "4"
        assert module.training_id == TRAINING_ID

    def test_add_child_appends(self, sample_tree: ModuleTree):
        new_id = sample_tree.add_module("m1")
        module = sample_tree.get(new_id)
        assert module.parent_id == "m1"
        assert module.order_index == 2
        assert module.level == 1
        assert module.name == DEFAULT_STEP_NAME
        assert module.numbering == "1.3"

    def test_new_module_defaults(self, sample_tree: ModuleTree):
        module = sample_tree.get(sample_tree.add_module())
        assert module.step_type == "content"
        assert module.step_config == {"content_type": "text"}
        assert (module.time_minutes, module.xp_reward, module.coins_reward) == (5, 10, 5)
        assert module.is_required and not module.is_optional
        assert module.unlock_condition == {"type": "previous_complete"}

    def test_add_under_child_is_noop(self, sample_tree: ModuleTree):
        before = sample_tree.snapshot()
        assert sample_tree.add_module("s1") is None
        assert sample_tree.snapshot() == before

    def test_add_under_unknown_parent_is_noop(self, sample_tree: ModuleTree):
        assert sample_tree.add_module("ghost") is None
        assert len(sample_tree) == 6

    @pytest.mark.parametrize("parent_id", [None, "m1", "m3"])
    def test_add_then_delete_restores_siblings(self, sample_tree: ModuleTree, parent_id):
        before = sibling_orders(sample_tree, parent_id)
        new_id = sample_tree.add_module(parent_id)
        sample_tree.delete_module(new_id)
        assert sibling_orders(sample_tree, parent_id) == before


@pytest.mark.unit
class TestDeleteModule:
    def test_delete_top_level_cascades(self, sample_tree: ModuleTree):
        removed = sample_tree.delete_module("m1")
        assert set(removed) == {"m1", "s1", "s2"}
        assert not sample_tree.contains("s1")
        assert sibling_orders(sample_tree, None) == [("m2", 0), ("m3", 1)]
        assert sample_tree.get("s3").numbering == "1.1"

    def test_delete_child_only_removes_child(self, sample_tree: ModuleTree):
        removed = sample_tree.delete_module("s1")
        assert removed == ["s1"]
        assert sibling_orders(sample_tree, "m1") == [("s2", 0)]
        assert sample_tree.contains("m1")

    def test_delete_unknown_is_noop(self, sample_tree: ModuleTree):
        before = sample_tree.snapshot()
        assert sample_tree.delete_module("ghost") == []
        assert sample_tree.snapshot() == before


@pytest.mark.unit
class TestDuplicateModule:
    def test_duplicate_copies_all_fields_but_id_and_position(self, sample_tree: ModuleTree):
        sample_tree.update_module("s1", {
            "name": "Pitch basics",
            "step_type": "quiz",
            "step_config": {"questions": [], "shuffleQuestions": True},
            "xp_reward": 40,
            "is_checkpoint": True,
        })
        clone_id = sample_tree.duplicate_module("s1")
        source, clone = sample_tree.get("s1"), sample_tree.get(clone_id)

        assert clone_id != "s1"
        assert clone.parent_id == "m1"
        assert clone.order_index == 2
        ignore = {"id", "order_index", "numbering"}
        assert clone.model_dump(exclude=ignore) == source.model_dump(exclude=ignore)

    def test_duplicate_config_is_independent(self, sample_tree: ModuleTree):
        sample_tree.update_module("m1", {"step_config": {"content_data": {"text": "a"}}})
        clone_id = sample_tree.duplicate_module("m1")
        sample_tree.get(clone_id).step_config["content_data"]["text"] = "b"
        assert sample_tree.get("m1").step_config["content_data"]["text"] == "a"

    def test_duplicate_top_level_does_not_clone_children(self, sample_tree: ModuleTree):
        clone_id = sample_tree.duplicate_module("m1")
        assert sample_tree.children_of(clone_id) == []
        assert sample_tree.get(clone_id).numbering == "4"

    def test_duplicate_unknown_is_noop(self, sample_tree: ModuleTree):
        assert sample_tree.duplicate_module("ghost") is None
        assert len(sample_tree) == 6


@pytest.mark.unit
class TestUpdateModule:
    def test_plain_fields(self, sample_tree: ModuleTree):
        assert sample_tree.update_module("m1", {"name": "Intro", "time_minutes": 12})
        assert sample_tree.get("m1").name == "Intro"
        assert sample_tree.get("m1").time_minutes == 12

    def test_empty_partial_is_noop(self, sample_tree: ModuleTree):
        before = sample_tree.snapshot()
        assert sample_tree.update_module("m1", {}) is False
        assert sample_tree.snapshot() == before

    def test_unknown_id_is_noop(self, sample_tree: ModuleTree):
        assert sample_tree.update_module("ghost", {"name": "x"}) is False

    def test_structural_fields_ignored(self, sample_tree: ModuleTree):
        sample_tree.update_module("s1", {"parent_id": None, "order_index": 7, "id": "zzz", "name": "ok"})
        module = sample_tree.get("s1")
        assert module.parent_id == "m1"
        assert module.order_index == 0
        assert module.name == "ok"

    @pytest.mark.parametrize("partial", [
        {"time_minutes": 0},
        {"time_minutes": 181},
        {"xp_reward": 501},
        {"coins_reward": -1},
        {"min_score": 101},
        {"unlock_condition": {"type": "after_lunch"}},
    ])
    def test_out_of_bounds_rejected_atomically(self, sample_tree: ModuleTree, partial):
        before = sample_tree.snapshot()
        with pytest.raises(FieldValidationError):
            sample_tree.update_module("m1", {"name": "would change", **partial})
        assert sample_tree.snapshot() == before

    def test_unknown_step_type_rejected(self, sample_tree: ModuleTree):
        with pytest.raises(FieldValidationError):
            sample_tree.update_module("m1", {"step_type": "karaoke"})
        assert sample_tree.get("m1").step_type == "content"

    def test_invalid_step_config_rejected(self, sample_tree: ModuleTree):
        sample_tree.update_module("m1", {"step_type": "arena_game"})
        with pytest.raises(FieldValidationError):
            sample_tree.update_module("m1", {"step_config": {"time_limit": 90}})

    def test_step_config_is_merged(self, sample_tree: ModuleTree):
        sample_tree.update_module("m1", {"step_config": {"content_data": {"text": "Hello"}}})
        sample_tree.update_module("m1", {"step_config": {"content_type": "video"}})
        config = sample_tree.get("m1").step_config
        assert config["content_type"] == "video"
        assert config["content_data"]["text"] == "Hello"

    def test_required_optional_toggle(self, sample_tree: ModuleTree):
        sample_tree.update_module("m1", {"is_optional": True})
        assert sample_tree.get("m1").is_required is False
        sample_tree.update_module("m1", {"is_required": True})
        assert sample_tree.get("m1").is_optional is False

    def test_required_and_optional_together_must_differ(self, sample_tree: ModuleTree):
        with pytest.raises(FieldValidationError):
            sample_tree.update_module("m1", {"is_required": True, "is_optional": True})
        sample_tree.update_module("m1", {"is_required": False, "is_optional": True})
        assert sample_tree.get("m1").is_optional

    def test_checkpoint_fills_default_min_score(self, sample_tree: ModuleTree):
        sample_tree.update_module("m1", {"is_checkpoint": True})
        assert sample_tree.get("m1").min_score == DEFAULT_CHECKPOINT_MIN_SCORE

    def test_checkpoint_toggle_keeps_min_score(self, sample_tree: ModuleTree):
        sample_tree.update_module("m1", {"is_checkpoint": True, "min_score": 85})
        sample_tree.update_module("m1", {"is_checkpoint": False})
        sample_tree.update_module("m1", {"is_checkpoint": True})
        assert sample_tree.get("m1").min_score == 85

    def test_clearing_min_score_on_checkpoint_restores_default(self):
        tree = ModuleTree(TRAINING_ID, [make_module("m", is_checkpoint=True, min_score=85)])
        assert tree.update_module("m", {"min_score": None})
        assert tree.get("m").is_checkpoint
        assert tree.get("m").min_score == DEFAULT_CHECKPOINT_MIN_SCORE

    def test_clearing_min_score_off_checkpoint(self, sample_tree: ModuleTree):
        sample_tree.update_module("m1", {"min_score": 40})
        sample_tree.update_module("m1", {"min_score": None})
        assert sample_tree.get("m1").min_score is None

    def test_effective_min_score(self, sample_tree: ModuleTree):
        module = sample_tree.get("m1")
        assert module.effective_min_score is None
        sample_tree.update_module("m1", {"is_checkpoint": True, "min_score": 55})
        assert module.effective_min_score == 55

    def test_description_can_be_cleared(self, sample_tree: ModuleTree):
        sample_tree.update_module("m1", {"description": "text"})
        sample_tree.update_module("m1", {"description": None})
        assert sample_tree.get("m1").description is None

    def test_name_none_is_ignored(self, sample_tree: ModuleTree):
        sample_tree.update_module("m1", {"name": None})
        assert sample_tree.get("m1").name == "m1"


@pytest.mark.unit
class TestStepTypeSwitch:
    def test_content_survives_quiz_round_trip(self, sample_tree: ModuleTree):
        from studio.step_configs import quiz

        sample_tree.update_module("m1", {"step_config": {"content_data": {"text": "Hello"}}})
        sample_tree.update_module("m1", {"step_type": "quiz"})
        module = sample_tree.get("m1")
        sample_tree.update_module("m1", {"step_config": quiz.add_question(module.step_config)})
        sample_tree.update_module("m1", {"step_type": "content"})

        config = sample_tree.get("m1").step_config
        assert config["content_data"]["text"] == "Hello"
        assert config["content_type"] == "text"
        assert len(config["questions"]) == 1


@pytest.mark.unit
class TestCopyAndEquality:
    def test_copy_is_deep(self, sample_tree: ModuleTree):
        other = sample_tree.copy()
        assert other == sample_tree
        other.update_module("m1", {"name": "changed"})
        assert other != sample_tree
        assert sample_tree.get("m1").name == "m1"

    def test_copy_shares_registry(self, sample_tree: ModuleTree):
        assert sample_tree.copy().registry is sample_tree.registry
