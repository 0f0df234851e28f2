"""
Unit Tests for Question Tree Operations

Tests for immutable structural edits, rollups and labelled flattening.
"""

import logging
import uuid

from exam_analytics.core.models import Question, QuestionType
from exam_analytics.tree import (
    compose_label,
    create_leaf,
    delete_by_id,
    find_by_id,
    find_parent_id,
    flatten_leaves,
    flatten_with_labels,
    insert_under_parent,
    iter_all,
    next_child_label,
    replace_by_id,
    rollup_marks,
    total_marks,
)


def _tree():
    q1 = Question(
        id="q1", number="1", max_marks=4,
        sub_questions=(
            Question(id="q1a", number="a", max_marks=2),
            Question(
                id="q1b", number="b", max_marks=0,
                sub_questions=(
                    Question(id="q1bi", number="i", max_marks=1),
                    Question(id="q1bii", number="ii", max_marks=3),
                ),
            ),
        ),
    )
    q2 = Question(id="q2", number="2", max_marks=1, type=QuestionType.MCQ)
    return (q1, q2)


class TestCreateLeaf:

    def test_create_leaf_when_called_then_defaults(self):
        leaf = create_leaf("3")
        assert leaf.number == "3"
        assert leaf.max_marks == 1
        assert leaf.type == QuestionType.SHORT
        assert leaf.is_leaf
        uuid.UUID(leaf.id)

    def test_create_leaf_when_called_twice_then_distinct_ids(self):
        assert create_leaf("1").id != create_leaf("1").id


class TestRollup:

    def test_rollup_marks_when_branch_then_ignores_own_marks(self):
        q1, q2 = _tree()
        assert rollup_marks(q1) == 6
        assert rollup_marks(q2) == 1

    def test_total_marks_when_roots_then_sum_of_leaves(self):
        tree = _tree()
        assert total_marks(tree) == sum(q.max_marks for q in flatten_leaves(tree)) == 7

    def test_total_marks_when_empty_then_zero(self):
        assert total_marks(()) == 0


class TestFlatten:

    def test_flatten_leaves_when_nested_then_depth_first(self):
        assert [q.id for q in flatten_leaves(_tree())] == ["q1a", "q1bi", "q1bii", "q2"]

    def test_flatten_with_labels_when_nested_then_composite_labels(self):
        labels = [(leaf.id, leaf.full_label) for leaf in flatten_with_labels(_tree())]
        assert labels == [
            ("q1a", "1(a)"),
            ("q1bi", "1(b)(i)"),
            ("q1bii", "1(b)(ii)"),
            ("q2", "2"),
        ]

    def test_compose_label_when_empty_then_empty(self):
        assert compose_label([]) == ""
        assert compose_label(["4"]) == "4"

    def test_iter_all_when_called_then_pre_order(self):
        assert [q.id for q in iter_all(_tree())] == ["q1", "q1a", "q1b", "q1bi", "q1bii", "q2"]


class TestLookups:

    def test_find_by_id_when_nested_then_found(self):
        assert find_by_id(_tree(), "q1bii").max_marks == 3

    def test_find_by_id_when_missing_then_none(self):
        assert find_by_id(_tree(), "nope") is None

    def test_find_parent_id_when_nested_then_direct_parent(self):
        tree = _tree()
        assert find_parent_id(tree, "q1bi") == "q1b"
        assert find_parent_id(tree, "q1a") == "q1"

    def test_find_parent_id_when_root_then_none(self):
        assert find_parent_id(_tree(), "q1") is None

    def test_next_child_label_when_children_exist_then_follows_last(self):
        q1, _ = _tree()
        assert next_child_label(q1) == "c"
        assert next_child_label(q1.sub_questions[1]) == "iii"

    def test_next_child_label_when_no_children_then_first_child(self):
        _, q2 = _tree()
        assert next_child_label(q2) == "a"


class TestStructuralEdits:
    """Edits return new trees and never touch the input."""

    def test_replace_by_id_when_found_then_new_tree(self):
        tree = _tree()
        updated = replace_by_id(tree, "q1a", Question(id="q1a", number="a", max_marks=5))

        assert find_by_id(updated, "q1a").max_marks == 5
        assert total_marks(updated) == 10
        assert find_by_id(tree, "q1a").max_marks == 2

    def test_replace_by_id_when_missing_then_same_tree(self, caplog):
        tree = _tree()
        with caplog.at_level(logging.DEBUG):
            assert replace_by_id(tree, "nope", create_leaf("9")) is tree
        assert "not found" in caplog.text

    def test_delete_by_id_when_branch_then_descendants_gone(self):
        tree = _tree()
        updated = delete_by_id(tree, "q1b")

        for gone in ("q1b", "q1bi", "q1bii"):
            assert find_by_id(updated, gone) is None
        assert total_marks(updated) == 3
        assert total_marks(tree) == 7

    def test_delete_by_id_when_last_child_removed_then_parent_is_leaf(self):
        tree = (Question(id="p", number="1", max_marks=4, sub_questions=(Question(id="c", number="a"),)),)
        updated = delete_by_id(tree, "c")
        assert updated[0].is_leaf
        assert total_marks(updated) == 4

    def test_delete_by_id_when_missing_then_same_tree(self):
        tree = _tree()
        assert delete_by_id(tree, "nope") is tree

    def test_insert_under_parent_when_none_then_new_root(self):
        leaf = create_leaf("3")
        updated = insert_under_parent(_tree(), None, leaf)
        assert [q.number for q in updated] == ["1", "2", "3"]

    def test_insert_under_parent_when_leaf_parent_then_becomes_branch(self):
        """The scenario: branch "1" with leaves "a" and "b"."""
        tree = (create_leaf("1"),)
        root_id = tree[0].id
        tree = insert_under_parent(tree, root_id, create_leaf(next_child_label(tree[0])))
        tree = insert_under_parent(tree, root_id, create_leaf(next_child_label(tree[0])))

        assert [q.number for q in tree[0].sub_questions] == ["a", "b"]
        assert total_marks(tree) == 2
        assert [leaf.full_label for leaf in flatten_with_labels(tree)] == ["1(a)", "1(b)"]

    def test_insert_under_parent_when_missing_parent_then_same_tree(self):
        tree = _tree()
        assert insert_under_parent(tree, "nope", create_leaf("x")) is tree
