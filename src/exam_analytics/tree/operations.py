"""
Module: tree.operations

Purpose:
    Pure functions over a question tree (a sequence of root Questions).
    Every structural edit is an immutable rebuild; nothing keeps parent
    back-pointers, so a parent is found by walking down from the roots.

Key Functions:
    - create_leaf(): New default leaf question
    - rollup_marks() / total_marks(): Calculated marks
    - flatten_leaves() / flatten_with_labels(): Canonical leaf ordering
    - find_by_id() / find_parent_id(): Lookups
    - replace_by_id() / delete_by_id() / insert_under_parent(): Edits

Edits whose target id is absent return the input tree unchanged (the
same tuple object) and log at DEBUG. They never raise.

Dependencies:
    - dataclasses (std)
    - uuid (std)
    - core.models.Question

Used By:
    - analysis.engine
    - legacy.adapter
    - tree.scaffold
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, replace
from typing import Iterator, List, Optional, Sequence, Tuple

from exam_analytics.core.models import Question, QuestionType
from exam_analytics.core.utils import Number

from .labels import first_child_label, next_sibling_label

logger = logging.getLogger(__name__)

QuestionTree = Tuple[Question, ...]


@dataclass(frozen=True)
class LabelledLeaf:
    """
    A leaf question with its composite label.

    Attributes:
        question: The leaf question
        full_label: Ancestor numbers joined like "1(a)(ii)"
    """
    question: Question
    full_label: str

    @property
    def id(self) -> str:
        return self.question.id


def create_leaf(number: str) -> Question:
    """
    Create a new leaf question with default settings.

    Defaults: fresh uuid4 id, type Short, max marks 1, no notes or tags.
    """
    return Question(
        id=str(uuid.uuid4()),
        number=number,
        max_marks=1,
        type=QuestionType.SHORT,
    )


# ─────────────────────────────────────────────────────────────────────────────
# Marks & Iteration
# ─────────────────────────────────────────────────────────────────────────────

def rollup_marks(node: Question) -> Number:
    """Leaf -> own max marks; branch -> sum of rollup over children."""
    if node.is_leaf:
        return node.max_marks
    return sum(rollup_marks(child) for child in node.sub_questions)


def total_marks(questions: Sequence[Question]) -> Number:
    """Sum of rollup_marks over all roots."""
    return sum(rollup_marks(q) for q in questions)


def iter_all(questions: Sequence[Question]) -> Iterator[Question]:
    """Yield every node pre-order, roots left to right."""
    for root in questions:
        yield from root.iter_all()


def flatten_leaves(questions: Sequence[Question]) -> List[Question]:
    """
    Leaves only, depth-first, left to right.

    This is the canonical ordering for exam totals and entry grids.
    """
    return [leaf for root in questions for leaf in root.iter_leaves()]


def compose_label(numbers: Sequence[str]) -> str:
    """
    Join a chain of numbers into a composite label.

    Example:
        >>> compose_label(["1", "a", "ii"])
        '1(a)(ii)'
    """
    if not numbers:
        return ""
    head, *rest = numbers
    return head + "".join(f"({n})" for n in rest)


def flatten_with_labels(questions: Sequence[Question]) -> List[LabelledLeaf]:
    """Leaves in canonical order, each with its composite label."""
    flat: List[LabelledLeaf] = []

    def _walk(node: Question, chain: Tuple[str, ...]) -> None:
        chain = chain + (node.number,)
        if node.is_leaf:
            flat.append(LabelledLeaf(node, compose_label(chain)))
            return
        for child in node.sub_questions:
            _walk(child, chain)

    for root in questions:
        _walk(root, ())
    return flat


# ─────────────────────────────────────────────────────────────────────────────
# Lookups
# ─────────────────────────────────────────────────────────────────────────────

def find_by_id(questions: Sequence[Question], question_id: str) -> Optional[Question]:
    """Find a node anywhere in the tree, or None."""
    for node in iter_all(questions):
        if node.id == question_id:
            return node
    return None


def find_parent_id(questions: Sequence[Question], child_id: str) -> Optional[str]:
    """
    Id of the node whose direct child is ``child_id``.

    Returns None for roots and for ids not in the tree.
    """
    for node in iter_all(questions):
        if any(child.id == child_id for child in node.sub_questions):
            return node.id
    return None


def next_child_label(parent: Question) -> str:
    """Label for a new last child of ``parent``."""
    if parent.sub_questions:
        return next_sibling_label(parent.sub_questions[-1].number)
    return first_child_label(parent.number)


# ─────────────────────────────────────────────────────────────────────────────
# Structural Edits
# ─────────────────────────────────────────────────────────────────────────────

def _replace_in(nodes: QuestionTree, question_id: str, replacement: Question) -> Optional[QuestionTree]:
    for i, node in enumerate(nodes):
        if node.id == question_id:
            return nodes[:i] + (replacement,) + nodes[i + 1:]
        if node.sub_questions:
            children = _replace_in(node.sub_questions, question_id, replacement)
            if children is not None:
                return nodes[:i] + (replace(node, sub_questions=children),) + nodes[i + 1:]
    return None


def replace_by_id(questions: Sequence[Question], question_id: str, replacement: Question) -> QuestionTree:
    """
    Replace the node with ``question_id`` (and its subtree) by ``replacement``.

    Returns:
        New tree, or the unchanged tree if the id is absent
    """
    tree = tuple(questions)
    rebuilt = _replace_in(tree, question_id, replacement)
    if rebuilt is None:
        logger.debug(f"replace_by_id: {question_id!r} not found, tree unchanged")
        return tree
    return rebuilt


def _delete_in(nodes: QuestionTree, question_id: str) -> Optional[QuestionTree]:
    for i, node in enumerate(nodes):
        if node.id == question_id:
            return nodes[:i] + nodes[i + 1:]
        if node.sub_questions:
            children = _delete_in(node.sub_questions, question_id)
            if children is not None:
                return nodes[:i] + (replace(node, sub_questions=children),) + nodes[i + 1:]
    return None


def delete_by_id(questions: Sequence[Question], question_id: str) -> QuestionTree:
    """
    Remove the node with ``question_id`` together with all its descendants.

    A branch that loses its last child becomes a leaf again, with its own
    stored max_marks.

    Returns:
        New tree, or the unchanged tree if the id is absent
    """
    tree = tuple(questions)
    rebuilt = _delete_in(tree, question_id)
    if rebuilt is None:
        logger.debug(f"delete_by_id: {question_id!r} not found, tree unchanged")
        return tree
    return rebuilt


def _insert_in(nodes: QuestionTree, parent_id: str, question: Question) -> Optional[QuestionTree]:
    for i, node in enumerate(nodes):
        if node.id == parent_id:
            updated = replace(node, sub_questions=node.sub_questions + (question,))
            return nodes[:i] + (updated,) + nodes[i + 1:]
        if node.sub_questions:
            children = _insert_in(node.sub_questions, parent_id, question)
            if children is not None:
                return nodes[:i] + (replace(node, sub_questions=children),) + nodes[i + 1:]
    return None


def insert_under_parent(
    questions: Sequence[Question],
    parent_id: Optional[str],
    question: Question,
) -> QuestionTree:
    """
    Append ``question`` as the last child of ``parent_id``.

    With ``parent_id=None`` the question is appended as a new root.
    Inserting under a leaf turns it into a branch.

    Returns:
        New tree, or the unchanged tree if the parent is absent
    """
    tree = tuple(questions)
    if parent_id is None:
        return tree + (question,)
    rebuilt = _insert_in(tree, parent_id, question)
    if rebuilt is None:
        logger.debug(f"insert_under_parent: parent {parent_id!r} not found, tree unchanged")
        return tree
    return rebuilt
