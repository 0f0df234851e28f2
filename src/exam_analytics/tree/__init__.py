"""
Module: tree

Purpose:
    Question Tree Model: immutable operations over an exam's question
    tree, label heuristics, and paper scaffolding.

Key Functions:
    - create_leaf(), rollup_marks(), total_marks()
    - flatten_leaves(), flatten_with_labels()
    - find_by_id(), find_parent_id()
    - replace_by_id(), delete_by_id(), insert_under_parent()
    - next_sibling_label(), first_child_label(), next_child_label()
    - build_scaffold()
"""

from .labels import first_child_label, next_sibling_label, to_roman_numeral
from .operations import (
    LabelledLeaf,
    QuestionTree,
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
from .scaffold import ScaffoldSection, SectionKind, build_scaffold, parse_sub_parts

__all__ = [
    "LabelledLeaf",
    "QuestionTree",
    "ScaffoldSection",
    "SectionKind",
    "build_scaffold",
    "compose_label",
    "create_leaf",
    "delete_by_id",
    "find_by_id",
    "find_parent_id",
    "first_child_label",
    "flatten_leaves",
    "flatten_with_labels",
    "insert_under_parent",
    "iter_all",
    "next_child_label",
    "next_sibling_label",
    "parse_sub_parts",
    "replace_by_id",
    "rollup_marks",
    "to_roman_numeral",
    "total_marks",
]
