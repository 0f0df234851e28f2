"""
Module: legacy

Purpose:
    Legacy Adapter: migrate historical export documents (analysis
    exports, template exports and embedded per-student mark maps) into
    the canonical models without losing ids.
"""

from .adapter import (
    ImportIssue,
    ImportResult,
    ParseFailure,
    detect_mode,
    load_legacy_file,
    parse_legacy_document,
)
from .collisions import rebind_results, resolve_exam_collision
from .rules import FieldRule, infer_question_type, to_tag_list

__all__ = [
    "FieldRule",
    "ImportIssue",
    "ImportResult",
    "ParseFailure",
    "detect_mode",
    "infer_question_type",
    "load_legacy_file",
    "parse_legacy_document",
    "rebind_results",
    "resolve_exam_collision",
    "to_tag_list",
]
