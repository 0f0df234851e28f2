"""
Module: legacy.rules

Purpose:
    Ordered field-extraction rules for historical export documents. Each
    canonical field lists the legacy keys it may appear under; the first
    key holding a present value wins.

    "Present" means not None and not an empty string. A numeric 0 is
    present, so a legacy maxMarks of 0 stays 0 rather than falling back
    to the default.

Key Classes:
    - FieldRule: One canonical field, its legacy keys and its default

Key Functions:
    - to_tag_list(): Bare string or list -> tuple of tags
    - infer_question_type(): Free-text legacy type -> QuestionType

Used By:
    - legacy.adapter
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Tuple, Union

from exam_analytics.core.models import QuestionType


def is_present(value: Any) -> bool:
    return value is not None and value != ""


@dataclass(frozen=True)
class FieldRule:
    """
    Extraction rule for one canonical field.

    Attributes:
        name: Canonical field name (used in import issues)
        keys: Legacy keys, tried in order
        default: Value returned when no key is present; a callable is
            called each time (e.g. uuid generation)

    Example:
        >>> FieldRule("number", ("number", "label"), "?").extract({"label": "3"})
        '3'
    """
    name: str
    keys: Tuple[str, ...]
    default: Union[Any, Callable[[], Any]] = None

    def find(self, raw: Mapping[str, Any]) -> Tuple[str, Any]:
        """Return (key, value) of the first present key, or ("", None)."""
        for key in self.keys:
            value = raw.get(key)
            if is_present(value):
                return key, value
        return "", None

    def has_value(self, raw: Mapping[str, Any]) -> bool:
        return self.find(raw)[1] is not None

    def extract(self, raw: Mapping[str, Any]) -> Any:
        _, value = self.find(raw)
        if value is None:
            return self.default() if callable(self.default) else self.default
        return value


# ─────────────────────────────────────────────────────────────────────────────
# Rule Tables
# ─────────────────────────────────────────────────────────────────────────────

QUESTION_RULES: Dict[str, FieldRule] = {
    rule.name: rule
    for rule in (
        FieldRule("id", ("id",)),
        FieldRule("number", ("number", "label"), "?"),
        FieldRule("max_marks", ("maxMarks", "marks", "max_marks"), 1),
        FieldRule("type", ("type", "questionType")),
        FieldRule("correct_answer", ("correctAnswer", "correct_answer", "answer")),
        FieldRule("notes", ("notes", "prompt"), ""),
        FieldRule("sub_questions", ("subQuestions", "sub_questions"), list),
        FieldRule("modules", ("modules", "module"), list),
        FieldRule("content_areas", ("contentAreas", "contentArea"), list),
        FieldRule("outcomes", ("outcomes", "outcome"), list),
        FieldRule("cognitive_verbs", ("cognitiveVerbs", "verbs", "cognitiveVerb"), list),
    )
}

# Exam defaults come from ImportConfig, so these rules carry none.
EXAM_RULES: Dict[str, FieldRule] = {
    rule.name: rule
    for rule in (
        FieldRule("id", ("id",)),
        FieldRule("name", ("name", "title")),
        FieldRule("date", ("date",)),
        FieldRule("cohort", ("cohort",)),
        FieldRule("syllabus_id", ("syllabusId", "syllabus_id")),
        FieldRule("total_marks", ("totalMarks", "total_marks")),
        FieldRule("questions", ("questions",), list),
    )
}

STUDENT_RULES: Dict[str, FieldRule] = {
    rule.name: rule
    for rule in (
        FieldRule("id", ("id",)),
        FieldRule("name", ("name",)),
        FieldRule("first_name", ("firstName", "first_name"), ""),
        FieldRule("last_name", ("lastName", "last_name"), ""),
        FieldRule("cohort", ("cohort",)),
        FieldRule("responses", ("responses", "marks"), dict),
    )
}

# Value of an embedded per-question entry written as an object.
NESTED_RULES: Dict[str, FieldRule] = {
    rule.name: rule
    for rule in (
        FieldRule("score", ("score", "mark"), 0),
        FieldRule("response", ("value", "response")),
    )
}

RESULT_RULES: Dict[str, FieldRule] = {
    rule.name: rule
    for rule in (
        FieldRule("id", ("id",)),
        FieldRule("exam_id", ("examId", "exam_id")),
        FieldRule("student_id", ("studentId", "student_id")),
        FieldRule("scores", ("questionScores", "question_scores"), dict),
        FieldRule("responses", ("questionResponses", "question_responses"), dict),
    )
}


# ─────────────────────────────────────────────────────────────────────────────
# Value Conversions
# ─────────────────────────────────────────────────────────────────────────────

def to_tag_list(value: Any) -> Tuple[str, ...]:
    """
    Normalize a legacy tag field.

    A bare string becomes a one-element tuple (blank -> empty); a list
    keeps its non-blank string items; anything else is empty.
    """
    if isinstance(value, str):
        text = value.strip()
        return (text,) if text else ()
    if isinstance(value, (list, tuple)):
        return tuple(item.strip() for item in value if isinstance(item, str) and item.strip())
    return ()


def infer_question_type(value: Any) -> QuestionType:
    """
    Map a free-text legacy type onto QuestionType.

    Substring match on the lower-cased text: "mcq" or "multiple" -> MCQ,
    "extended" or "long" -> Extended, anything else -> Short.
    """
    if not isinstance(value, str):
        return QuestionType.SHORT
    lower = value.lower()
    if "mcq" in lower or "multiple" in lower:
        return QuestionType.MCQ
    if "extended" in lower or "long" in lower:
        return QuestionType.EXTENDED
    return QuestionType.SHORT
