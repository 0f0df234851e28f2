"""
Module: scoring.entry

Purpose:
    Turn one raw value typed into the marking grid into a validated edit
    for a single leaf question. Nothing is written here; the edit is applied by
    ResultStore.upsert so that a rejected value never touches the store.

Key Functions:
    - score_cell(): Validate a raw value for a leaf question

Key Classes:
    - CellEdit: Validated delta for one leaf (set or clear)
    - ValidationRejected: Raised for values the leaf cannot accept

Dependencies:
    - core.models.Question
    - core.utils.numbers

Used By:
    - scoring.store.ResultStore.record_response
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from exam_analytics.core.models import Question
from exam_analytics.core.utils import Number, coerce_number, format_number


MCQ_OPTIONS = ("A", "B", "C", "D")


class ValidationRejected(ValueError):
    """
    A raw value was rejected for a question.

    The store is left unchanged; the caller decides whether to ignore it
    silently or tell the user.

    Attributes:
        question_id: Leaf the value was entered for
        raw: The rejected input
    """

    def __init__(self, message: str, question_id: str, raw: object):
        super().__init__(message)
        self.question_id = question_id
        self.raw = raw


@dataclass(frozen=True)
class CellEdit:
    """
    Validated delta for one leaf question.

    Attributes:
        question_id: Leaf id
        score: New score, or None when clearing
        response: New response string, or None when clearing

    A clearing edit removes both entries so the leaf reads as unanswered
    rather than answered with zero.
    """

    question_id: str
    score: Optional[Number] = None
    response: Optional[str] = None

    @property
    def is_clear(self) -> bool:
        return self.score is None and self.response is None

    @classmethod
    def clear(cls, question_id: str) -> CellEdit:
        return cls(question_id=question_id)


def score_cell(question: Question, raw: object) -> CellEdit:
    """
    Validate a raw entry for a leaf question.

    MCQ leaves take a single letter A-D (any case, surrounding whitespace
    ignored); it scores max_marks when it equals the correct answer and 0
    otherwise. Short and Extended leaves take a number in [0, max_marks].
    An empty value clears the leaf for every type.

    Args:
        question: Leaf question the value is for
        raw: Value as typed (string) or a number

    Returns:
        CellEdit to pass to ResultStore.upsert

    Raises:
        ValidationRejected: If the question is not a leaf, the letter is not
            an option, or the number is missing, non-finite or out of range
    """
    if not question.is_leaf:
        raise ValidationRejected(
            f"Question {question.number!r} has sub-questions and cannot be scored directly",
            question.id, raw,
        )

    text = raw.strip() if isinstance(raw, str) else raw
    if text is None or text == "":
        return CellEdit.clear(question.id)

    if question.is_mcq:
        letter = str(text).upper()
        if letter not in MCQ_OPTIONS:
            raise ValidationRejected(
                f"MCQ response must be one of {', '.join(MCQ_OPTIONS)}: {raw!r}",
                question.id, raw,
            )
        correct = (question.correct_answer or "").strip().upper()
        score = question.max_marks if correct and letter == correct else 0
        return CellEdit(question_id=question.id, score=score, response=letter)

    score = coerce_number(text)
    if score is None:
        raise ValidationRejected(f"Score must be a number: {raw!r}", question.id, raw)
    if not (0 <= score <= question.max_marks):
        raise ValidationRejected(
            f"Score {format_number(score)} outside 0-{format_number(question.max_marks)} "
            f"for question {question.number!r}",
            question.id, raw,
        )
    return CellEdit(question_id=question.id, score=score, response=format_number(score))
