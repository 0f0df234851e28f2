"""
Module: marks

Purpose:
    Provides the Marks dataclass - the validated record of a mark value
    together with where it came from. Exams use it to distinguish a total
    recalculated from the question tree from one carried over verbatim
    from a historical export.

Key Functions:
    - Marks.explicit(value): Mark value taken as-is from a document
    - Marks.aggregate(questions): Sum of the questions' rolled-up marks

Dependencies:
    - dataclasses (std)
    - math (std)
    - .questions.Question (TYPE_CHECKING only)

Used By:
    - core.models.exams.Exam
    - legacy.adapter
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, Sequence, Union

if TYPE_CHECKING:
    from .questions import Question


MarkSource = Literal["explicit", "aggregate"]
Number = Union[int, float]


@dataclass(frozen=True, slots=True)
class Marks:
    """
    Validated mark information.

    Attributes:
        value: Non-negative, finite mark value
        source: How this mark was determined
            - "explicit": Read directly from a stored/imported document
            - "aggregate": Sum of leaf questions

    Invariants:
        - value >= 0 and finite
        - source is one of the valid literals

    Example:
        >>> m = Marks.explicit(5)
        >>> m.value
        5
        >>> m.source
        'explicit'
    """

    value: Number
    source: MarkSource

    def __post_init__(self) -> None:
        """Validate marks on construction."""
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise ValueError(f"Marks must be numeric: {self.value!r}")
        if not math.isfinite(self.value):
            raise ValueError(f"Marks must be finite: {self.value}")
        if self.value < 0:
            raise ValueError(f"Marks cannot be negative: {self.value}")
        if self.source not in ("explicit", "aggregate"):
            raise ValueError(f"Invalid mark source: {self.source}")

    # ─────────────────────────────────────────────────────────────────────────
    # Factory Methods
    # ─────────────────────────────────────────────────────────────────────────

    @classmethod
    def explicit(cls, value: Number) -> Marks:
        """
        Create marks taken verbatim from a document.

        Args:
            value: The stored mark value

        Returns:
            Marks with source="explicit"
        """
        return cls(value=value, source="explicit")

    @classmethod
    def aggregate(cls, questions: Sequence[Question]) -> Marks:
        """
        Calculate aggregate marks from questions.

        Each question contributes its rolled-up total, so branches are
        counted through their leaves only.

        Args:
            questions: Questions to sum

        Returns:
            Marks with source="aggregate"
        """
        total = sum(q.total_marks for q in questions)
        return cls(value=total, source="aggregate")

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        return f"Marks({self.value}, {self.source!r})"
