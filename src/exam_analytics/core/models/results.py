"""
Module: results

Purpose:
    Provides the Result dataclass (one student's scores for one exam) and
    the Student record that results refer to.

Key Functions:
    - Result.score_total: Calculated from present scores, never stored
    - Result.with_edits(): New Result with partial score/response deltas merged
    - Student.placeholder(): Stand-in student for an id with no record

Dependencies:
    - dataclasses (std)
    - types (std)
    - core.utils.numbers

Used By:
    - scoring.store
    - analysis.engine
    - legacy.adapter
    - core.utils.serialization
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from ..utils.numbers import Number, normalize_number


def _freeze(mapping: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True, eq=False)
class Result:
    """
    Scores and responses of one student for one exam.

    Attributes:
        id: Unique identifier
        exam_id: Exam this result belongs to
        student_id: Student this result belongs to
        question_scores: Leaf id -> numeric score (read-only mapping)
        question_responses: Leaf id -> raw response string (read-only mapping)

    Invariants:
        - score_total == sum(question_scores.values())
        - An absent key means "not yet answered", not zero

    Example:
        >>> r = Result("r1", "e1", "s1", {"q1a": 2, "q1b": 1})
        >>> r.score_total
        3
    """

    id: str
    exam_id: str
    student_id: str
    question_scores: Mapping[str, Number] = field(default_factory=dict)
    question_responses: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "question_scores", _freeze(self.question_scores))
        object.__setattr__(self, "question_responses", _freeze(self.question_responses))

    @property
    def score_total(self) -> Number:
        """Sum of present scores. **IMPORTANT:** never stored."""
        return normalize_number(sum(self.question_scores.values()))

    @property
    def key(self) -> tuple[str, str]:
        """Identity of the aggregate in a store: (student_id, exam_id)."""
        return (self.student_id, self.exam_id)

    def with_edits(
        self,
        scores: Mapping[str, Optional[Number]],
        responses: Mapping[str, Optional[str]],
    ) -> Result:
        """
        Return a new Result with deltas merged in.

        A None value deletes the key; keys not mentioned are kept as-is.
        """
        new_scores = dict(self.question_scores)
        for question_id, score in scores.items():
            if score is None:
                new_scores.pop(question_id, None)
            else:
                new_scores[question_id] = score
        new_responses = dict(self.question_responses)
        for question_id, response in responses.items():
            if response is None:
                new_responses.pop(question_id, None)
            else:
                new_responses[question_id] = response
        return replace(self, question_scores=new_scores, question_responses=new_responses)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Result):
            return NotImplemented
        return (
            self.id == other.id
            and self.exam_id == other.exam_id
            and self.student_id == other.student_id
            and dict(self.question_scores) == dict(other.question_scores)
            and dict(self.question_responses) == dict(other.question_responses)
        )

    __hash__ = None  # type: ignore[assignment]

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the canonical camelCase shape, with the derived total."""
        return {
            "id": self.id,
            "examId": self.exam_id,
            "studentId": self.student_id,
            "scoreTotal": self.score_total,
            "questionScores": dict(self.question_scores),
            "questionResponses": dict(self.question_responses),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Result:
        """
        Deserialize from the canonical shape.

        Note: a stored scoreTotal is NOT trusted - it is recalculated.
        """
        return cls(
            id=data["id"],
            exam_id=data["examId"],
            student_id=data["studentId"],
            question_scores={
                k: normalize_number(v) for k, v in (data.get("questionScores") or {}).items()
            },
            question_responses={
                k: str(v) for k, v in (data.get("questionResponses") or {}).items()
            },
        )

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        return (
            f"Result({self.id!r}, student={self.student_id!r}, exam={self.exam_id!r}, "
            f"total={self.score_total}, answered={len(self.question_scores)})"
        )


@dataclass(frozen=True)
class Student:
    """
    Minimal student record needed by the analytics engine.

    Attributes:
        id: Unique identifier referenced by Result.student_id
        name: Display name
        cohort: Optional cohort label
        attributes: Any other fields from an imported document, untouched
    """

    id: str
    name: str
    cohort: Optional[str] = None
    attributes: Mapping[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @classmethod
    def placeholder(cls, student_id: str, prefix: str = "Student") -> Student:
        """Stand-in for a referenced id with no student record."""
        return cls(id=student_id, name=f"{prefix} {student_id[:4]}".strip())

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = dict(self.attributes)
        d["id"] = self.id
        d["name"] = self.name
        if self.cohort is not None:
            d["cohort"] = self.cohort
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Student:
        attributes = {k: v for k, v in data.items() if k not in ("id", "name", "cohort")}
        cohort = data.get("cohort")
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            cohort=str(cohort) if cohort is not None else None,
            attributes=attributes,
        )
