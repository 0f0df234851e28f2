"""
Module: exams

Purpose:
    Provides the Exam dataclass - an assessment with metadata and the
    ordered root questions it exclusively owns.

Key Functions:
    - Exam.total_marks: Calculated from leaves unless an explicit total
      was carried over from a historical import
    - Exam.leaf_questions: Leaves in document order
    - Exam.get_question(id): Find any node by id
    - Exam.to_dict() / Exam.from_dict(): Serialization

Dependencies:
    - dataclasses (std)
    - functools (std)
    - .marks.Marks
    - .questions.Question

Used By:
    - scoring.store
    - analysis.engine
    - legacy.adapter
    - core.utils.serialization
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import Any, Dict, Optional, Tuple

from ..utils.numbers import Number
from .marks import Marks
from .questions import Question


@dataclass(frozen=True)
class Exam:
    """
    Complete exam representation (immutable).

    Attributes:
        id: Unique identifier
        name: Display name
        date: ISO date string
        cohort: Cohort label like "12"
        syllabus_id: Syllabus identifier
        questions: Ordered root questions
        marks: Optional stored total. Only a Marks.explicit value is ever
            honoured; anything else is ignored in favour of the rollup.

    Invariants:
        - total_marks == sum of leaf max_marks, unless marks.source == "explicit"

    Example:
        >>> exam = Exam(id="e1", name="Trial", date="2024-06-01",
        ...             cohort="12", syllabus_id="chemistry", questions=(q1,))
        >>> exam.total_marks  # Always calculated
        5
    """

    id: str
    name: str
    date: str
    cohort: str = ""
    syllabus_id: str = ""
    questions: Tuple[Question, ...] = ()
    marks: Optional[Marks] = None

    # ─────────────────────────────────────────────────────────────────────────
    # Calculated Properties
    # ─────────────────────────────────────────────────────────────────────────

    @cached_property
    def calculated_marks(self) -> Number:
        """Sum of all leaf max_marks."""
        return Marks.aggregate(self.questions).value

    @cached_property
    def total_marks(self) -> Number:
        """
        Exam total.

        Recomputed from the tree, except when an explicit historical total
        was recorded by the legacy importer.
        """
        if self.marks is not None and self.marks.source == "explicit":
            return self.marks.value
        return self.calculated_marks

    @cached_property
    def leaf_questions(self) -> Tuple[Question, ...]:
        """Leaf questions, depth-first, left to right."""
        return tuple(leaf for root in self.questions for leaf in root.iter_leaves())

    @cached_property
    def _index(self) -> Dict[str, Question]:
        index: Dict[str, Question] = {}
        for root in self.questions:
            for node in root.iter_all():
                index.setdefault(node.id, node)
        return index

    # ─────────────────────────────────────────────────────────────────────────
    # Query Methods
    # ─────────────────────────────────────────────────────────────────────────

    def get_question(self, question_id: str) -> Optional[Question]:
        """Find a question node (leaf or branch) by id."""
        return self._index.get(question_id)

    def get_leaf(self, question_id: str) -> Optional[Question]:
        """Find a leaf question by id; branches return None."""
        question = self._index.get(question_id)
        if question is None or not question.is_leaf:
            return None
        return question

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the canonical camelCase shape."""
        return {
            "id": self.id,
            "name": self.name,
            "date": self.date,
            "cohort": self.cohort,
            "syllabusId": self.syllabus_id,
            "totalMarks": self.total_marks,
            "questions": [q.to_dict() for q in self.questions],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Exam:
        """
        Deserialize from the canonical shape.

        Note: a stored totalMarks is NOT trusted - it is recalculated.
        """
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            date=data.get("date", ""),
            cohort=str(data.get("cohort") or ""),
            syllabus_id=data.get("syllabusId") or "",
            questions=tuple(Question.from_dict(q) for q in data.get("questions", [])),
        )

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        return f"Exam({self.id!r}, {self.name!r}, marks={self.total_marks}, questions={len(self.questions)})"
