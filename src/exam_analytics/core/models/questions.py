"""
Module: questions

Purpose:
    Provides the Question dataclass - an immutable tree node representing
    exam structure. A question with no sub-questions is a leaf and is the
    only unit that is scored directly; a branch's marks are always the sum
    of its leaf descendants.

Key Functions:
    - Question.is_leaf: True when there are no sub-questions
    - Question.total_marks: Rolled-up marks (never stored for branches)
    - Question.iter_leaves() / Question.iter_all(): Tree iteration
    - Question.to_dict() / Question.from_dict(): Serialization

Dependencies:
    - dataclasses (std)
    - enum (std)
    - core.utils.numbers

Used By:
    - core.models.exams.Exam
    - tree.operations
    - scoring.entry
    - analysis.engine
    - legacy.adapter
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Tuple

from ..utils.numbers import Number, normalize_number


class QuestionType(str, Enum):
    """How a leaf question is answered and scored."""
    MCQ = "MCQ"            # Single letter response, marked against correct_answer
    SHORT = "Short"        # Numeric mark entry
    EXTENDED = "Extended"  # Numeric mark entry, longer response

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Question:
    """
    Question node (immutable tree structure).

    The tree structure is:
        Question ("1")
        ├── Question ("a")
        │   ├── Question ("i") [leaf]
        │   └── Question ("ii") [leaf]
        └── Question ("b") [leaf]

    Attributes:
        id: Unique identifier, stable across edits
        number: Own label like "1", "a" or "ii" (not the composite label)
        max_marks: Marks available - authoritative on leaves only
        type: Answer type (MCQ, Short, Extended)
        correct_answer: Expected letter for MCQ leaves
        notes: Free-text notes, used as the prompt snippet
        sub_questions: Ordered child questions
        modules: Module tags
        content_areas: Content area tags
        outcomes: Outcome tags
        cognitive_verbs: Cognitive verb tags

    Invariants:
        - A node is a leaf iff sub_questions is empty
        - total_marks of a branch is the sum of its leaf max_marks
        - max_marks >= 0

    Example:
        >>> a = Question(id="q1a", number="a", max_marks=2)
        >>> b = Question(id="q1b", number="b", max_marks=3)
        >>> q = Question(id="q1", number="1", sub_questions=(a, b))
        >>> q.total_marks
        5
    """

    id: str
    number: str
    max_marks: Number = 1
    type: QuestionType = QuestionType.SHORT
    correct_answer: Optional[str] = None
    notes: str = ""
    sub_questions: Tuple[Question, ...] = ()
    modules: Tuple[str, ...] = ()
    content_areas: Tuple[str, ...] = ()
    outcomes: Tuple[str, ...] = ()
    cognitive_verbs: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Validate question on construction."""
        if self.max_marks < 0:
            raise ValueError(f"max_marks cannot be negative for {self.number!r}: {self.max_marks}")
        if not isinstance(self.type, QuestionType):
            object.__setattr__(self, "type", QuestionType(self.type))

    # ─────────────────────────────────────────────────────────────────────────
    # Properties
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def is_leaf(self) -> bool:
        """Check if this question has no sub-questions."""
        return len(self.sub_questions) == 0

    @property
    def is_mcq(self) -> bool:
        return self.type == QuestionType.MCQ

    @property
    def total_marks(self) -> Number:
        """
        Calculate total marks for this question and all descendants.

        For a leaf, returns self.max_marks.
        For a branch, returns sum of all leaf marks.

        **IMPORTANT:** A branch's own max_marks is ignored.
        """
        if self.is_leaf:
            return self.max_marks
        return sum(child.total_marks for child in self.sub_questions)

    @property
    def leaf_count(self) -> int:
        """Count of leaf questions in this subtree."""
        if self.is_leaf:
            return 1
        return sum(child.leaf_count for child in self.sub_questions)

    # ─────────────────────────────────────────────────────────────────────────
    # Iteration Methods
    # ─────────────────────────────────────────────────────────────────────────

    def iter_leaves(self) -> Iterator[Question]:
        """Yield leaf questions depth-first, left to right."""
        if self.is_leaf:
            yield self
        else:
            for child in self.sub_questions:
                yield from child.iter_leaves()

    def iter_all(self) -> Iterator[Question]:
        """Yield this question, then all descendants (pre-order)."""
        yield self
        for child in self.sub_questions:
            yield from child.iter_all()

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize to the canonical camelCase shape.

        Branches emit their rolled-up total as maxMarks.
        """
        d: Dict[str, Any] = {
            "id": self.id,
            "number": self.number,
            "maxMarks": self.total_marks,
            "type": str(self.type),
            "notes": self.notes,
            "subQuestions": [child.to_dict() for child in self.sub_questions],
            "modules": list(self.modules),
            "contentAreas": list(self.content_areas),
            "outcomes": list(self.outcomes),
            "cognitiveVerbs": list(self.cognitive_verbs),
        }
        if self.correct_answer is not None:
            d["correctAnswer"] = self.correct_answer
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Question:
        """
        Deserialize from the canonical shape.

        Lenient historical shapes are handled by legacy.adapter instead.
        """
        return cls(
            id=data["id"],
            number=str(data["number"]),
            max_marks=normalize_number(data.get("maxMarks", 1)),
            type=QuestionType(data.get("type", QuestionType.SHORT.value)),
            correct_answer=data.get("correctAnswer"),
            notes=data.get("notes") or "",
            sub_questions=tuple(cls.from_dict(child) for child in data.get("subQuestions", [])),
            modules=tuple(data.get("modules", [])),
            content_areas=tuple(data.get("contentAreas", [])),
            outcomes=tuple(data.get("outcomes", [])),
            cognitive_verbs=tuple(data.get("cognitiveVerbs", [])),
        )

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        child_str = f", children={len(self.sub_questions)}" if self.sub_questions else ""
        return f"Question({self.number!r}, {self.type.value}, marks={self.total_marks}{child_str})"
