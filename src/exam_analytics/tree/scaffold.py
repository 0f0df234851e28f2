"""
Module: tree.scaffold

Purpose:
    Build a whole question tree from a short section description, so a
    marker can lay out a paper ("20 MCQs, then 4 written questions with
    parts") without adding every node by hand.

Key Classes:
    - SectionKind: MCQ block or written block
    - ScaffoldSection: One section of the paper

Key Functions:
    - parse_sub_parts(): "a, b(i;ii), c" -> sub-question tree
    - build_scaffold(): Sections -> numbered root questions

Dependencies:
    - re (std)
    - tree.operations.create_leaf

Used By:
    - Exam builder surfaces (external)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Sequence, Tuple

from exam_analytics.core.models import Question, QuestionType

from .operations import create_leaf

_NESTED_PART_RE = re.compile(r"^(.+)\((.*)\)$")


class SectionKind(str, Enum):
    """Kind of scaffold section."""
    MCQ = "mc"
    WRITTEN = "written"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ScaffoldSection:
    """
    One section of a scaffolded paper.

    Attributes:
        name: Section name, copied into each question's notes
        kind: MCQ or WRITTEN
        count: Number of MCQ leaves (MCQ sections only)
        marks: Marks per MCQ leaf (MCQ sections only)
        questions: One sub-part spec per written question, e.g. "a, b(i;ii)".
            An empty spec gives a single leaf question.

    Example:
        >>> ScaffoldSection("Section I", SectionKind.MCQ, count=20)
        >>> ScaffoldSection("Section II", SectionKind.WRITTEN, questions=("a, b", "a(i;ii)"))
    """

    name: str
    kind: SectionKind
    count: int = 0
    marks: int = 1
    questions: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Validate section on construction."""
        if self.count < 0:
            raise ValueError(f"count must be non-negative: {self.count}")
        if self.marks < 0:
            raise ValueError(f"marks must be non-negative: {self.marks}")


def parse_sub_parts(spec: str) -> Tuple[Question, ...]:
    """
    Parse a sub-part spec into child questions.

    Parts are comma separated; a part may list its own children in
    parentheses separated by semicolons.

    Example:
        >>> [q.number for q in parse_sub_parts("a, b(i;ii)")]
        ['a', 'b']
    """
    if not spec or not spec.strip():
        return ()
    parts: List[Question] = []
    for part in (p.strip() for p in spec.split(",")):
        if not part:
            continue
        match = _NESTED_PART_RE.match(part)
        if match:
            number = match.group(1).strip()
            children = tuple(
                create_leaf(label.strip())
                for label in match.group(2).split(";")
                if label.strip()
            )
            parts.append(replace(create_leaf(number), sub_questions=children))
        else:
            parts.append(create_leaf(part))
    return tuple(parts)


def build_scaffold(sections: Sequence[ScaffoldSection]) -> Tuple[Question, ...]:
    """
    Build numbered root questions from sections.

    Numbering starts at 1 and continues across sections.

    Returns:
        Root questions in paper order
    """
    roots: List[Question] = []
    counter = 1
    for section in sections:
        if section.kind == SectionKind.MCQ:
            for _ in range(section.count):
                roots.append(replace(
                    create_leaf(str(counter)),
                    type=QuestionType.MCQ,
                    max_marks=section.marks,
                    notes=section.name,
                ))
                counter += 1
        else:
            for spec in section.questions:
                roots.append(replace(
                    create_leaf(str(counter)),
                    notes=section.name,
                    sub_questions=parse_sub_parts(spec),
                ))
                counter += 1
    return tuple(roots)
