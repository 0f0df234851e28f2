"""
Assessment Analytics Core Package

Shared data models and utilities used by the tree, scoring, analysis and
legacy packages.

1. **Immutable Data Models**
   Frozen dataclasses; edits create new instances.

2. **Calculated Marks (Never Stored)**
   Exam and branch totals come from leaf questions; result totals come from
   the present scores.

3. **Canonical Wire Format**
   Every model has `to_dict()` / `from_dict()` for the camelCase JSON shape
   shared with the rest of the application.
"""

from .models import Marks, Question, QuestionType, Exam, Result, Student

__all__ = [
    "Marks",
    "Question",
    "QuestionType",
    "Exam",
    "Result",
    "Student",
]
