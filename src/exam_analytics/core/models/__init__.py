"""
Core Models Package

Immutable, validated data models that serve as the single source of truth
for exams, questions and results.

All models in this package are frozen dataclasses. Any change produces a new
instance, so a question tree handed to the analysis engine can never be
modified underneath it.

| Model      | Calculated, never stored      |
|------------|-------------------------------|
| `Question` | `total_marks` of a branch     |
| `Exam`     | `total_marks` (except explicit historical totals) |
| `Result`   | `score_total`                 |
"""

from .marks import Marks
from .questions import Question, QuestionType
from .exams import Exam
from .results import Result, Student

__all__ = [
    "Marks",
    "Question",
    "QuestionType",
    "Exam",
    "Result",
    "Student",
]
