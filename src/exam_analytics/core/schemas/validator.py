"""
Schema Validation Utilities

Validates canonical exam and result documents before deserialization.

- `validate_exam()` and `validate_result()` always run structural checks
  that fail fast with a path to the offending field.
- With `strict=True` the document is additionally checked against the
  packaged JSON Schema definitions using jsonschema.
"""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any

import jsonschema


QUESTION_TYPES = ("MCQ", "Short", "Extended")


# Load schemas lazily
_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ValidationError(Exception):
    """Raised when data fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _require(data: dict[str, Any], required: list[str], path: str) -> None:
    missing = [f for f in required if f not in data]
    if missing:
        raise ValidationError(
            f"Missing required fields: {missing}",
            path=path,
            errors=[f"Missing field: {f}" for f in missing],
        )


def _validate_strict(data: dict[str, Any], schema_name: str) -> None:
    schema = _load_schema(schema_name)
    try:
        jsonschema.validate(data, schema)
    except jsonschema.ValidationError as e:
        raise ValidationError(
            f"Schema validation failed: {e.message}",
            path=".".join(str(p) for p in e.absolute_path),
            errors=[e.message],
        )


def validate_exam(data: dict[str, Any], *, strict: bool = False) -> None:
    """
    Validate exam data against the canonical schema.

    Args:
        data: Exam dictionary to validate
        strict: If True, also validate with jsonschema

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError("Exam must be an object")
    _require(data, ["id", "name", "questions"], "")

    questions = data["questions"]
    if not isinstance(questions, list):
        raise ValidationError("questions must be a list", path="questions")

    seen: set[str] = set()
    for i, question in enumerate(questions):
        _validate_question(question, f"questions[{i}]", seen)

    if strict:
        _validate_strict(data, "exam")


def _validate_question(data: Any, path: str, seen: set[str]) -> None:
    """Validate a question node recursively."""
    if not isinstance(data, dict):
        raise ValidationError("Question must be an object", path=path)
    _require(data, ["id", "number"], path)

    question_id = data["id"]
    if question_id in seen:
        raise ValidationError(f"Duplicate question id: {question_id!r}", path=f"{path}.id")
    seen.add(question_id)

    kind = data.get("type", "Short")
    if kind not in QUESTION_TYPES:
        raise ValidationError(f"Invalid question type: {kind!r}", path=f"{path}.type")

    marks = data.get("maxMarks", 1)
    if not _is_number(marks) or marks < 0:
        raise ValidationError(
            f"Invalid maxMarks: {marks} (must be non-negative number)",
            path=f"{path}.maxMarks",
        )

    children = data.get("subQuestions", [])
    if not isinstance(children, list):
        raise ValidationError("subQuestions must be a list", path=f"{path}.subQuestions")
    for i, child in enumerate(children):
        _validate_question(child, f"{path}.subQuestions[{i}]", seen)


def validate_result(data: dict[str, Any], *, strict: bool = False) -> None:
    """
    Validate result data against the canonical schema.

    Args:
        data: Result dictionary to validate
        strict: If True, also validate with jsonschema

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError("Result must be an object")
    _require(data, ["id", "examId", "studentId"], "")

    scores = data.get("questionScores", {})
    if not isinstance(scores, dict):
        raise ValidationError("questionScores must be an object", path="questionScores")
    for question_id, score in scores.items():
        if not _is_number(score):
            raise ValidationError(
                f"Invalid score for {question_id!r}: {score!r}",
                path=f"questionScores.{question_id}",
            )

    responses = data.get("questionResponses", {})
    if not isinstance(responses, dict):
        raise ValidationError("questionResponses must be an object", path="questionResponses")

    if strict:
        _validate_strict(data, "result")
