"""
Serialization Utilities

Provides to/from JSON utilities for the canonical models, plus the two
export documents the application produces.

- Clean separation: `serialize_*` and `deserialize_*` functions
- All models have `to_dict()` and `from_dict()` methods
- Validation via schemas before deserialization
- Never trust stored calculated values (totalMarks, scoreTotal)

Export documents:
- Analysis export ("version 2.0"): `{exam, results, students?, generatedAt, version}`
- Template export: exam fields + `mode: "template"` + `exportedAt`

Both are accepted back by `exam_analytics.legacy.parse_legacy_document`.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Optional

from ..models.exams import Exam
from ..models.results import Result, Student
from ..schemas.validator import validate_exam, validate_result
from .file_locking import locked_read_json, locked_write_json


ANALYSIS_EXPORT_VERSION = "2.0"


def _timestamp(now: Optional[datetime] = None) -> str:
    return (now or datetime.now(timezone.utc)).isoformat()


# ─────────────────────────────────────────────────────────────────────────────
# Exam / Result Serialization
# ─────────────────────────────────────────────────────────────────────────────

def serialize_exam(exam: Exam) -> dict[str, Any]:
    """
    Serialize an Exam to a dictionary.

    Note:
        totalMarks is included for consumers but ignored on load.
    """
    return exam.to_dict()


def deserialize_exam(data: dict[str, Any], *, validate: bool = True, strict: bool = False) -> Exam:
    """
    Deserialize an Exam from a canonical dictionary.

    Args:
        data: Dictionary from JSON
        validate: Whether to validate against schema first
        strict: Whether validation also runs the JSON Schema

    Raises:
        ValidationError: If validate=True and data is invalid
    """
    if validate:
        validate_exam(data, strict=strict)
    return Exam.from_dict(data)


def serialize_result(result: Result) -> dict[str, Any]:
    """Serialize a Result; scoreTotal is emitted as derived from the scores."""
    return result.to_dict()


def deserialize_result(data: dict[str, Any], *, validate: bool = True, strict: bool = False) -> Result:
    """
    Deserialize a Result from a canonical dictionary.

    Raises:
        ValidationError: If validate=True and data is invalid
    """
    if validate:
        validate_result(data, strict=strict)
    return Result.from_dict(data)


# ─────────────────────────────────────────────────────────────────────────────
# Export Documents
# ─────────────────────────────────────────────────────────────────────────────

def export_analysis_document(
    exam: Exam,
    results: Iterable[Result],
    students: Optional[Iterable[Student]] = None,
    *,
    now: Optional[datetime] = None,
) -> dict[str, Any]:
    """
    Build a version 2.0 analysis export.

    Args:
        exam: Exam the results belong to
        results: Results to include (already filtered by the caller)
        students: Optional student records to embed
        now: Timestamp override, mainly for tests

    Returns:
        Dictionary suitable for JSON serialization
    """
    document: dict[str, Any] = {
        "exam": serialize_exam(exam),
        "results": [serialize_result(r) for r in results],
        "generatedAt": _timestamp(now),
        "version": ANALYSIS_EXPORT_VERSION,
    }
    if students is not None:
        document["students"] = [s.to_dict() for s in students]
    return document


def export_template_document(exam: Exam, *, now: Optional[datetime] = None) -> dict[str, Any]:
    """Build a template export: the exam structure without any results."""
    document = serialize_exam(exam)
    document["mode"] = "template"
    document["exportedAt"] = _timestamp(now)
    return document


# ─────────────────────────────────────────────────────────────────────────────
# File Utilities
# ─────────────────────────────────────────────────────────────────────────────

def save_document_json(document: dict[str, Any], path: Path) -> None:
    """Write a document to disk under an exclusive lock."""
    locked_write_json(path, document)


def load_document_json(path: Path) -> Any:
    """
    Read a JSON document from disk under a shared lock.

    Raises:
        FileNotFoundError: If file doesn't exist
        json.JSONDecodeError: If the content is not JSON
    """
    if not path.exists():
        raise FileNotFoundError(f"Document not found: {path}")
    return locked_read_json(path)
