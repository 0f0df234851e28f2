"""
Module: legacy.adapter

Purpose:
    Reconcile historical export documents into the canonical Exam,
    Student and Result models. Accepts the current analysis export
    (version 2.0), template exports, and older files where each student
    carries an embedded map of per-question marks keyed by question id or
    printed label.

    Only unreadable input fails hard (ParseFailure). Every other problem
    degrades a single field: a default is used or the value is skipped,
    and an ImportIssue is recorded and logged.

Key Functions:
    - parse_legacy_document(): JSON text or mapping -> ImportResult
    - load_legacy_file(): Read a file under a shared lock and parse it
    - detect_mode(): "template" or "analysis"

Key Classes:
    - ImportResult: Migrated exam, students, results and issues
    - ImportIssue: One degraded field (path + message)
    - ParseFailure: Input cannot be read at all

Dependencies:
    - legacy.rules: Ordered field-extraction tables
    - tree.flatten_with_labels: Label matching for embedded marks

Used By:
    - cli import / analyze
"""

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Set, Tuple, Union

from exam_analytics.config import ImportConfig
from exam_analytics.core.models import Exam, Marks, Question, Result, Student
from exam_analytics.core.utils import Number, coerce_number, format_number
from exam_analytics.core.utils.serialization import load_document_json
from exam_analytics.tree import flatten_with_labels

from .rules import (
    EXAM_RULES,
    NESTED_RULES,
    QUESTION_RULES,
    RESULT_RULES,
    STUDENT_RULES,
    infer_question_type,
    to_tag_list,
)

logger = logging.getLogger(__name__)

MODES = ("template", "analysis")

Source = Union[str, bytes, Mapping[str, Any]]


class ParseFailure(Exception):
    """Document is not JSON, or its root (or its ``exam``) is not an object."""
    pass


@dataclass(frozen=True)
class ImportIssue:
    """
    One degraded field.

    Attributes:
        path: Location in the source document, like "questions[2].maxMarks"
        message: What was wrong and what was done instead
    """
    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


@dataclass(frozen=True)
class ImportResult:
    """
    Outcome of a legacy import.

    Attributes:
        exam: Migrated exam (ids preserved)
        students: Explicit students first, then synthesized placeholders
        results: Migrated results, in document order
        mode: "template" or "analysis"
        issues: Degraded fields, in the order they were found
    """
    exam: Exam
    students: Tuple[Student, ...] = ()
    results: Tuple[Result, ...] = ()
    mode: str = "template"
    issues: Tuple[ImportIssue, ...] = ()

    @property
    def degraded(self) -> bool:
        return bool(self.issues)


# ─────────────────────────────────────────────────────────────────────────────
# Mode Detection
# ─────────────────────────────────────────────────────────────────────────────

def detect_mode(document: Mapping[str, Any]) -> str:
    """
    Decide whether a document carries results.

    First match wins: an explicit ``mode`` of "template" or "analysis";
    a non-empty ``results`` list; any ``students`` entry with
    ``responses`` or ``marks``. Otherwise "template".
    """
    mode = document.get("mode")
    if mode in MODES:
        return mode

    results = document.get("results")
    if isinstance(results, list) and results:
        return "analysis"

    students = document.get("students")
    if isinstance(students, list) and any(
        isinstance(s, Mapping) and STUDENT_RULES["responses"].has_value(s) for s in students
    ):
        return "analysis"

    return "template"


def _response_text(value: Any) -> Optional[str]:
    """Response as stored on a Result; None for values that are not text or a number."""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return format_number(value)
    return None


# ─────────────────────────────────────────────────────────────────────────────
# Import Context
# ─────────────────────────────────────────────────────────────────────────────

class _Migration:
    """Issue log and id bookkeeping for one import."""

    def __init__(self, config: ImportConfig) -> None:
        self.config = config
        self.issues: List[ImportIssue] = []
        self.question_ids: Set[str] = set()

    def warn(self, path: str, message: str) -> None:
        issue = ImportIssue(path, message)
        self.issues.append(issue)
        logger.warning(f"Import: {issue}")

    # ─────────────────────────────────────────────────────────────────────────
    # Questions / Exam
    # ─────────────────────────────────────────────────────────────────────────

    def question(self, raw: Mapping[str, Any], path: str) -> Question:
        rules = QUESTION_RULES

        question_id = rules["id"].extract(raw)
        if question_id is None:
            question_id = str(uuid.uuid4())
            self.warn(f"{path}.id", f"missing id, generated {question_id}")
        question_id = str(question_id)
        if question_id in self.question_ids:
            fresh = str(uuid.uuid4())
            self.warn(f"{path}.id", f"duplicate id {question_id!r}, replaced with {fresh}")
            question_id = fresh
        self.question_ids.add(question_id)

        number = str(rules["number"].extract(raw)).strip() or "?"

        key, raw_marks = rules["max_marks"].find(raw)
        max_marks = rules["max_marks"].default
        if raw_marks is not None:
            marks = coerce_number(raw_marks)
            if marks is None or marks < 0:
                self.warn(f"{path}.{key}", f"invalid max marks {raw_marks!r}, using {max_marks}")
            else:
                max_marks = marks

        correct = rules["correct_answer"].extract(raw)
        notes = rules["notes"].extract(raw)

        raw_children = rules["sub_questions"].extract(raw)
        if not isinstance(raw_children, list):
            self.warn(f"{path}.subQuestions", "not a list, ignored")
            raw_children = []

        return Question(
            id=question_id,
            number=number,
            max_marks=max_marks,
            type=infer_question_type(rules["type"].extract(raw)),
            correct_answer=str(correct).strip() if correct is not None else None,
            notes=str(notes),
            sub_questions=self.questions(raw_children, f"{path}.subQuestions"),
            modules=to_tag_list(rules["modules"].extract(raw)),
            content_areas=to_tag_list(rules["content_areas"].extract(raw)),
            outcomes=to_tag_list(rules["outcomes"].extract(raw)),
            cognitive_verbs=to_tag_list(rules["cognitive_verbs"].extract(raw)),
        )

    def questions(self, raw_list: List[Any], path: str) -> Tuple[Question, ...]:
        migrated = []
        for index, raw in enumerate(raw_list):
            item_path = f"{path}[{index}]"
            if not isinstance(raw, Mapping):
                self.warn(item_path, "question is not an object, skipped")
                continue
            migrated.append(self.question(raw, item_path))
        return tuple(migrated)

    def exam(self, raw: Mapping[str, Any]) -> Exam:
        rules = EXAM_RULES
        config = self.config

        exam_id = rules["id"].extract(raw)
        if exam_id is None:
            exam_id = str(uuid.uuid4())
            self.warn("exam.id", f"missing id, generated {exam_id}")

        raw_questions = rules["questions"].extract(raw)
        if not isinstance(raw_questions, list):
            self.warn("exam.questions", "not a list, ignored")
            raw_questions = []
        questions = self.questions(raw_questions, "questions")

        marks: Optional[Marks] = None
        raw_total = rules["total_marks"].extract(raw)
        if raw_total is not None:
            total = coerce_number(raw_total)
            if total is None or total < 0:
                self.warn("exam.totalMarks", f"invalid total {raw_total!r}, using the question rollup")
            elif total > 0 and total != Marks.aggregate(questions).value:
                marks = Marks.explicit(total)

        name = rules["name"].extract(raw)
        raw_date = rules["date"].extract(raw)
        cohort = rules["cohort"].extract(raw)
        syllabus = rules["syllabus_id"].extract(raw)

        return Exam(
            id=str(exam_id),
            name=str(name) if name is not None else config.default_exam_name,
            date=str(raw_date) if raw_date is not None else date.today().isoformat(),
            cohort=str(cohort) if cohort is not None else config.default_cohort,
            syllabus_id=str(syllabus) if syllabus is not None else config.default_syllabus_id,
            questions=questions,
            marks=marks,
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Students / Results
    # ─────────────────────────────────────────────────────────────────────────

    def student_name(self, raw: Mapping[str, Any]) -> str:
        name = STUDENT_RULES["name"].extract(raw)
        if name is not None and str(name).strip():
            return str(name).strip()
        first = str(STUDENT_RULES["first_name"].extract(raw))
        last = str(STUDENT_RULES["last_name"].extract(raw))
        return f"{first} {last}".strip() or self.config.unknown_student_name

    def explicit_student(self, raw: Any, path: str) -> Optional[Student]:
        if not isinstance(raw, Mapping):
            self.warn(path, "student is not an object, skipped")
            return None
        student_id = STUDENT_RULES["id"].extract(raw)
        if student_id is None:
            self.warn(f"{path}.id", "student without id, skipped")
            return None
        known = ("id", "name", "cohort")
        cohort = STUDENT_RULES["cohort"].extract(raw)
        return Student(
            id=str(student_id),
            name=self.student_name(raw),
            cohort=str(cohort) if cohort is not None else None,
            attributes={k: v for k, v in raw.items() if k not in known},
        )

    def result(self, raw: Any, path: str, exam: Exam) -> Optional[Result]:
        rules = RESULT_RULES
        if not isinstance(raw, Mapping):
            self.warn(path, "result is not an object, skipped")
            return None

        student_id = rules["student_id"].extract(raw)
        if student_id is None:
            self.warn(f"{path}.studentId", "result without student id, skipped")
            return None

        result_id = rules["id"].extract(raw)
        if result_id is None:
            result_id = str(uuid.uuid4())
            self.warn(f"{path}.id", f"missing id, generated {result_id}")

        raw_scores = rules["scores"].extract(raw)
        if not isinstance(raw_scores, Mapping):
            self.warn(f"{path}.questionScores", "not an object, ignored")
            raw_scores = {}
        scores: Dict[str, Number] = {}
        for question_id, value in raw_scores.items():
            score = coerce_number(value)
            if score is None:
                self.warn(f"{path}.questionScores.{question_id}", f"non-numeric score {value!r} dropped")
                continue
            scores[str(question_id)] = score

        raw_responses = rules["responses"].extract(raw)
        if not isinstance(raw_responses, Mapping):
            self.warn(f"{path}.questionResponses", "not an object, ignored")
            raw_responses = {}
        responses: Dict[str, str] = {}
        for question_id, value in raw_responses.items():
            if value is None:
                continue
            text = _response_text(value)
            if text is None:
                self.warn(f"{path}.questionResponses.{question_id}", f"unsupported response {value!r} dropped")
                continue
            responses[str(question_id)] = text

        return Result(
            id=str(result_id),
            exam_id=str(rules["exam_id"].extract(raw) or exam.id),
            student_id=str(student_id),
            question_scores=scores,
            question_responses=responses,
        )

    def embedded(self, raw: Any, path: str, exam: Exam, matcher: _LeafMatcher) -> Tuple[Optional[Student], Optional[Result]]:
        if not isinstance(raw, Mapping):
            self.warn(path, "student is not an object, skipped")
            return None, None

        student_id = STUDENT_RULES["id"].extract(raw)
        if student_id is None:
            student_id = str(uuid.uuid4())
            self.warn(f"{path}.id", f"missing id, generated {student_id}")
        cohort = STUDENT_RULES["cohort"].extract(raw)
        student = Student(
            id=str(student_id),
            name=self.student_name(raw),
            cohort=str(cohort) if cohort is not None else None,
        )

        key, marks = STUDENT_RULES["responses"].find(raw)
        if marks is not None and not isinstance(marks, Mapping):
            self.warn(f"{path}.{key}", "not an object, ignored")
            marks = {}
        marks = marks if isinstance(marks, Mapping) else {}

        scores: Dict[str, Number] = {}
        responses: Dict[str, str] = {}
        for label, value in marks.items():
            entry_path = f"{path}.{key}.{label}"
            leaf = matcher.match(str(label))
            if leaf is None:
                self.warn(entry_path, "no matching question, skipped")
                continue

            if isinstance(value, Mapping):
                raw_score = NESTED_RULES["score"].extract(value)
                raw_response = NESTED_RULES["response"].extract(value)
            else:
                raw_score, raw_response = value, None

            score = coerce_number(raw_score)
            if score is None:
                self.warn(entry_path, f"non-numeric score {raw_score!r}, skipped")
                continue
            scores[leaf.id] = score
            if raw_response is not None:
                text = _response_text(raw_response)
                if text is None:
                    self.warn(entry_path, f"unsupported response {raw_response!r}, dropped")
                else:
                    responses[leaf.id] = text

        result = Result(
            id=str(uuid.uuid4()),
            exam_id=exam.id,
            student_id=student.id,
            question_scores=scores,
            question_responses=responses,
        )
        return student, result


class _LeafMatcher:
    """
    Resolve an embedded key to a leaf question.

    Tried in order: leaf id, composite label "1(a)", compact label "1a",
    bare number. The first leaf in leaf order wins within each tier.
    """

    def __init__(self, exam: Exam) -> None:
        self._tiers: List[Dict[str, Question]] = [{}, {}, {}, {}]
        by_id, by_label, by_compact, by_number = self._tiers
        for item in flatten_with_labels(exam.questions):
            by_id.setdefault(item.id, item.question)
            by_label.setdefault(item.full_label, item.question)
            by_compact.setdefault(item.full_label.replace("(", "").replace(")", ""), item.question)
            by_number.setdefault(item.question.number, item.question)

    def match(self, key: str) -> Optional[Question]:
        key = key.strip()
        for tier in self._tiers:
            if key in tier:
                return tier[key]
        return None


# ─────────────────────────────────────────────────────────────────────────────
# Public API
# ─────────────────────────────────────────────────────────────────────────────

def _decode(source: Source) -> Mapping[str, Any]:
    if isinstance(source, (str, bytes, bytearray)):
        try:
            document = json.loads(source)
        except ValueError as e:
            raise ParseFailure(f"Invalid JSON: {e}") from e
    else:
        document = source
    if not isinstance(document, Mapping):
        raise ParseFailure(f"Document root must be an object, got {type(document).__name__}")
    return document


def parse_legacy_document(source: Source, *, config: Optional[ImportConfig] = None) -> ImportResult:
    """
    Migrate a historical export into canonical models.

    Args:
        source: JSON text (str/bytes) or an already-decoded mapping
        config: Defaults for missing fields (ImportConfig() if omitted)

    Returns:
        ImportResult; ``degraded`` is True when any field fell back

    Raises:
        ParseFailure: Invalid JSON, a non-object root, or a non-object
            ``exam`` field

    Example:
        >>> imported = parse_legacy_document('{"name": "Trial", "questions": []}')
        >>> imported.mode, imported.exam.name
        ('template', 'Trial')
    """
    document = _decode(source)
    migration = _Migration(config or ImportConfig())

    raw_exam = document.get("exam")
    if raw_exam is None:
        raw_exam = document
    elif not isinstance(raw_exam, Mapping):
        raise ParseFailure(f"'exam' must be an object, got {type(raw_exam).__name__}")

    mode = detect_mode(document)
    exam = migration.exam(raw_exam)

    students: List[Student] = []
    results: List[Result] = []
    if mode == "analysis":
        raw_results = document.get("results")
        raw_students = document.get("students")
        if raw_students is not None and not isinstance(raw_students, list):
            migration.warn("students", "not a list, ignored")
            raw_students = None

        if isinstance(raw_results, list) and raw_results:
            results = _migrate_results(migration, raw_results, raw_students or [], exam, students)
        elif raw_students:
            matcher = _LeafMatcher(exam)
            seen: Set[str] = set()
            for index, raw in enumerate(raw_students):
                student, result = migration.embedded(raw, f"students[{index}]", exam, matcher)
                if student is None:
                    continue
                if student.id in seen:
                    migration.warn(f"students[{index}].id", f"duplicate student {student.id!r}, skipped")
                    continue
                seen.add(student.id)
                students.append(student)
                results.append(result)

    logger.info(
        f"Imported {exam.name!r} ({mode}): {len(exam.leaf_questions)} leaf question(s), "
        f"{len(students)} student(s), {len(results)} result(s), {len(migration.issues)} issue(s)"
    )

    return ImportResult(
        exam=exam,
        students=tuple(students),
        results=tuple(results),
        mode=mode,
        issues=tuple(migration.issues),
    )


def _migrate_results(
    migration: _Migration,
    raw_results: List[Any],
    raw_students: List[Any],
    exam: Exam,
    students: List[Student],
) -> List[Result]:
    results = []
    seen: Set[Tuple[str, str]] = set()
    for index, raw in enumerate(raw_results):
        result = migration.result(raw, f"results[{index}]", exam)
        if result is None:
            continue
        if result.key in seen:
            migration.warn(
                f"results[{index}]",
                f"duplicate result for student {result.student_id!r} on exam {result.exam_id!r}, skipped",
            )
            continue
        seen.add(result.key)
        results.append(result)

    known: Set[str] = set()
    for index, raw in enumerate(raw_students):
        student = migration.explicit_student(raw, f"students[{index}]")
        if student is not None and student.id not in known:
            known.add(student.id)
            students.append(student)

    for result in results:
        if result.student_id not in known:
            known.add(result.student_id)
            students.append(Student.placeholder(result.student_id, migration.config.placeholder_prefix))
    return results


def load_legacy_file(path: Path, *, config: Optional[ImportConfig] = None) -> ImportResult:
    """
    Read a document under a shared lock and migrate it.

    Raises:
        FileNotFoundError: If the file does not exist
        ParseFailure: If the content is not a usable JSON object
    """
    try:
        document = load_document_json(Path(path))
    except ValueError as e:
        raise ParseFailure(f"Unreadable JSON in {path}: {e}") from e
    return parse_legacy_document(document, config=config)
