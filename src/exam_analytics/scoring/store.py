"""
Module: scoring.store

Purpose:
    In-memory store of Results, at most one per (student_id, exam_id).
    All writes go through one serialized upsert that merges partial deltas
    into the existing score/response maps, so two entry surfaces editing
    different questions of the same Result never overwrite each other.

Key Classes:
    - ResultStore: Keyed Result aggregate with merge-based upsert

Dependencies:
    - threading (std)
    - uuid (std)
    - scoring.entry: CellEdit, score_cell, ValidationRejected

Used By:
    - Entry surfaces (grid and single-student views, external)
    - legacy import callers via merge_result()
"""

from __future__ import annotations

import logging
import threading
import uuid
from typing import Dict, Iterable, List, Optional, Tuple

from exam_analytics.core.models import Exam, Result

from .entry import CellEdit, ValidationRejected, score_cell

logger = logging.getLogger(__name__)

ResultKey = Tuple[str, str]


class ResultStore:
    """
    Result aggregate keyed by (student_id, exam_id).

    A Result is created on its first write and replaced by a merged copy
    on every later write. There is no whole-map replacement: callers pass
    deltas only.

    Example:
        >>> store = ResultStore()
        >>> store.record_response(exam, "s1", "q1a", "2")
        >>> store.get("s1", exam.id).score_total
        2
    """

    def __init__(self, results: Iterable[Result] = ()) -> None:
        self._lock = threading.Lock()
        self._results: Dict[ResultKey, Result] = {}
        for result in results:
            self.merge_result(result)

    # ─────────────────────────────────────────────────────────────────────────
    # Writes
    # ─────────────────────────────────────────────────────────────────────────

    def upsert(self, student_id: str, exam_id: str, edits: Iterable[CellEdit]) -> Result:
        """
        Merge cell edits into the Result for (student_id, exam_id).

        Creates the Result on first write. Edits are applied in order, so
        a later edit to the same leaf wins.

        Returns:
            The stored Result after the merge
        """
        edits = list(edits)
        scores = {edit.question_id: edit.score for edit in edits}
        responses = {edit.question_id: edit.response for edit in edits}
        return self._merge(student_id, exam_id, scores, responses)

    def record_response(self, exam: Exam, student_id: str, question_id: str, raw: object) -> Result:
        """
        Validate a raw value for one leaf of ``exam`` and merge it.

        Raises:
            ValidationRejected: If ``question_id`` is not a leaf of the exam
                or the value is invalid. The store is unchanged.
        """
        question = exam.get_question(question_id)
        if question is None:
            raise ValidationRejected(
                f"Question {question_id!r} is not part of exam {exam.id!r}",
                question_id, raw,
            )
        edit = score_cell(question, raw)
        return self.upsert(student_id, exam.id, [edit])

    def merge_result(self, result: Result) -> Result:
        """
        Merge an externally produced Result (e.g. from an import) as deltas.

        The stored id is kept when a Result for the same key already exists.
        """
        return self._merge(
            result.student_id,
            result.exam_id,
            dict(result.question_scores),
            dict(result.question_responses),
            result_id=result.id,
        )

    def _merge(
        self,
        student_id: str,
        exam_id: str,
        scores: Dict[str, object],
        responses: Dict[str, object],
        *,
        result_id: Optional[str] = None,
    ) -> Result:
        key = (student_id, exam_id)
        with self._lock:
            current = self._results.get(key)
            if current is None:
                current = Result(
                    id=result_id or str(uuid.uuid4()),
                    exam_id=exam_id,
                    student_id=student_id,
                )
                logger.debug(f"Created result {current.id} for student {student_id} on exam {exam_id}")
            merged = current.with_edits(scores, responses)
            self._results[key] = merged
            return merged

    # ─────────────────────────────────────────────────────────────────────────
    # Bulk Removal
    # ─────────────────────────────────────────────────────────────────────────

    def remove_exam(self, exam_id: str) -> int:
        """Remove every Result for an exam; returns how many were removed."""
        return self._remove(lambda key: key[1] == exam_id)

    def remove_student(self, student_id: str) -> int:
        """Remove every Result for a student; returns how many were removed."""
        return self._remove(lambda key: key[0] == student_id)

    def clear(self) -> None:
        with self._lock:
            self._results.clear()

    def _remove(self, predicate) -> int:
        with self._lock:
            doomed = [key for key in self._results if predicate(key)]
            for key in doomed:
                del self._results[key]
        if doomed:
            logger.info(f"Removed {len(doomed)} result(s)")
        return len(doomed)

    # ─────────────────────────────────────────────────────────────────────────
    # Reads
    # ─────────────────────────────────────────────────────────────────────────

    def get(self, student_id: str, exam_id: str) -> Optional[Result]:
        with self._lock:
            return self._results.get((student_id, exam_id))

    def results_for_exam(self, exam_id: str) -> List[Result]:
        """Results for one exam in insertion order."""
        with self._lock:
            return [r for key, r in self._results.items() if key[1] == exam_id]

    def all_results(self) -> List[Result]:
        with self._lock:
            return list(self._results.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._results)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._results
