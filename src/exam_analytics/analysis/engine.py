"""
Module: analysis.engine

Purpose:
    Turn an exam's question tree and a caller-filtered set of Results into
    question, tag, distribution and band views. Pure: no filtering, no I/O,
    one accumulation pass over the results.

Key Functions:
    - analyze_performance(): Exam + Results -> ExamAnalysis
    - band_for(): Percentage -> index into BANDS

Dependencies:
    - analysis.stats (numpy)
    - tree.flatten_with_labels: Leaf order and composite labels

Used By:
    - analysis.comparison
    - cli analyze
"""

from __future__ import annotations

import logging
import math
from typing import Dict, Iterable, List, Tuple

from exam_analytics.core.models import Exam, Result
from exam_analytics.core.utils import Number, format_number, normalize_number, safe_pct
from exam_analytics.tree import LabelledLeaf, flatten_with_labels

from .models import (
    TAG_DIMENSIONS,
    BandData,
    ExamAnalysis,
    QuestionPerformance,
    TagPerformance,
)
from .stats import calculate_stats

logger = logging.getLogger(__name__)


PROBLEM_QUESTION_COUNT = 3

# (name, range, inclusive lower bound), lowest band first.
BANDS: Tuple[Tuple[str, str, int], ...] = (
    ("Band 1", "<50%", 0),
    ("Band 2", "50-59%", 50),
    ("Band 3", "60-69%", 60),
    ("Band 4", "70-79%", 70),
    ("Band 5", "80-89%", 80),
    ("Band 6", "90-100%", 90),
)


def band_for(pct: float) -> int:
    """Index into BANDS for a percentage of the exam total."""
    for index in range(len(BANDS) - 1, -1, -1):
        if pct >= BANDS[index][2]:
            return index
    return 0


class _Bucket:
    """Running score/max sums for one question or tag."""

    __slots__ = ("score", "max", "count")

    def __init__(self) -> None:
        self.score: Number = 0
        self.max: Number = 0
        self.count = 0

    def add(self, score: Number, max_marks: Number) -> None:
        self.score += score
        self.max += max_marks
        self.count += 1


def _usable_score(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


# ─────────────────────────────────────────────────────────────────────────────
# Analysis
# ─────────────────────────────────────────────────────────────────────────────

def analyze_performance(exam: Exam, results: Iterable[Result]) -> ExamAnalysis:
    """
    Analyze an exam over a set of Results.

    Results are used as given; filtering by class or cohort is the
    caller's job. A leaf contributes to a question or tag view only for
    results where it has a score; MCQ distractor counts come from the
    recorded response letter whether or not a score exists.

    Args:
        exam: Exam providing the leaf catalogue, tags and max marks
        results: Results to analyze (normally all for ``exam.id``)

    Returns:
        ExamAnalysis with every percentage in [0, 100]
    """
    results = list(results)
    leaves = flatten_with_labels(exam.questions)

    question_buckets: Dict[str, _Bucket] = {leaf.id: _Bucket() for leaf in leaves}
    tag_buckets: Dict[str, Dict[str, _Bucket]] = {dimension: {} for dimension in TAG_DIMENSIONS}
    distractors: Dict[str, Dict[str, int]] = {}
    distributions: Dict[str, Dict[str, int]] = {}
    for leaf in leaves:
        if leaf.question.is_mcq:
            distractors[leaf.id] = {}
        else:
            distributions[leaf.id] = {}
    band_counts = [0] * len(BANDS)

    exam_total = exam.total_marks
    for result in results:
        band_counts[band_for(safe_pct(result.score_total, exam_total))] += 1

        for leaf in leaves:
            question = leaf.question
            score = result.question_scores.get(question.id)

            if _usable_score(score):
                question_buckets[question.id].add(score, question.max_marks)
                for dimension, attribute in TAG_DIMENSIONS.items():
                    for tag in getattr(question, attribute):
                        tag_buckets[dimension].setdefault(tag, _Bucket()).add(score, question.max_marks)
                if not question.is_mcq:
                    key = format_number(score)
                    distributions[question.id][key] = distributions[question.id].get(key, 0) + 1

            if question.is_mcq:
                response = result.question_responses.get(question.id)
                if isinstance(response, str) and response.strip():
                    option = response.strip().upper()
                    distractors[question.id][option] = distractors[question.id].get(option, 0) + 1

    by_question = tuple(_question_performance(leaf, question_buckets[leaf.id]) for leaf in leaves)
    problem_questions = tuple(sorted(by_question, key=lambda q: q.pct)[:PROBLEM_QUESTION_COUNT])
    bands = tuple(
        BandData(name=name, range=label, lower=lower, count=count)
        for (name, label, lower), count in zip(BANDS, band_counts)
    )

    logger.debug(
        f"Analyzed exam {exam.id}: {len(results)} result(s), {len(leaves)} leaf question(s)"
    )

    return ExamAnalysis(
        stats=calculate_stats([r.score_total for r in results]),
        by_question=by_question,
        by_verb=_tag_performance(tag_buckets["verb"]),
        by_module=_tag_performance(tag_buckets["module"]),
        by_content_area=_tag_performance(tag_buckets["content"]),
        by_outcome=_tag_performance(tag_buckets["outcome"]),
        distractors=distractors,
        score_distributions=distributions,
        bands=bands,
        problem_questions=problem_questions,
    )


def _question_performance(leaf: LabelledLeaf, bucket: _Bucket) -> QuestionPerformance:
    question = leaf.question
    avg = bucket.score / bucket.count if bucket.count else 0.0
    return QuestionPerformance(
        id=question.id,
        number=question.number,
        full_label=leaf.full_label,
        prompt=question.notes,
        type=question.type.value,
        avg=float(avg),
        max=question.max_marks,
        pct=safe_pct(avg, question.max_marks),
        answered=bucket.count,
    )


def _tag_performance(buckets: Dict[str, _Bucket]) -> Tuple[TagPerformance, ...]:
    performances: List[TagPerformance] = [
        TagPerformance(
            name=name,
            score=normalize_number(bucket.score),
            max=normalize_number(bucket.max),
            pct=safe_pct(bucket.score, bucket.max),
        )
        for name, bucket in buckets.items()
    ]
    # equal percentages keep first-seen order
    return tuple(sorted(performances, key=lambda t: t.pct, reverse=True))

