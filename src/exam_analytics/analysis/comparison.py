"""
Module: analysis.comparison

Purpose:
    Cohort-vs-individual views: one student's tag percentages beside the
    cohort's, the student's rank by total, and a bundle of both analyses.

Key Functions:
    - compare_tags(): Pair cohort and student percentages per tag
    - cohort_rank(): Rank of a student's total within a result set
    - compare_to_cohort(): Cohort analysis, individual analysis and rank

Used By:
    - cli analyze --student
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple

from exam_analytics.core.models import Exam, Result

from .engine import analyze_performance
from .models import ExamAnalysis


@dataclass(frozen=True)
class TagComparison:
    name: str
    cohort_pct: float
    student_pct: float

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "cohortPct": self.cohort_pct, "studentPct": self.student_pct}


@dataclass(frozen=True)
class CohortRank:
    """
    Position of one student's total among a result set.

    rank is 1 for the highest total and None when the student has no
    result in the set; of is the size of the set.
    """
    rank: Optional[int]
    of: int

    def to_dict(self) -> Dict[str, Any]:
        return {"rank": self.rank, "of": self.of}


@dataclass(frozen=True)
class StudentComparison:
    student_id: str
    cohort: ExamAnalysis
    individual: ExamAnalysis
    mean_difference: float
    rank: CohortRank

    def tags(self, dimension: str) -> Tuple[TagComparison, ...]:
        return compare_tags(self.cohort, self.individual, dimension)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "studentId": self.student_id,
            "cohort": self.cohort.to_dict(),
            "individual": self.individual.to_dict(),
            "meanDifference": self.mean_difference,
            "rank": self.rank.to_dict(),
            "byVerb": [c.to_dict() for c in self.tags("verb")],
            "byModule": [c.to_dict() for c in self.tags("module")],
            "byContentArea": [c.to_dict() for c in self.tags("content")],
            "byOutcome": [c.to_dict() for c in self.tags("outcome")],
        }


def compare_tags(cohort: ExamAnalysis, individual: ExamAnalysis, dimension: str) -> Tuple[TagComparison, ...]:
    """
    Pair each cohort tag with the individual's percentage for it.

    Order follows the cohort's buckets. A tag the individual never scored
    on reads as 0.

    Raises:
        ValueError: If dimension is not "verb", "module", "outcome" or "content"
    """
    student_pcts = {tag.name: tag.pct for tag in individual.tags(dimension)}
    return tuple(
        TagComparison(name=tag.name, cohort_pct=tag.pct, student_pct=student_pcts.get(tag.name, 0.0))
        for tag in cohort.tags(dimension)
    )


def cohort_rank(results: Sequence[Result], student_id: str) -> CohortRank:
    """Rank by score_total descending; ties keep input order."""
    ranked = sorted(results, key=lambda r: r.score_total, reverse=True)
    for position, result in enumerate(ranked, start=1):
        if result.student_id == student_id:
            return CohortRank(rank=position, of=len(ranked))
    return CohortRank(rank=None, of=len(ranked))


def compare_to_cohort(exam: Exam, results: Iterable[Result], student_id: str) -> StudentComparison:
    """
    Analyze the cohort and one student side by side.

    Args:
        exam: Exam being analyzed
        results: Cohort results (already filtered by the caller)
        student_id: Student to compare

    Returns:
        StudentComparison; a student without a result gets an empty
        individual analysis and rank None
    """
    results = list(results)
    cohort = analyze_performance(exam, results)
    individual = analyze_performance(exam, [r for r in results if r.student_id == student_id])
    return StudentComparison(
        student_id=student_id,
        cohort=cohort,
        individual=individual,
        mean_difference=individual.stats.mean - cohort.stats.mean,
        rank=cohort_rank(results, student_id),
    )
