"""
Module: analysis

Purpose:
    Analysis Engine: statistics, per-question and per-tag performance,
    score distributions, MCQ distractors, percentage bands, and the
    cohort-vs-individual comparison built on them.
"""

from .comparison import (
    CohortRank,
    StudentComparison,
    TagComparison,
    cohort_rank,
    compare_tags,
    compare_to_cohort,
)
from .engine import BANDS, PROBLEM_QUESTION_COUNT, analyze_performance, band_for
from .models import (
    TAG_DIMENSIONS,
    AnalysisStats,
    BandData,
    ExamAnalysis,
    QuestionPerformance,
    TagPerformance,
)
from .stats import calculate_stats

__all__ = [
    "BANDS",
    "PROBLEM_QUESTION_COUNT",
    "TAG_DIMENSIONS",
    "AnalysisStats",
    "BandData",
    "CohortRank",
    "ExamAnalysis",
    "QuestionPerformance",
    "StudentComparison",
    "TagComparison",
    "TagPerformance",
    "analyze_performance",
    "band_for",
    "calculate_stats",
    "cohort_rank",
    "compare_tags",
    "compare_to_cohort",
]
