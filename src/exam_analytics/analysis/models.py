"""
Module: analysis.models

Purpose:
    Immutable output types of the analysis engine. Consumers (charts,
    tables, reports) read these as a stable contract: percentages are
    always in [0, 100] and never NaN or None.

Key Classes:
    - AnalysisStats: Descriptive statistics over result totals
    - QuestionPerformance: Per-leaf average and percentage
    - TagPerformance: Per-tag bucket totals and percentage
    - BandData: Count of results in one percentage band
    - ExamAnalysis: Everything above for one exam and result set

Dependencies:
    - dataclasses (std)

Used By:
    - analysis.engine
    - analysis.comparison
    - cli
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from exam_analytics.core.utils import Number

# Dimension key -> Question attribute holding the tags.
TAG_DIMENSIONS: Dict[str, str] = {
    "verb": "cognitive_verbs",
    "module": "modules",
    "content": "content_areas",
    "outcome": "outcomes",
}


@dataclass(frozen=True)
class AnalysisStats:
    """
    Descriptive statistics over result totals.

    std_dev is the population standard deviation (divisor N). With no
    results every field is 0.
    """
    mean: float = 0.0
    median: float = 0.0
    min: Number = 0
    max: Number = 0
    std_dev: float = 0.0
    count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mean": self.mean,
            "median": self.median,
            "min": self.min,
            "max": self.max,
            "stdDev": self.std_dev,
            "count": self.count,
        }


@dataclass(frozen=True)
class QuestionPerformance:
    """
    Performance on one leaf question.

    Attributes:
        id: Leaf id
        number: Leaf's own label
        full_label: Composite label like "1(a)"
        prompt: Leaf notes, used as a prompt snippet
        type: Question type value ("MCQ", "Short", "Extended")
        avg: Mean score over results where the leaf has a score
        max: Leaf max marks
        pct: avg as a percentage of max
        answered: Number of results with a score for the leaf
    """
    id: str
    number: str
    full_label: str
    prompt: str
    type: str
    avg: float
    max: Number
    pct: float
    answered: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "number": self.number,
            "fullLabel": self.full_label,
            "prompt": self.prompt,
            "type": self.type,
            "avg": self.avg,
            "max": self.max,
            "pct": self.pct,
            "answered": self.answered,
        }


@dataclass(frozen=True)
class TagPerformance:
    """Summed scores and maxima of every scored leaf carrying a tag."""
    name: str
    score: Number
    max: Number
    pct: float

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "score": self.score, "max": self.max, "pct": self.pct}


@dataclass(frozen=True)
class BandData:
    """
    One percentage-of-total band.

    Attributes:
        name: "Band 1" .. "Band 6"
        range: Human-readable range like "50-59%"
        lower: Inclusive lower bound in percent
        count: Results whose total falls in the band
    """
    name: str
    range: str
    lower: int
    count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "range": self.range, "lower": self.lower, "count": self.count}


@dataclass(frozen=True)
class ExamAnalysis:
    """
    Full analysis of one exam over a caller-filtered result set.

    Attributes:
        stats: Statistics over result totals
        by_question: One entry per leaf, in leaf order
        by_verb / by_module / by_content_area / by_outcome: Tag buckets,
            sorted by pct descending
        distractors: MCQ leaf id -> {letter: count}
        score_distributions: Non-MCQ leaf id -> {score: count}
        bands: Six bands, lowest first
        problem_questions: The three lowest-pct leaves
    """
    stats: AnalysisStats
    by_question: Tuple[QuestionPerformance, ...] = ()
    by_verb: Tuple[TagPerformance, ...] = ()
    by_module: Tuple[TagPerformance, ...] = ()
    by_content_area: Tuple[TagPerformance, ...] = ()
    by_outcome: Tuple[TagPerformance, ...] = ()
    distractors: Dict[str, Dict[str, int]] = field(default_factory=dict)
    score_distributions: Dict[str, Dict[str, int]] = field(default_factory=dict)
    bands: Tuple[BandData, ...] = ()
    problem_questions: Tuple[QuestionPerformance, ...] = ()

    def tags(self, dimension: str) -> Tuple[TagPerformance, ...]:
        """
        Tag buckets for a dimension key.

        Raises:
            ValueError: If dimension is not one of TAG_DIMENSIONS
        """
        buckets = {
            "verb": self.by_verb,
            "module": self.by_module,
            "content": self.by_content_area,
            "outcome": self.by_outcome,
        }
        if dimension not in buckets:
            raise ValueError(f"Unknown tag dimension: {dimension!r} (expected one of {sorted(buckets)})")
        return buckets[dimension]

    def question(self, question_id: str) -> QuestionPerformance | None:
        for performance in self.by_question:
            if performance.id == question_id:
                return performance
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the camelCase read contract."""
        return {
            "stats": self.stats.to_dict(),
            "byQuestion": [q.to_dict() for q in self.by_question],
            "byVerb": [t.to_dict() for t in self.by_verb],
            "byModule": [t.to_dict() for t in self.by_module],
            "byContentArea": [t.to_dict() for t in self.by_content_area],
            "byOutcome": [t.to_dict() for t in self.by_outcome],
            "distractors": {k: dict(v) for k, v in self.distractors.items()},
            "scoreDistributions": {k: dict(v) for k, v in self.score_distributions.items()},
            "bands": [b.to_dict() for b in self.bands],
            "problemQuestions": [q.to_dict() for q in self.problem_questions],
        }
