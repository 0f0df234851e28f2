"""
Descriptive statistics over result totals.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from exam_analytics.core.utils import Number, normalize_number

from .models import AnalysisStats


def calculate_stats(scores: Sequence[Number]) -> AnalysisStats:
    """
    Mean, median, min, max, population std-dev and count.

    The median of an even-sized sample is the mean of the two middle
    values. An empty sample gives all zeros rather than NaN.
    """
    if len(scores) == 0:
        return AnalysisStats()

    values = np.asarray(scores, dtype=float)
    return AnalysisStats(
        mean=float(np.mean(values)),
        median=float(np.median(values)),
        min=normalize_number(float(np.min(values))),
        max=normalize_number(float(np.max(values))),
        std_dev=float(np.std(values, ddof=0)),
        count=int(values.size),
    )
