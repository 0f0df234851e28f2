"""
Exam id collisions on import.

Imports preserve ids so that re-importing an export links back to the
same exam. When the caller already holds an exam with that id and wants
to keep both, the imported copy is re-keyed and renamed.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from typing import Collection, Iterable

from exam_analytics.config import ImportConfig
from exam_analytics.core.models import Exam, Result

logger = logging.getLogger(__name__)


def resolve_exam_collision(
    exam: Exam,
    existing_ids: Collection[str],
    suffix: str = ImportConfig.collision_suffix,
) -> Exam:
    """
    Re-key an imported exam whose id is already taken.

    Args:
        exam: Imported exam
        existing_ids: Exam ids the caller already holds
        suffix: Appended to the name of a re-keyed exam

    Returns:
        The exam unchanged when its id is free, otherwise a copy with a
        fresh id and ``name + suffix``
    """
    if exam.id not in existing_ids:
        return exam
    renamed = replace(exam, id=str(uuid.uuid4()), name=f"{exam.name}{suffix}")
    logger.info(f"Exam id {exam.id} already exists; imported as {renamed.id} ({renamed.name!r})")
    return renamed


def rebind_results(results: Iterable[Result], exam_id: str) -> list[Result]:
    """Point results at a re-keyed exam id."""
    return [r if r.exam_id == exam_id else replace(r, exam_id=exam_id) for r in results]
