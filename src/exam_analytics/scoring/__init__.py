"""
Module: scoring

Purpose:
    Scoring & Response Store: validates hand-entered marks per leaf
    question and keeps one Result per (student, exam), updated only by
    merging partial deltas.

Key Functions:
    - score_cell(): Raw value -> CellEdit, or ValidationRejected

Key Classes:
    - ResultStore: Serialized, merge-based upsert
    - CellEdit: One leaf's delta
    - ValidationRejected: Rejected value, store unchanged
"""

from .entry import MCQ_OPTIONS, CellEdit, ValidationRejected, score_cell
from .store import ResultStore

__all__ = [
    "MCQ_OPTIONS",
    "CellEdit",
    "ResultStore",
    "ValidationRejected",
    "score_cell",
]
