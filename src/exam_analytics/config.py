"""
Module: config

Purpose:
    Configuration dataclasses for the legacy importer. Immutable
    configuration with validation on construction.

Key Classes:
    - ImportConfig: Per-field defaults used when an imported document
      is missing optional fields

Dependencies:
    - dataclasses (std)

Used By:
    - legacy.adapter: Degraded field defaults
    - legacy.collisions: Rename suffix
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ImportConfig:
    """
    Defaults applied by the legacy importer (immutable).

    Attributes:
        default_exam_name: Name used when the document has none
        default_cohort: Cohort used when the document has none
        default_syllabus_id: Syllabus used when the document has none
        placeholder_prefix: Prefix of synthesized student names
            ("Student 1a2b" for id "1a2b...")
        unknown_student_name: Name for embedded students with no name fields
        collision_suffix: Appended to an exam name when the caller resolves
            an id collision

    Example:
        >>> config = ImportConfig(default_cohort="11")
        >>> config.default_syllabus_id
        'chemistry'
    """

    default_exam_name: str = "Imported Exam"
    default_cohort: str = "12"
    default_syllabus_id: str = "chemistry"
    placeholder_prefix: str = "Student"
    unknown_student_name: str = "Unknown Student"
    collision_suffix: str = " (Imported)"

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not self.default_exam_name.strip():
            raise ValueError("default_exam_name must not be blank")
        if not self.unknown_student_name.strip():
            raise ValueError("unknown_student_name must not be blank")
        if not self.collision_suffix:
            raise ValueError("collision_suffix must not be empty")
