"""
Utils Package

Numeric helpers used by the models themselves, plus two submodules that
depend on the models and are imported directly:

- `core.utils.serialization`: to/from dict, export documents, document files
- `core.utils.file_locking`: portalocker-backed JSON file access
"""

from .numbers import Number, coerce_number, format_number, normalize_number, safe_pct

__all__ = [
    "Number",
    "coerce_number",
    "format_number",
    "normalize_number",
    "safe_pct",
]
