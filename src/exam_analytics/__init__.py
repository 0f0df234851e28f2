"""Top-level package for the Assessment Analytics Engine.

Provides subpackages:
- exam_analytics.core – canonical models, schema validation, serialization
- exam_analytics.tree – question tree operations and label heuristics
- exam_analytics.scoring – per-student score entry and the result store
- exam_analytics.analysis – descriptive statistics over exam results
- exam_analytics.legacy – importer for historical export documents
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        try:
            content = pyproject.read_text()
            for line in content.splitlines():
                if line.strip().startswith("version"):
                    # Parse: version = "1.0.0"
                    return line.split("=")[1].strip().strip('"').strip("'")
        except OSError:
            pass

    try:
        from importlib.metadata import version as pkg_version, PackageNotFoundError
        return pkg_version("exam-analytics")
    except PackageNotFoundError:
        return "0.0.0"

__version__ = _get_version()
__all__: list[str] = ["__version__"]
