"""
Command line entry point.

Usage:
    exam-analytics import FILE
    exam-analytics analyze FILE [--student ID] [--output PATH]
    python -m exam_analytics ...
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from exam_analytics import __version__
from exam_analytics.analysis import analyze_performance, compare_to_cohort
from exam_analytics.core.utils.serialization import save_document_json
from exam_analytics.legacy import ImportResult, ParseFailure, load_legacy_file

logger = logging.getLogger("exam_analytics.cli")


def _print_summary(imported: ImportResult) -> None:
    exam = imported.exam
    print(f"Mode:       {imported.mode}")
    print(f"Exam:       {exam.name} ({exam.id})")
    print(f"Total:      {exam.total_marks} marks")
    print(f"Questions:  {len(exam.questions)} root / {len(exam.leaf_questions)} leaf")
    print(f"Students:   {len(imported.students)}")
    print(f"Results:    {len(imported.results)}")
    if imported.degraded:
        print(f"Warnings:   {len(imported.issues)}")
        for issue in imported.issues:
            print(f"  - {issue}")


def cmd_import(args: argparse.Namespace) -> int:
    imported = load_legacy_file(args.file)
    _print_summary(imported)
    return 0


def cmd_analyze(args: argparse.Namespace) -> int:
    imported = load_legacy_file(args.file)
    exam = imported.exam
    results = [r for r in imported.results if r.exam_id == exam.id]
    if len(results) != len(imported.results):
        logger.warning(f"Ignoring {len(imported.results) - len(results)} result(s) for other exams")

    if args.student:
        document = compare_to_cohort(exam, results, args.student).to_dict()
    else:
        document = analyze_performance(exam, results).to_dict()

    if args.output:
        save_document_json(document, args.output)
        logger.info(f"Analysis written to: {args.output}")
    else:
        print(json.dumps(document, indent=2, ensure_ascii=False))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="exam-analytics",
        description="Import legacy exam exports and analyze results",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    import_parser = subparsers.add_parser("import", help="Parse a legacy document and print a summary")
    import_parser.add_argument("file", type=Path, help="Exported JSON document")
    import_parser.set_defaults(func=cmd_import)

    analyze_parser = subparsers.add_parser("analyze", help="Run the analysis and print or save it as JSON")
    analyze_parser.add_argument("file", type=Path, help="Exported JSON document with results")
    analyze_parser.add_argument("--student", "-s", help="Compare this student id to the cohort")
    analyze_parser.add_argument("--output", "-o", type=Path, help="Write JSON here instead of stdout")
    analyze_parser.set_defaults(func=cmd_analyze)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )

    try:
        return args.func(args)
    except FileNotFoundError as e:
        logger.error(f"Error: {e}")
        return 1
    except ParseFailure as e:
        logger.error(f"Error: could not read {args.file}: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
