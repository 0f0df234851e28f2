"""
Unit Tests for Paper Scaffolding
"""

import pytest

from exam_analytics.core.models import QuestionType
from exam_analytics.tree import flatten_with_labels, total_marks
from exam_analytics.tree.scaffold import ScaffoldSection, SectionKind, build_scaffold, parse_sub_parts


class TestParseSubParts:

    def test_parse_sub_parts_when_flat_then_leaves(self):
        parts = parse_sub_parts("a, b, c")
        assert [p.number for p in parts] == ["a", "b", "c"]
        assert all(p.is_leaf for p in parts)

    def test_parse_sub_parts_when_nested_then_children(self):
        parts = parse_sub_parts("a, b(i;ii)")
        assert [c.number for c in parts[1].sub_questions] == ["i", "ii"]

    def test_parse_sub_parts_when_blank_then_empty(self):
        assert parse_sub_parts("  ") == ()
        assert len(parse_sub_parts("a,,b")) == 2


class TestBuildScaffold:

    def test_build_scaffold_when_mcq_then_numbered_mcq_leaves(self):
        roots = build_scaffold([ScaffoldSection("Section I", SectionKind.MCQ, count=3, marks=1)])
        assert [q.number for q in roots] == ["1", "2", "3"]
        assert all(q.type == QuestionType.MCQ and q.notes == "Section I" for q in roots)

    def test_build_scaffold_when_sections_then_numbering_continues(self):
        roots = build_scaffold([
            ScaffoldSection("Section I", SectionKind.MCQ, count=2),
            ScaffoldSection("Section II", SectionKind.WRITTEN, questions=("a, b(i;ii)", "")),
        ])

        assert [q.number for q in roots] == ["1", "2", "3", "4"]
        assert roots[3].is_leaf
        labels = [leaf.full_label for leaf in flatten_with_labels(roots)]
        assert labels == ["1", "2", "3(a)", "3(b)(i)", "3(b)(ii)", "4"]
        assert total_marks(roots) == 6

    def test_build_scaffold_when_ids_then_all_unique(self):
        roots = build_scaffold([ScaffoldSection("W", SectionKind.WRITTEN, questions=("a(i;ii)", "a(i;ii)"))])
        ids = [q.id for root in roots for q in root.iter_all()]
        assert len(ids) == len(set(ids))

    def test_section_when_negative_count_then_raises_error(self):
        with pytest.raises(ValueError, match="count"):
            ScaffoldSection("Bad", SectionKind.MCQ, count=-1)
