"""
Unit Tests for Exam Model

Tests for derived totals, lookups and serialization of Exam.
"""

from dataclasses import replace

from exam_analytics.core.models import Exam, Marks, Question


class TestExamTotals:
    """Exam totals are always derived unless explicitly recorded."""

    def test_total_marks_when_no_marks_then_rollup(self, branch_exam):
        assert branch_exam.total_marks == 6
        assert branch_exam.calculated_marks == 6

    def test_total_marks_when_explicit_then_explicit_wins(self, branch_exam):
        exam = replace(branch_exam, marks=Marks.explicit(50))
        assert exam.total_marks == 50
        assert exam.calculated_marks == 6

    def test_total_marks_when_aggregate_marks_stored_then_ignored(self, branch_exam):
        """Only explicit totals are honoured; stale stored totals are not."""
        exam = replace(branch_exam, marks=Marks(value=99, source="aggregate"))
        assert exam.total_marks == 6

    def test_from_dict_when_stale_total_then_recalculated(self, branch_exam):
        data = branch_exam.to_dict()
        data["totalMarks"] = 999
        assert Exam.from_dict(data).total_marks == 6

    def test_total_marks_when_no_questions_then_zero(self):
        assert Exam(id="e", name="Empty", date="2024-01-01").total_marks == 0


class TestExamLookups:
    """Tests for get_question / get_leaf / leaf_questions."""

    def test_leaf_questions_when_nested_then_leaf_order(self, branch_exam):
        assert [q.id for q in branch_exam.leaf_questions] == ["q1a", "q1b", "q2"]

    def test_get_question_when_branch_id_then_found(self, branch_exam):
        assert branch_exam.get_question("q1").number == "1"

    def test_get_leaf_when_branch_id_then_none(self, branch_exam):
        assert branch_exam.get_leaf("q1") is None
        assert branch_exam.get_leaf("q1b").max_marks == 3

    def test_get_question_when_unknown_then_none(self, branch_exam):
        assert branch_exam.get_question("nope") is None


class TestExamSerialization:

    def test_to_dict_when_called_then_camel_case_with_total(self, branch_exam):
        d = branch_exam.to_dict()
        assert d["syllabusId"] == "chemistry"
        assert d["totalMarks"] == 6
        assert [q["id"] for q in d["questions"]] == ["q1", "q2"]

    def test_from_dict_when_round_trip_then_same_document(self, branch_exam):
        """Branch maxMarks is re-emitted as the rollup, so compare documents."""
        rebuilt = Exam.from_dict(branch_exam.to_dict())
        assert rebuilt.to_dict() == branch_exam.to_dict()
        assert rebuilt.leaf_questions == branch_exam.leaf_questions

    def test_from_dict_when_optional_fields_missing_then_defaults(self):
        exam = Exam.from_dict({"id": "e", "questions": [{"id": "q", "number": "1"}]})
        assert exam.name == ""
        assert exam.cohort == ""
        assert exam.questions == (Question(id="q", number="1"),)
