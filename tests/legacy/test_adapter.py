"""
Unit Tests for the Legacy Adapter

Tests for mode detection, exam migration, result migration and failure
semantics of parse_legacy_document.
"""

import json

import pytest

from exam_analytics.config import ImportConfig
from exam_analytics.core.models import QuestionType
from exam_analytics.legacy import (
    ParseFailure,
    detect_mode,
    load_legacy_file,
    parse_legacy_document,
)


@pytest.fixture
def embedded_document() -> dict:
    """Older export: marks embedded per student, keyed by printed label."""
    return {
        "exam": {
            "id": "exam-old",
            "title": "2019 Trial",
            "questions": [
                {
                    "id": "q1",
                    "number": "1",
                    "subQuestions": [
                        {"id": "q1a", "number": "a", "marks": 2, "module": "M1"},
                        {"id": "q1b", "number": "b", "marks": 3, "verbs": ["Explain"]},
                    ],
                },
                {"id": "q2", "label": "2", "type": "Multiple choice", "answer": "C", "marks": 1},
            ],
        },
        "students": [
            {"id": "s1", "firstName": "Ada", "lastName": "L", "responses": {"1(a)": 2, "q1b": "1.5", "2": {"mark": 1, "value": "c"}}},
            {"id": "s2", "name": "Grace", "marks": {"1a": {"score": 1}, "9": 4, "1b": "n/a"}},
        ],
    }


class TestDetectMode:

    @pytest.mark.parametrize(
        "document, expected",
        [
            ({"mode": "template", "results": [{"id": "r"}]}, "template"),
            ({"mode": "analysis"}, "analysis"),
            ({"results": [{"id": "r"}]}, "analysis"),
            ({"results": []}, "template"),
            ({"students": [{"id": "s"}]}, "template"),
            ({"students": [{"id": "s", "marks": {}}]}, "analysis"),
            ({"mode": "other"}, "template"),
            ({}, "template"),
        ],
    )
    def test_detect_mode_when_document_then_first_match_wins(self, document, expected):
        assert detect_mode(document) == expected


class TestExamMigration:

    def test_parse_when_template_then_no_results(self):
        imported = parse_legacy_document({"id": "e1", "name": "Topic Test", "questions": [{"id": "q", "number": "1"}]})
        assert imported.mode == "template"
        assert imported.results == ()
        assert imported.students == ()
        assert imported.exam.id == "e1"
        assert not imported.degraded

    def test_parse_when_fields_missing_then_config_defaults(self):
        config = ImportConfig(default_cohort="11", default_syllabus_id="physics")
        imported = parse_legacy_document('{"questions": []}', config=config)
        exam = imported.exam

        assert exam.name == "Imported Exam"
        assert exam.cohort == "11"
        assert exam.syllabus_id == "physics"
        assert exam.date
        assert imported.degraded
        assert [i.path for i in imported.issues] == ["exam.id"]

    def test_parse_when_legacy_keys_then_mapped(self, embedded_document):
        exam = parse_legacy_document(embedded_document).exam

        assert exam.name == "2019 Trial"
        q1a, q1b, q2 = exam.leaf_questions
        assert q1a.max_marks == 2
        assert q1a.modules == ("M1",)
        assert q1b.cognitive_verbs == ("Explain",)
        assert q2.number == "2"
        assert q2.type == QuestionType.MCQ
        assert q2.correct_answer == "C"

    def test_parse_when_zero_max_marks_then_kept(self):
        exam = parse_legacy_document({"id": "e", "questions": [{"id": "q", "number": "1", "maxMarks": 0}]}).exam
        assert exam.leaf_questions[0].max_marks == 0

    def test_parse_when_bad_max_marks_then_default_and_issue(self):
        imported = parse_legacy_document({"id": "e", "questions": [{"id": "q", "number": "1", "marks": "lots"}]})
        assert imported.exam.leaf_questions[0].max_marks == 1
        assert imported.issues[0].path == "questions[0].marks"

    def test_parse_when_stale_total_then_explicit_total_honoured(self):
        """A historical total that disagrees with the rollup is kept verbatim."""
        doc = {"id": "e", "totalMarks": 80, "questions": [{"id": "q", "number": "1", "maxMarks": 5}]}
        exam = parse_legacy_document(doc).exam
        assert exam.total_marks == 80
        assert exam.calculated_marks == 5

    def test_parse_when_total_matches_rollup_then_derived(self):
        doc = {"id": "e", "totalMarks": 5, "questions": [{"id": "q", "number": "1", "maxMarks": 5}]}
        assert parse_legacy_document(doc).exam.marks is None

    def test_parse_when_duplicate_question_ids_then_re_keyed(self):
        doc = {"id": "e", "questions": [{"id": "q", "number": "1"}, {"id": "q", "number": "2"}]}
        imported = parse_legacy_document(doc)
        first, second = imported.exam.questions
        assert first.id == "q"
        assert second.id != "q"
        assert "duplicate" in imported.issues[0].message

    def test_parse_when_question_not_object_then_skipped(self):
        imported = parse_legacy_document({"id": "e", "questions": ["oops", {"id": "q", "number": "1"}]})
        assert [q.id for q in imported.exam.questions] == ["q"]
        assert imported.issues[0].path == "questions[0]"


class TestEmbeddedMigration:
    """Per-student mark maps matched to leaves."""

    def test_parse_when_embedded_then_matched_by_every_tier(self, embedded_document):
        imported = parse_legacy_document(embedded_document)
        ada, grace = imported.results

        assert imported.mode == "analysis"
        assert dict(ada.question_scores) == {"q1a": 2, "q1b": 1.5, "q2": 1}
        assert dict(ada.question_responses) == {"q2": "c"}
        assert dict(grace.question_scores) == {"q1a": 1}
        assert ada.exam_id == grace.exam_id == "exam-old"

    def test_parse_when_embedded_then_student_names(self, embedded_document):
        students = parse_legacy_document(embedded_document).students
        assert [(s.id, s.name) for s in students] == [("s1", "Ada L"), ("s2", "Grace")]

    def test_parse_when_unmatched_or_bad_values_then_skipped_with_issues(self, embedded_document):
        imported = parse_legacy_document(embedded_document)
        paths = [i.path for i in imported.issues]
        assert "students[1].marks.9" in paths
        assert "students[1].marks.1b" in paths

    def test_parse_when_legacy_1a_scenario_then_score_keyed_by_leaf_id(self):
        doc = {
            "students": [{"id": "s1", "responses": {"1a": {"score": 2}}}],
            "exam": {"questions": [{"number": "1", "subQuestions": [{"number": "a", "maxMarks": 2}]}]},
        }

        imported = parse_legacy_document(doc)

        assert imported.mode == "analysis"
        assert len(imported.results) == 1
        leaf = imported.exam.leaf_questions[0]
        assert dict(imported.results[0].question_scores) == {leaf.id: 2}
        assert imported.results[0].score_total == 2

    def test_parse_when_branch_label_then_not_matched(self, embedded_document):
        embedded_document["students"][0]["responses"] = {"1": 5}
        imported = parse_legacy_document(embedded_document)
        assert dict(imported.results[0].question_scores) == {}

    def test_parse_when_no_name_then_unknown_student(self):
        doc = {"exam": {"id": "e", "questions": []}, "students": [{"id": "s", "marks": {}}]}
        assert parse_legacy_document(doc).students[0].name == "Unknown Student"

    def test_parse_when_student_without_id_then_generated(self):
        doc = {"exam": {"id": "e", "questions": []}, "students": [{"name": "Ann", "marks": {}}]}
        imported = parse_legacy_document(doc)
        assert imported.students[0].id
        assert imported.results[0].student_id == imported.students[0].id

    def test_parse_when_nested_response_is_object_then_score_kept_response_dropped(self, embedded_document):
        embedded_document["students"][0]["responses"] = {"2": {"mark": 1, "value": ["c"]}}

        imported = parse_legacy_document(embedded_document)

        ada = imported.results[0]
        assert dict(ada.question_scores) == {"q2": 1}
        assert dict(ada.question_responses) == {}
        assert "students[0].responses.2" in [i.path for i in imported.issues]


class TestResultListMigration:
    """Version 2.0 style documents carrying a results list."""

    def test_parse_when_results_then_placeholders_for_missing_students(self):
        doc = {
            "exam": {"id": "e", "questions": [{"id": "q", "number": "1", "maxMarks": 4}]},
            "results": [
                {"id": "r1", "examId": "e", "studentId": "abcdef", "questionScores": {"q": 3}},
                {"id": "r2", "studentId": "s2", "questionScores": {"q": 1}},
            ],
            "students": [{"id": "s2", "name": "Bo", "cohort": "12", "wellbeing": {"status": "Green"}}],
            "version": "2.0",
        }

        imported = parse_legacy_document(doc)

        assert [(s.id, s.name) for s in imported.students] == [("s2", "Bo"), ("abcdef", "Student abcd")]
        assert imported.students[0].attributes == {"wellbeing": {"status": "Green"}}
        assert imported.results[1].exam_id == "e"
        assert not imported.degraded

    def test_parse_when_non_numeric_score_then_dropped_with_issue(self):
        doc = {
            "exam": {"id": "e", "questions": []},
            "results": [{"id": "r", "studentId": "s", "questionScores": {"q": "x", "p": 2}}],
        }
        imported = parse_legacy_document(doc)
        assert dict(imported.results[0].question_scores) == {"p": 2}
        assert imported.issues[0].path == "results[0].questionScores.q"

    def test_parse_when_result_without_student_then_skipped(self):
        doc = {"exam": {"id": "e", "questions": []}, "results": [{"id": "r"}, {"id": "r2", "studentId": "s"}]}
        imported = parse_legacy_document(doc)
        assert [r.id for r in imported.results] == ["r2"]

    def test_parse_when_custom_prefix_then_used_for_placeholders(self):
        doc = {"exam": {"id": "e", "questions": []}, "results": [{"id": "r", "studentId": "xyz123"}]}
        imported = parse_legacy_document(doc, config=ImportConfig(placeholder_prefix="Pupil"))
        assert imported.students[0].name == "Pupil xyz1"

    def test_parse_when_same_student_and_exam_twice_then_first_kept(self):
        doc = {
            "exam": {"id": "e1", "questions": [{"id": "q", "number": "1", "maxMarks": 5}]},
            "results": [
                {"id": "r1", "studentId": "s1", "examId": "e1", "questionScores": {"q": 2}},
                {"id": "r2", "studentId": "s1", "examId": "e1", "questionScores": {"q": 4}},
            ],
        }

        imported = parse_legacy_document(doc)

        assert [r.key for r in imported.results] == [("s1", "e1")]
        assert imported.results[0].score_total == 2
        assert [s.id for s in imported.students] == ["s1"]
        assert imported.issues[0].path == "results[1]"
        assert "duplicate" in imported.issues[0].message

    def test_parse_when_same_student_other_exam_then_both_kept(self):
        doc = {
            "exam": {"id": "e1", "questions": []},
            "results": [
                {"id": "r1", "studentId": "s1", "examId": "e1"},
                {"id": "r2", "studentId": "s1", "examId": "e2"},
            ],
        }
        imported = parse_legacy_document(doc)
        assert [r.id for r in imported.results] == ["r1", "r2"]
        assert not imported.degraded

    def test_parse_when_response_not_text_or_number_then_dropped_with_issue(self):
        doc = {
            "exam": {"id": "e", "questions": []},
            "results": [{
                "id": "r",
                "studentId": "s",
                "questionResponses": {"q": "B", "p": 3, "f": 2.0, "x": {"x": 1}, "t": True, "n": None},
            }],
        }

        imported = parse_legacy_document(doc)

        assert dict(imported.results[0].question_responses) == {"q": "B", "p": "3", "f": "2"}
        assert [i.path for i in imported.issues] == [
            "results[0].questionResponses.x",
            "results[0].questionResponses.t",
        ]


class TestParseFailure:

    @pytest.mark.parametrize("source", ["{not json", "[1, 2]", '"text"', b"\xff\xfe", {"exam": "nope"}, '{"exam": 3}'])
    def test_parse_when_unreadable_then_parse_failure(self, source):
        with pytest.raises(ParseFailure):
            parse_legacy_document(source)

    def test_parse_when_exam_null_then_top_level_used(self):
        imported = parse_legacy_document({"exam": None, "id": "e", "questions": []})
        assert imported.exam.id == "e"


class TestLoadLegacyFile:

    def test_load_when_file_then_parsed(self, tmp_path, embedded_document):
        path = tmp_path / "legacy.json"
        path.write_text(json.dumps(embedded_document), encoding="utf-8")
        assert load_legacy_file(path).exam.id == "exam-old"

    def test_load_when_invalid_json_then_parse_failure(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{", encoding="utf-8")
        with pytest.raises(ParseFailure):
            load_legacy_file(path)

    def test_load_when_not_utf8_then_parse_failure(self, tmp_path):
        path = tmp_path / "latin1.json"
        path.write_bytes(b'{"name": "\xff\xfe"}')
        with pytest.raises(ParseFailure):
            load_legacy_file(path)

    def test_load_when_missing_then_file_not_found(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_legacy_file(tmp_path / "missing.json")
