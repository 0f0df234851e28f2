import pytest
import sys
from pathlib import Path

# Add src to sys.path so we can import exam_analytics
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from exam_analytics.core.models import Exam, Question, QuestionType, Result  # noqa: E402


# Common test fixtures
@pytest.fixture
def branch_exam() -> Exam:
    """
    Exam with one branch "1" (leaves a: 2 marks, b: 3 marks) and one
    MCQ leaf "2" (1 mark, answer B).
    """
    q1a = Question(
        id="q1a", number="a", max_marks=2,
        modules=("M1",), cognitive_verbs=("Explain",), outcomes=("CH12-1",),
        content_areas=("Bonding",),
    )
    q1b = Question(
        id="q1b", number="b", max_marks=3,
        modules=("M1", "M2"), cognitive_verbs=("Calculate",),
    )
    q1 = Question(id="q1", number="1", max_marks=0, sub_questions=(q1a, q1b))
    q2 = Question(
        id="q2", number="2", max_marks=1, type=QuestionType.MCQ, correct_answer="B",
        modules=("M2",), notes="Which gas",
    )
    return Exam(
        id="exam-1", name="Trial HSC", date="2024-06-01",
        cohort="12", syllabus_id="chemistry", questions=(q1, q2),
    )


@pytest.fixture
def branch_results(branch_exam: Exam) -> list:
    """Three results on branch_exam with totals 6, 3 and 0."""
    return [
        Result("r1", branch_exam.id, "s1", {"q1a": 2, "q1b": 3, "q2": 1}, {"q1a": "2", "q1b": "3", "q2": "B"}),
        Result("r2", branch_exam.id, "s2", {"q1a": 1, "q1b": 2, "q2": 0}, {"q1a": "1", "q1b": "2", "q2": "C"}),
        Result("r3", branch_exam.id, "s3", {"q1a": 0}, {"q1a": "0", "q2": "c"}),
    ]
