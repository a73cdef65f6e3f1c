"""Tests for quiz constants, schemas and service calls."""

import pytest
from pydantic import ValidationError

from learnhub.main import LearnHub
from learnhub.quizzes.models import OPTION_LETTERS, QuizSessionState, format_time_limit
from learnhub.quizzes.schemas import AnswerSubmission, CreateQuestionRequest


class TestFormatTimeLimit:
    """format_time_limit rendering."""

    @pytest.mark.parametrize(
        ("minutes", "expected"),
        [
            (90, "1h 30m"),
            (60, "1h 0m"),
            (45, "45m"),
            (1, "1m"),
            (None, "No limit"),
            (0, "No limit"),
        ],
    )
    def test_format(self, minutes: int | None, expected: str) -> None:
        assert format_time_limit(minutes) == expected


class TestAnswerLetters:
    """Option letters on submissions and question definitions."""

    def test_letters(self) -> None:
        assert OPTION_LETTERS == ("A", "B", "C", "D")

    def test_submission_normalizes_case(self) -> None:
        assert AnswerSubmission(question_id=1, answer=" c ").answer == "C"

    def test_submission_rejects_unknown_letter(self) -> None:
        with pytest.raises(ValidationError):
            AnswerSubmission(question_id=1, answer="E")

    def test_question_correct_answer_validated(self) -> None:
        fields = {
            "quiz": 1,
            "question_text": "2 + 2?",
            "option_a": "3",
            "option_b": "4",
            "option_c": "5",
            "option_d": "22",
        }
        assert CreateQuestionRequest(**fields, correct_answer="b").correct_answer == "B"
        with pytest.raises(ValidationError):
            CreateQuestionRequest(**fields, correct_answer="Z")

    def test_state_values(self) -> None:
        assert QuizSessionState("locked") == QuizSessionState.LOCKED


class TestQuizService:
    """Quiz listing and history calls."""

    @pytest.mark.asyncio
    async def test_list_quizzes_by_lesson(self, alice: LearnHub) -> None:
        quizzes = await alice.quizzes.list_quizzes(lesson_id=2)
        assert [q.id for q in quizzes] == [1]
        assert quizzes[0].attempts_remaining == 3
        assert await alice.quizzes.list_quizzes(lesson_id=1) == []

    @pytest.mark.asyncio
    async def test_history_starts_empty(self, alice: LearnHub) -> None:
        assert await alice.quizzes.get_attempt_history(1) == []
