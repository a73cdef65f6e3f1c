"""Pydantic schemas for quizzes, questions and attempts."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from learnhub.quizzes.models import OPTION_LETTERS


def _normalize_letter(value: str) -> str:
    letter = value.strip().upper()
    if letter not in OPTION_LETTERS:
        raise ValueError(f"Answer must be one of {', '.join(OPTION_LETTERS)}")
    return letter


# ==============================================================================
# Quiz Schemas
# ==============================================================================


class QuestionResponse(BaseModel):
    """Multiple-choice question. ``correct_answer`` is hidden from students."""

    model_config = ConfigDict(extra="ignore")

    id: int
    question_text: str
    option_a: str
    option_b: str
    option_c: str
    option_d: str
    correct_answer: str | None = None
    points: int = 1
    explanation: str | None = None
    order: int = 0

    @property
    def options(self) -> dict[str, str]:
        """Options keyed by letter."""
        return {
            "A": self.option_a,
            "B": self.option_b,
            "C": self.option_c,
            "D": self.option_d,
        }


class QuizDetail(BaseModel):
    """Quiz with its questions and the student's attempt state."""

    model_config = ConfigDict(extra="ignore")

    id: int
    lesson: int | None = None
    title: str
    description: str | None = None
    instructions: str | None = None
    passing_score: Decimal = Decimal(70)
    max_attempts: int = 3
    time_limit_minutes: int | None = None
    attempts_remaining: int = 0
    best_score: Decimal | None = None
    passed: bool = False
    questions: list[QuestionResponse] = Field(default_factory=list)


class CreateQuizRequest(BaseModel):
    """Quiz creation request (instructors)."""

    lesson: int
    title: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    instructions: str = ""
    passing_score: Decimal = Field(Decimal(70), ge=0, le=100)
    max_attempts: int = Field(3, ge=1)
    time_limit_minutes: int | None = Field(None, ge=1)


class CreateQuestionRequest(BaseModel):
    """Question creation request (instructors)."""

    quiz: int
    question_text: str = Field(..., min_length=1)
    option_a: str = Field(..., min_length=1)
    option_b: str = Field(..., min_length=1)
    option_c: str = Field(..., min_length=1)
    option_d: str = Field(..., min_length=1)
    correct_answer: str
    points: int = Field(1, ge=1)
    explanation: str = ""
    order: int = Field(0, ge=0)

    @field_validator("correct_answer")
    @classmethod
    def validate_correct_answer(cls, v: str) -> str:
        return _normalize_letter(v)


# ==============================================================================
# Attempt Schemas
# ==============================================================================


class AnswerSubmission(BaseModel):
    """One answered question in an attempt."""

    question_id: int
    answer: str

    @field_validator("answer")
    @classmethod
    def validate_answer(cls, v: str) -> str:
        return _normalize_letter(v)


class DetailedResult(BaseModel):
    """Per-question grading feedback."""

    model_config = ConfigDict(extra="ignore")

    question_text: str = ""
    user_answer: str | None = None
    correct_answer: str | None = None
    is_correct: bool = False
    explanation: str | None = None


class QuizAttemptResult(BaseModel):
    """Graded attempt as returned by the backend."""

    model_config = ConfigDict(extra="ignore")

    score: Decimal
    passed: bool
    correct_answers: int = 0
    total_questions: int = 0
    attempt_number: int = 1
    remaining_attempts: int = 0
    detailed_results: list[DetailedResult] = Field(default_factory=list)


class QuizAttemptHistory(BaseModel):
    """One past attempt."""

    model_config = ConfigDict(extra="ignore")

    id: int | None = None
    attempt_number: int
    score: Decimal
    passed: bool
    started_at: datetime | None = None
    completed_at: datetime | None = None
