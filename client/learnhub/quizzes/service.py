"""Quiz service layer.

API calls for loading quizzes, submitting attempts and reading the attempt
history. Authoring calls (quiz and question creation) are for instructors.
"""

from collections.abc import Sequence

import structlog

from learnhub.core.http import ApiClient, unwrap_list
from learnhub.quizzes.schemas import (
    AnswerSubmission,
    CreateQuestionRequest,
    CreateQuizRequest,
    QuestionResponse,
    QuizAttemptHistory,
    QuizAttemptResult,
    QuizDetail,
)


logger = structlog.get_logger(__name__)


class QuizService:
    """Service for quiz calls."""

    def __init__(self, api: ApiClient):
        self.api = api

    async def get_quiz(self, quiz_id: int) -> QuizDetail:
        """Load a quiz with its questions, sorted by ``order``."""
        payload = await self.api.get(f"/quizzes/{quiz_id}/")
        quiz = QuizDetail.model_validate(payload)
        quiz.questions = sorted(quiz.questions, key=lambda q: q.order)
        return quiz

    async def list_quizzes(self, lesson_id: int | None = None) -> list[QuizDetail]:
        payload = await self.api.get("/quizzes/", params={"lesson": lesson_id})
        return [QuizDetail.model_validate(item) for item in unwrap_list(payload)]

    async def submit_attempt(
        self, quiz_id: int, answers: Sequence[AnswerSubmission]
    ) -> QuizAttemptResult:
        """Submit answers for grading. Each call consumes one attempt."""
        payload = await self.api.post(
            f"/quizzes/{quiz_id}/attempt/",
            json={"answers": [a.model_dump() for a in answers]},
        )
        result = QuizAttemptResult.model_validate(payload)
        logger.info(
            "quiz_attempt_graded",
            quiz_id=quiz_id,
            score=str(result.score),
            passed=result.passed,
            remaining_attempts=result.remaining_attempts,
        )
        return result

    async def get_attempt_history(self, quiz_id: int) -> list[QuizAttemptHistory]:
        payload = await self.api.get(f"/quiz-attempts/quiz/{quiz_id}/history/")
        return [
            QuizAttemptHistory.model_validate(item) for item in unwrap_list(payload)
        ]

    async def create_quiz(self, data: CreateQuizRequest) -> QuizDetail:
        payload = await self.api.post("/quizzes/", json=data.model_dump(mode="json"))
        quiz = QuizDetail.model_validate(payload)
        logger.info("quiz_created", quiz_id=quiz.id, lesson_id=data.lesson)
        return quiz

    async def create_question(self, data: CreateQuestionRequest) -> QuestionResponse:
        payload = await self.api.post("/questions/", json=data.model_dump(mode="json"))
        question = QuestionResponse.model_validate(payload)
        logger.info("question_created", question_id=question.id, quiz_id=data.quiz)
        return question
