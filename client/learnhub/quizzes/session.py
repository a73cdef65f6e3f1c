"""Quiz attempt state machine.

Drives one student's attempt at a quiz:

    not_started -> in_progress -> submitted -> (retake) not_started
    locked (no attempts left; terminal)

The session owns navigation, the selected answers, the countdown and the
submission guard. Grading happens on the backend; the session only stores
the result. At most one attempt request is sent per attempt: user submits
and timer expiry both go through the same guard.
"""

from decimal import Decimal

import structlog

from learnhub.core.context import action_context
from learnhub.core.errors import (
    ActionInProgressError,
    ApiError,
    ClientValidationError,
    ConfirmationRequiredError,
    InvalidTransitionError,
)
from learnhub.quizzes.models import OPTION_LETTERS, QuizSessionState
from learnhub.quizzes.schemas import (
    AnswerSubmission,
    QuestionResponse,
    QuizAttemptResult,
    QuizDetail,
)
from learnhub.quizzes.service import QuizService


logger = structlog.get_logger(__name__)


# ==============================================================================
# Custom Exceptions
# ==============================================================================


class QuizLockedError(ClientValidationError):
    """No attempts left on this quiz."""

    def __init__(self, message: str = "You have used all attempts for this quiz"):
        super().__init__(message, "quiz_locked")


class RetakeNotAllowedError(ClientValidationError):
    """Retake requested after a pass, with no attempts left, or mid-attempt."""

    def __init__(self, message: str = "This quiz cannot be retaken"):
        super().__init__(message, "retake_not_allowed")


# ==============================================================================
# Quiz Session
# ==============================================================================


class QuizSession:
    """Client-side controller for one quiz attempt."""

    def __init__(self, quiz: QuizDetail, service: QuizService):
        if not quiz.questions:
            raise ClientValidationError("Quiz has no questions", "quiz_empty")

        self.quiz = quiz
        self.service = service

        self.attempts_remaining = quiz.attempts_remaining
        self.best_score: Decimal | None = quiz.best_score
        self.passed = quiz.passed

        self.answers: dict[int, str] = {}
        self.current_index = 0
        self.time_left_minutes: int | None = None
        self.result: QuizAttemptResult | None = None
        self._submitting = False
        self._time_expired = False

        self.state = (
            QuizSessionState.LOCKED
            if self.attempts_remaining <= 0
            else QuizSessionState.NOT_STARTED
        )

    # ==========================================================================
    # Read-only views
    # ==========================================================================

    @property
    def questions(self) -> list[QuestionResponse]:
        return self.quiz.questions

    @property
    def total_questions(self) -> int:
        return len(self.quiz.questions)

    @property
    def current_question(self) -> QuestionResponse:
        return self.quiz.questions[self.current_index]

    @property
    def answered_count(self) -> int:
        return len(self.answers)

    @property
    def unanswered_question_ids(self) -> list[int]:
        return [q.id for q in self.quiz.questions if q.id not in self.answers]

    @property
    def is_complete(self) -> bool:
        """Every question has an answer."""
        return self.answered_count == self.total_questions

    @property
    def completion_percentage(self) -> Decimal:
        """Position in the question list, as shown by the progress bar."""
        return Decimal(self.current_index + 1) * 100 / Decimal(self.total_questions)

    @property
    def is_submitting(self) -> bool:
        return self._submitting

    @property
    def time_expired(self) -> bool:
        return self._time_expired

    @property
    def can_start(self) -> bool:
        return self.state == QuizSessionState.NOT_STARTED

    @property
    def can_retake(self) -> bool:
        return (
            self.state == QuizSessionState.SUBMITTED
            and self.attempts_remaining > 0
            and not (self.result is not None and self.result.passed)
        )

    # ==========================================================================
    # Transitions
    # ==========================================================================

    def start(self) -> None:
        """Begin the attempt and reset the countdown.

        Raises:
            QuizLockedError: No attempts left.
            InvalidTransitionError: Attempt already started or submitted.
        """
        if self.state == QuizSessionState.LOCKED:
            raise QuizLockedError()
        if self.state != QuizSessionState.NOT_STARTED:
            raise InvalidTransitionError("Quiz already started")

        self.state = QuizSessionState.IN_PROGRESS
        self.current_index = 0
        self.time_left_minutes = self.quiz.time_limit_minutes or None
        self._time_expired = False

        logger.info(
            "quiz_started",
            quiz_id=self.quiz.id,
            attempts_remaining=self.attempts_remaining,
            time_limit_minutes=self.time_left_minutes,
        )

    def select_answer(self, question_id: int, letter: str) -> None:
        """Record the selected option for a question (replaces any earlier one).

        Raises:
            ClientValidationError: Unknown question or option letter.
        """
        self._require_in_progress()
        if self._submitting:
            raise ActionInProgressError("Quiz submission in progress")

        if all(q.id != question_id for q in self.quiz.questions):
            raise ClientValidationError(
                f"Question {question_id} is not part of this quiz", "unknown_question"
            )
        normalized = letter.strip().upper()
        if normalized not in OPTION_LETTERS:
            raise ClientValidationError(
                f"Answer must be one of {', '.join(OPTION_LETTERS)}", "invalid_answer"
            )

        self.answers[question_id] = normalized

    def next(self) -> None:
        self._require_in_progress()
        if self.current_index < self.total_questions - 1:
            self.current_index += 1

    def previous(self) -> None:
        self._require_in_progress()
        if self.current_index > 0:
            self.current_index -= 1

    def jump_to(self, index: int) -> None:
        self._require_in_progress()
        if not 0 <= index < self.total_questions:
            raise ClientValidationError(
                f"Question index must be between 0 and {self.total_questions - 1}",
                "invalid_question_index",
            )
        self.current_index = index

    async def tick(self) -> QuizAttemptResult | None:
        """Advance the countdown by one minute.

        Reaching zero submits the collected answers without confirmation.
        Returns the result of that auto-submission, otherwise None.
        """
        if self.state != QuizSessionState.IN_PROGRESS or not self.time_left_minutes:
            return None

        self.time_left_minutes -= 1
        if self.time_left_minutes > 0:
            return None

        self._time_expired = True
        logger.info("quiz_time_expired", quiz_id=self.quiz.id)
        if self._submitting:
            logger.debug("quiz_auto_submit_skipped", quiz_id=self.quiz.id)
            return None
        return await self._submit(auto=True)

    async def submit(self, confirmed: bool = False) -> QuizAttemptResult:
        """Submit the attempt on behalf of the student.

        Args:
            confirmed: Student accepted submitting with unanswered questions.

        Raises:
            ActionInProgressError: A submission is already in flight.
            InvalidTransitionError: Attempt not in progress.
            ConfirmationRequiredError: Unanswered questions and not confirmed.
            ApiError: Backend rejected the attempt; answers are kept.
        """
        if self._submitting:
            raise ActionInProgressError("Quiz submission already in progress")
        self._require_in_progress()

        if not confirmed and not self.is_complete and not self._time_expired:
            unanswered = self.total_questions - self.answered_count
            raise ConfirmationRequiredError(
                f"You have {unanswered} unanswered question(s). "
                "Submit anyway?"
            )

        return await self._submit(auto=False)

    def retake(self) -> None:
        """Reset for a fresh attempt.

        Raises:
            RetakeNotAllowedError: Quiz passed, attempts exhausted, or the
                current attempt was not submitted.
        """
        if not self.can_retake:
            raise RetakeNotAllowedError()

        self.state = QuizSessionState.NOT_STARTED
        self.answers = {}
        self.current_index = 0
        self.time_left_minutes = None
        self.result = None
        self._time_expired = False

        logger.info("quiz_retake", quiz_id=self.quiz.id)

    # ==========================================================================
    # Internals
    # ==========================================================================

    def build_submission(self) -> list[AnswerSubmission]:
        """Answered questions in quiz order; unanswered ones are omitted."""
        return [
            AnswerSubmission(question_id=q.id, answer=self.answers[q.id])
            for q in self.quiz.questions
            if q.id in self.answers
        ]

    def _require_in_progress(self) -> None:
        if self.state == QuizSessionState.LOCKED:
            raise QuizLockedError()
        if self.state != QuizSessionState.IN_PROGRESS:
            raise InvalidTransitionError(f"Quiz is {self.state.value}")

    async def _submit(self, auto: bool) -> QuizAttemptResult:
        # Callers checked the guard; no await happens before it is set.
        self._submitting = True
        answers = self.build_submission()
        try:
            with action_context("quiz_auto_submit" if auto else "quiz_submit"):
                result = await self.service.submit_attempt(self.quiz.id, answers)
        except ApiError as e:
            logger.warning(
                "quiz_submit_failed",
                quiz_id=self.quiz.id,
                auto=auto,
                error=e.message,
                code=e.code,
            )
            raise
        finally:
            self._submitting = False

        self.result = result
        self.state = QuizSessionState.SUBMITTED
        self.attempts_remaining = result.remaining_attempts
        self.passed = self.passed or result.passed
        if self.best_score is None or result.score > self.best_score:
            self.best_score = result.score

        logger.info(
            "quiz_submitted",
            quiz_id=self.quiz.id,
            auto=auto,
            answered=len(answers),
            total=self.total_questions,
            score=str(result.score),
            passed=result.passed,
            remaining_attempts=result.remaining_attempts,
        )
        return result
