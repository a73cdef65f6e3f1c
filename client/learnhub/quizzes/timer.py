"""Background countdown for a timed quiz session."""

import asyncio
import contextlib

import structlog

from learnhub.core.errors import ApiError
from learnhub.quizzes.models import QuizSessionState
from learnhub.quizzes.session import QuizSession


logger = structlog.get_logger(__name__)


class QuizTimer:
    """Calls ``session.tick()`` once per interval while the attempt runs.

    The loop ends on its own once the session leaves ``in_progress``
    (submitted by the student or by expiry). A failed auto-submission is
    kept in ``last_error`` so the caller can offer a manual retry; the
    session keeps its answers in that case.
    """

    def __init__(self, session: QuizSession, interval_seconds: float = 60.0):
        self.session = session
        self.interval_seconds = interval_seconds
        self.last_error: ApiError | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start ticking. No-op for quizzes without a time limit."""
        if self.running:
            logger.warning("quiz_timer_already_running", quiz_id=self.session.quiz.id)
            return
        if self.session.time_left_minutes is None:
            return

        self.last_error = None
        self._task = asyncio.create_task(
            self._run(), name=f"quiz_timer_{self.session.quiz.id}"
        )
        logger.debug("quiz_timer_started", quiz_id=self.session.quiz.id)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.debug("quiz_timer_stopped", quiz_id=self.session.quiz.id)

    async def wait(self) -> None:
        """Wait until the countdown loop finishes."""
        if self._task is not None:
            await self._task

    async def _run(self) -> None:
        while self.session.state == QuizSessionState.IN_PROGRESS:
            await asyncio.sleep(self.interval_seconds)
            try:
                await self.session.tick()
            except ApiError as e:
                self.last_error = e
                logger.warning(
                    "quiz_auto_submit_failed",
                    quiz_id=self.session.quiz.id,
                    error=e.message,
                )
                return
            if self.session.time_expired:
                return
