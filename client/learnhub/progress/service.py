"""Student progress service layer.

API calls for:
- Course progress (cached per course until invalidated)
- Overall progress across enrolled courses
- Lesson completion, gated on the lesson's quiz
- Lesson progress details and reset

Summaries returned by the backend are recomputed with the aggregator so the
percentage rules hold regardless of backend rounding.
"""

from typing import Any

import structlog

from learnhub.core.errors import ClientValidationError
from learnhub.core.http import ApiClient
from learnhub.courses.schemas import LessonResponse
from learnhub.progress.aggregator import (
    recompute_course_summary,
    recompute_entry,
    summarize_progress,
)
from learnhub.progress.schemas import (
    CourseProgressResponse,
    LessonProgressDetail,
    OverallProgressResponse,
)


logger = structlog.get_logger(__name__)


# ==============================================================================
# Custom Exceptions
# ==============================================================================


class QuizNotPassedError(ClientValidationError):
    """Lesson quiz must be passed before the lesson can be completed."""

    def __init__(
        self,
        message: str = "You must pass the quiz before marking this lesson as complete.",
    ):
        super().__init__(message, "quiz_not_passed")


# ==============================================================================
# Progress Service
# ==============================================================================


class ProgressService:
    """Service for student progress, shared by every consumer of progress data."""

    def __init__(self, api: ApiClient):
        self.api = api
        self._course_cache: dict[int, CourseProgressResponse] = {}

    def cached_course_progress(self, course_id: int) -> CourseProgressResponse | None:
        return self._course_cache.get(course_id)

    def invalidate(self, course_id: int) -> None:
        """Drop the cached progress of one course."""
        if self._course_cache.pop(course_id, None) is not None:
            logger.debug("progress_cache_invalidated", course_id=course_id)

    def clear_cache(self) -> None:
        self._course_cache.clear()

    # ==========================================================================
    # Queries
    # ==========================================================================

    async def get_course_progress(
        self, course_id: int, refresh: bool = False
    ) -> CourseProgressResponse:
        """Get the current student's progress in a course.

        Args:
            course_id: Course ID.
            refresh: Bypass the cache.
        """
        if not refresh and course_id in self._course_cache:
            return self._course_cache[course_id]

        payload = await self.api.get(f"/course-progress/{course_id}/")
        progress = CourseProgressResponse.model_validate(payload)
        progress.progress_summary = recompute_course_summary(progress.progress_summary)

        self._course_cache[course_id] = progress
        return progress

    async def get_overall_progress(self) -> OverallProgressResponse:
        """Get progress across every enrolled course, with recomputed totals."""
        payload = await self.api.get("/course-progress/overall/")
        overall = OverallProgressResponse.model_validate(payload)

        overall.course_progress = [recompute_entry(e) for e in overall.course_progress]
        overall.summary = summarize_progress(overall.course_progress)
        return overall

    async def get_lesson_progress_details(self, lesson_id: int) -> LessonProgressDetail:
        payload = await self.api.get(f"/lesson-progress/{lesson_id}/details/")
        return LessonProgressDetail.model_validate(payload or {})

    # ==========================================================================
    # Commands
    # ==========================================================================

    def ensure_lesson_completable(self, lesson: LessonResponse) -> None:
        """Check the quiz gate locally.

        Raises:
            QuizNotPassedError: The lesson's quiz is not passed and attempts
                remain.
        """
        if lesson.quiz is not None and lesson.quiz.blocks_completion:
            raise QuizNotPassedError()

    async def mark_lesson_complete(self, lesson: LessonResponse) -> Any:
        """Mark a lesson complete for the current student.

        Raises:
            QuizNotPassedError: Quiz gate not met; nothing is sent.
            ApiError: Backend rejected the completion.
        """
        self.ensure_lesson_completable(lesson)

        result = await self.api.post(f"/lessons/{lesson.id}/mark_complete/")
        if lesson.course_id is not None:
            self.invalidate(lesson.course_id)
        else:
            self.clear_cache()

        logger.info("lesson_completed", lesson_id=lesson.id, course_id=lesson.course_id)
        return result

    async def reset_lesson_progress(
        self, lesson_id: int, course_id: int | None = None
    ) -> None:
        """Reset a lesson's progress (the whole cache is dropped without course_id)."""
        await self.api.post(f"/lesson-progress/{lesson_id}/reset/")
        if course_id is not None:
            self.invalidate(course_id)
        else:
            self.clear_cache()

        logger.info("lesson_progress_reset", lesson_id=lesson_id, course_id=course_id)
