"""Tests for the progress service against the fake backend."""

from decimal import Decimal
from unittest.mock import Mock

import pytest

from learnhub.core.http import ApiClient
from learnhub.courses.schemas import LessonQuizSummary, LessonResponse
from learnhub.main import LearnHub
from learnhub.progress.aggregator import certificate_visible
from learnhub.progress.service import ProgressService, QuizNotPassedError
from tests.fake_backend import FakeBackend


PROGRESS_PATH = "/api/course-progress/1/"


class TestCourseProgress:
    """Per-course progress and its cache."""

    @pytest.mark.asyncio
    async def test_percentage_is_recomputed(self, alice: LearnHub) -> None:
        progress = await alice.progress.get_course_progress(1)

        assert progress.is_enrolled is True
        assert progress.progress_summary.completed_lessons == 1
        assert progress.progress_summary.total_lessons == 3
        assert progress.progress_summary.progress_percentage == Decimal("33.33")
        assert progress.course_completed is False
        assert progress.progress_summary.next_lesson is not None
        assert progress.progress_summary.next_lesson.id == 2
        assert certificate_visible(progress) is False

    @pytest.mark.asyncio
    async def test_cached_until_refreshed(
        self, alice: LearnHub, backend: FakeBackend
    ) -> None:
        first = await alice.progress.get_course_progress(1)
        second = await alice.progress.get_course_progress(1)
        assert first is second
        assert backend.count("GET", PROGRESS_PATH) == 1

        await alice.progress.get_course_progress(1, refresh=True)
        assert backend.count("GET", PROGRESS_PATH) == 2

    @pytest.mark.asyncio
    async def test_not_enrolled(self, alice: LearnHub) -> None:
        progress = await alice.progress.get_course_progress(2)

        assert progress.is_enrolled is False
        assert progress.progress_summary.progress_percentage == 0

    @pytest.mark.asyncio
    async def test_lesson_details_keep_extra_fields(self, alice: LearnHub) -> None:
        details = await alice.progress.get_lesson_progress_details(1)

        assert details.completed is True
        assert details.lesson_title == "Introduction"
        assert details.model_extra == {"time_spent_minutes": 12}


class TestLessonCompletion:
    """Marking lessons complete, gated on the lesson quiz."""

    @pytest.mark.asyncio
    async def test_unpassed_quiz_blocks_without_request(
        self, alice: LearnHub, backend: FakeBackend
    ) -> None:
        lesson = await alice.lessons.get_lesson(2)
        assert lesson.quiz is not None
        assert lesson.quiz.blocks_completion is True

        with pytest.raises(QuizNotPassedError) as exc_info:
            await alice.progress.mark_lesson_complete(lesson)

        assert exc_info.value.code == "quiz_not_passed"
        assert backend.count("POST", "/api/lessons/2/mark_complete/") == 0

    @pytest.mark.asyncio
    async def test_completion_invalidates_cached_progress(
        self, alice: LearnHub
    ) -> None:
        await alice.progress.get_course_progress(1)
        lesson = await alice.lessons.get_lesson(3)

        await alice.progress.mark_lesson_complete(lesson)

        assert alice.progress.cached_course_progress(1) is None
        progress = await alice.progress.get_course_progress(1)
        assert progress.progress_summary.progress_percentage == Decimal("66.66")

    @pytest.mark.asyncio
    async def test_pass_quiz_then_complete_course(self, alice: LearnHub) -> None:
        session = await alice.open_quiz(1)
        session.start()
        for question_id, letter in ((1, "A"), (2, "B"), (3, "C")):
            session.select_answer(question_id, letter)
        await session.submit()

        lesson = await alice.lessons.get_lesson(2)
        assert lesson.quiz is not None
        assert lesson.quiz.passed is True
        await alice.progress.mark_lesson_complete(lesson)
        await alice.progress.mark_lesson_complete(await alice.lessons.get_lesson(3))

        progress = await alice.progress.get_course_progress(1)
        assert progress.progress_summary.progress_percentage == Decimal(100)
        assert progress.course_completed is True
        assert progress.progress_summary.next_lesson is None
        assert certificate_visible(progress) is True

    @pytest.mark.asyncio
    async def test_exhausted_attempts_unblock_completion(
        self, alice: LearnHub, backend: FakeBackend
    ) -> None:
        for _ in range(3):
            await alice.quizzes.submit_attempt(1, [])

        lesson = await alice.lessons.get_lesson(2)
        assert lesson.quiz is not None
        assert lesson.quiz.attempts_remaining == 0
        await alice.progress.mark_lesson_complete(lesson)

        assert backend.count("POST", "/api/lessons/2/mark_complete/") == 1

    def test_lesson_without_quiz_is_completable(self) -> None:
        service = ProgressService(Mock(spec=ApiClient))
        service.ensure_lesson_completable(LessonResponse(id=5, title="Plain"))
        service.ensure_lesson_completable(
            LessonResponse(
                id=6,
                title="Quiz done",
                quiz=LessonQuizSummary(id=1, attempts_remaining=2, passed=True),
            )
        )

    @pytest.mark.asyncio
    async def test_reset_lesson_progress(self, alice: LearnHub) -> None:
        await alice.progress.get_course_progress(1)

        await alice.progress.reset_lesson_progress(1, course_id=1)

        assert alice.progress.cached_course_progress(1) is None
        progress = await alice.progress.get_course_progress(1)
        assert progress.progress_summary.completed_lessons == 0
        assert progress.progress_summary.progress_percentage == 0


class TestOverallProgress:
    """Overall report with totals recomputed on the client."""

    @pytest.mark.asyncio
    async def test_summary_recomputed(
        self, alice: LearnHub, backend: FakeBackend
    ) -> None:
        backend.enroll(backend.users[1], backend.courses[2])
        backend.complete_lesson(backend.users[1], backend.lessons[4])

        overall = await alice.progress.get_overall_progress()

        by_course = {e.course_id: e for e in overall.course_progress}
        assert by_course[1].progress_percentage == Decimal("33.33")
        assert by_course[2].progress_percentage == Decimal(100)
        assert overall.summary.total_courses == 2
        assert overall.summary.completed_courses == 1
        assert overall.summary.in_progress_courses == 1
        assert overall.summary.total_certificates == 1
        assert overall.summary.average_progress == Decimal("66.66")
        assert overall.student is not None
        assert overall.student.username == "alice"

    @pytest.mark.asyncio
    async def test_logout_clears_cache(self, alice: LearnHub) -> None:
        await alice.progress.get_course_progress(1)

        await alice.logout()

        assert alice.progress.cached_course_progress(1) is None
