"""Tests for dashboards and analytics."""

from decimal import Decimal

import pytest

from learnhub.analytics.service import completion_rate, format_hours
from learnhub.auth.permissions import PermissionDeniedError
from learnhub.core.errors import AuthorizationError
from learnhub.main import LearnHub
from tests.fake_backend import FakeBackend


class TestFormatting:
    """Dashboard number formatting."""

    @pytest.mark.parametrize(
        ("completed", "total", "expected"),
        [(0, 0, 0), (0, 3, 0), (1, 3, 33), (2, 3, 67), (1, 8, 13), (4, 4, 100)],
    )
    def test_completion_rate(self, completed: int, total: int, expected: int) -> None:
        assert completion_rate(completed, total) == expected

    @pytest.mark.parametrize(
        ("hours", "expected"),
        [(0.5, "30 min"), (0.25, "15 min"), (1, "1.0 hours"), (2.5, "2.5 hours")],
    )
    def test_format_hours(self, hours: float, expected: str) -> None:
        assert format_hours(hours) == expected


class TestAnalyticsService:
    """AnalyticsService against the fake backend."""

    @pytest.mark.asyncio
    async def test_student_dashboard(self, alice: LearnHub) -> None:
        dashboard = await alice.analytics.student_dashboard()

        assert dashboard.student is not None
        assert dashboard.student.username == "alice"
        assert dashboard.stats.total_courses == 1
        assert dashboard.stats.in_progress_courses == 1
        assert [e.course_id for e in dashboard.enrollments] == [1]
        assert dashboard.model_extra == {"recommended_courses": []}

    @pytest.mark.asyncio
    async def test_instructor_dashboard(self, bob: LearnHub) -> None:
        dashboard = await bob.analytics.instructor_dashboard()

        assert dashboard.overall_stats.total_courses == 2
        assert dashboard.overall_stats.total_students == 2
        assert dashboard.overall_stats.total_revenue == Decimal("49.99")
        assert len(dashboard.course_statistics) == 2

    @pytest.mark.asyncio
    async def test_instructor_views_rejected_for_students(
        self, alice: LearnHub, backend: FakeBackend
    ) -> None:
        with pytest.raises(PermissionDeniedError) as exc_info:
            await alice.analytics.instructor_dashboard()
        with pytest.raises(PermissionDeniedError):
            await alice.analytics.course_analytics(1)
        with pytest.raises(PermissionDeniedError):
            await alice.analytics.student_progress_report(1)

        assert exc_info.value.code == "permission_denied"
        assert backend.count("GET", "/api/dashboard/instructor/") == 0

    @pytest.mark.asyncio
    async def test_backend_forbidden_keeps_session(
        self, alice: LearnHub, backend: FakeBackend
    ) -> None:
        backend.fail("GET", "/api/dashboard/student/", status=403)

        with pytest.raises(AuthorizationError) as exc_info:
            await alice.analytics.student_dashboard()

        assert exc_info.value.status_code == 403
        assert alice.session.is_authenticated

    @pytest.mark.asyncio
    async def test_course_analytics(self, bob: LearnHub) -> None:
        analytics = await bob.analytics.course_analytics(1)

        assert analytics.course is not None
        assert analytics.course.title == "Python Basics"
        assert analytics.progress_distribution["26-50"] == 1

    @pytest.mark.asyncio
    async def test_progress_reports(self, bob: LearnHub) -> None:
        report = await bob.analytics.student_progress_reports()

        rates = {r.course_id: r.completion_rate for r in report.course_reports}
        assert rates == {1: Decimal(0), 2: Decimal(100)}

    @pytest.mark.asyncio
    async def test_activity(self, alice: LearnHub) -> None:
        items = await alice.analytics.activity()

        assert [item.description for item in items] == ["Completed Introduction"]
        assert items[0].type == "lesson_completed"
