"""Dashboard and analytics service layer.

Read-only API calls for the student dashboard, the instructor dashboard,
per-course analytics, progress reports and the activity feed.
"""

from decimal import ROUND_HALF_UP, Decimal

from learnhub.analytics.schemas import (
    ActivityItem,
    CourseAnalytics,
    InstructorDashboard,
    StudentDashboard,
    StudentProgressReport,
)
from learnhub.auth.permissions import UserRole, require_role
from learnhub.auth.session import SessionStore
from learnhub.core.http import ApiClient, unwrap_list


def completion_rate(completed: int, total: int) -> int:
    """Whole-number percentage of completed courses, as shown on dashboards."""
    if total <= 0:
        return 0
    rate = Decimal(completed) * 100 / Decimal(total)
    return int(rate.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def format_hours(hours: float) -> str:
    """``0.5 -> '30 min'``, ``2.5 -> '2.5 hours'``."""
    if hours < 1:
        return f"{round(hours * 60)} min"
    return f"{hours:.1f} hours"


class AnalyticsService:
    """Service for dashboard and analytics calls.

    Instructor views are checked against the session role before any request
    is sent.
    """

    def __init__(self, api: ApiClient, session: SessionStore):
        self.api = api
        self.session = session

    def _require_instructor(self) -> None:
        user = self.session.user
        require_role(user.role if user else None, UserRole.INSTRUCTOR)

    async def student_dashboard(self) -> StudentDashboard:
        payload = await self.api.get("/dashboard/student/")
        return StudentDashboard.model_validate(payload or {})

    async def instructor_dashboard(self) -> InstructorDashboard:
        self._require_instructor()
        payload = await self.api.get("/dashboard/instructor/")
        return InstructorDashboard.model_validate(payload or {})

    async def course_analytics(self, course_id: int) -> CourseAnalytics:
        self._require_instructor()
        payload = await self.api.get(f"/courses/{course_id}/analytics/")
        return CourseAnalytics.model_validate(payload or {})

    async def student_progress_reports(self) -> StudentProgressReport:
        self._require_instructor()
        payload = await self.api.get("/student-progress-reports/")
        return StudentProgressReport.model_validate(payload or {})

    async def student_progress_report(self, student_id: int) -> StudentProgressReport:
        self._require_instructor()
        payload = await self.api.get(f"/student-progress-reports/{student_id}/")
        return StudentProgressReport.model_validate(payload or {})

    async def activity(self) -> list[ActivityItem]:
        payload = await self.api.get("/activity/")
        return [ActivityItem.model_validate(item) for item in unwrap_list(payload)]
