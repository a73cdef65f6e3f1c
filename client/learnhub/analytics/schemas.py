"""Pydantic schemas for dashboards and instructor analytics.

These payloads are read-only summaries whose exact fields vary with the
backend version, so every model keeps unknown fields (``extra="allow"``).
"""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from learnhub.certificates.schemas import CertificateResponse
from learnhub.courses.schemas import CourseRef, UserRef
from learnhub.enrollments.schemas import EnrollmentResponse


class _Loose(BaseModel):
    model_config = ConfigDict(extra="allow")


# ==============================================================================
# Dashboards
# ==============================================================================


class StudentStats(_Loose):
    total_courses: int = 0
    completed_courses: int = 0
    in_progress_courses: int = 0
    total_certificates: int = 0


class StudentDashboard(_Loose):
    """``GET /dashboard/student/``."""

    student: UserRef | None = None
    enrollments: list[EnrollmentResponse] = Field(default_factory=list)
    stats: StudentStats = Field(default_factory=StudentStats)
    certificates: list[CertificateResponse] = Field(default_factory=list)


class InstructorStats(_Loose):
    total_courses: int = 0
    published_courses: int = 0
    draft_courses: int = 0
    total_students: int = 0
    active_students: int = 0
    new_students: int = 0
    recent_completions: int = 0
    total_revenue: Decimal = Decimal(0)
    monthly_revenue: Decimal = Decimal(0)


class InstructorDashboard(_Loose):
    """``GET /dashboard/instructor/``."""

    instructor: UserRef | None = None
    overall_stats: InstructorStats = Field(default_factory=InstructorStats)
    course_statistics: list[dict[str, Any]] = Field(default_factory=list)
    recent_activity: list[dict[str, Any]] = Field(default_factory=list)


# ==============================================================================
# Analytics
# ==============================================================================


class CourseAnalytics(_Loose):
    """``GET /courses/{id}/analytics/``."""

    course: CourseRef | None = None
    progress_distribution: dict[str, Any] = Field(default_factory=dict)
    engagement: dict[str, Any] = Field(default_factory=dict)
    time_analysis: dict[str, Any] = Field(default_factory=dict)
    quiz_performance: dict[str, Any] = Field(default_factory=dict)
    recent_completions: list[dict[str, Any]] = Field(default_factory=list)


class CourseReport(_Loose):
    """Per-course line of a student progress report."""

    course_id: int
    course_title: str = ""
    total_students: int = 0
    completed_students: int = 0
    completion_rate: Decimal = Decimal(0)
    average_progress: Decimal = Decimal(0)
    average_quiz_score: Decimal | None = None


class StudentProgressReport(_Loose):
    """``GET /student-progress-reports/`` (and ``/{student_id}/``)."""

    course_reports: list[CourseReport] = Field(default_factory=list)


class ActivityItem(_Loose):
    """One entry of ``GET /activity/``."""

    type: str | None = None
    description: str | None = None
    timestamp: str | None = None
