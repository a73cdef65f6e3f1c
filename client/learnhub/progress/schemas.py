"""Pydantic schemas for progress tracking.

Response models for:
- Progress of one course (enrollment, lesson counts, certificate)
- Overall progress across every enrolled course
- Lesson progress details
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from learnhub.courses.schemas import CourseRef, LessonRef, UserRef


class ProgressCertificate(BaseModel):
    """Certificate flag reported by the backend for a course."""

    model_config = ConfigDict(extra="ignore")

    exists: bool = True
    id: int | None = None
    certificate_id: str | None = None
    issued_at: datetime | None = None


# ==============================================================================
# Course Progress
# ==============================================================================


class EnrollmentInfo(BaseModel):
    """Enrollment of the current student in a course, if any."""

    model_config = ConfigDict(extra="ignore")

    exists: bool = False
    id: int | None = None
    enrolled_at: datetime | None = None
    completed: bool = False
    completed_at: datetime | None = None


class CourseProgressSummary(BaseModel):
    """Lesson counts and completion for one course."""

    model_config = ConfigDict(extra="ignore")

    progress_percentage: Decimal = Decimal(0)
    completed_lessons: int = 0
    total_lessons: int = 0
    course_completed: bool = False
    next_lesson: LessonRef | None = None


class CourseProgressResponse(BaseModel):
    """``GET /course-progress/{id}/``."""

    model_config = ConfigDict(extra="ignore")

    course: CourseRef | None = None
    enrollment: EnrollmentInfo = Field(default_factory=EnrollmentInfo)
    progress_summary: CourseProgressSummary = Field(
        default_factory=CourseProgressSummary
    )
    certificate: ProgressCertificate | None = None

    @property
    def is_enrolled(self) -> bool:
        return self.enrollment.exists

    @property
    def course_completed(self) -> bool:
        return self.progress_summary.course_completed


# ==============================================================================
# Overall Progress
# ==============================================================================


class CourseProgressEntry(BaseModel):
    """One enrolled course in the overall progress report."""

    model_config = ConfigDict(extra="ignore")

    course_id: int
    course_title: str = ""
    course_description: str | None = None
    completed_lessons: int = 0
    total_lessons: int = 0
    progress_percentage: Decimal = Decimal(0)
    course_completed: bool = False
    certificate: ProgressCertificate | None = None
    enrolled_at: datetime | None = None
    last_activity: datetime | None = None


class ProgressSummary(BaseModel):
    """Totals across every enrolled course."""

    model_config = ConfigDict(extra="ignore")

    total_courses: int = 0
    completed_courses: int = 0
    in_progress_courses: int = 0
    average_progress: Decimal = Decimal(0)
    total_certificates: int = 0


class OverallProgressResponse(BaseModel):
    """``GET /course-progress/overall/``."""

    model_config = ConfigDict(extra="ignore")

    student: UserRef | None = None
    summary: ProgressSummary = Field(default_factory=ProgressSummary)
    course_progress: list[CourseProgressEntry] = Field(default_factory=list)


# ==============================================================================
# Lesson Progress
# ==============================================================================


class LessonProgressDetail(BaseModel):
    """``GET /lesson-progress/{id}/details/``; extra backend fields are kept."""

    model_config = ConfigDict(extra="allow")

    lesson_id: int | None = None
    lesson_title: str | None = None
    completed: bool = False
    last_accessed: datetime | None = None
    completed_at: datetime | None = None
