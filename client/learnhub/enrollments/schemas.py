"""Pydantic schemas for enrollments."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from learnhub.courses.schemas import CourseRef, UserRef


class EnrollmentResponse(BaseModel):
    """Enrollment record."""

    model_config = ConfigDict(extra="ignore")

    id: int
    student: UserRef | int | None = None
    course: CourseRef | int | None = None
    enrolled_at: datetime | None = None
    completed: bool = False
    completed_at: datetime | None = None
    progress_percentage: Decimal = Decimal(0)

    @property
    def course_id(self) -> int | None:
        if isinstance(self.course, CourseRef):
            return self.course.id
        return self.course


class EnrollmentProgress(BaseModel):
    """``GET /enrollments/{id}/progress/``; extra backend fields are kept."""

    model_config = ConfigDict(extra="allow")

    progress_percentage: Decimal = Decimal(0)
    completed_lessons: int = 0
    total_lessons: int = 0
