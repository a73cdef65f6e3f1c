"""Pydantic schemas for courses and lessons.

Request and response models for:
- Courses: catalogue, detail and instructor CRUD
- Lessons: detail and instructor CRUD
"""

from datetime import datetime
from decimal import Decimal
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from learnhub.courses.models import (
    LESSON_CONTENT_MIN_LENGTH,
    LESSON_DURATION_MAX_MINUTES,
    ContentType,
    CourseLevel,
)


# ==============================================================================
# Shared References
# ==============================================================================


class UserRef(BaseModel):
    """Compact user reference embedded in other payloads."""

    model_config = ConfigDict(extra="ignore")

    id: int
    username: str | None = None
    first_name: str = ""
    last_name: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip() or (self.username or "")


class CourseRef(BaseModel):
    """Compact course reference."""

    model_config = ConfigDict(extra="ignore")

    id: int
    title: str = ""
    instructor: UserRef | None = None


class LessonRef(BaseModel):
    """Compact lesson reference (used for "next lesson" links)."""

    model_config = ConfigDict(extra="ignore")

    id: int
    title: str = ""
    order: int = 0


# ==============================================================================
# Course Schemas
# ==============================================================================


class CreateCourseRequest(BaseModel):
    """Course creation request."""

    title: str = Field(..., min_length=1, max_length=200, description="Course title")
    description: str = Field(..., min_length=1, description="Course description")
    category: str = Field(..., min_length=1, max_length=100)
    level: CourseLevel
    duration_hours: int = Field(..., ge=1, description="Estimated duration")
    price: Decimal = Field(Decimal(0), ge=0, description="0 = free")
    is_published: bool = False
    learning_outcomes: list[str] = Field(default_factory=list)

    @field_validator("title", "description", "category")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Field is required")
        return v

    @field_validator("learning_outcomes")
    @classmethod
    def drop_blank_outcomes(cls, v: list[str]) -> list[str]:
        return [outcome.strip() for outcome in v if outcome.strip()]


class UpdateCourseRequest(BaseModel):
    """Course update request (only set fields are sent)."""

    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    category: str | None = Field(None, max_length=100)
    level: CourseLevel | None = None
    duration_hours: int | None = Field(None, ge=1)
    price: Decimal | None = Field(None, ge=0)
    is_published: bool | None = None
    learning_outcomes: list[str] | None = None


class CourseResponse(BaseModel):
    """Course as listed in the catalogue and shown on its detail page."""

    model_config = ConfigDict(extra="ignore")

    id: int
    title: str
    description: str = ""
    category: str | None = None
    level: CourseLevel | None = None
    duration_hours: Decimal | None = None
    price: Decimal = Decimal(0)
    is_published: bool = True
    instructor: UserRef | None = None
    total_lessons: int = 0
    total_students: int = 0
    created_at: datetime | None = None
    is_enrolled: bool = False
    learning_outcomes: list[str] = Field(default_factory=list)
    lessons_with_progress: list["LessonResponse"] = Field(default_factory=list)

    @property
    def is_free(self) -> bool:
        return self.price == 0

    def is_instructed_by(self, user_id: int) -> bool:
        return self.instructor is not None and self.instructor.id == user_id


# ==============================================================================
# Lesson Schemas
# ==============================================================================


class CreateLessonRequest(BaseModel):
    """Lesson creation request."""

    course: int = Field(..., description="Course ID")
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    content_type: ContentType
    content: str = Field(..., min_length=LESSON_CONTENT_MIN_LENGTH)
    order: int = Field(0, ge=0)
    duration_minutes: int = Field(0, ge=0, le=LESSON_DURATION_MAX_MINUTES)
    video_url: str | None = None
    attachment: str | None = None
    is_active: bool = True

    @field_validator("video_url", "attachment")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v.strip()

    @model_validator(mode="after")
    def video_lessons_need_url(self) -> Self:
        if self.content_type == ContentType.VIDEO and not self.video_url:
            raise ValueError("Video lessons require a video URL")
        return self


class UpdateLessonRequest(BaseModel):
    """Partial lesson update."""

    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    content_type: ContentType | None = None
    content: str | None = Field(None, min_length=LESSON_CONTENT_MIN_LENGTH)
    order: int | None = Field(None, ge=0)
    duration_minutes: int | None = Field(None, ge=0, le=LESSON_DURATION_MAX_MINUTES)
    video_url: str | None = None
    attachment: str | None = None
    is_active: bool | None = None


class LessonQuizSummary(BaseModel):
    """State of the quiz attached to a lesson, for the current student."""

    model_config = ConfigDict(extra="ignore")

    id: int
    title: str = ""
    description: str | None = None
    passing_score: Decimal = Decimal(70)
    time_limit_minutes: int | None = None
    attempts_remaining: int = 0
    best_score: Decimal | None = None
    passed: bool = False

    @property
    def blocks_completion(self) -> bool:
        """Quiz not passed while tries are left: the lesson cannot be completed."""
        return not self.passed and self.attempts_remaining > 0


class LessonProgressState(BaseModel):
    """Progress of the current student on one lesson."""

    model_config = ConfigDict(extra="ignore")

    completed: bool = False
    last_accessed: datetime | None = None
    completed_at: datetime | None = None


class LessonCourseRef(CourseRef):
    """Course reference on a lesson, with the lesson that follows."""

    next_lesson: LessonRef | None = None


class LessonResponse(BaseModel):
    """Lesson detail."""

    model_config = ConfigDict(extra="ignore")

    id: int
    course: LessonCourseRef | int | None = None
    title: str
    description: str | None = None
    content_type: ContentType = ContentType.TEXT
    content: str = ""
    order: int = 0
    duration_minutes: int = 0
    video_url: str | None = None
    attachment: str | None = None
    is_active: bool = True
    has_quiz: bool = False
    quiz: LessonQuizSummary | None = None
    progress: LessonProgressState | None = None

    @property
    def course_id(self) -> int | None:
        if isinstance(self.course, LessonCourseRef):
            return self.course.id
        return self.course

    @property
    def is_completed(self) -> bool:
        return self.progress is not None and self.progress.completed


CourseResponse.model_rebuild()
