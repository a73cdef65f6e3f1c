"""Course and lesson service layer.

API calls for:
- Course catalogue, detail and instructor CRUD
- Enrolled / available course listings
- Lesson detail and instructor CRUD

Plus the catalogue helpers (search, category/level filters, sort orders)
applied to an already loaded course list.
"""

from collections.abc import Iterable

import structlog

from learnhub.core.http import ApiClient, unwrap_list
from learnhub.courses.models import CourseLevel, CourseOrdering, sort_lessons
from learnhub.courses.schemas import (
    CourseResponse,
    CreateCourseRequest,
    CreateLessonRequest,
    LessonResponse,
    UpdateCourseRequest,
    UpdateLessonRequest,
)


logger = structlog.get_logger(__name__)


# ==============================================================================
# Catalogue Helpers
# ==============================================================================


def filter_courses(
    courses: Iterable[CourseResponse],
    search: str | None = None,
    category: str | None = None,
    level: CourseLevel | str | None = None,
) -> list[CourseResponse]:
    """Filter courses by free-text search, category and level.

    Search is case-insensitive over title and description. Empty values
    disable the corresponding filter.
    """
    needle = (search or "").strip().lower()
    level_value = CourseLevel(level) if level else None

    result = []
    for course in courses:
        if needle and needle not in course.title.lower() and needle not in (
            course.description or ""
        ).lower():
            continue
        if category and course.category != category:
            continue
        if level_value is not None and course.level != level_value:
            continue
        result.append(course)
    return result


def sort_courses(
    courses: Iterable[CourseResponse],
    ordering: CourseOrdering | str = CourseOrdering.NEWEST,
) -> list[CourseResponse]:
    """Sort courses by one of the catalogue orderings (stable)."""
    ordering = CourseOrdering(ordering)
    items = list(courses)

    match ordering:
        case CourseOrdering.NEWEST | CourseOrdering.OLDEST:
            dated = [c for c in items if c.created_at is not None]
            undated = [c for c in items if c.created_at is None]
            dated.sort(
                key=lambda c: c.created_at,  # type: ignore[arg-type,return-value]
                reverse=ordering == CourseOrdering.NEWEST,
            )
            return dated + undated
        case CourseOrdering.PRICE_LOW:
            return sorted(items, key=lambda c: c.price)
        case CourseOrdering.PRICE_HIGH:
            return sorted(items, key=lambda c: c.price, reverse=True)
        case CourseOrdering.DURATION_SHORT:
            return sorted(items, key=lambda c: c.duration_hours or 0)
        case CourseOrdering.DURATION_LONG:
            return sorted(items, key=lambda c: c.duration_hours or 0, reverse=True)
        case CourseOrdering.POPULAR:
            return sorted(items, key=lambda c: c.total_students, reverse=True)
        case CourseOrdering.LESSONS:
            return sorted(items, key=lambda c: c.total_lessons, reverse=True)


def list_categories(courses: Iterable[CourseResponse]) -> list[str]:
    """Distinct non-empty categories, sorted alphabetically."""
    return sorted({c.category for c in courses if c.category})


# ==============================================================================
# Course Service
# ==============================================================================


class CourseService:
    """Service for course catalogue and authoring calls."""

    def __init__(self, api: ApiClient):
        self.api = api

    async def list_courses(
        self,
        search: str | None = None,
        category: str | None = None,
        level: CourseLevel | None = None,
    ) -> list[CourseResponse]:
        """List published courses visible to the current user."""
        payload = await self.api.get(
            "/courses/",
            params={
                "search": search or None,
                "category": category or None,
                "level": level.value if level else None,
            },
        )
        return [CourseResponse.model_validate(item) for item in unwrap_list(payload)]

    async def get_course(self, course_id: int) -> CourseResponse:
        """Get a course with its lessons (and progress, for enrolled students).

        Raises:
            NotFoundError: Course does not exist.
        """
        payload = await self.api.get(f"/courses/{course_id}/")
        course = CourseResponse.model_validate(payload)
        course.lessons_with_progress = sort_lessons(course.lessons_with_progress)
        return course

    async def create_course(self, data: CreateCourseRequest) -> CourseResponse:
        payload = await self.api.post("/courses/", json=data.model_dump(mode="json"))
        course = CourseResponse.model_validate(payload)
        logger.info("course_created", course_id=course.id, title=course.title)
        return course

    async def update_course(
        self, course_id: int, data: UpdateCourseRequest
    ) -> CourseResponse:
        payload = await self.api.put(
            f"/courses/{course_id}/",
            json=data.model_dump(exclude_none=True, mode="json"),
        )
        logger.info("course_updated", course_id=course_id)
        return CourseResponse.model_validate(payload)

    async def delete_course(self, course_id: int) -> None:
        await self.api.delete(f"/courses/{course_id}/")
        logger.info("course_deleted", course_id=course_id)

    async def enrolled_courses(self) -> list[CourseResponse]:
        """Courses the current student is enrolled in."""
        payload = await self.api.get("/courses/enrolled_courses/")
        return [CourseResponse.model_validate(item) for item in unwrap_list(payload)]

    async def available_courses(self) -> list[CourseResponse]:
        """Published courses the current student is not enrolled in."""
        payload = await self.api.get("/courses/available_courses/")
        return [CourseResponse.model_validate(item) for item in unwrap_list(payload)]


# ==============================================================================
# Lesson Service
# ==============================================================================


class LessonService:
    """Service for lesson detail and authoring calls."""

    def __init__(self, api: ApiClient):
        self.api = api

    async def get_lesson(self, lesson_id: int) -> LessonResponse:
        """Get a lesson with its quiz summary and the student's progress."""
        payload = await self.api.get(f"/lessons/{lesson_id}/")
        return LessonResponse.model_validate(payload)

    async def list_lessons(self, course_id: int | None = None) -> list[LessonResponse]:
        """List lessons, optionally for one course, sorted by ``order``."""
        payload = await self.api.get("/lessons/", params={"course": course_id})
        return sort_lessons(
            LessonResponse.model_validate(item) for item in unwrap_list(payload)
        )

    async def create_lesson(self, data: CreateLessonRequest) -> LessonResponse:
        payload = await self.api.post("/lessons/", json=data.model_dump(mode="json"))
        lesson = LessonResponse.model_validate(payload)
        logger.info("lesson_created", lesson_id=lesson.id, course_id=data.course)
        return lesson

    async def update_lesson(
        self, lesson_id: int, data: UpdateLessonRequest
    ) -> LessonResponse:
        payload = await self.api.patch(
            f"/lessons/{lesson_id}/",
            json=data.model_dump(exclude_none=True, mode="json"),
        )
        logger.info("lesson_updated", lesson_id=lesson_id)
        return LessonResponse.model_validate(payload)

    async def delete_lesson(self, lesson_id: int) -> None:
        await self.api.delete(f"/lessons/{lesson_id}/")
        logger.info("lesson_deleted", lesson_id=lesson_id)
