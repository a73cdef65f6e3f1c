"""Course catalogue enumerations and lesson ordering."""

from collections.abc import Iterable
from decimal import Decimal
from enum import Enum
from typing import Protocol, TypeVar


class ContentType(str, Enum):
    """Lesson content type."""

    TEXT = "text"
    VIDEO = "video"
    QUIZ = "quiz"
    ASSIGNMENT = "assignment"


class CourseLevel(str, Enum):
    """Course difficulty level."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class CourseOrdering(str, Enum):
    """Sort orders offered by the course catalogue."""

    NEWEST = "newest"
    OLDEST = "oldest"
    PRICE_LOW = "price-low"
    PRICE_HIGH = "price-high"
    DURATION_SHORT = "duration-short"
    DURATION_LONG = "duration-long"
    POPULAR = "popular"
    LESSONS = "lessons"


# Lesson limits used by the authoring forms
LESSON_CONTENT_MIN_LENGTH = 20
LESSON_DURATION_MAX_MINUTES = 480


class _Ordered(Protocol):
    order: int


OrderedT = TypeVar("OrderedT", bound=_Ordered)


def sort_lessons(lessons: Iterable[OrderedT]) -> list[OrderedT]:
    """Sort lessons by ``order``; ties keep their original sequence."""
    return sorted(lessons, key=lambda lesson: lesson.order)


def format_duration_hours(hours: float | Decimal | None) -> str:
    """Render a course duration given in (possibly fractional) hours.

    Examples:
        >>> format_duration_hours(1.5)
        '1 hr 30 min'
        >>> format_duration_hours(2)
        '2 hours'
        >>> format_duration_hours(0.25)
        '15 min'
    """
    if not hours:
        return "N/A"
    whole_hours = int(hours)
    minutes = round((float(hours) - whole_hours) * 60)

    if whole_hours == 0:
        return f"{minutes} min"
    if minutes == 0:
        return f"{whole_hours} hour{'s' if whole_hours != 1 else ''}"
    return f"{whole_hours} hr {minutes} min"
