"""Course catalogue and lesson module.

Provides:
- Course listing, detail and instructor CRUD
- Catalogue search, filters and sort orders
- Lesson detail and instructor CRUD
"""

from .models import (
    ContentType,
    CourseLevel,
    CourseOrdering,
    format_duration_hours,
    sort_lessons,
)


__all__ = [
    "ContentType",
    "CourseLevel",
    "CourseOrdering",
    "format_duration_hours",
    "sort_lessons",
]
