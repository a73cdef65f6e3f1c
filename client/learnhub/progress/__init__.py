"""Student progress module.

Provides:
- Course and overall progress with locally recomputed percentages
- Quiz-gated lesson completion
- Certificate visibility rules
"""

from .aggregator import (
    calculate_progress_percentage,
    certificate_visible,
    is_course_completed,
    summarize_progress,
)


__all__ = [
    "calculate_progress_percentage",
    "certificate_visible",
    "is_course_completed",
    "summarize_progress",
]
