"""Progress arithmetic.

Pure functions over data already fetched from the backend. Percentages are
``Decimal``: a course reads exactly 100 only when every lesson is complete,
and partial progress is truncated (never rounded up) to two places.
"""

from collections.abc import Sequence
from decimal import ROUND_DOWN, Decimal
from typing import Protocol

from learnhub.progress.schemas import (
    CourseProgressEntry,
    CourseProgressSummary,
    ProgressCertificate,
    ProgressSummary,
)


HUNDRED = Decimal(100)
TWO_PLACES = Decimal("0.01")


class _CertificateHolder(Protocol):
    @property
    def course_completed(self) -> bool: ...

    @property
    def certificate(self) -> ProgressCertificate | None: ...


def calculate_progress_percentage(completed: int, total: int) -> Decimal:
    """Percentage of completed lessons.

    Examples:
        >>> calculate_progress_percentage(0, 0)
        Decimal('0')
        >>> calculate_progress_percentage(2, 3)
        Decimal('66.66')
        >>> calculate_progress_percentage(5, 5)
        Decimal('100')
    """
    if total <= 0 or completed <= 0:
        return Decimal(0)
    if completed >= total:
        return HUNDRED
    return (Decimal(completed) * HUNDRED / Decimal(total)).quantize(
        TWO_PLACES, rounding=ROUND_DOWN
    )


def is_course_completed(percentage: Decimal) -> bool:
    return percentage == HUNDRED


def recompute_course_summary(summary: CourseProgressSummary) -> CourseProgressSummary:
    """Derive percentage and completion from the lesson counts."""
    pct = calculate_progress_percentage(summary.completed_lessons, summary.total_lessons)
    return summary.model_copy(
        update={"progress_percentage": pct, "course_completed": is_course_completed(pct)}
    )


def recompute_entry(entry: CourseProgressEntry) -> CourseProgressEntry:
    """Same as ``recompute_course_summary`` for an overall-progress row."""
    pct = calculate_progress_percentage(entry.completed_lessons, entry.total_lessons)
    return entry.model_copy(
        update={"progress_percentage": pct, "course_completed": is_course_completed(pct)}
    )


def certificate_visible(item: _CertificateHolder) -> bool:
    """A certificate is shown only for a completed course the backend issued one for."""
    return (
        item.course_completed
        and item.certificate is not None
        and item.certificate.exists
    )


def summarize_progress(entries: Sequence[CourseProgressEntry]) -> ProgressSummary:
    """Totals across courses; ``average_progress`` is the unweighted mean."""
    if not entries:
        return ProgressSummary()

    completed = sum(1 for e in entries if e.course_completed)
    average = sum((e.progress_percentage for e in entries), Decimal(0)) / len(entries)

    return ProgressSummary(
        total_courses=len(entries),
        completed_courses=completed,
        in_progress_courses=len(entries) - completed,
        average_progress=average.quantize(TWO_PLACES, rounding=ROUND_DOWN),
        total_certificates=sum(1 for e in entries if certificate_visible(e)),
    )
