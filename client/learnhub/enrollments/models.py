"""Enrollment states."""

from enum import Enum


class EnrollmentState(str, Enum):
    """Enrollment of the current student in one course.

    ``completed`` is derived from progress; no action leads to it directly.
    """

    NOT_ENROLLED = "not_enrolled"
    ENROLLED = "enrolled"
    COMPLETED = "completed"
