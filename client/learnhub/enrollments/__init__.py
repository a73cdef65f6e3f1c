"""Enrollment module.

Provides:
- Enrollment listing, progress and certificate lookups
- Enroll/unenroll state machine with duplicate-enroll tolerance
"""

from .models import EnrollmentState


__all__ = ["EnrollmentState"]
