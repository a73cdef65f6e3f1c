"""Enrollment state machine.

    not_enrolled --enroll--> enrolled --unenroll(confirmed)--> not_enrolled
                             enrolled + course_completed  ==  completed

A repeated enroll (double click, stale view) is answered by the backend with
an "already enrolled" error; it is treated as a successful enroll. Each
course allows one outstanding enroll/unenroll request at a time.
"""

import structlog

from learnhub.auth.permissions import can_enroll
from learnhub.auth.session import SessionStore
from learnhub.core.busy import BusyTracker
from learnhub.core.context import action_context
from learnhub.core.errors import (
    ApiError,
    ApiValidationError,
    ClientValidationError,
    ConfirmationRequiredError,
    ConflictError,
)
from learnhub.courses.schemas import CourseResponse
from learnhub.enrollments.models import EnrollmentState
from learnhub.enrollments.service import EnrollmentService
from learnhub.progress.service import ProgressService


logger = structlog.get_logger(__name__)

ENROLLMENT_ACTION = "enrollment"
UNENROLL_CONFIRMATION_MESSAGE = (
    "Are you sure you want to unenroll from this course? "
    "All your progress will be lost."
)


class EnrollmentNotAllowedError(ClientValidationError):
    """Current user may not enroll in this course."""

    def __init__(self, message: str = "Only students can enroll in courses"):
        super().__init__(message, "enrollment_not_allowed")


def _is_duplicate_enrollment(error: ApiError) -> bool:
    if isinstance(error, ConflictError):
        return True
    return (
        isinstance(error, ApiValidationError)
        and "already enrolled" in error.message.lower()
    )


class EnrollmentLifecycle:
    """Tracks and changes the current student's enrollments."""

    def __init__(
        self,
        enrollments: EnrollmentService,
        progress: ProgressService,
        session: SessionStore,
        busy: BusyTracker,
    ):
        self.enrollments = enrollments
        self.progress = progress
        self.session = session
        self.busy = busy
        self._enrolled: set[int] = set()

    def observe(self, course: CourseResponse) -> EnrollmentState:
        """Record the enrollment flag of a freshly loaded course."""
        if course.is_enrolled:
            self._enrolled.add(course.id)
        else:
            self._enrolled.discard(course.id)
        return self.state(course.id)

    def state(self, course_id: int) -> EnrollmentState:
        if course_id not in self._enrolled:
            return EnrollmentState.NOT_ENROLLED
        progress = self.progress.cached_course_progress(course_id)
        if progress is not None and progress.course_completed:
            return EnrollmentState.COMPLETED
        return EnrollmentState.ENROLLED

    def reset(self) -> None:
        """Forget every observed enrollment (the user changed)."""
        self._enrolled.clear()

    def is_busy(self, course_id: int) -> bool:
        return self.busy.is_busy(ENROLLMENT_ACTION, course_id)

    def ensure_can_enroll(self, course: CourseResponse) -> None:
        """Raises EnrollmentNotAllowedError for non-students and own courses."""
        user = self.session.user
        if user is None or not can_enroll(user.role):
            raise EnrollmentNotAllowedError()
        if course.is_instructed_by(user.id):
            raise EnrollmentNotAllowedError("You cannot enroll in your own course")

    async def enroll(self, course: CourseResponse) -> EnrollmentState:
        """Enroll the current student in a course.

        Raises:
            EnrollmentNotAllowedError: Not a student, or own course.
            ActionInProgressError: Enroll/unenroll already in flight for it.
            ApiError: Backend failure other than a duplicate enrollment.
        """
        self.ensure_can_enroll(course)

        with action_context("enroll"):
            async with self.busy.track(ENROLLMENT_ACTION, course.id):
                try:
                    await self.enrollments.enroll(course.id)
                except ApiError as e:
                    if not _is_duplicate_enrollment(e):
                        raise
                    logger.info("enrollment_already_exists", course_id=course.id)
                else:
                    logger.info("enrollment_created", course_id=course.id)

        self._enrolled.add(course.id)
        self.progress.invalidate(course.id)
        return self.state(course.id)

    async def unenroll(self, course_id: int, confirmed: bool = False) -> EnrollmentState:
        """Leave a course. All lesson progress in it is discarded.

        Raises:
            ConfirmationRequiredError: ``confirmed`` not set; nothing is sent.
            ActionInProgressError: Enroll/unenroll already in flight for it.
            ApiError: Backend failure; the enrollment is kept.
        """
        if not confirmed:
            raise ConfirmationRequiredError(UNENROLL_CONFIRMATION_MESSAGE)

        with action_context("unenroll"):
            async with self.busy.track(ENROLLMENT_ACTION, course_id):
                await self.enrollments.unenroll(course_id)

        self._enrolled.discard(course_id)
        self.progress.invalidate(course_id)
        logger.info("enrollment_removed", course_id=course_id)
        return EnrollmentState.NOT_ENROLLED

    async def refresh(self, course_id: int) -> EnrollmentState:
        """Re-derive the state from the backend's course progress."""
        progress = await self.progress.get_course_progress(course_id, refresh=True)
        if progress.is_enrolled:
            self._enrolled.add(course_id)
        else:
            self._enrolled.discard(course_id)
        return self.state(course_id)
