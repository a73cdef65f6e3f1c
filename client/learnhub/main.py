"""LearnHub client - service container.

One ``LearnHub`` owns the settings, the session store, the HTTP client, the
in-flight action tracker and the progress cache, and hands the same
instances to every service that needs them.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx

from learnhub.analytics.service import AnalyticsService
from learnhub.auth.service import AuthService
from learnhub.auth.session import SessionStore
from learnhub.certificates.service import CertificateService
from learnhub.config import Settings, get_settings
from learnhub.core.busy import BusyTracker
from learnhub.core.http import ApiClient
from learnhub.core.logging import configure_structlog, get_logger
from learnhub.courses.service import CourseService, LessonService
from learnhub.enrollments.lifecycle import EnrollmentLifecycle
from learnhub.enrollments.service import EnrollmentService
from learnhub.progress.service import ProgressService
from learnhub.quizzes.service import QuizService
from learnhub.quizzes.session import QuizSession
from learnhub.quizzes.timer import QuizTimer


logger = get_logger(__name__)


class LearnHub:
    """Client state container."""

    def __init__(
        self,
        settings: Settings,
        session: SessionStore | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings
        self.session = session or SessionStore(settings.session_file)
        self.api = ApiClient(
            settings,
            self.session,
            transport=transport,
            on_session_expired=self.drop_user_state,
        )
        self.busy = BusyTracker()

        self.auth = AuthService(self.api, self.session)
        self.courses = CourseService(self.api)
        self.lessons = LessonService(self.api)
        self.quizzes = QuizService(self.api)
        self.progress = ProgressService(self.api)
        self.enrollments = EnrollmentService(self.api)
        self.enrollment_lifecycle = EnrollmentLifecycle(
            self.enrollments, self.progress, self.session, self.busy
        )
        self.certificates = CertificateService(self.api)
        self.analytics = AnalyticsService(self.api, self.session)

    async def __aenter__(self) -> "LearnHub":
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.api.aclose()
        logger.info("learnhub_closed")

    async def open_quiz(self, quiz_id: int) -> QuizSession:
        """Load a quiz and wrap it in a fresh attempt session."""
        quiz = await self.quizzes.get_quiz(quiz_id)
        return QuizSession(quiz, self.quizzes)

    def quiz_timer(self, quiz_session: QuizSession) -> QuizTimer:
        return QuizTimer(quiz_session, self.settings.quiz_tick_seconds)

    async def logout(self) -> None:
        """Log out and drop every cached per-user state."""
        try:
            await self.auth.logout()
        finally:
            self.drop_user_state()

    def drop_user_state(self) -> None:
        """Clear caches tied to the logged-in user.

        Also runs when the API client forces a logout after a failed refresh.
        """
        self.progress.clear_cache()
        self.enrollment_lifecycle.reset()
        logger.info("user_state_dropped")


def create_learnhub(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> LearnHub:
    """Create a configured client (logging included)."""
    settings = settings or get_settings()
    configure_structlog(settings)

    logger.info(
        "starting_learnhub",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
        api_base_url=settings.api_base_url,
    )
    return LearnHub(settings, transport=transport)


@asynccontextmanager
async def learnhub_client(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AsyncGenerator[LearnHub, None]:
    """Create a client for the duration of a block and close it afterwards."""
    hub = create_learnhub(settings, transport)
    try:
        yield hub
    finally:
        await hub.aclose()
