"""Tests for the enrollment API calls."""

from decimal import Decimal

import pytest

from learnhub.auth.schemas import LoginRequest
from learnhub.core.errors import NotFoundError
from learnhub.main import LearnHub
from tests.fake_backend import KNOWN_CERTIFICATE_ID


class TestEnrollmentService:
    """EnrollmentService against the fake backend."""

    @pytest.mark.asyncio
    async def test_list_enrollments(self, alice: LearnHub) -> None:
        enrollments = await alice.enrollments.list_enrollments()

        assert [e.course_id for e in enrollments] == [1]
        assert enrollments[0].progress_percentage == Decimal("33.3")
        assert enrollments[0].completed is False

    @pytest.mark.asyncio
    async def test_get_enrollment(self, alice: LearnHub) -> None:
        enrollment = await alice.enrollments.get_enrollment(1)
        assert enrollment.course_id == 1

        with pytest.raises(NotFoundError):
            await alice.enrollments.get_enrollment(2)

    @pytest.mark.asyncio
    async def test_progress_keeps_extra_fields(self, alice: LearnHub) -> None:
        progress = await alice.enrollments.get_enrollment_progress(1)

        assert progress.completed_lessons == 1
        assert progress.total_lessons == 3
        assert progress.model_extra == {"quiz_attempts": 0}

    @pytest.mark.asyncio
    async def test_certificate_only_after_completion(self, hub: LearnHub) -> None:
        await hub.auth.login(LoginRequest(username="alice", password="password123"))
        with pytest.raises(NotFoundError):
            await hub.enrollments.get_enrollment_certificate(1)

        await hub.logout()
        await hub.auth.login(LoginRequest(username="carol", password="password123"))
        certificate = await hub.enrollments.get_enrollment_certificate(2)
        assert certificate.certificate_id == KNOWN_CERTIFICATE_ID
