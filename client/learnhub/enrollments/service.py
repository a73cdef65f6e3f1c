"""Enrollment service layer.

Thin API calls; the state machine around them lives in ``lifecycle``.
"""

from typing import Any

from learnhub.certificates.schemas import CertificateResponse
from learnhub.core.http import ApiClient, unwrap_list
from learnhub.enrollments.schemas import EnrollmentProgress, EnrollmentResponse


class EnrollmentService:
    """Service for enrollment calls."""

    def __init__(self, api: ApiClient):
        self.api = api

    async def enroll(self, course_id: int) -> Any:
        return await self.api.post(f"/courses/{course_id}/enroll/")

    async def unenroll(self, course_id: int) -> Any:
        return await self.api.post(f"/courses/{course_id}/unenroll/")

    async def list_enrollments(self) -> list[EnrollmentResponse]:
        payload = await self.api.get("/enrollments/")
        return [EnrollmentResponse.model_validate(item) for item in unwrap_list(payload)]

    async def get_enrollment(self, enrollment_id: int) -> EnrollmentResponse:
        payload = await self.api.get(f"/enrollments/{enrollment_id}/")
        return EnrollmentResponse.model_validate(payload)

    async def get_enrollment_progress(self, enrollment_id: int) -> EnrollmentProgress:
        payload = await self.api.get(f"/enrollments/{enrollment_id}/progress/")
        return EnrollmentProgress.model_validate(payload or {})

    async def get_enrollment_certificate(
        self, enrollment_id: int
    ) -> CertificateResponse:
        """Certificate of a completed enrollment.

        Raises:
            NotFoundError: Course not completed yet.
        """
        payload = await self.api.get(f"/enrollments/{enrollment_id}/certificate/")
        return CertificateResponse.model_validate(payload)
