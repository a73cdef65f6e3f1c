"""Certificate service layer.

API calls for listing, downloading, verifying and regenerating
certificates. Verification is safe to call from anywhere: it returns a
``VerificationResult`` instead of raising on backend failures.
"""

from typing import Any, NamedTuple

import structlog
from pydantic import ValidationError

from learnhub.certificates.schemas import CertificateResponse, VerificationResult
from learnhub.certificates.validators import extract_certificate_id
from learnhub.core.errors import ApiError, NotFoundError, extract_error_message
from learnhub.core.http import ApiClient, unwrap_list


logger = structlog.get_logger(__name__)

VERIFICATION_FAILED_MESSAGE = "Verification failed"


class CertificateFile(NamedTuple):
    """Downloaded certificate document."""

    filename: str
    content: bytes
    media_type: str


def render_certificate_text(certificate: CertificateResponse) -> str:
    """Plain-text certificate, used when the backend has no PDF yet."""
    student = certificate.student.full_name if certificate.student else ""
    course = certificate.course.title if certificate.course else ""
    instructor = (
        certificate.course.instructor.full_name
        if certificate.course and certificate.course.instructor
        else ""
    )
    issued = certificate.issued_at.date().isoformat() if certificate.issued_at else ""

    return "\n".join(
        [
            "Certificate of Completion",
            "",
            "This certifies that",
            student,
            "has successfully completed the course",
            f'"{course}"',
            "",
            f"Certificate ID: {certificate.certificate_id}",
            f"Issued: {issued}",
            f"Instructor: {instructor}",
        ]
    )


def _verification_from_payload(payload: Any, certificate_id: str) -> VerificationResult:
    """Parse a 2xx verification body; anything unreadable is a failed check."""
    failed = VerificationResult(
        valid=False, error=VERIFICATION_FAILED_MESSAGE, certificate_id=certificate_id
    )
    if not isinstance(payload, dict):
        # Maintenance pages and other non-object bodies
        logger.warning(
            "certificate_verify_unexpected_body",
            certificate_id=certificate_id,
            body_type=type(payload).__name__,
        )
        return failed
    try:
        return VerificationResult.model_validate(
            {**payload, "certificate_id": certificate_id}
        )
    except ValidationError:
        return failed


class CertificateService:
    """Service for certificate calls."""

    def __init__(self, api: ApiClient):
        self.api = api

    async def list_certificates(
        self, search: str | None = None
    ) -> list[CertificateResponse]:
        """Certificates of the current user, optionally filtered locally."""
        payload = await self.api.get("/certificates/")
        certificates = [
            CertificateResponse.model_validate(item) for item in unwrap_list(payload)
        ]
        if search:
            certificates = [c for c in certificates if c.matches(search)]
        return certificates

    async def get_certificate(self, certificate_pk: int) -> CertificateResponse:
        payload = await self.api.get(f"/certificates/{certificate_pk}/")
        return CertificateResponse.model_validate(payload)

    async def download(self, certificate: CertificateResponse) -> CertificateFile:
        """Download the certificate PDF, or a text rendering when none exists."""
        try:
            content = await self.api.download(f"/certificates/{certificate.id}/download/")
        except NotFoundError:
            content = b""

        if content:
            return CertificateFile(
                f"Certificate-{certificate.certificate_id}.pdf",
                content,
                "application/pdf",
            )

        logger.info(
            "certificate_pdf_unavailable", certificate_id=certificate.certificate_id
        )
        return CertificateFile(
            f"Certificate-{certificate.certificate_id}.txt",
            render_certificate_text(certificate).encode("utf-8"),
            "text/plain",
        )

    async def verify(self, text: str) -> VerificationResult:
        """Verify a certificate by ID (or by any text containing one).

        Raises:
            ClientValidationError: No certificate ID in ``text``; nothing is
                sent.
        """
        certificate_id = extract_certificate_id(text)

        try:
            payload = await self.api.get(
                f"/certificates/verify/{certificate_id}/", authenticated=False
            )
        except ApiError as e:
            result = VerificationResult(
                valid=False,
                error=extract_error_message(e.payload, VERIFICATION_FAILED_MESSAGE),
                certificate_id=certificate_id,
            )
        else:
            result = _verification_from_payload(payload, certificate_id)

        if not result.valid and not result.error:
            result.error = "This certificate could not be verified"

        logger.info(
            "certificate_verified", certificate_id=certificate_id, valid=result.valid
        )
        return result

    async def regenerate(self, course_id: int) -> CertificateResponse:
        """Ask the backend to reissue the certificate of a completed course."""
        payload = await self.api.post(
            "/certificates/regenerate/", json={"course_id": course_id}
        )
        certificate = CertificateResponse.model_validate(payload)
        logger.info(
            "certificate_regenerated",
            course_id=course_id,
            certificate_id=certificate.certificate_id,
        )
        return certificate
