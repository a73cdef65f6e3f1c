"""Tests for certificate listing, download and verification."""

import httpx
import pytest
import pytest_asyncio

from learnhub.auth.schemas import LoginRequest
from learnhub.certificates.schemas import CertificateResponse
from learnhub.certificates.service import render_certificate_text
from learnhub.config import Settings
from learnhub.core.errors import ApiValidationError, ClientValidationError
from learnhub.courses.schemas import CourseRef, UserRef
from learnhub.main import LearnHub
from tests.fake_backend import KNOWN_CERTIFICATE_ID, FakeBackend


@pytest_asyncio.fixture
async def carol(hub: LearnHub) -> LearnHub:
    await hub.auth.login(LoginRequest(username="carol", password="password123"))
    return hub


class TestVerify:
    """Public verification; failures come back as results."""

    @pytest.mark.asyncio
    async def test_known_certificate(self, hub: LearnHub) -> None:
        result = await hub.certificates.verify(KNOWN_CERTIFICATE_ID)

        assert result.valid is True
        assert result.error is None
        assert result.certificate_id == KNOWN_CERTIFICATE_ID
        assert result.certificate is not None
        assert result.certificate.course is not None
        assert result.certificate.course.title == "Data Science"

    @pytest.mark.asyncio
    async def test_id_inside_pasted_link(self, hub: LearnHub) -> None:
        result = await hub.certificates.verify(
            f"https://lms.example.com/verify/{KNOWN_CERTIFICATE_ID.lower()}"
        )
        assert result.valid is True

    @pytest.mark.asyncio
    async def test_unknown_certificate(self, hub: LearnHub) -> None:
        result = await hub.certificates.verify("CERT-000000000000")

        assert result.valid is False
        assert result.error == "Certificate not found"
        assert result.certificate_id == "CERT-000000000000"

    @pytest.mark.asyncio
    async def test_server_error_is_a_result(
        self, hub: LearnHub, backend: FakeBackend
    ) -> None:
        path = f"/api/certificates/verify/{KNOWN_CERTIFICATE_ID}/"
        backend.fail("GET", path, status=500)

        result = await hub.certificates.verify(KNOWN_CERTIFICATE_ID)

        assert result.valid is False
        assert result.error == "Internal server error"

    @pytest.mark.asyncio
    async def test_network_failure_is_a_result(self, settings: Settings) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        async with LearnHub(settings, transport=httpx.MockTransport(handler)) as hub:
            result = await hub.certificates.verify(KNOWN_CERTIFICATE_ID)

        assert result.valid is False
        assert result.error == "Verification failed"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(200, text="<html>maintenance</html>"),
            httpx.Response(200, json=[{"valid": True}]),
        ],
        ids=["html", "list"],
    )
    async def test_non_object_body_is_a_result(
        self, settings: Settings, response: httpx.Response
    ) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return response

        async with LearnHub(settings, transport=httpx.MockTransport(handler)) as hub:
            result = await hub.certificates.verify(KNOWN_CERTIFICATE_ID)

        assert result.valid is False
        assert result.error == "Verification failed"
        assert result.certificate_id == KNOWN_CERTIFICATE_ID

    @pytest.mark.asyncio
    async def test_missing_id_rejected_locally(
        self, hub: LearnHub, backend: FakeBackend
    ) -> None:
        with pytest.raises(ClientValidationError):
            await hub.certificates.verify("no id here")
        assert backend.calls == []


class TestCertificates:
    """Listing, download and regeneration for the certificate owner."""

    @pytest.mark.asyncio
    async def test_list_and_search(self, carol: LearnHub) -> None:
        certificates = await carol.certificates.list_certificates()
        assert [c.certificate_id for c in certificates] == [KNOWN_CERTIFICATE_ID]

        assert await carol.certificates.list_certificates(search="data") == certificates
        assert await carol.certificates.list_certificates(search="carol") == certificates
        assert await carol.certificates.list_certificates(search="python") == []

    @pytest.mark.asyncio
    async def test_get_certificate(self, carol: LearnHub) -> None:
        certificate = await carol.certificates.get_certificate(2)
        assert certificate.certificate_id == KNOWN_CERTIFICATE_ID

    @pytest.mark.asyncio
    async def test_download_pdf(self, carol: LearnHub, backend: FakeBackend) -> None:
        backend.pdfs[2] = b"%PDF-1.4 certificate"
        certificate = await carol.certificates.get_certificate(2)

        document = await carol.certificates.download(certificate)

        assert document.filename == f"Certificate-{KNOWN_CERTIFICATE_ID}.pdf"
        assert document.content == b"%PDF-1.4 certificate"
        assert document.media_type == "application/pdf"

    @pytest.mark.asyncio
    async def test_download_falls_back_to_text(self, carol: LearnHub) -> None:
        certificate = await carol.certificates.get_certificate(2)

        document = await carol.certificates.download(certificate)

        assert document.filename == f"Certificate-{KNOWN_CERTIFICATE_ID}.txt"
        assert document.media_type == "text/plain"
        text = document.content.decode("utf-8")
        assert "Carol Tester" in text
        assert '"Data Science"' in text
        assert "Instructor: Bob Tester" in text

    @pytest.mark.asyncio
    async def test_regenerate(self, carol: LearnHub) -> None:
        certificate = await carol.certificates.regenerate(2)
        assert certificate.certificate_id == KNOWN_CERTIFICATE_ID

    @pytest.mark.asyncio
    async def test_regenerate_incomplete_course(self, alice: LearnHub) -> None:
        with pytest.raises(ApiValidationError, match="Course not completed"):
            await alice.certificates.regenerate(1)


def test_render_certificate_text() -> None:
    certificate = CertificateResponse(
        id=1,
        certificate_id="CERT-ABC",
        student=UserRef(id=1, first_name="Ada", last_name="Lovelace"),
        course=CourseRef(id=3, title="Engines", instructor=UserRef(id=2, first_name="Charles")),
    )

    text = render_certificate_text(certificate)

    assert text.splitlines()[0] == "Certificate of Completion"
    assert "Ada Lovelace" in text
    assert "Certificate ID: CERT-ABC" in text
    assert "Instructor: Charles" in text
