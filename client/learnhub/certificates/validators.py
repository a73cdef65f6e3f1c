"""Certificate identifier parsing."""

import re
import secrets

from learnhub.core.errors import ClientValidationError


CERTIFICATE_ID_PREFIX = "CERT-"
CERTIFICATE_ID_PATTERN = re.compile(r"CERT-[A-Z0-9]+", re.IGNORECASE)


def extract_certificate_id(text: str) -> str:
    """Find a certificate ID in free text (a pasted link, an email line...).

    The match is normalized to upper case.

    Raises:
        ClientValidationError: No certificate ID in the text.

    Examples:
        >>> extract_certificate_id("Verify at /verify/cert-3be755fc96b9 please")
        'CERT-3BE755FC96B9'
    """
    match = CERTIFICATE_ID_PATTERN.search(text or "")
    if match is None:
        raise ClientValidationError(
            "Enter a certificate ID such as CERT-1A2B3C4D5E6F",
            "invalid_certificate_id",
            {"certificate_id": ["No certificate ID found"]},
        )
    return match.group(0).upper()


def is_valid_certificate_id(value: str) -> bool:
    """Whole-string check, unlike ``extract_certificate_id``."""
    return CERTIFICATE_ID_PATTERN.fullmatch(value.strip()) is not None


def generate_certificate_id() -> str:
    """Random ID in the backend's format: ``CERT-`` and 12 upper-case hex chars."""
    return CERTIFICATE_ID_PREFIX + secrets.token_hex(6).upper()
