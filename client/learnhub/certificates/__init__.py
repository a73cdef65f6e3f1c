"""Certificates module.

Provides:
- Certificate listing, download and regeneration
- Verification by certificate ID
"""

from .validators import (
    CERTIFICATE_ID_PATTERN,
    extract_certificate_id,
    generate_certificate_id,
    is_valid_certificate_id,
)


__all__ = [
    "CERTIFICATE_ID_PATTERN",
    "extract_certificate_id",
    "generate_certificate_id",
    "is_valid_certificate_id",
]
