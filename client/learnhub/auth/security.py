"""Access token inspection.

The client never holds the signing key, so tokens are read without signature
verification. The only use is deciding whether an access token is already
expired, which saves a guaranteed 401 round trip.
"""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt


def read_token_claims(token: str) -> dict[str, Any] | None:
    """Decode the JWT payload without verifying it.

    Returns:
        Claims dictionary, or None if the token is not a JWT.
    """
    try:
        return jwt.get_unverified_claims(token)
    except JWTError:
        return None


def token_expires_at(token: str) -> datetime | None:
    """Get the ``exp`` claim of a token as an aware datetime."""
    claims = read_token_claims(token)
    if not claims or "exp" not in claims:
        return None
    try:
        return datetime.fromtimestamp(int(claims["exp"]), tz=UTC)
    except (TypeError, ValueError):
        return None


def is_token_expired(
    token: str,
    leeway_seconds: int = 0,
    now: datetime | None = None,
) -> bool:
    """Check whether a token has expired (or will within ``leeway_seconds``).

    Opaque tokens and tokens without ``exp`` are treated as valid; the
    backend will answer 401 if they are not.

    Examples:
        >>> is_token_expired("not-a-jwt")
        False
    """
    expires_at = token_expires_at(token)
    if expires_at is None:
        return False
    current = now or datetime.now(UTC)
    return expires_at <= current + timedelta(seconds=leeway_seconds)
