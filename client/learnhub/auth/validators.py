"""Validation utilities for account forms.

Provides validation for:
- Usernames
- Email format
- Password length and confirmation
"""

import re
from typing import NamedTuple


# ==============================================================================
# Constants for validation rules
# ==============================================================================

PASSWORD_MIN_LENGTH = 8
USERNAME_MAX_LENGTH = 150

# Django's default username charset: letters, digits and @/./+/-/_
USERNAME_PATTERN = re.compile(r"^[\w.@+-]+$")
EMAIL_PATTERN = re.compile(r"^[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}$", re.IGNORECASE)


class ValidationResult(NamedTuple):
    """Result of a validation check."""

    valid: bool
    message: str | None = None


def validate_username(username: str) -> ValidationResult:
    """Validate a username.

    Examples:
        >>> validate_username("jane_doe")
        ValidationResult(valid=True, message=None)
        >>> validate_username("jane doe")
        ValidationResult(valid=False, message='Username may only contain letters, digits and @/./+/-/_')
    """
    if not username.strip():
        return ValidationResult(False, "Username is required")

    if len(username) > USERNAME_MAX_LENGTH:
        return ValidationResult(
            False, f"Username must be at most {USERNAME_MAX_LENGTH} characters"
        )

    if not USERNAME_PATTERN.match(username):
        return ValidationResult(
            False, "Username may only contain letters, digits and @/./+/-/_"
        )

    return ValidationResult(True)


def validate_email(email: str) -> ValidationResult:
    """Basic email format validation.

    Examples:
        >>> validate_email("user@example.com")
        ValidationResult(valid=True, message=None)
        >>> validate_email("invalid-email")
        ValidationResult(valid=False, message='Invalid email address')
    """
    if EMAIL_PATTERN.match(email):
        return ValidationResult(True)
    return ValidationResult(False, "Invalid email address")


def validate_password(password: str) -> ValidationResult:
    """Validate password length.

    Strength rules beyond length are enforced by the backend.

    Examples:
        >>> validate_password("longenough")
        ValidationResult(valid=True, message=None)
        >>> validate_password("short")
        ValidationResult(valid=False, message='Password must be at least 8 characters')
    """
    if len(password) < PASSWORD_MIN_LENGTH:
        return ValidationResult(
            False, f"Password must be at least {PASSWORD_MIN_LENGTH} characters"
        )
    return ValidationResult(True)


def validate_password_confirmation(password: str, confirmation: str) -> ValidationResult:
    """Check that both password fields match."""
    if password != confirmation:
        return ValidationResult(False, "Passwords do not match")
    return ValidationResult(True)
