"""Error hierarchy shared by every client module.

Two families:
- ClientValidationError and its children are raised locally, before any
  request is sent.
- ApiError and its children wrap a backend response (or the absence of one).
"""

from typing import Any


class LearnHubError(Exception):
    """Base client error."""

    def __init__(self, message: str, code: str = "learnhub_error"):
        self.message = message
        self.code = code
        super().__init__(message)


# ==============================================================================
# Local Errors
# ==============================================================================


class ClientValidationError(LearnHubError):
    """Input rejected locally; nothing was sent to the backend."""

    def __init__(
        self,
        message: str,
        code: str = "validation_error",
        field_errors: dict[str, list[str]] | None = None,
    ):
        super().__init__(message, code)
        self.field_errors = field_errors or {}


class ConfirmationRequiredError(ClientValidationError):
    """Irreversible or incomplete action attempted without confirmation."""

    def __init__(self, message: str):
        super().__init__(message, "confirmation_required")


class ActionInProgressError(ClientValidationError):
    """The same action is already awaiting a response."""

    def __init__(self, message: str = "Action already in progress"):
        super().__init__(message, "action_in_progress")


class InvalidTransitionError(ClientValidationError):
    """Operation not allowed in the current state."""

    def __init__(self, message: str):
        super().__init__(message, "invalid_transition")


# ==============================================================================
# Backend Errors
# ==============================================================================


class ApiError(LearnHubError):
    """Backend call failed."""

    retryable = False

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        payload: Any = None,
        code: str = "api_error",
    ):
        super().__init__(message, code)
        self.status_code = status_code
        self.payload = payload


class ApiValidationError(ApiError):
    """Backend rejected the request (4xx); message is shown verbatim."""

    def __init__(self, message: str, status_code: int = 400, payload: Any = None):
        super().__init__(message, status_code, payload, "api_validation_error")


class AuthorizationError(ApiError):
    """Missing, expired or insufficient credentials."""

    def __init__(
        self,
        message: str = "Authentication required",
        status_code: int | None = 401,
        payload: Any = None,
    ):
        super().__init__(message, status_code, payload, "authorization_error")


class NotFoundError(ApiError):
    """Resource does not exist."""

    def __init__(self, message: str = "Not found", payload: Any = None):
        super().__init__(message, 404, payload, "not_found")


class ConflictError(ApiError):
    """Resource already exists or conflicts with current backend state."""

    def __init__(self, message: str = "Conflict", payload: Any = None):
        super().__init__(message, 409, payload, "conflict")


class ServerError(ApiError):
    """Backend failed (5xx)."""

    retryable = True

    def __init__(self, message: str, status_code: int = 500, payload: Any = None):
        super().__init__(message, status_code, payload, "server_error")


class NetworkError(ApiError):
    """No response: connection failure or timeout."""

    retryable = True

    def __init__(self, message: str = "Network error. Please check your connection."):
        super().__init__(message, None, None, "network_error")


def extract_error_message(payload: Any, default: str) -> str:
    """Pull a human-readable message out of a DRF-style error payload.

    Looks at ``detail``, ``message``, ``error`` and ``non_field_errors`` in
    that order, then at the first field error.

    Examples:
        >>> extract_error_message({"detail": "Not allowed"}, "x")
        'Not allowed'
        >>> extract_error_message({"email": ["Invalid email"]}, "x")
        'email: Invalid email'
    """
    if isinstance(payload, str) and payload.strip():
        return payload
    if not isinstance(payload, dict):
        return default

    for key in ("detail", "message", "error", "non_field_errors"):
        value = payload.get(key)
        if isinstance(value, str) and value:
            return value
        if isinstance(value, list) and value:
            return ", ".join(str(item) for item in value)

    for key, value in payload.items():
        if isinstance(value, list) and value:
            return f"{key}: {', '.join(str(item) for item in value)}"
        if isinstance(value, str) and value:
            return f"{key}: {value}"

    return default


def error_from_response(status_code: int, payload: Any) -> ApiError:
    """Map an HTTP error status to the matching ApiError subclass."""
    if status_code in (401, 403):
        default = (
            "Authentication required"
            if status_code == 401
            else "You do not have permission to perform this action"
        )
        return AuthorizationError(
            extract_error_message(payload, default), status_code, payload
        )
    if status_code == 404:
        return NotFoundError(extract_error_message(payload, "Not found"), payload)
    if status_code == 409:
        return ConflictError(extract_error_message(payload, "Conflict"), payload)
    if status_code >= 500:
        return ServerError(
            extract_error_message(payload, "An error occurred. Please try again."),
            status_code,
            payload,
        )
    return ApiValidationError(
        extract_error_message(payload, "Invalid request"), status_code, payload
    )
