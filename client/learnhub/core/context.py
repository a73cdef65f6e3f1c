"""Call context carried by log lines and outgoing requests.

Values live in contextvars, so concurrent tasks on the event loop (a quiz
timer ticking while the student submits, say) each see their own action
and request ID.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any
from uuid import uuid4


request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)
user_id_var: ContextVar[str | None] = ContextVar("user_id", default=None)
action_var: ContextVar[str | None] = ContextVar("action", default=None)


def generate_request_id() -> str:
    return str(uuid4())


def get_request_id() -> str | None:
    """Request ID pinned by the enclosing ``action_context``, if any."""
    return request_id_var.get()


def get_user_id() -> str | None:
    return user_id_var.get()


def set_user_id(user_id: int | str | None) -> None:
    """Remember the logged-in user for log lines (None after logout)."""
    user_id_var.set(str(user_id) if user_id is not None else None)


def get_action() -> str | None:
    return action_var.get()


def get_context() -> dict[str, Any]:
    """The context values that are set, as merged into every log event."""
    values = {
        "request_id": request_id_var.get(),
        "user_id": user_id_var.get(),
        "action": action_var.get(),
    }
    return {key: value for key, value in values.items() if value}


@contextmanager
def action_context(action: str, request_id: str | None = None) -> Iterator[str]:
    """Scope one user action (an enroll, a quiz submission...).

    Every request sent inside the block, token refreshes and replays
    included, carries the same ``X-Request-ID``; every log line carries
    ``action`` and ``request_id``.

    Usage:
        with action_context("quiz_submit"):
            await service.submit_attempt(quiz_id, answers)

    Yields:
        The request ID in effect.
    """
    rid = request_id or generate_request_id()
    action_token = action_var.set(action)
    request_token = request_id_var.set(rid)
    try:
        yield rid
    finally:
        request_id_var.reset(request_token)
        action_var.reset(action_token)
