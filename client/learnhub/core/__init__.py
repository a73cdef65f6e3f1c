# Core infrastructure
from learnhub.core.busy import BusyTracker
from learnhub.core.context import (
    action_context,
    get_action,
    get_context,
    get_request_id,
    get_user_id,
    set_user_id,
)
from learnhub.core.logging import configure_structlog, get_logger


__all__ = [
    "BusyTracker",
    "action_context",
    "configure_structlog",
    "get_action",
    "get_context",
    "get_logger",
    "get_request_id",
    "get_user_id",
    "set_user_id",
]
