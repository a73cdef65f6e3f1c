"""Quiz session states and answer constants."""

from enum import Enum


class QuizSessionState(str, Enum):
    """Lifecycle of one quiz attempt on the client."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    SUBMITTED = "submitted"
    LOCKED = "locked"


# Multiple-choice options, in display order
OPTION_LETTERS = ("A", "B", "C", "D")


def format_time_limit(minutes: int | None) -> str:
    """Render a duration in minutes for display.

    Examples:
        >>> format_time_limit(90)
        '1h 30m'
        >>> format_time_limit(45)
        '45m'
        >>> format_time_limit(None)
        'No limit'
    """
    if not minutes:
        return "No limit"
    if minutes >= 60:
        hours, mins = divmod(minutes, 60)
        return f"{hours}h {mins}m"
    return f"{minutes}m"
