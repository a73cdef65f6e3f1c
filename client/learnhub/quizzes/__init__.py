"""Quiz taking module.

Provides:
- Quiz loading, attempt submission and attempt history
- Client-side attempt state machine with a countdown timer
- Quiz and question authoring for instructors
"""

from .models import OPTION_LETTERS, QuizSessionState, format_time_limit


__all__ = [
    "OPTION_LETTERS",
    "QuizSessionState",
    "format_time_limit",
]
