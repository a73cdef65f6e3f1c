"""Session store shared by every service of one client.

Holds the access token, refresh token and profile of the logged-in user.
Every outgoing request reads the access token from here; login, refresh and
logout are the only writers. When a session file is configured the store is
persisted as JSON so a new process resumes the session.
"""

from pathlib import Path

import structlog
from pydantic import BaseModel, ValidationError

from learnhub.auth.schemas import AuthResponse, UserResponse


logger = structlog.get_logger(__name__)


class StoredSession(BaseModel):
    """Serialized session contents."""

    access_token: str | None = None
    refresh_token: str | None = None
    user: UserResponse | None = None


class SessionStore:
    """Tokens and user profile of the current login."""

    def __init__(self, path: Path | str | None = None) -> None:
        self._path = Path(path) if path else None
        self._data = StoredSession()
        if self._path is not None:
            self._load()

    @property
    def access_token(self) -> str | None:
        return self._data.access_token

    @property
    def refresh_token(self) -> str | None:
        return self._data.refresh_token

    @property
    def user(self) -> UserResponse | None:
        return self._data.user

    @property
    def is_authenticated(self) -> bool:
        return self._data.access_token is not None

    def save(self, auth: AuthResponse) -> None:
        """Store the result of a login or registration."""
        self._data = StoredSession(
            access_token=auth.access,
            refresh_token=auth.refresh,
            user=auth.user,
        )
        self._persist()

    def update_tokens(self, access: str, refresh: str | None = None) -> None:
        """Replace the access token (and the refresh token on rotation)."""
        self._data.access_token = access
        if refresh is not None:
            self._data.refresh_token = refresh
        self._persist()

    def update_user(self, user: UserResponse) -> None:
        self._data.user = user
        self._persist()

    def clear(self) -> None:
        """Forget tokens and user (logout)."""
        self._data = StoredSession()
        if self._path is not None and self._path.exists():
            self._path.unlink()
        logger.info("session_cleared")

    def _persist(self) -> None:
        if self._path is None:
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(self._data.model_dump_json(), encoding="utf-8")

    def _load(self) -> None:
        if self._path is None or not self._path.exists():
            return
        try:
            self._data = StoredSession.model_validate_json(
                self._path.read_text(encoding="utf-8")
            )
        except ValidationError:
            logger.warning("session_file_invalid", path=str(self._path))
            self._data = StoredSession()
