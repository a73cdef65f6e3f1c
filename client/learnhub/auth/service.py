"""Authentication service.

Login, registration and logout against the REST API. Tokens and the user
profile go to the session store; token refresh lives in the HTTP client
because it runs transparently on any 401.
"""

import structlog

from learnhub.auth.schemas import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    UserResponse,
)
from learnhub.auth.session import SessionStore
from learnhub.core.context import set_user_id
from learnhub.core.errors import ApiError
from learnhub.core.http import ApiClient


logger = structlog.get_logger(__name__)


class AuthService:
    """Service for the account lifecycle of the current user."""

    def __init__(self, api: ApiClient, session: SessionStore):
        self.api = api
        self.session = session

    @property
    def current_user(self) -> UserResponse | None:
        return self.session.user

    @property
    def is_authenticated(self) -> bool:
        return self.session.is_authenticated

    async def login(self, data: LoginRequest) -> UserResponse:
        """Log in and store the returned tokens.

        Raises:
            AuthorizationError / ApiValidationError: Bad credentials.
        """
        payload = await self.api.post(
            "/login/", json=data.model_dump(), authenticated=False
        )
        auth = AuthResponse.model_validate(payload)
        self.session.save(auth)
        set_user_id(auth.user.id)

        logger.info("user_logged_in", username=auth.user.username)
        return auth.user

    async def register(self, data: RegisterRequest) -> UserResponse:
        """Create an account; the backend logs the new user in directly."""
        payload = await self.api.post(
            "/register/", json=data.model_dump(mode="json"), authenticated=False
        )
        auth = AuthResponse.model_validate(payload)
        self.session.save(auth)
        set_user_id(auth.user.id)

        logger.info("user_registered", username=auth.user.username, role=auth.user.role)
        return auth.user

    async def logout(self) -> None:
        """Log out. The local session is cleared even if the backend call fails."""
        refresh = self.session.refresh_token
        try:
            if self.session.is_authenticated:
                await self.api.post("/logout/", json={"refresh": refresh})
        except ApiError as e:
            logger.warning("logout_request_failed", error=e.message, code=e.code)
        finally:
            self.session.clear()
            set_user_id(None)

        logger.info("user_logged_out")

    async def refresh_token(self) -> str:
        """Force a token refresh (normally done automatically on 401)."""
        return await self.api.refresh_access_token()

    def update_user(self, user: UserResponse) -> None:
        self.session.update_user(user)
