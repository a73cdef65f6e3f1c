"""HTTP transport for the LMS REST API.

Wraps ``httpx.AsyncClient`` with:
- Bearer authentication from the session store
- One refresh-and-replay on 401, forced logout when the refresh fails
- Proactive refresh of access tokens whose ``exp`` has passed
- Mapping of error responses onto the ApiError hierarchy
- Request ID propagation and structured request logging
"""

import asyncio
import time
from collections.abc import Callable
from typing import Any

import httpx
import structlog

from learnhub.auth.schemas import TokenRefreshResponse
from learnhub.auth.security import is_token_expired
from learnhub.auth.session import SessionStore
from learnhub.config.settings import Settings
from learnhub.core.context import generate_request_id, get_request_id
from learnhub.core.errors import (
    AuthorizationError,
    NetworkError,
    error_from_response,
)


logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
SESSION_EXPIRED_MESSAGE = "Session expired. Please log in again."


class ApiClient:
    """Async client for the LMS REST API."""

    def __init__(
        self,
        settings: Settings,
        session: SessionStore,
        transport: httpx.AsyncBaseTransport | None = None,
        on_session_expired: Callable[[], None] | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Client settings (base URL, timeouts, refresh path).
            session: Store holding the tokens of the current login.
            transport: Optional httpx transport (tests mount an ASGI app here).
            on_session_expired: Called after a forced logout, once the
                session is cleared, to drop state cached for that user.
        """
        self.settings = settings
        self.session = session
        self._on_session_expired = on_session_expired
        self._client = httpx.AsyncClient(
            base_url=settings.api_base_url,
            timeout=settings.api_timeout_seconds,
            headers={"Accept": "application/json"},
            transport=transport,
        )
        self._refresh_lock = asyncio.Lock()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ==========================================================================
    # Public API
    # ==========================================================================

    async def get(self, path: str, **kwargs: Any) -> Any:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> Any:
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs: Any) -> Any:
        return await self.request("PUT", path, **kwargs)

    async def patch(self, path: str, **kwargs: Any) -> Any:
        return await self.request("PATCH", path, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> Any:
        return await self.request("DELETE", path, **kwargs)

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
        authenticated: bool = True,
    ) -> Any:
        """Send a request and return the decoded response body.

        Args:
            method: HTTP method.
            path: Path relative to the API base URL (e.g. ``/courses/``).
            json: JSON body.
            params: Query parameters; None values are dropped.
            authenticated: Attach the bearer token and handle 401 with a
                token refresh.

        Returns:
            Decoded JSON body, or None for empty responses.

        Raises:
            ApiError: Subclass matching the failure.
        """
        response = await self._execute(
            method, path, json=json, params=params, authenticated=authenticated
        )
        return self._handle_response(response)

    async def download(self, path: str, params: dict[str, Any] | None = None) -> bytes:
        """GET a binary resource (e.g. a certificate PDF).

        Raises:
            ApiError: Subclass matching the failure.
        """
        response = await self._execute(
            "GET", path, json=None, params=params, authenticated=True
        )
        if not response.is_success:
            self._handle_response(response)
        return response.content

    async def refresh_access_token(
        self, stale_token: str | None = None, request_id: str | None = None
    ) -> str:
        """Exchange the refresh token for a new access token.

        Concurrent callers share one refresh: if the access token changed
        while waiting for the lock, the new token is returned as is.

        Raises:
            AuthorizationError: Refresh rejected; the session is cleared.
            NetworkError: Backend unreachable; the session is kept.
        """
        async with self._refresh_lock:
            current = self.session.access_token
            if stale_token is not None and current and current != stale_token:
                return current

            refresh = self.session.refresh_token
            if not refresh:
                self._expire_session()
                raise AuthorizationError(SESSION_EXPIRED_MESSAGE)

            response = await self._send(
                "POST",
                self.settings.api_token_refresh_path,
                json={"refresh": refresh},
                params=None,
                authenticated=False,
                request_id=request_id,
            )

            if not response.is_success:
                logger.warning("token_refresh_failed", status_code=response.status_code)
                self._expire_session()
                raise AuthorizationError(
                    SESSION_EXPIRED_MESSAGE, status_code=response.status_code
                )

            tokens = TokenRefreshResponse.model_validate(response.json())
            self.session.update_tokens(tokens.access, tokens.refresh)
            logger.info("token_refreshed")
            return tokens.access

    # ==========================================================================
    # Internals
    # ==========================================================================

    def _expire_session(self) -> None:
        """Forced logout: clear the session and notify the owner."""
        self.session.clear()
        if self._on_session_expired is not None:
            self._on_session_expired()

    async def _execute(
        self,
        method: str,
        path: str,
        *,
        json: Any,
        params: dict[str, Any] | None,
        authenticated: bool,
    ) -> httpx.Response:
        if params:
            params = {k: v for k, v in params.items() if v is not None}

        # One ID for the request and any refresh or replay it causes
        request_id = get_request_id() or generate_request_id()

        if authenticated:
            await self._refresh_if_expired(request_id)

        used_token = self.session.access_token
        response = await self._send(
            method,
            path,
            json=json,
            params=params,
            authenticated=authenticated,
            request_id=request_id,
        )

        if response.status_code == httpx.codes.UNAUTHORIZED and authenticated:
            if not self.session.refresh_token:
                self._expire_session()
                raise AuthorizationError(SESSION_EXPIRED_MESSAGE)

            await self.refresh_access_token(stale_token=used_token, request_id=request_id)
            response = await self._send(
                method,
                path,
                json=json,
                params=params,
                authenticated=True,
                request_id=request_id,
            )
            if response.status_code == httpx.codes.UNAUTHORIZED:
                logger.warning("request_unauthorized_after_refresh", path=path)
                self._expire_session()

        return response

    async def _refresh_if_expired(self, request_id: str) -> None:
        token = self.session.access_token
        if (
            token
            and self.session.refresh_token
            and is_token_expired(token, self.settings.api_token_leeway_seconds)
        ):
            logger.debug("access_token_expired_refreshing")
            await self.refresh_access_token(stale_token=token, request_id=request_id)

    async def _send(
        self,
        method: str,
        path: str,
        *,
        json: Any,
        params: dict[str, Any] | None,
        authenticated: bool,
        request_id: str | None = None,
    ) -> httpx.Response:
        headers = {REQUEST_ID_HEADER: request_id or get_request_id() or generate_request_id()}
        if authenticated and self.session.access_token:
            headers["Authorization"] = f"Bearer {self.session.access_token}"

        start_time = time.perf_counter()
        try:
            response = await self._client.request(
                method, path, json=json, params=params, headers=headers
            )
        except httpx.TimeoutException as e:
            logger.error("api_request_timeout", method=method, path=path, error=str(e))
            raise NetworkError("Request timed out. Please try again.") from e
        except httpx.RequestError as e:
            logger.error("api_request_error", method=method, path=path, error=str(e))
            raise NetworkError from e

        logger.info(
            "api_request",
            method=method,
            path=path,
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )
        return response

    @staticmethod
    def _handle_response(response: httpx.Response) -> Any:
        if response.is_success:
            if response.status_code == httpx.codes.NO_CONTENT or not response.content:
                return None
            try:
                return response.json()
            except ValueError:
                return response.text

        try:
            payload: Any = response.json()
        except ValueError:
            payload = response.text

        error = error_from_response(response.status_code, payload)
        logger.warning(
            "api_request_failed",
            path=response.request.url.path,
            status_code=response.status_code,
            error_code=error.code,
            error=error.message,
        )
        raise error


def unwrap_list(payload: Any) -> list[Any]:
    """Return the items of a list response, paginated (``results``) or not."""
    if payload is None:
        return []
    if isinstance(payload, dict):
        return list(payload.get("results", []))
    return list(payload)
