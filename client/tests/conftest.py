"""Shared fixtures: settings, fake backend and logged-in clients."""

from collections.abc import AsyncIterator

import httpx
import pytest
import pytest_asyncio

from learnhub.auth.schemas import LoginRequest
from learnhub.auth.session import SessionStore
from learnhub.config import Settings
from learnhub.core.http import ApiClient
from learnhub.main import LearnHub
from tests.fake_backend import FakeBackend


@pytest.fixture
def settings() -> Settings:
    """Settings pointing at the fake backend."""
    return Settings(
        environment="testing",
        api_base_url="http://testserver/api",
        api_token_leeway_seconds=0,
        session_file=None,
        quiz_tick_seconds=0.01,
    )


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend.with_sample_data()


@pytest.fixture
def transport(backend: FakeBackend) -> httpx.ASGITransport:
    return httpx.ASGITransport(app=backend.app)


@pytest.fixture
def session_store() -> SessionStore:
    return SessionStore()


@pytest_asyncio.fixture
async def api(
    settings: Settings, session_store: SessionStore, transport: httpx.ASGITransport
) -> AsyncIterator[ApiClient]:
    async with ApiClient(settings, session_store, transport=transport) as client:
        yield client


@pytest_asyncio.fixture
async def hub(
    settings: Settings, session_store: SessionStore, transport: httpx.ASGITransport
) -> AsyncIterator[LearnHub]:
    async with LearnHub(settings, session=session_store, transport=transport) as client:
        yield client


@pytest_asyncio.fixture
async def alice(hub: LearnHub) -> LearnHub:
    """Client logged in as the student enrolled in "Python Basics"."""
    await hub.auth.login(LoginRequest(username="alice", password="password123"))
    return hub


@pytest_asyncio.fixture
async def bob(hub: LearnHub) -> LearnHub:
    """Client logged in as the instructor of both sample courses."""
    await hub.auth.login(LoginRequest(username="bob", password="password123"))
    return hub
