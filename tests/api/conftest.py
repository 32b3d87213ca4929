"""Fixtures for API tests."""

import asyncio

import pytest
from falcon.testing import TestClient

from rbacconsole.application.rbac_cache import RBACCache
from rbacconsole.application.use_cases.assistant.dispatch_command import (
    DispatchCommandUseCase,
)
from rbacconsole.interfaces.api.app import create_app
from rbacconsole.interfaces.api.middleware.auth import AuthMiddleware


class _TestUser:
    user_id = "test-user-1"


class AuthBypassMiddleware:
    """Middleware that sets context.user for testing."""

    async def process_request(self, req, resp):
        req.context.user = _TestUser()


@pytest.fixture
def loaded_cache(cache: RBACCache) -> RBACCache:
    asyncio.run(cache.load())
    return cache


@pytest.fixture
def app(loaded_cache, mock_interpreter):
    """Falcon ASGI app over the fake store, auth bypassed."""
    dispatch = DispatchCommandUseCase(loaded_cache, mock_interpreter)
    return create_app(loaded_cache, dispatch, middleware=[AuthBypassMiddleware()])


@pytest.fixture
def client(app) -> TestClient:
    """Falcon ASGI test client."""
    return TestClient(app)


@pytest.fixture
def keycloak():
    """Stub provider that accepts only the token "good"."""
    from unittest.mock import MagicMock

    from rbacconsole.infrastructure.auth.keycloak_provider import OIDCUser

    provider = MagicMock()
    provider.decode_token.side_effect = lambda token: (
        OIDCUser(user_id="u-1", email="ops@example.com", username="ops") if token == "good" else None
    )
    return provider


@pytest.fixture
def secured_client(loaded_cache, mock_interpreter, keycloak) -> TestClient:
    """Client whose app validates bearer tokens through the stub provider."""
    dispatch = DispatchCommandUseCase(loaded_cache, mock_interpreter)
    app = create_app(loaded_cache, dispatch, middleware=[AuthMiddleware(keycloak)])
    return TestClient(app)
