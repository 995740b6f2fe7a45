"""
Pytest configuration and fixtures for testing.

This module provides shared fixtures for authentication, sessions,
connections and Redis.
"""

import os
import uuid
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

# Set required environment variables for testing before importing app modules
os.environ.setdefault("KEYCLOAK_REALM", "test-realm")
os.environ.setdefault("KEYCLOAK_CLIENT_ID", "test-client")
os.environ.setdefault("KEYCLOAK_BASE_URL", "http://localhost:8080/")

SESSION_ID = "5b0d4a8e-3c0b-4f6e-9d6a-2f4c7b1e8a90"
USER_ID = "f86caf01-69b4-4892-ba2d-ffa58fdd5dab"


@pytest.fixture
def session_id():
    return SESSION_ID


@pytest.fixture
def mock_user_data():
    """
    Provides mock decoded user data from Keycloak token.

    Returns:
        dict: Mock user data with client roles and session claim
    """
    return {
        "sub": USER_ID,
        "sid": SESSION_ID,
        "preferred_username": "testuser",
        "given_name": "Test",
        "family_name": "User",
        "email": "testuser@example.com",
        "exp": 9999999999,
        "azp": "test-client",
        "realm_access": {"roles": ["offline_access", "uma_authorization"]},
        "resource_access": {
            "test-client": {"roles": ["admin", "send-notifications"]}
        },
    }


@pytest.fixture
def limited_user_data():
    """
    Provides mock user data with limited privileges.

    Returns:
        dict: Mock limited user data
    """
    return {
        "sub": "limited-user-id",
        "sid": str(uuid.uuid4()),
        "preferred_username": "limiteduser",
        "exp": 9999999999,
        "azp": "test-client",
        "realm_access": {"roles": ["offline_access"]},
        "resource_access": {"test-client": {"roles": []}},
    }


@pytest.fixture
def mock_user(mock_user_data):
    from marketplace.schemas.user import UserModel

    return UserModel(**mock_user_data)


@pytest.fixture
def limited_user(limited_user_data):
    from marketplace.schemas.user import UserModel

    return UserModel(**limited_user_data)


@pytest.fixture
def user_session():
    """A valid session of the mock user, expiring in one hour."""
    from marketplace.schemas.session import UserSessionModel

    return UserSessionModel(
        id=SESSION_ID,
        user_id=USER_ID,
        expires_at=datetime.now(UTC) + timedelta(hours=1),
        roles=["buyer"],
    )


@pytest.fixture
def registry():
    from marketplace.managers.connection_registry import ConnectionRegistry

    return ConnectionRegistry()


@pytest.fixture
def mock_websocket():
    """
    Provides a mock WebSocket connection for testing.

    Returns:
        MagicMock: Mocked WebSocket instance
    """
    ws_mock = MagicMock()
    ws_mock.send_json = AsyncMock()
    ws_mock.send_text = AsyncMock()
    ws_mock.accept = AsyncMock()
    ws_mock.close = AsyncMock()
    return ws_mock


@pytest.fixture
def mock_redis():
    """
    Provides a mock Redis connection for testing.

    Returns:
        AsyncMock: Mocked Redis connection with common methods
    """
    from tests.mocks.redis_mocks import create_mock_redis_connection

    return create_mock_redis_connection()
