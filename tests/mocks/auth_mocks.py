"""
Mock factory functions for authentication testing.

Provides mocks for Keycloak and related auth components.
"""

from unittest.mock import AsyncMock, Mock


def create_mock_keycloak_manager(user_data: dict | None = None):
    """
    Creates a mock KeycloakManager whose ``decode_token`` returns ``user_data``.

    Returns:
        Mock: Mocked KeycloakManager instance
    """
    manager_mock = Mock()
    manager_mock.login_async = AsyncMock(
        return_value={
            "access_token": "mock_access_token",
            "refresh_token": "mock_refresh_token",
            "expires_in": 300,
            "token_type": "Bearer",
        }
    )
    manager_mock.decode_token = AsyncMock(return_value=user_data or {})
    return manager_mock
