"""
Dependency injection configuration for FastAPI.

Services are built once by the application factory and kept on
``app.state``; these getters expose them to endpoints and can be replaced
through ``app.dependency_overrides`` in tests.

Example:
    ```python
    @router.get("/notifications")
    async def get_notifications(
        user: CurrentUserDep, service: NotificationServiceDep
    ) -> list[NotificationModel]:
        return await service.get_notifications(user.id)
    ```
"""

from typing import Annotated

from fastapi import Depends, Request

from marketplace.dependencies.permissions import get_current_user, require_roles
from marketplace.managers.connection_registry import ConnectionRegistry
from marketplace.repositories.session_repository import RedisSessionRepository
from marketplace.schemas.user import UserModel
from marketplace.services.notification_service import NotificationService
from marketplace.services.session_terminator import SessionTerminator


def get_connection_registry(request: Request) -> ConnectionRegistry:
    return request.app.state.connection_registry


def get_session_repository(request: Request) -> RedisSessionRepository:
    return request.app.state.session_repository


def get_notification_service(request: Request) -> NotificationService:
    return request.app.state.notification_service


def get_session_terminator(request: Request) -> SessionTerminator:
    return request.app.state.session_terminator


CurrentUserDep = Annotated[UserModel, Depends(get_current_user)]
ConnectionRegistryDep = Annotated[
    ConnectionRegistry, Depends(get_connection_registry)
]
SessionRepoDep = Annotated[
    RedisSessionRepository, Depends(get_session_repository)
]
NotificationServiceDep = Annotated[
    NotificationService, Depends(get_notification_service)
]
SessionTerminatorDep = Annotated[
    SessionTerminator, Depends(get_session_terminator)
]

__all__ = [
    "ConnectionRegistryDep",
    "CurrentUserDep",
    "NotificationServiceDep",
    "SessionRepoDep",
    "SessionTerminatorDep",
    "get_connection_registry",
    "get_current_user",
    "get_notification_service",
    "get_session_repository",
    "get_session_terminator",
    "require_roles",
]
