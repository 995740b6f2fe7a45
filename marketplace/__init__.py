# Uvicorn application factory <https://www.uvicorn.org/#application-factories>
from asyncio import create_task, gather
from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.middleware.authentication import AuthenticationMiddleware

from marketplace.auth import AuthBackend
from marketplace.logging import logger
from marketplace.managers.connection_registry import ConnectionRegistry
from marketplace.middlewares.correlation_id import CorrelationIDMiddleware
from marketplace.repositories.notification_repository import (
    RedisNotificationRepository,
)
from marketplace.repositories.session_repository import RedisSessionRepository
from marketplace.routing import collect_subrouters
from marketplace.services.connection_lifecycle import ConnectionLifecycle
from marketplace.services.notification_dispatcher import NotificationDispatcher
from marketplace.services.notification_service import NotificationService
from marketplace.services.session_terminator import SessionTerminator
from marketplace.storage.redis import RedisPool
from marketplace.tasks.session_expiry import session_expiry_task


async def startup(app: FastAPI) -> None:
    """Start the background tasks of the application."""
    logger.info("Application startup initiated")

    app.state.tasks.append(
        create_task(session_expiry_task(app.state.session_terminator))
    )
    logger.info("Created task for session expiry")


async def shutdown(app: FastAPI) -> None:
    """
    Graceful cleanup: close Redis pools, then cancel background tasks.

    ``gather(..., return_exceptions=True)`` absorbs the CancelledError of
    each cancelled task.
    """
    logger.info("Application shutdown initiated")

    try:
        await RedisPool.close_all()
    except Exception as ex:
        logger.error(f"Error closing Redis connection pools: {ex}")

    tasks = app.state.tasks
    if tasks:
        logger.info(f"Cancelling {len(tasks)} background tasks")
        for task in tasks:
            task.cancel()
        await gather(*tasks, return_exceptions=True)
        tasks.clear()
        logger.info("All background tasks completed")

    logger.info("Application shutdown complete")


@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup(app)
    yield
    await shutdown(app)


def application() -> FastAPI:
    """
    Build the FastAPI application.

    Every collaborator of the realtime layer is constructed here and kept
    on ``app.state``: the connection registry, the session store used for
    validation, the connection lifecycle, the notification dispatcher and
    service and the session terminator. Each application instance owns
    its own registry.

    Middlewares: ``AuthenticationMiddleware`` decodes Keycloak tokens into
    ``UserModel``; ``CorrelationIDMiddleware`` tags HTTP requests.
    """
    app = FastAPI(
        title="Marketplace realtime",
        description="Realtime sessions and notifications for the marketplace",
        version="1.0.0",
        lifespan=lifespan,
    )

    registry = ConnectionRegistry()
    session_repository = RedisSessionRepository()
    dispatcher = NotificationDispatcher(registry)

    app.state.tasks = []
    app.state.connection_registry = registry
    app.state.session_repository = session_repository
    app.state.connection_lifecycle = ConnectionLifecycle(
        registry, session_repository
    )
    app.state.notification_dispatcher = dispatcher
    app.state.notification_service = NotificationService(
        RedisNotificationRepository(), dispatcher
    )
    app.state.session_terminator = SessionTerminator(registry)

    # Collect routers
    app.include_router(collect_subrouters())

    # Middlewares (execute in REVERSE order of registration)
    app.add_middleware(AuthenticationMiddleware, backend=AuthBackend())
    app.add_middleware(CorrelationIDMiddleware)

    return app


app = application()  # Need for fastapi cli
