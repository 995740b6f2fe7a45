"""Health check endpoint for monitoring service status."""

from fastapi import APIRouter, Response, status
from pydantic import BaseModel
from redis.exceptions import RedisError

from marketplace.dependencies import ConnectionRegistryDep
from marketplace.logging import logger
from marketplace.settings import app_settings
from marketplace.storage.redis import get_auth_redis_connection

router = APIRouter()


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str
    redis: str
    connections: dict[str, int]


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check endpoint",
    tags=["health"],
)
async def health_check(
    response: Response, registry: ConnectionRegistryDep
) -> HealthResponse:
    """
    Report Redis connectivity and the size of the connection registry.

    Returns 503 Service Unavailable when the session store is unreachable,
    since no connection can be validated without it.
    """
    redis_status = "healthy"

    try:
        r = await get_auth_redis_connection()
        if r is None:
            raise ConnectionError(
                f"No connection to Redis db {app_settings.AUTH_REDIS_DB}"
            )
        await r.ping()
    except (RedisError, ConnectionError, TimeoutError, OSError) as e:
        logger.error(f"Redis health check failed: {e}")
        redis_status = "unhealthy"

    if redis_status == "unhealthy":
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthResponse(
        status=redis_status,
        redis=redis_status,
        connections=registry.stats(),
    )
