"""
Error handler decorators for unified exception handling across protocols.

Both decorators turn ``AppException`` instances into the response type of
their protocol so endpoints and handlers can raise domain errors directly.
"""

from functools import wraps
from typing import Any, Callable

from fastapi import HTTPException
from redis.exceptions import RedisError as RedisClientError

from marketplace.api.ws.constants import RSPCode
from marketplace.exceptions import AppException
from marketplace.logging import logger
from marketplace.schemas.request import RequestModel
from marketplace.schemas.response import ResponseModel


def handle_http_errors(func: Callable) -> Callable:
    """
    Decorator for HTTP endpoints to convert AppException to HTTPException.

    Example:
        ```python
        @router.post("/notifications")
        @handle_http_errors
        async def send_notification(...) -> NotificationModel:
            return await service.send_notification(data)
        ```
    """

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except AppException as ex:
            logger.warning(
                f"AppException in {func.__name__}: {ex.message}",
                extra={"exception_type": type(ex).__name__},
            )
            raise HTTPException(
                status_code=ex.http_status,
                detail=ex.message,
            )
        except RedisClientError as ex:
            logger.error(
                f"Redis error in {func.__name__}: {ex}",
                exc_info=True,
            )
            raise HTTPException(
                status_code=500,
                detail="Storage error occurred",
            )

    return wrapper


def handle_ws_errors(func: Callable) -> Callable:
    """
    Decorator for WebSocket handlers to convert AppException to ResponseModel.
    """

    @wraps(func)
    async def wrapper(
        request: RequestModel, *args: Any, **kwargs: Any
    ) -> ResponseModel | None:
        try:
            return await func(request, *args, **kwargs)
        except AppException as ex:
            logger.warning(
                f"AppException in {func.__name__}: {ex.message}",
                extra={
                    "exception_type": type(ex).__name__,
                    "pkg_id": request.pkg_id,
                    "req_id": str(request.req_id),
                },
            )
            return ResponseModel.err_msg(
                request.pkg_id,
                request.req_id,
                msg=ex.message,
                status_code=ex.ws_status,
            )
        except RedisClientError as ex:
            logger.error(
                f"Redis error in {func.__name__}: {ex}",
                extra={"pkg_id": request.pkg_id, "req_id": str(request.req_id)},
                exc_info=True,
            )
            return ResponseModel.err_msg(
                request.pkg_id,
                request.req_id,
                msg="Storage error occurred",
                status_code=RSPCode.ERROR,
            )

    return wrapper
