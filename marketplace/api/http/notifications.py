"""Notification endpoints: send, list and acknowledge notifications."""

from fastapi import APIRouter, Depends, Response, status

from marketplace.dependencies import (
    CurrentUserDep,
    NotificationServiceDep,
    require_roles,
)
from marketplace.schemas.notification import (
    NotificationCreateModel,
    NotificationModel,
    NotificationSeenModel,
)
from marketplace.utils.error_handler import handle_http_errors

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.post(
    "",
    response_model=NotificationModel,
    status_code=status.HTTP_201_CREATED,
    summary="Send a notification",
    dependencies=[Depends(require_roles("send-notifications"))],
)
@handle_http_errors
async def send_notification(
    data: NotificationCreateModel, service: NotificationServiceDep
) -> NotificationModel:
    """
    Store a notification and push it to the recipient's live connections.

    Without ``to`` the notification is broadcast to every connected client.

    Example:
        POST /notifications
        {"type": "info", "message": "Your order has shipped", "to": "<user id>"}
    """
    return await service.send_notification(data)


@router.get(
    "",
    response_model=list[NotificationModel],
    summary="List the current user's notifications",
)
@handle_http_errors
async def get_notifications(
    user: CurrentUserDep, service: NotificationServiceDep
) -> list[NotificationModel]:
    return await service.get_notifications(user.id)


@router.get(
    "/unseen",
    response_model=list[NotificationModel],
    summary="List the current user's unseen notifications",
)
@handle_http_errors
async def get_unseen_notifications(
    user: CurrentUserDep, service: NotificationServiceDep
) -> list[NotificationModel]:
    return await service.get_unseen_notifications(user.id)


@router.post(
    "/{notification_id}/seen",
    response_model=NotificationSeenModel,
    summary="Mark a notification as seen",
)
@handle_http_errors
async def mark_notification_seen(
    notification_id: str,
    user: CurrentUserDep,
    service: NotificationServiceDep,
) -> NotificationSeenModel:
    """
    Record that the current user has read ``notification_id``.

    Raises:
        HTTPException: 404 if the notification does not exist.
    """
    return await service.mark_seen(notification_id, user.id)


@router.delete(
    "/{notification_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a notification",
    dependencies=[Depends(require_roles("admin"))],
)
@handle_http_errors
async def delete_notification(
    notification_id: str, service: NotificationServiceDep
) -> Response:
    await service.delete_notification(notification_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
