"""
FastAPI dependencies for authentication and role-based access control.
"""

from fastapi import Depends, HTTPException, Request, status
from starlette.authentication import UnauthenticatedUser

from marketplace.logging import logger
from marketplace.schemas.user import UserModel


def get_current_user(request: Request) -> UserModel:
    """
    Return the authenticated user of the request.

    Raises:
        HTTPException: 401 if the request is not authenticated.
    """
    user = request.scope.get("user")

    if user is None or isinstance(user, UnauthenticatedUser):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )

    return user


def require_roles(*roles: str):  # type: ignore[no-untyped-def]
    """
    Create a FastAPI dependency that requires the user to have ALL specified roles.

    Example:
        ```python
        @router.delete(
            "/notifications/{notification_id}",
            dependencies=[Depends(require_roles("admin"))],
        )
        async def delete_notification(...): ...
        ```

    Raises:
        HTTPException: 401 if user is not authenticated, 403 if user lacks required roles.
    """

    async def check_roles(
        request: Request, user: UserModel = Depends(get_current_user)
    ) -> None:
        missing_roles = [role for role in roles if role not in user.roles]

        if missing_roles:
            logger.debug(
                f"The user {user.username} made a request to "
                f"{request.method} {request.url.path} but has "
                f"insufficient permissions. Missing roles: {missing_roles}"
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Missing required roles: {', '.join(missing_roles)}",
            )

    return check_roles
