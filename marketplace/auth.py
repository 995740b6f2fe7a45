from typing import Any
from urllib.parse import parse_qsl

from fastapi.security.utils import get_authorization_scheme_param
from jwcrypto.jwt import JWTExpired
from keycloak.exceptions import KeycloakAuthenticationError
from starlette.authentication import (
    AuthCredentials,
    AuthenticationBackend,
    AuthenticationError as StarletteAuthenticationError,
)

from marketplace.logging import logger
from marketplace.managers.keycloak_manager import KeycloakManager
from marketplace.schemas.user import UserModel
from marketplace.settings import app_settings


class AuthenticationError(StarletteAuthenticationError):
    """
    Token authentication failed.

    Attributes:
        reason: Machine-readable code ('token_expired', 'invalid_credentials',
            'token_decode_error').
        detail: Human-readable error details.
    """

    def __init__(self, reason: str, detail: str) -> None:
        self.reason = reason
        self.detail = detail
        super().__init__(f"{reason}: {detail}")


class AuthBackend(AuthenticationBackend):  # type: ignore[misc]
    """
    Keycloak bearer-token authentication for HTTP and WebSocket requests.

    HTTP requests carry the token in the ``Authorization`` header, WebSocket
    upgrades in the ``Authorization`` query parameter. Requests without a
    token stay anonymous; endpoints decide whether that is allowed. The
    decoded ``UserModel`` carries the ``sid`` claim realtime connections
    are registered under.
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.excluded_paths = app_settings.EXCLUDED_PATHS

    async def authenticate(self, request):  # type: ignore[no-untyped-def]
        """
        Decode the request's access token into a ``UserModel``.

        Returns:
            Tuple of (AuthCredentials, UserModel), or None for excluded
            paths and requests without a token.

        Raises:
            AuthenticationError: The token is expired, rejected or malformed.
        """
        logger.debug(f"Request type -> {request.scope['type']}")

        if request.scope["type"] == "websocket":
            qs = dict(parse_qsl(request.scope["query_string"].decode("utf8")))
            auth_access_token = qs.get("Authorization", "")
        else:  # type -> http
            if self.excluded_paths.match(request.url.path):
                return None

            auth_access_token = request.headers.get("authorization", "")

        _, access_token = get_authorization_scheme_param(auth_access_token)

        try:
            kc_manager = KeycloakManager()

            # Development only
            if app_settings.DEBUG_AUTH:
                logger.warning(
                    "DEBUG_AUTH is enabled - using debug credentials. "
                    "NEVER enable this in production!"
                )
                token = await kc_manager.login_async(
                    app_settings.DEBUG_AUTH_USERNAME,
                    app_settings.DEBUG_AUTH_PASSWORD,
                )
                access_token = token["access_token"]

            if not access_token:
                return None

            user_data = await kc_manager.decode_token(access_token)
            user: UserModel = UserModel(**user_data)

            return AuthCredentials(user.roles), user

        except JWTExpired as ex:
            logger.error(f"JWT token expired: {ex}")
            raise AuthenticationError("token_expired", str(ex))

        except KeycloakAuthenticationError as ex:
            logger.error(f"Invalid credentials: {ex}")
            raise AuthenticationError("invalid_credentials", str(ex))

        except ValueError as ex:
            logger.error(f"Error occurred while decode auth token: {ex}")
            raise AuthenticationError("token_decode_error", str(ex))
