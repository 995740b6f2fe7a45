from typing import Any

from keycloak import KeycloakOpenID

from marketplace.settings import app_settings
from marketplace.utils.singleton import SingletonMeta


class KeycloakManager(metaclass=SingletonMeta):
    """
    Singleton access to the Keycloak OpenID client.

    Tokens are issued by Keycloak; this service only decodes them, plus a
    password login used by the debug authentication mode.
    """

    def __init__(self) -> None:
        self.openid = KeycloakOpenID(
            server_url=f"{app_settings.KEYCLOAK_BASE_URL}/",
            client_id=app_settings.KEYCLOAK_CLIENT_ID,
            realm_name=app_settings.KEYCLOAK_REALM,
        )

    async def decode_token(self, access_token: str) -> dict[str, Any]:
        """
        Validate and decode an access token.

        Raises:
            JWTExpired: The token has expired.
            ValueError: The token cannot be decoded.
        """
        return await self.openid.a_decode_token(access_token)

    async def login_async(
        self, username: str, password: str
    ) -> dict[str, Any]:
        """
        Authenticate a user and obtain tokens.

        Raises:
            KeycloakAuthenticationError: If authentication fails.
        """
        return await self.openid.a_token(username=username, password=password)
