import re

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(case_sensitive=True)

    ENVIRONMENT: str = "dev"

    # Keycloak settings
    KEYCLOAK_REALM: str
    KEYCLOAK_CLIENT_ID: str
    KEYCLOAK_BASE_URL: str = "http://hw-keycloak:8080/"

    # Redis settings
    REDIS_IP: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_MAX_CONNECTIONS: int = 50
    REDIS_SOCKET_TIMEOUT: int = 5
    REDIS_CONNECT_TIMEOUT: int = 5
    REDIS_HEALTH_CHECK_INTERVAL: int = 30
    REDIS_RETRY_ON_TIMEOUT: bool = True

    MAIN_REDIS_DB: int = 1
    AUTH_REDIS_DB: int = 10

    # Redis key layout
    USER_SESSION_REDIS_KEY_PREFIX: str = "session:"
    NOTIFICATION_REDIS_KEY_PREFIX: str = "notification:"
    USER_NOTIFICATIONS_REDIS_KEY_PREFIX: str = "notifications:user:"
    SEEN_NOTIFICATIONS_REDIS_KEY_PREFIX: str = "notifications:seen:"

    # Notification retention
    NOTIFICATION_HISTORY_LIMIT: int = 100
    NOTIFICATION_TTL_SECONDS: int = 30 * 24 * 60 * 60

    # Logging settings
    LOG_LEVEL: str = "INFO"
    LOG_FILE_PATH: str = "logs/logging_errors.log"
    LOG_EXCLUDED_PATHS: list[str] = ["/metrics", "/health"]
    LOKI_ENABLED: bool = False
    LOKI_URL: str = "http://loki:3100"
    LOKI_VERSION: str = "1"

    EXCLUDED_PATHS: re.Pattern = re.compile(
        r"^(/docs|/openapi.json|/health|/metrics)$"
    )

    # Debug mode settings
    DEBUG_AUTH: bool = False
    DEBUG_AUTH_USERNAME: str = "acika"
    DEBUG_AUTH_PASSWORD: str = "12345"


app_settings = Settings()
