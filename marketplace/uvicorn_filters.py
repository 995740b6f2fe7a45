"""Custom filters for uvicorn access logging."""

import logging


class ExcludeMetricsFilter(logging.Filter):
    """
    Drop access log lines of monitoring endpoints.

    Health checks and Prometheus scrapes would otherwise flood the access
    log. Loaded by uvicorn's logging config before the app starts, so the
    settings import happens lazily.
    """

    def __init__(self, name: str = "", excluded_paths: list[str] | None = None):
        super().__init__(name)
        self._excluded_paths = excluded_paths

    @property
    def excluded_paths(self) -> list[str]:
        if self._excluded_paths is None:
            from marketplace.settings import app_settings

            self._excluded_paths = app_settings.LOG_EXCLUDED_PATHS
        return self._excluded_paths

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        return not any(path in message for path in self.excluded_paths)
