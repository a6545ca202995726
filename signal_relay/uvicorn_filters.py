"""Custom filters for uvicorn access logging."""

import logging

from uvicorn.config import LOGGING_CONFIG

from signal_relay.settings import app_settings


class ExcludeMetricsFilter(logging.Filter):
    """
    Logging filter to exclude monitoring endpoint requests from access logs.

    This filter prevents excessive log noise from health checks and
    Prometheus scraping. Requests to paths like /metrics and /health
    will not appear in uvicorn's access logs.

    The excluded paths are configurable via the LOG_EXCLUDED_PATHS
    setting in signal_relay.settings.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Determine if the log record should be logged.

        Args:
            record: The log record to evaluate.

        Returns:
            False if the request path is in LOG_EXCLUDED_PATHS, True otherwise.
        """
        message = record.getMessage()
        return not any(
            path in message for path in app_settings.LOG_EXCLUDED_PATHS
        )


def build_log_config() -> dict:
    """
    Uvicorn's default logging config with ExcludeMetricsFilter on the
    access logger.
    """
    config = {
        **LOGGING_CONFIG,
        "filters": {
            "exclude_metrics": {
                "()": "signal_relay.uvicorn_filters.ExcludeMetricsFilter"
            }
        },
        "handlers": {
            name: dict(handler)
            for name, handler in LOGGING_CONFIG["handlers"].items()
        },
    }
    config["handlers"]["access"]["filters"] = ["exclude_metrics"]
    return config
