"""
Logging configuration for the dashboard server.

Health endpoints are polled by load balancers and monitors, so their access
log lines are dropped. Everything else goes to stdout through one formatter.
"""

import logging
import logging.config
import re
from typing import Any, Dict, Iterable, Optional, Tuple

HEALTH_PATH = "/health"

# Fallback for access lines that do not carry uvicorn's argument tuple
_REQUEST_LINE = re.compile(r'"(?P<method>[A-Z]+) (?P<path>[^ "]+)')


def _request_target(record: logging.LogRecord) -> Optional[Tuple[str, str]]:
    # uvicorn.access logs (client_addr, method, full_path, http_version, status_code)
    if isinstance(record.args, tuple) and len(record.args) == 5:
        return str(record.args[1]), str(record.args[2])
    match = _REQUEST_LINE.search(record.getMessage())
    if match is None:
        return None
    return match.group("method"), match.group("path")


class HealthCheckFilter(logging.Filter):
    """Drop uvicorn access lines for GET requests to the health routes."""

    def __init__(self, prefix: str = HEALTH_PATH, name: str = ""):
        super().__init__(name)
        self.prefix = prefix

    def is_health_path(self, path: str) -> bool:
        path = path.split("?", 1)[0]
        return path == self.prefix or path.startswith(self.prefix + "/")

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name != "uvicorn.access":
            return True
        target = _request_target(record)
        if target is None:
            return True
        method, path = target
        return not (method in ("GET", "HEAD") and self.is_health_path(path))


def _logger(handler: str, level: str) -> Dict[str, Any]:
    return {"handlers": [handler], "level": level, "propagate": False}


def get_logging_config(
    level: str = "INFO",
    app_loggers: Iterable[str] = ("watchdeck",)
) -> Dict[str, Any]:
    """
    Build the dictConfig document for the server.

    Args:
        level: Level name applied to uvicorn and the application loggers
        app_loggers: Logger names that share the default handler

    Returns:
        Dictionary accepted by logging.config.dictConfig and uvicorn's log_config
    """
    level = level.upper()

    loggers = {
        "uvicorn": _logger("default", level),
        "uvicorn.error": _logger("default", level),
        "uvicorn.access": _logger("access", level),
    }
    for name in app_loggers:
        loggers[name] = _logger("default", level)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "health_check_filter": {
                "()": HealthCheckFilter,
                "prefix": HEALTH_PATH,
            }
        },
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            },
            "access": {
                "format": "%(message)s"
            }
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout"
            },
            "access": {
                "class": "logging.StreamHandler",
                "formatter": "access",
                "stream": "ext://sys.stdout",
                "filters": ["health_check_filter"]
            }
        },
        "loggers": loggers,
        "root": {
            "level": level,
            "handlers": ["default"]
        }
    }


def configure_logging(level: str = "INFO") -> None:
    """Apply the logging configuration to the running process."""
    logging.config.dictConfig(get_logging_config(level))
