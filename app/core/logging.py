"""Logging setup for the station backend: JSON lines on stderr by default."""
from __future__ import annotations

import logging
from typing import Optional

from pythonjsonlogger import jsonlogger

_PLAIN_FORMAT = "%(asctime)s %(levelname)-8s [%(service)s/%(env)s] %(name)s: %(message)s"
_JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(service)s %(env)s %(message)s"

# Per-request access lines duplicate what the reverse proxy already records.
QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore")


class ServiceContextFilter(logging.Filter):
    """Stamp every record with the service name and deployment environment."""

    def __init__(self, service: str, env: str) -> None:
        super().__init__()
        self.service = service
        self.env = env

    def filter(self, record: logging.LogRecord) -> bool:
        record.service = self.service
        record.env = getattr(record, "env", self.env)
        return True


def setup_logging(
    level: str = "INFO",
    *,
    json_output: bool = True,
    service: str = "station-admin-backend",
    env: str = "dev",
) -> None:
    """Configure root logging with a JSON (or plain text) formatter."""

    root_logger = logging.getLogger()
    # Remove existing handlers to avoid duplicate logs when reloading.
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
    root_logger.setLevel(level.upper())

    handler = logging.StreamHandler()
    if json_output:
        formatter: logging.Formatter = jsonlogger.JsonFormatter(_JSON_FORMAT)
    else:
        formatter = logging.Formatter(_PLAIN_FORMAT)
    handler.setFormatter(formatter)
    handler.addFilter(ServiceContextFilter(service, env))
    root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level.upper())
    return logger


__all__ = ["QUIET_LOGGERS", "ServiceContextFilter", "get_logger", "setup_logging"]
