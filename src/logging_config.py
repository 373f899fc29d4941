"""JSON structured logging for the scrape service."""

import logging
import sys

from pythonjsonlogger.json import JsonFormatter

SERVICE_NAME = "wiki-scrape"

# Loggers that install their own handlers and must be re-routed.
_SERVER_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error")


def build_formatter() -> JsonFormatter:
    return JsonFormatter(
        fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
        rename_fields={
            "asctime": "timestamp",
            "levelname": "level",
            "name": "logger",
        },
        static_fields={"service": SERVICE_NAME},
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )


def setup_logging(log_level: str = "INFO") -> None:
    """Send every log record to stdout as one JSON object per line.

    ``httpx`` request logging is capped at WARNING since a full wiki scrape
    issues one request per page.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(build_formatter())

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    for name in _SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers.clear()
        server_logger.addHandler(handler)
        server_logger.propagate = False

    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
