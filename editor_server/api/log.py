"""loguru setup for the editor server.

Application code logs through loguru directly; uvicorn, boto3/botocore and
python-multipart log through stdlib ``logging``, which is bridged into loguru
so every line shares one format.  An optional second sink receives the error
reports marked by :class:`~editor_server.api.reporting.ErrorReporter` as JSON
lines.
"""

from __future__ import annotations

import inspect
import logging
import sys
from typing import Any

from loguru import logger

_STDERR_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

# Library loggers that are only interesting when something goes wrong.
_QUIET_LOGGERS = ("uvicorn.access", "botocore", "boto3", "urllib3", "multipart")


class _StdlibBridge(logging.Handler):
    """Re-emit stdlib ``logging`` records through loguru at the caller's frame."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = inspect.currentframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _is_error_report(record: dict[str, Any]) -> bool:
    return bool(record["extra"].get("error_report"))


def setup_logging(level: str = "INFO", error_log: str | None = None) -> None:
    """Replace all loguru sinks and route stdlib logging into loguru.

    Call once at startup.  ``error_log`` adds a JSON-lines sink that only
    receives forwarded error reports.
    """
    level = level.upper()

    handlers: list[dict[str, Any]] = [{"sink": sys.stderr, "level": level, "format": _STDERR_FORMAT}]
    if error_log:
        handlers.append({"sink": error_log, "level": "WARNING", "serialize": True, "filter": _is_error_report})
    logger.configure(handlers=handlers)

    logging.basicConfig(handlers=[_StdlibBridge()], level=0, force=True)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger.info("Logging initialised (level={}, error_log={})", level, error_log or "-")
