"""Error reporting for failures that reach the request boundary.

Every reported error is logged through loguru.  In ``prod`` mode the record is
also bound with ``error_report=True``; :func:`~editor_server.api.log.setup_logging`
routes those records to a JSON sink (``EDITOR_ERROR_LOG``) that an external
error tracker can ingest.  ``dev`` mode never forwards.
"""

from __future__ import annotations

from typing import Literal

from loguru import logger


class ErrorReporter:
    def __init__(self, mode: Literal["dev", "prod"] = "dev") -> None:
        self.mode = mode

    @property
    def forwarding(self) -> bool:
        return self.mode == "prod"

    def report(self, exc: BaseException, *, status_code: int = 500, route: str | None = None) -> None:
        """Log the error and, in prod mode, mark it for external collection."""
        bound = logger.bind(error_report=self.forwarding, route=route, status_code=status_code)
        if status_code >= 500:
            bound.opt(exception=exc).error("Request failed ({}) on {}: {!r}", status_code, route, exc)
        else:
            bound.warning("Request rejected ({}) on {}: {}", status_code, route, exc)
