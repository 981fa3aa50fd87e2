"""Structured request lifecycle events.

Every executor call emits a start event and then exactly one of the completed
or rejected events. Records carry the transport's ``debug_id`` as
``correlation_id`` so calls made through one manager can be grouped by a log
aggregator.

Usage
-----
>>> event_logger = RequestEventLogger("Ab12Cd34Ef56")
>>> event_logger.log_request_started(verb="GET", url="/users")

"""

from __future__ import annotations

import enum

from apimanager.logging import get_logger, log_debug, log_info, log_warning

logger = get_logger(__name__)


class RequestEventType(enum.StrEnum):
    """Structured log event types for executor requests."""

    REQUEST_STARTED = "request.started"
    REQUEST_COMPLETED = "request.completed"
    REQUEST_REJECTED = "request.rejected"


class RequestEventLogger:
    """Emit structured request events via femtologging."""

    def __init__(self, correlation_id: str) -> None:
        """Bind the logger to one correlation identifier."""
        self.correlation_id = correlation_id

    def log_request_started(self, *, verb: str, url: str) -> None:
        """Log the start of a request."""
        log_debug(
            logger,
            "[%s] correlation_id=%s verb=%s url=%s",
            RequestEventType.REQUEST_STARTED,
            self.correlation_id,
            verb,
            url,
        )

    def log_request_completed(self, *, verb: str, url: str, status_code: int) -> None:
        """Log a request that produced a successful payload."""
        log_info(
            logger,
            "[%s] correlation_id=%s verb=%s url=%s status_code=%d",
            RequestEventType.REQUEST_COMPLETED,
            self.correlation_id,
            verb,
            url,
            status_code,
        )

    def log_request_rejected(
        self,
        *,
        verb: str,
        url: str,
        kind: str,
        status_code: int | None,
        error: BaseException | None = None,
    ) -> None:
        """Log a request rejected by the transport or by its payload status."""
        log_warning(
            logger,
            "[%s] correlation_id=%s verb=%s url=%s rejection_kind=%s "
            "status_code=%s error_type=%s",
            RequestEventType.REQUEST_REJECTED,
            self.correlation_id,
            verb,
            url,
            kind,
            status_code,
            type(error).__name__ if error is not None else None,
        )


__all__ = ["RequestEventLogger", "RequestEventType"]
