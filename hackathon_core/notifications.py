"""Best-effort notification of application state changes."""
from __future__ import annotations

import logging
from concurrent.futures import Executor
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .ports import NotificationSink
from .types import Application

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationEvent:
    name: str  # e.g. "submission.reviewed"
    application_id: str | None
    hackathon_id: str
    applicant_id: str | None
    occurred_at: datetime
    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def for_application(
        cls, name: str, application: Application, occurred_at: datetime, **data: Any
    ) -> "NotificationEvent":
        return cls(
            name=name,
            application_id=application.id,
            hackathon_id=application.hackathon_id,
            applicant_id=application.applicant_id,
            occurred_at=occurred_at,
            data={"status": application.status.value, **data},
        )


class LoggingNotificationSink:
    """Sink that only writes events to the log."""

    def emit(self, event: NotificationEvent) -> None:
        logger.info(
            "NOTIFY %s application=%s hackathon=%s",
            event.name,
            event.application_id,
            event.hackathon_id,
            extra={
                "event": "notification.emitted",
                "notification": event.name,
                "application_id": event.application_id,
                "hackathon_id": event.hackathon_id,
            },
        )


class NotificationDispatcher:
    """Hands events to a sink without ever failing the caller.

    With an executor the sink runs off the calling thread; without one it runs
    inline, but any exception is still logged and dropped.
    """

    def __init__(self, sink: NotificationSink | None, executor: Executor | None = None):
        self.sink = sink
        self.executor = executor

    def _emit_safely(self, event: NotificationEvent) -> None:
        try:
            self.sink.emit(event)
        except Exception:
            logger.warning(
                "Notification %s for application %s failed",
                event.name,
                event.application_id,
                exc_info=True,
                extra={
                    "event": "notification.failed",
                    "notification": event.name,
                    "application_id": event.application_id,
                },
            )

    def dispatch(self, event: NotificationEvent) -> None:
        if self.sink is None:
            return
        if self.executor is None:
            self._emit_safely(event)
            return
        try:
            self.executor.submit(self._emit_safely, event)
        except RuntimeError:
            # Executor already shut down.
            logger.warning(
                "Notification %s dropped: executor unavailable",
                event.name,
                extra={"event": "notification.dropped", "notification": event.name},
            )

    def shutdown(self, wait: bool = True) -> None:
        """Stop the executor, if any; later events are dropped."""
        if self.executor is not None:
            self.executor.shutdown(wait=wait)
