"""Simple logging-backed implementation of the event publisher."""

from __future__ import annotations

import logging

from adjust_volume.domain.events import DomainEvent, FileFailed

LOGGER = logging.getLogger("adjust_volume.events")


class LoggingEventPublisher:
    """Emit event payload summaries to structured logs."""

    def publish(self, event: DomainEvent) -> None:
        LOGGER.log(
            logging.WARNING if isinstance(event, FileFailed) else logging.INFO,
            "domain_event_emitted",
            extra={
                "event_name": type(event).__name__,
                "correlation_id": event.correlation_id,
                "payload_summary": event.payload_summary,
                "occurred_at": event.occurred_at.isoformat(),
            },
        )
