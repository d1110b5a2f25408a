"""Application-level event publishing contracts."""

from __future__ import annotations

from typing import Protocol

from adjust_volume.domain.events import DomainEvent


class EventPublisher(Protocol):
    """Port for publishing domain events."""

    def publish(self, event: DomainEvent) -> None:
        """Publish a single event."""


class NullEventPublisher:
    """No-op publisher used when event streaming is disabled."""

    def publish(self, event: DomainEvent) -> None:  # noqa: ARG002
        return


class CompositeEventPublisher:
    """Fan each event out to several publishers in order."""

    def __init__(self, *publishers: EventPublisher) -> None:
        self._publishers = publishers

    def publish(self, event: DomainEvent) -> None:
        for publisher in self._publishers:
            publisher.publish(event)
