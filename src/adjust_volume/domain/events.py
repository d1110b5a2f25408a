"""Domain event contracts for volume adjustment workflows."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True, slots=True)
class DomainEvent:
    """Base domain event emitted by application services."""

    correlation_id: str
    payload_summary: dict[str, Any]
    occurred_at: datetime = field(default_factory=lambda: datetime.now(tz=timezone.utc))


@dataclass(frozen=True, slots=True)
class FileProcessingStarted(DomainEvent):
    """A file passed classification and a strategy is about to run."""


@dataclass(frozen=True, slots=True)
class StrategySelected(DomainEvent):
    """A processing strategy was chosen for a file."""


@dataclass(frozen=True, slots=True)
class FileStaged(DomainEvent):
    """Adjusted audio was written to the staging area (not committed)."""


@dataclass(frozen=True, slots=True)
class FileCommitted(DomainEvent):
    """A staged artifact replaced its original file."""


@dataclass(frozen=True, slots=True)
class FileFailed(DomainEvent):
    """Processing failed for a file; the original is untouched."""


@dataclass(frozen=True, slots=True)
class BatchCompleted(DomainEvent):
    """All files of a run were attempted."""
