"""Domain models for volume adjustment workflows."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from adjust_volume.adjustment_options import AdjustmentStrategy
from adjust_volume.domain.errors import AnalysisError


class CodecClass(str, Enum):
    """Coarse codec family used by auto mode."""

    LOSSY = "lossy"
    LOSSLESS = "lossless"


class ProcessingState(str, Enum):
    """Lifecycle states of a single file inside the file processor."""

    PENDING_CLASSIFICATION = "pending-classification"
    PENDING_STRATEGY_SELECTION = "pending-strategy-selection"
    PROCESSING = "processing"
    STAGED = "staged"
    COMMITTED = "committed"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class AudioFileReference:
    """An eligible audio file discovered on disk."""

    path: Path
    extension: str
    codec_name: str | None = None
    codec_class: CodecClass | None = None


# loudnorm JSON keys consumed by the corrective pass.
LOUDNORM_STAT_FIELDS: tuple[str, ...] = (
    "input_i",
    "input_tp",
    "input_lra",
    "input_thresh",
    "target_offset",
)


@dataclass(frozen=True, slots=True)
class LoudnessStatistics:
    """Measurement-pass statistics reported by the loudnorm filter."""

    input_i: float
    input_tp: float
    input_lra: float
    input_thresh: float
    target_offset: float

    @classmethod
    def from_loudnorm_payload(cls, payload: dict[str, Any]) -> "LoudnessStatistics":
        values: dict[str, float] = {}
        for name in LOUDNORM_STAT_FIELDS:
            if name not in payload:
                raise AnalysisError(f"loudnorm output is missing '{name}'.")
            raw = payload[name]
            try:
                value = float(raw)
            except (TypeError, ValueError):
                raise AnalysisError(f"loudnorm field '{name}' is not numeric: {raw!r}.") from None
            if not math.isfinite(value):
                raise AnalysisError(
                    f"loudnorm field '{name}' is not finite ({raw}); the input may be silent."
                )
            values[name] = value
        return cls(**values)


@dataclass(frozen=True, slots=True)
class ProcessingOutcome:
    """Per-file result reported back to the tree walker."""

    path: Path
    success: bool
    state: ProcessingState
    strategy: AdjustmentStrategy | None = None
    error_code: str | None = None
    error_detail: str | None = None


@dataclass(slots=True)
class BatchResult:
    """Aggregated outcomes of a tree walk."""

    outcomes: list[ProcessingOutcome] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.success)

    @property
    def failed(self) -> int:
        return self.attempted - self.succeeded

    @property
    def success(self) -> bool:
        return self.failed == 0

    def summary(self) -> dict[str, int]:
        return {"total": self.attempted, "succeeded": self.succeeded, "failed": self.failed}
