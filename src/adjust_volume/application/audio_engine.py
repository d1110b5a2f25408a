"""Port for the external audio decode/filter/encode engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence


@dataclass(frozen=True, slots=True)
class EngineResult:
    """Captured outcome of one engine invocation."""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def error_tail(self, lines: int = 5) -> str:
        """Last few diagnostic lines, for error messages."""

        tail = [line for line in self.stderr.strip().splitlines() if line.strip()][-lines:]
        return "\n".join(tail) or f"exit status {self.returncode}"


class AudioEngine(Protocol):
    """Runs ffmpeg-compatible filter passes and stream probes."""

    def run_ffmpeg(self, args: Sequence[str]) -> EngineResult:
        """Run the filter/encode tool with ``args`` and capture its output."""

    def run_ffprobe(self, args: Sequence[str]) -> EngineResult:
        """Run the stream metadata tool with ``args`` and capture its output."""
