"""Subprocess adapter that runs ffmpeg and ffprobe."""

from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass
from typing import Sequence

from adjust_volume.application.audio_engine import EngineResult
from adjust_volume.domain.errors import DependencyMissing

logger = logging.getLogger(__name__)

# Exit status reported when an invocation exceeds its timeout.
TIMEOUT_RETURNCODE = 124


@dataclass(frozen=True, slots=True)
class FfmpegEngine:
    """Blocking ffmpeg/ffprobe runner with an optional per-call timeout."""

    ffmpeg_binary: str = "ffmpeg"
    ffprobe_binary: str = "ffprobe"
    timeout_seconds: float | None = None

    def ensure_available(self) -> None:
        for binary in (self.ffmpeg_binary, self.ffprobe_binary):
            if shutil.which(binary) is None:
                raise DependencyMissing(f"{binary} is not installed. Please install it to use this tool.")

    def run_ffmpeg(self, args: Sequence[str]) -> EngineResult:
        return self._run([self.ffmpeg_binary, *args])

    def run_ffprobe(self, args: Sequence[str]) -> EngineResult:
        return self._run([self.ffprobe_binary, *args])

    def _run(self, cmd: list[str]) -> EngineResult:
        logger.debug("Running %s", " ".join(cmd))
        try:
            proc = subprocess.run(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
                timeout=self.timeout_seconds,
            )
        except FileNotFoundError as exc:
            raise DependencyMissing(f"{cmd[0]} is not installed. Please install it to use this tool.") from exc
        except subprocess.TimeoutExpired:
            # subprocess.run kills the child before re-raising.
            logger.warning("%s timed out after %ss", cmd[0], self.timeout_seconds)
            return EngineResult(
                returncode=TIMEOUT_RETURNCODE,
                stderr=f"{cmd[0]} timed out after {self.timeout_seconds}s",
            )
        return EngineResult(returncode=proc.returncode, stdout=proc.stdout, stderr=proc.stderr)
