"""Peak-based gain adjustment."""

from __future__ import annotations

import logging
import math
import re
from pathlib import Path

from adjust_volume.application.audio_engine import AudioEngine
from adjust_volume.domain.errors import GainApplicationError
from adjust_volume.domain.services import compute_gain, parse_decibels

logger = logging.getLogger(__name__)

_MAX_VOLUME = re.compile(r"max_volume:\s*(\S+)\s*dB")


def parse_max_volume(text: str) -> float:
    """Extract the ``max_volume`` reading from volumedetect output."""

    match = _MAX_VOLUME.search(text)
    if not match:
        raise GainApplicationError("volumedetect did not report max_volume.")
    try:
        return parse_decibels(match.group(1))
    except ValueError as exc:
        raise GainApplicationError(str(exc)) from exc


def measure_peak(path: Path, engine: AudioEngine) -> float:
    """Maximum sample level of ``path`` in dBFS."""

    result = engine.run_ffmpeg(
        ["-nostdin", "-hide_banner", "-i", str(path), "-af", "volumedetect", "-f", "null", "-"]
    )
    if not result.ok:
        raise GainApplicationError(f"Peak detection failed for {path}: {result.error_tail()}")
    peak_db = parse_max_volume(result.stderr)
    if not math.isfinite(peak_db):
        raise GainApplicationError(f"Peak level of {path} is {peak_db} dB; the input may be silent.")
    return peak_db


def volume_filter(gain_db: float) -> str:
    return f"volume={gain_db:.2f}dB"


def apply_gain(path: Path, gain_db: float, staged_path: Path, engine: AudioEngine) -> Path:
    """Write ``path`` scaled by ``gain_db`` to ``staged_path``."""

    result = engine.run_ffmpeg(
        [
            "-y",
            "-nostdin",
            "-hide_banner",
            "-loglevel",
            "error",
            "-i",
            str(path),
            "-af",
            volume_filter(gain_db),
            str(staged_path),
        ]
    )
    if not result.ok:
        staged_path.unlink(missing_ok=True)
        raise GainApplicationError(f"Failed to increase volume for file: {path}: {result.error_tail()}")
    return staged_path


def adjust_peak(path: Path, target_peak_db: float, staged_path: Path, engine: AudioEngine) -> float:
    """Measure, compute and apply the gain; returns the applied gain in dB."""

    peak_db = measure_peak(path, engine)
    gain_db = compute_gain(peak_db, target_peak_db)
    logger.debug("Peak of %s is %.2f dB, applying %.2f dB", path, peak_db, gain_db)
    apply_gain(path, gain_db, staged_path, engine)
    return gain_db
