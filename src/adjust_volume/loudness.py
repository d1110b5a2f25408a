"""Two-pass loudnorm normalization.

The first pass runs loudnorm in measurement mode against a fixed reference
profile and scrapes the JSON statistics block it prints among ffmpeg's log
output. The second pass feeds those statistics back to loudnorm in linear mode
together with the final targets, so the correction is a single linear gain
rather than another round of adaptive range compression.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path

from adjust_volume.application.audio_engine import AudioEngine
from adjust_volume.domain.errors import AnalysisError, NormalizationError
from adjust_volume.domain.models import LoudnessStatistics
from adjust_volume.utils.config import MeasurementProfile, TargetConfig

logger = logging.getLogger(__name__)

_BLOCK_START = re.compile(r"^[ \t]*\{", re.MULTILINE)


def _number(value: float) -> str:
    return f"{value:.2f}"


def extract_json_block(text: str) -> str:
    """Return the first brace-balanced block that starts at the head of a line.

    Braces inside JSON strings do not count towards nesting.
    """

    match = _BLOCK_START.search(text)
    if match is None:
        raise AnalysisError("No loudnorm statistics block found in engine output.")

    start = match.end() - 1
    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start : index + 1]
    raise AnalysisError("Unterminated loudnorm statistics block in engine output.")


def parse_statistics(text: str) -> LoudnessStatistics:
    block = extract_json_block(text)
    try:
        payload = json.loads(block)
    except json.JSONDecodeError as exc:
        raise AnalysisError(f"Malformed loudnorm statistics block: {exc}") from exc
    if not isinstance(payload, dict):
        raise AnalysisError("loudnorm statistics block is not an object.")
    return LoudnessStatistics.from_loudnorm_payload(payload)


def measurement_filter(profile: MeasurementProfile) -> str:
    return (
        f"loudnorm=I={_number(profile.integrated_lufs)}"
        f":TP={_number(profile.true_peak_db)}"
        f":LRA={_number(profile.loudness_range)}"
        ":print_format=json"
    )


def analyze(path: Path, profile: MeasurementProfile, engine: AudioEngine) -> LoudnessStatistics:
    """Run the measurement pass over ``path``."""

    result = engine.run_ffmpeg(
        [
            "-nostdin",
            "-hide_banner",
            "-i",
            str(path),
            "-af",
            measurement_filter(profile),
            "-f",
            "null",
            "-",
        ]
    )
    if not result.ok:
        raise AnalysisError(f"Failed to extract loudnorm data from file: {path}: {result.error_tail()}")
    try:
        stats = parse_statistics(result.stderr)
    except AnalysisError as error:
        raise AnalysisError(f"Failed to extract loudnorm data from file: {path}: {error.message}") from error
    logger.debug("Measured %s: %s", path, stats)
    return stats


def build_loudnorm_filter(stats: LoudnessStatistics, targets: TargetConfig) -> str:
    """Corrective loudnorm filter parametrized by the measured statistics."""

    params = {
        "I": _number(targets.target_loudness_lufs),
        "TP": _number(targets.true_peak_ceiling_db),
        "LRA": _number(targets.loudness_range_target),
        "measured_I": _number(stats.input_i),
        "measured_TP": _number(stats.input_tp),
        "measured_LRA": _number(stats.input_lra),
        "measured_thresh": _number(stats.input_thresh),
        "offset": _number(stats.target_offset),
        "linear": "true",
    }
    return "loudnorm=" + ":".join(f"{key}={value}" for key, value in params.items())


def probe_sample_rate(path: Path, engine: AudioEngine) -> int | None:
    """Sample rate of the first audio stream, or None when unknown."""

    result = engine.run_ffprobe(
        [
            "-v",
            "error",
            "-select_streams",
            "a:0",
            "-show_entries",
            "stream=sample_rate",
            "-of",
            "default=noprint_wrappers=1:nokey=1",
            str(path),
        ]
    )
    if not result.ok:
        return None
    for line in result.stdout.splitlines():
        if line.strip().isdigit():
            return int(line.strip())
    return None


def normalize(
    path: Path,
    stats: LoudnessStatistics,
    targets: TargetConfig,
    staged_path: Path,
    engine: AudioEngine,
) -> Path:
    """Run the corrective pass over ``path`` into ``staged_path``."""

    args = [
        "-y",
        "-nostdin",
        "-hide_banner",
        "-loglevel",
        "error",
        "-i",
        str(path),
        "-af",
        build_loudnorm_filter(stats, targets),
    ]
    # loudnorm resamples to 192 kHz internally; keep the source rate.
    sample_rate = probe_sample_rate(path, engine)
    if sample_rate:
        args += ["-ar", str(sample_rate)]
    args.append(str(staged_path))

    result = engine.run_ffmpeg(args)
    if not result.ok:
        staged_path.unlink(missing_ok=True)
        raise NormalizationError(f"Failed to normalize volume for file: {path}: {result.error_tail()}")
    return staged_path
