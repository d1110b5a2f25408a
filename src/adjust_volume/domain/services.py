"""Domain services that contain pure business rules."""

from __future__ import annotations

import re

from adjust_volume.adjustment_options import AdjustmentMode, AdjustmentStrategy
from adjust_volume.domain.models import CodecClass

_BARE_DECIMAL = re.compile(r"^([+-]?)\.(\d+)$")


def normalize_decimal(text: str) -> str:
    """Prefix a leading zero to bare decimals such as ``.5`` or ``-.5``."""

    stripped = text.strip()
    match = _BARE_DECIMAL.match(stripped)
    if match:
        return f"{match.group(1)}0.{match.group(2)}"
    return stripped


def parse_decibels(text: str) -> float:
    """Parse a decibel value as printed by ffmpeg, e.g. ``-3.2 dB`` or ``.5``."""

    cleaned = text.strip()
    if cleaned.lower().endswith("db"):
        cleaned = cleaned[:-2]
    cleaned = normalize_decimal(cleaned)
    try:
        return float(cleaned)
    except ValueError:
        raise ValueError(f"Not a decibel value: {text!r}") from None


def compute_gain(measured_peak_db: float, target_peak_db: float) -> float:
    """Gain in dB that moves the measured peak onto the target peak."""

    return target_peak_db - measured_peak_db


def classify_codec(codec_name: str, lossy_codecs: tuple[str, ...]) -> CodecClass:
    if codec_name.strip().lower() in lossy_codecs:
        return CodecClass.LOSSY
    return CodecClass.LOSSLESS


def select_strategy(mode: AdjustmentMode, codec_class: CodecClass | None = None) -> AdjustmentStrategy:
    """Pick the processing strategy for one file under ``mode``."""

    if mode is AdjustmentMode.BASIC:
        return AdjustmentStrategy.PEAK_GAIN
    if mode is AdjustmentMode.LOUDNESS:
        return AdjustmentStrategy.LOUDNESS_NORMALIZATION
    if codec_class is None:
        raise ValueError("Auto mode requires the codec class of the file.")
    if codec_class is CodecClass.LOSSY:
        return AdjustmentStrategy.LOUDNESS_NORMALIZATION
    return AdjustmentStrategy.PEAK_GAIN
