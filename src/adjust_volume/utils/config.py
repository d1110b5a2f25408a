from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from adjust_volume.adjustment_options import AdjustmentMode, parse_mode
from adjust_volume.audio_contract import (
    DEFAULT_LOUDNESS_RANGE_TARGET,
    DEFAULT_TARGET_LOUDNESS_LUFS,
    DEFAULT_TARGET_PEAK_DB,
    DEFAULT_TRUE_PEAK_CEILING_DB,
    LOSSY_CODECS,
    MEASUREMENT_INTEGRATED_LUFS,
    MEASUREMENT_LOUDNESS_RANGE,
    MEASUREMENT_TRUE_PEAK_DB,
    SUPPORTED_EXTENSIONS,
)

CACHE_DIR_ENV_VAR = "ADJUST_VOLUME_CACHE_DIR"


def default_cache_dir() -> Path:
    override = os.getenv(CACHE_DIR_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".cache" / "adjust-volume"


class TargetConfig(BaseModel):
    """Final correction targets applied to every processed file."""

    model_config = ConfigDict(frozen=True)

    target_peak_db: float = Field(DEFAULT_TARGET_PEAK_DB, le=0.0)
    target_loudness_lufs: float = Field(DEFAULT_TARGET_LOUDNESS_LUFS, ge=-70.0, le=-5.0)
    true_peak_ceiling_db: float = Field(DEFAULT_TRUE_PEAK_CEILING_DB, ge=-9.0, le=0.0)
    loudness_range_target: float = Field(DEFAULT_LOUDNESS_RANGE_TARGET, ge=1.0, le=50.0)


class MeasurementProfile(BaseModel):
    """Reference loudnorm settings used only for the measurement pass."""

    model_config = ConfigDict(frozen=True)

    integrated_lufs: float = Field(MEASUREMENT_INTEGRATED_LUFS, ge=-70.0, le=-5.0)
    true_peak_db: float = Field(MEASUREMENT_TRUE_PEAK_DB, ge=-9.0, le=0.0)
    loudness_range: float = Field(MEASUREMENT_LOUDNESS_RANGE, ge=1.0, le=50.0)


class RunConfig(BaseModel):
    """Immutable configuration for one adjustment run."""

    model_config = ConfigDict(frozen=True)

    mode: AdjustmentMode = AdjustmentMode.BASIC
    targets: TargetConfig = Field(default_factory=TargetConfig)
    measurement: MeasurementProfile = Field(default_factory=MeasurementProfile)
    cache_dir: Path = Field(default_factory=default_cache_dir)
    supported_extensions: tuple[str, ...] = SUPPORTED_EXTENSIONS
    lossy_codecs: tuple[str, ...] = LOSSY_CODECS
    follow_symlinks: bool = False
    timeout_seconds: float | None = Field(None, gt=0.0)
    jobs: int = Field(1, ge=1)
    ffmpeg_binary: str = "ffmpeg"
    ffprobe_binary: str = "ffprobe"

    @field_validator("mode", mode="before")
    @classmethod
    def _parse_mode(cls, value: Any) -> Any:
        if isinstance(value, (str, int)) and not isinstance(value, AdjustmentMode):
            return parse_mode(str(value))
        return value

    @field_validator("supported_extensions", "lossy_codecs", mode="before")
    @classmethod
    def _normalize_names(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.split(",")
        if isinstance(value, (list, tuple, set, frozenset)):
            return tuple(str(item).strip().lower().lstrip(".") for item in value if str(item).strip())
        return value

    @field_validator("supported_extensions")
    @classmethod
    def _validate_extensions(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if not value:
            raise ValueError("supported_extensions must contain at least one extension.")
        return value

    @field_validator("cache_dir")
    @classmethod
    def _expand_cache_dir(cls, value: Path) -> Path:
        return value.expanduser()


def load_run_config(path: Path, overrides: dict[str, Any] | None = None) -> RunConfig:
    """Load a run configuration file and apply ``overrides`` on top of it."""

    data = _load_config_data(path)
    if overrides:
        data = merge_config_data(data, overrides)
    return RunConfig.model_validate(data)


def merge_config_data(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config_data(merged[key], value)
        else:
            merged[key] = value
    return merged


def _load_config_data(path: Path) -> dict[str, Any]:
    if path.suffix.lower() in {".yaml", ".yml"}:
        try:
            import yaml
        except ImportError as exc:
            raise ImportError("PyYAML is required to load YAML configs.") from exc

        with path.open("r", encoding="utf-8") as handle:
            try:
                data = yaml.safe_load(handle) or {}
            except yaml.YAMLError as exc:
                raise ValueError(f"Malformed YAML in {path}: {exc}") from exc
    else:
        with path.open("r", encoding="utf-8") as handle:
            try:
                data = json.load(handle)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Malformed JSON in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping at the top level.")
    return data
