"""Public package exports for adjust-volume with lazy imports."""

from __future__ import annotations

from importlib import import_module
from typing import Any

__all__ = [
    "AdjustAudioFile",
    "AdjustAudioTree",
    "AdjustmentMode",
    "BatchResult",
    "LoudnessStatistics",
    "RunConfig",
    "TargetConfig",
    "analyze",
    "classify",
    "compute_gain",
    "normalize",
    "run_adjustment",
]

_EXPORT_MODULES: dict[str, str] = {
    "AdjustAudioFile": "adjust_volume.application.adjustment_service",
    "AdjustAudioTree": "adjust_volume.application.adjustment_service",
    "AdjustmentMode": "adjust_volume.adjustment_options",
    "BatchResult": "adjust_volume.domain.models",
    "LoudnessStatistics": "adjust_volume.domain.models",
    "RunConfig": "adjust_volume.utils.config",
    "TargetConfig": "adjust_volume.utils.config",
    "analyze": "adjust_volume.loudness",
    "classify": "adjust_volume.classification",
    "compute_gain": "adjust_volume.domain.services",
    "normalize": "adjust_volume.loudness",
    "run_adjustment": "adjust_volume.interfaces.cli_handlers",
}


def __getattr__(name: str) -> Any:
    if name not in _EXPORT_MODULES:
        raise AttributeError(f"module 'adjust_volume' has no attribute {name!r}")

    module = import_module(_EXPORT_MODULES[name])
    value = getattr(module, name)
    globals()[name] = value
    return value
