from .config import (
    MeasurementProfile,
    RunConfig,
    TargetConfig,
    default_cache_dir,
    load_run_config,
    merge_config_data,
)

__all__ = [
    "MeasurementProfile",
    "RunConfig",
    "TargetConfig",
    "default_cache_dir",
    "load_run_config",
    "merge_config_data",
]
