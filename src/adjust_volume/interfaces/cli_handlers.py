"""CLI-facing handlers that delegate to application services."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import typer

from adjust_volume.adjustment_options import AdjustmentStrategy
from adjust_volume.application.adjustment_service import AdjustAudioFile, AdjustAudioTree
from adjust_volume.application.audio_engine import AudioEngine
from adjust_volume.application.event_publisher import CompositeEventPublisher
from adjust_volume.domain.errors import CacheDirUnavailable, InvalidInput
from adjust_volume.domain.events import DomainEvent, FileCommitted, FileFailed, FileProcessingStarted
from adjust_volume.domain.models import BatchResult, ProcessingState
from adjust_volume.infrastructure.ffmpeg_engine import FfmpegEngine
from adjust_volume.infrastructure.logging_event_publisher import LoggingEventPublisher
from adjust_volume.infrastructure.staging import StagingArea, staging_area
from adjust_volume.utils.config import RunConfig, load_run_config

logger = logging.getLogger(__name__)


def error_message(message: str) -> None:
    typer.secho(f"Error: {message}", fg=typer.colors.RED, bold=True, err=True)


def success_message(message: str) -> None:
    typer.secho(message, fg=typer.colors.GREEN, bold=True)


class ConsoleEventPublisher:
    """Print one human-readable status line per file milestone."""

    def publish(self, event: DomainEvent) -> None:
        payload = event.payload_summary
        if isinstance(event, FileProcessingStarted):
            strategy = AdjustmentStrategy(payload["strategy"])
            typer.echo(f'Processing file "{payload["path"]}" using {strategy.description}...')
        elif isinstance(event, FileCommitted):
            success_message(f"Adjusted volume for: {payload['path']}")
        elif isinstance(event, FileFailed):
            error_message(payload["error"])
            if payload["stage"] == ProcessingState.PENDING_CLASSIFICATION.value:
                error_message(f"Invalid file: {payload['path']}. Skipping...")


def build_run_config(
    *,
    config_path: Path | None = None,
    mode: str | None = None,
    target_peak_db: float | None = None,
    target_loudness_lufs: float | None = None,
    true_peak_ceiling_db: float | None = None,
    loudness_range_target: float | None = None,
    cache_dir: Path | None = None,
    follow_symlinks: bool | None = None,
    timeout_seconds: float | None = None,
    jobs: int | None = None,
) -> RunConfig:
    """Build the run configuration; explicit arguments override the config file."""

    overrides: dict[str, Any] = {}
    if mode is not None:
        overrides["mode"] = mode
    targets = {
        key: value
        for key, value in {
            "target_peak_db": target_peak_db,
            "target_loudness_lufs": target_loudness_lufs,
            "true_peak_ceiling_db": true_peak_ceiling_db,
            "loudness_range_target": loudness_range_target,
        }.items()
        if value is not None
    }
    if targets:
        overrides["targets"] = targets
    for key, value in (
        ("cache_dir", cache_dir),
        ("follow_symlinks", follow_symlinks),
        ("timeout_seconds", timeout_seconds),
        ("jobs", jobs),
    ):
        if value is not None:
            overrides[key] = value

    if config_path is not None:
        return load_run_config(config_path, overrides)
    return RunConfig.model_validate(overrides)


def run_adjustment(path: Path, config: RunConfig, engine: AudioEngine | None = None) -> BatchResult:
    """Adjust ``path`` with ``config``; fatal errors propagate to the caller."""

    if engine is None:
        ffmpeg_engine = FfmpegEngine(
            ffmpeg_binary=config.ffmpeg_binary,
            ffprobe_binary=config.ffprobe_binary,
            timeout_seconds=config.timeout_seconds,
        )
        ffmpeg_engine.ensure_available()
        engine = ffmpeg_engine

    if not path.exists():
        raise InvalidInput(f"Invalid path provided: {path}. Please provide a valid directory or file path.")

    if StagingArea(config.cache_dir).contains(path):
        raise CacheDirUnavailable(
            f"Cache directory {config.cache_dir} must not contain the path being adjusted: {path}"
        )

    publisher = CompositeEventPublisher(LoggingEventPublisher(), ConsoleEventPublisher())
    with staging_area(config.cache_dir) as staging:
        processor = AdjustAudioFile(
            config=config,
            engine=engine,
            staging=staging,
            event_publisher=publisher,
        )
        logger.info("Adjusting %s in %s mode (run %s)", path, config.mode.value, processor.correlation_id)
        return AdjustAudioTree(processor=processor).run(path)


def report_summary(result: BatchResult) -> None:
    if result.success:
        success_message("All files processed successfully.")
    else:
        error_message(
            f"Some files could not be processed ({result.failed} of {result.attempted} failed)."
        )
