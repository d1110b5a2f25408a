"""CLI interface for adjust-volume."""

from __future__ import annotations

import logging
from pathlib import Path

import typer

from .domain.errors import AdjustVolumeError
from .interfaces.cli_handlers import build_run_config, error_message, report_summary, run_adjustment

app = typer.Typer(help="Adjust the volume of audio files", add_completion=False)

_MODE_HELP = (
    "1 (basic): peak volume adjustment, "
    "2 (loudness): two phase loudnorm normalization, "
    "3 (auto): normalize lossy tracks and volume adjust lossless tracks."
)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def adjust_command(
    path: Path = typer.Argument(..., help="Audio file or directory to process recursively."),
    mode: str | None = typer.Argument(None, help=_MODE_HELP, show_default="1"),
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Optional JSON or YAML run configuration file."
    ),
    target_peak: float | None = typer.Option(
        None, "--target-peak", help="Target peak level in dB for volume adjustment."
    ),
    target_loudness: float | None = typer.Option(
        None, "--target-loudness", help="Integrated loudness target in LUFS for normalization."
    ),
    true_peak: float | None = typer.Option(
        None, "--true-peak", help="True peak ceiling in dB for normalization."
    ),
    loudness_range: float | None = typer.Option(
        None, "--loudness-range", help="Loudness range target for the corrective pass."
    ),
    cache_dir: Path | None = typer.Option(
        None, "--cache-dir", help="Staging directory (default: $ADJUST_VOLUME_CACHE_DIR or ~/.cache/adjust-volume)."
    ),
    follow_symlinks: bool | None = typer.Option(
        None,
        "--follow-symlinks/--no-follow-symlinks",
        help="Follow symlinked files and directories while walking.",
    ),
    timeout: float | None = typer.Option(
        None, "--timeout", help="Per ffmpeg invocation timeout in seconds."
    ),
    jobs: int | None = typer.Option(None, "--jobs", "-j", min=1, help="Number of files processed concurrently."),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level."),
) -> None:
    """Adjust volume of a file or of every supported file under a directory."""

    configure_logging(log_level)

    try:
        run_config = build_run_config(
            config_path=config,
            mode=mode,
            target_peak_db=target_peak,
            target_loudness_lufs=target_loudness,
            true_peak_ceiling_db=true_peak,
            loudness_range_target=loudness_range,
            cache_dir=cache_dir,
            follow_symlinks=follow_symlinks,
            timeout_seconds=timeout,
            jobs=jobs,
        )
    except (OSError, ValueError) as error:
        error_message(f"Invalid configuration: {error}")
        raise typer.Exit(code=1) from error

    try:
        result = run_adjustment(path, run_config)
    except AdjustVolumeError as error:
        error_message(error.message)
        raise typer.Exit(code=1) from error
    except KeyboardInterrupt:
        error_message("Interrupted; unfinished files were left untouched.")
        raise typer.Exit(code=130) from None

    report_summary(result)
    if not result.success:
        raise typer.Exit(code=1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
