"""Application services orchestrating volume adjustment use-cases."""

from __future__ import annotations

import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator
from uuid import uuid4

from adjust_volume import gain, loudness
from adjust_volume.adjustment_options import AdjustmentMode, AdjustmentStrategy
from adjust_volume.application.audio_engine import AudioEngine
from adjust_volume.application.event_publisher import EventPublisher, NullEventPublisher
from adjust_volume.classification import classify, is_supported_extension
from adjust_volume.domain.errors import FileProcessingError, InvalidInput, UnsupportedFile
from adjust_volume.domain.events import (
    BatchCompleted,
    FileCommitted,
    FileFailed,
    FileProcessingStarted,
    FileStaged,
    StrategySelected,
)
from adjust_volume.domain.models import AudioFileReference, BatchResult, ProcessingOutcome, ProcessingState
from adjust_volume.domain.services import select_strategy
from adjust_volume.infrastructure.staging import StagingArea
from adjust_volume.utils.config import RunConfig

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class AdjustAudioFile:
    """Use case that adjusts one file and atomically replaces the original.

    The file moves through classification, strategy selection, processing
    into the staging area and finally the commit. Any per-file failure ends in
    the ``FAILED`` state with the original left untouched.
    """

    config: RunConfig
    engine: AudioEngine
    staging: StagingArea
    event_publisher: EventPublisher = field(default_factory=NullEventPublisher)
    correlation_id: str = field(default_factory=lambda: str(uuid4()))

    def process(self, path: Path, worker: str | None = None) -> ProcessingOutcome:
        state = ProcessingState.PENDING_CLASSIFICATION
        strategy: AdjustmentStrategy | None = None
        staged: Path | None = None
        try:
            if self.staging.contains(path):
                raise UnsupportedFile(f"File lies inside the cache directory: {path}")

            audio_file = classify(
                path,
                supported_extensions=self.config.supported_extensions,
                lossy_codecs=self.config.lossy_codecs,
                engine=self.engine,
                probe_codec=self.config.mode is AdjustmentMode.AUTO,
            ).unwrap()

            state = ProcessingState.PENDING_STRATEGY_SELECTION
            strategy = select_strategy(self.config.mode, audio_file.codec_class)
            self.event_publisher.publish(
                StrategySelected(
                    correlation_id=self.correlation_id,
                    payload_summary={
                        "path": str(path),
                        "mode": self.config.mode.value,
                        "codec": audio_file.codec_name,
                        "codec_class": audio_file.codec_class.value if audio_file.codec_class else None,
                        "strategy": strategy.value,
                    },
                )
            )
            self.event_publisher.publish(
                FileProcessingStarted(
                    correlation_id=self.correlation_id,
                    payload_summary={"path": str(path), "strategy": strategy.value},
                )
            )

            state = ProcessingState.PROCESSING
            staged = self.staging.path_for(path, worker)
            details = self._run_strategy(strategy, audio_file, staged)

            state = ProcessingState.STAGED
            self.event_publisher.publish(
                FileStaged(
                    correlation_id=self.correlation_id,
                    payload_summary={"path": str(path), "staged": str(staged), **details},
                )
            )

            self.staging.commit(staged, path)
            state = ProcessingState.COMMITTED
            self.event_publisher.publish(
                FileCommitted(
                    correlation_id=self.correlation_id,
                    payload_summary={"path": str(path), "strategy": strategy.value},
                )
            )
            return ProcessingOutcome(path=path, success=True, state=state, strategy=strategy)
        except FileProcessingError as error:
            if staged is not None:
                self.staging.discard(staged)
            self.event_publisher.publish(
                FileFailed(
                    correlation_id=self.correlation_id,
                    payload_summary={
                        "path": str(path),
                        "stage": state.value,
                        "code": error.code,
                        "error": error.message,
                    },
                )
            )
            return ProcessingOutcome(
                path=path,
                success=False,
                state=ProcessingState.FAILED,
                strategy=strategy,
                error_code=error.code,
                error_detail=error.message,
            )

    def _run_strategy(
        self, strategy: AdjustmentStrategy, audio_file: AudioFileReference, staged: Path
    ) -> dict[str, Any]:
        if strategy is AdjustmentStrategy.PEAK_GAIN:
            gain_db = gain.adjust_peak(
                audio_file.path, self.config.targets.target_peak_db, staged, self.engine
            )
            return {"gain_db": gain_db}

        stats = loudness.analyze(audio_file.path, self.config.measurement, self.engine)
        loudness.normalize(audio_file.path, stats, self.config.targets, staged, self.engine)
        return {
            "input_i": stats.input_i,
            "input_tp": stats.input_tp,
            "target_lufs": self.config.targets.target_loudness_lufs,
        }


@dataclass(slots=True)
class AdjustAudioTree:
    """Use case that adjusts a single file or every eligible file under a directory."""

    processor: AdjustAudioFile

    @property
    def config(self) -> RunConfig:
        return self.processor.config

    def run(self, root: Path) -> BatchResult:
        if root.is_file():
            paths = [root]
        elif root.is_dir():
            paths = list(self.discover(root))
            if not paths:
                logger.warning("No supported audio files found under %s", root)
        else:
            raise InvalidInput(f"Invalid path provided: {root}. Please provide a valid directory or file path.")

        if self.config.jobs > 1 and len(paths) > 1:
            outcomes = self._run_concurrently(paths)
        else:
            outcomes = [self.processor.process(path) for path in paths]

        result = BatchResult(outcomes=outcomes)
        self.processor.event_publisher.publish(
            BatchCompleted(
                correlation_id=self.processor.correlation_id,
                payload_summary={"root": str(root), **result.summary()},
            )
        )
        return result

    def _run_concurrently(self, paths: list[Path]) -> list[ProcessingOutcome]:
        def _process(path: Path) -> ProcessingOutcome:
            return self.processor.process(path, worker=str(threading.get_ident()))

        with ThreadPoolExecutor(max_workers=self.config.jobs) as executor:
            return list(executor.map(_process, paths))

    def discover(self, root: Path) -> Iterator[Path]:
        """Yield supported files under ``root`` in a stable, sorted order.

        Symlinked files and directories are skipped unless ``follow_symlinks``
        is set; when following, each real directory and file is visited once.
        """

        follow = self.config.follow_symlinks
        staging = self.processor.staging
        visited_dirs: set[str] = set()
        seen_files: set[str] = set()

        for dirpath, dirnames, filenames in os.walk(root, followlinks=follow):
            current = Path(dirpath)
            if follow:
                real_dir = os.path.realpath(dirpath)
                if real_dir in visited_dirs:
                    dirnames[:] = []
                    continue
                visited_dirs.add(real_dir)

            dirnames[:] = sorted(name for name in dirnames if not staging.contains(current / name))

            for name in sorted(filenames):
                candidate = current / name
                if candidate.is_symlink():
                    if not follow:
                        logger.debug("Skipping symlink %s", candidate)
                        continue
                    candidate = candidate.resolve()
                    if not candidate.is_file():
                        continue
                if not is_supported_extension(candidate, self.config.supported_extensions):
                    continue
                key = os.path.realpath(candidate)
                if key in seen_files:
                    continue
                seen_files.add(key)
                yield candidate
