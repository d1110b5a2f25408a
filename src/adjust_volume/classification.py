"""File eligibility and codec classification.

A file is eligible when it is a regular file with a supported extension. The
codec family (lossy or lossless) comes from the first audio stream reported by
ffprobe and is only needed when files are routed per codec.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from adjust_volume.application.audio_engine import AudioEngine
from adjust_volume.audio_contract import file_extension
from adjust_volume.domain.errors import ClassificationError, FileProcessingError, UnsupportedFile
from adjust_volume.domain.models import AudioFileReference
from adjust_volume.domain.services import classify_codec

CODEC_PROBE_ARGS: tuple[str, ...] = (
    "-v",
    "error",
    "-select_streams",
    "a:0",
    "-show_entries",
    "stream=codec_name",
    "-of",
    "default=noprint_wrappers=1:nokey=1",
)


@dataclass(frozen=True, slots=True)
class ClassificationResult:
    """Either an eligible file reference or the reason it was rejected."""

    file: AudioFileReference | None = None
    error: FileProcessingError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> AudioFileReference:
        """Return the classified file or raise the rejection."""

        if self.error is not None:
            raise self.error
        if self.file is None:
            raise ClassificationError("Classification produced no file")
        return self.file


def is_supported_extension(path: Path, supported_extensions: tuple[str, ...]) -> bool:
    return file_extension(path.name) in supported_extensions


def probe_codec_name(path: Path, engine: AudioEngine) -> str:
    """Return the codec name of the first audio stream of ``path``."""

    result = engine.run_ffprobe([*CODEC_PROBE_ARGS, str(path)])
    if not result.ok:
        raise ClassificationError(f"Failed to read codec of {path}: {result.error_tail()}")
    for line in result.stdout.splitlines():
        if line.strip():
            return line.strip().lower()
    raise ClassificationError(f"No audio stream found in {path}")


def classify(
    path: Path,
    *,
    supported_extensions: tuple[str, ...],
    lossy_codecs: tuple[str, ...],
    engine: AudioEngine,
    probe_codec: bool = True,
) -> ClassificationResult:
    """Check eligibility of ``path`` and, optionally, its codec family.

    Rejections are returned, not raised, so callers can skip the file and
    continue with the rest of a batch.
    """

    if not path.is_file():
        return ClassificationResult(error=UnsupportedFile(f"File does not exist: {path}"))

    extension = file_extension(path.name)
    if extension not in supported_extensions:
        supported = ", ".join(supported_extensions)
        return ClassificationResult(
            error=UnsupportedFile(f"Unsupported file format: {path}. Supported formats are: {supported}.")
        )

    if not probe_codec:
        return ClassificationResult(file=AudioFileReference(path=path, extension=extension))

    try:
        codec_name = probe_codec_name(path, engine)
    except ClassificationError as error:
        return ClassificationResult(error=error)

    return ClassificationResult(
        file=AudioFileReference(
            path=path,
            extension=extension,
            codec_name=codec_name,
            codec_class=classify_codec(codec_name, lossy_codecs),
        )
    )
