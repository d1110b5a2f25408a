"""Audio file contract shared by the classifier and configuration defaults.

Invariants
----------
* Only a known set of file extensions is ever processed.
* A codec is lossy iff its ffprobe codec name is in the lossy set; every other
  codec, including unknown ones, is treated as lossless.
"""

from __future__ import annotations

# Supported source extensions (lower-case, without leading dot).
SUPPORTED_EXTENSIONS: tuple[str, ...] = ("mp3", "wav", "flac", "ogg", "aac", "m4a", "opus")

# Codec names routed to loudness normalization in auto mode. ffprobe reports
# Ogg Vorbis streams as ``vorbis``.
LOSSY_CODECS: tuple[str, ...] = ("mp3", "ogg", "vorbis", "aac", "m4a", "opus")

# Reference profile used for the loudnorm measurement pass.
MEASUREMENT_INTEGRATED_LUFS = -16.0
MEASUREMENT_TRUE_PEAK_DB = -1.5
MEASUREMENT_LOUDNESS_RANGE = 11.0

# Final correction defaults.
DEFAULT_TARGET_PEAK_DB = -1.0
DEFAULT_TARGET_LOUDNESS_LUFS = -12.0
DEFAULT_TRUE_PEAK_CEILING_DB = -1.5
DEFAULT_LOUDNESS_RANGE_TARGET = 20.0


def file_extension(name: str) -> str:
    """Return the lower-case extension of ``name`` without its dot."""

    _, dot, extension = name.rpartition(".")
    return extension.lower() if dot else ""
