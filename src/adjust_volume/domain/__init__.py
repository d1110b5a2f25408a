"""DDD domain layer."""

from .errors import (
    AdjustVolumeError,
    AnalysisError,
    CacheDirUnavailable,
    ClassificationError,
    CommitError,
    DependencyMissing,
    FileProcessingError,
    GainApplicationError,
    InvalidInput,
    NormalizationError,
    UnsupportedFile,
)
from .events import BatchCompleted, DomainEvent, FileCommitted, FileFailed, FileProcessingStarted, FileStaged, StrategySelected
from .models import AudioFileReference, BatchResult, CodecClass, LoudnessStatistics, ProcessingOutcome, ProcessingState
from .services import classify_codec, compute_gain, normalize_decimal, parse_decibels, select_strategy

__all__ = [
    "AdjustVolumeError",
    "AnalysisError",
    "CacheDirUnavailable",
    "ClassificationError",
    "CommitError",
    "DependencyMissing",
    "FileProcessingError",
    "GainApplicationError",
    "InvalidInput",
    "NormalizationError",
    "UnsupportedFile",
    "DomainEvent",
    "FileProcessingStarted",
    "StrategySelected",
    "FileStaged",
    "FileCommitted",
    "FileFailed",
    "BatchCompleted",
    "AudioFileReference",
    "BatchResult",
    "CodecClass",
    "LoudnessStatistics",
    "ProcessingOutcome",
    "ProcessingState",
    "classify_codec",
    "compute_gain",
    "normalize_decimal",
    "parse_decibels",
    "select_strategy",
]
