"""Error types raised by volume adjustment workflows.

Fatal errors stop the whole run before or between files. Per-file errors are
caught at the file processor boundary and folded into the batch result.
"""

from __future__ import annotations


class AdjustVolumeError(Exception):
    """Base error carrying a stable machine-readable code."""

    code = "adjust_volume_error"
    fatal = False

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def as_dict(self) -> dict[str, str]:
        return {"code": self.code, "message": self.message}


class DependencyMissing(AdjustVolumeError):
    code = "dependency_missing"
    fatal = True


class InvalidInput(AdjustVolumeError):
    code = "invalid_input"
    fatal = True


class CacheDirUnavailable(AdjustVolumeError):
    code = "cache_dir_unavailable"
    fatal = True


class FileProcessingError(AdjustVolumeError):
    """Base for failures scoped to a single file."""


class UnsupportedFile(FileProcessingError):
    code = "unsupported_file"


class ClassificationError(FileProcessingError):
    code = "classification_failed"


class AnalysisError(FileProcessingError):
    code = "analysis_failed"


class NormalizationError(FileProcessingError):
    code = "normalization_failed"


class GainApplicationError(FileProcessingError):
    code = "gain_application_failed"


class CommitError(FileProcessingError):
    code = "commit_failed"
