"""Process-scoped staging area for adjusted audio awaiting commit."""

from __future__ import annotations

import errno
import logging
import os
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from adjust_volume.domain.errors import CacheDirUnavailable, CommitError

logger = logging.getLogger(__name__)


class StagingArea:
    """Directory holding staged artifacts keyed by source base name."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def prepare(self) -> None:
        """Create the directory if needed and check that it is writable."""

        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise CacheDirUnavailable(f"Failed to create cache directory: {self.root} ({exc})") from exc
        if not self.root.is_dir():
            raise CacheDirUnavailable(f"Cache path is not a directory: {self.root}")
        if not os.access(self.root, os.W_OK | os.X_OK):
            raise CacheDirUnavailable(f"Cache directory is not writable: {self.root}")

    def path_for(self, source: Path, worker: str | None = None) -> Path:
        """Staging path for ``source``; ``worker`` isolates concurrent writers."""

        if worker is None:
            return self.root / source.name
        worker_dir = self.root / f"worker-{worker}"
        try:
            worker_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise CommitError(f"Failed to create staging directory {worker_dir} ({exc})") from exc
        return worker_dir / source.name

    def contains(self, path: Path) -> bool:
        try:
            path.resolve().relative_to(self.root.resolve())
        except ValueError:
            return False
        return True

    def discard(self, staged: Path) -> None:
        staged.unlink(missing_ok=True)

    def commit(self, staged: Path, destination: Path) -> None:
        """Atomically replace ``destination`` with ``staged``.

        Either the destination holds the complete staged bytes afterwards or
        it is left exactly as it was.
        """

        if not staged.is_file():
            raise CommitError(f"No staged file to commit for: {destination}")
        try:
            shutil.copymode(destination, staged)
            os.replace(staged, destination)
            return
        except OSError as exc:
            if exc.errno != errno.EXDEV:
                self.discard(staged)
                raise CommitError(
                    f"Failed to move processed file back to original location: {destination} ({exc})"
                ) from exc

        logger.debug("Staging area is on another filesystem; copying beside %s", destination)
        self._commit_across_devices(staged, destination)

    def _commit_across_devices(self, staged: Path, destination: Path) -> None:
        fd, partial_name = tempfile.mkstemp(
            prefix=f".{destination.name}.", suffix=".partial", dir=destination.parent
        )
        partial = Path(partial_name)
        try:
            with os.fdopen(fd, "wb") as partial_handle, staged.open("rb") as staged_handle:
                shutil.copyfileobj(staged_handle, partial_handle)
                partial_handle.flush()
                os.fsync(partial_handle.fileno())
            shutil.copymode(destination, partial)
            os.replace(partial, destination)
        except OSError as exc:
            partial.unlink(missing_ok=True)
            raise CommitError(
                f"Failed to move processed file back to original location: {destination} ({exc})"
            ) from exc
        finally:
            self.discard(staged)

    def wipe(self) -> None:
        """Remove everything inside the staging directory."""

        if not self.root.is_dir():
            return
        for entry in self.root.iterdir():
            try:
                if entry.is_dir() and not entry.is_symlink():
                    shutil.rmtree(entry)
                else:
                    entry.unlink()
            except OSError as exc:
                logger.warning("Failed to clean cache entry %s: %s", entry, exc)


@contextmanager
def staging_area(root: Path) -> Iterator[StagingArea]:
    """Yield a prepared staging area that is wiped when the block exits."""

    area = StagingArea(root)
    area.prepare()
    try:
        yield area
    finally:
        area.wipe()
