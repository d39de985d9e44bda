"""Directory scanning orchestration engine."""

from __future__ import annotations

import logging
import os
import stat
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator

from dirsize.core.sizer import size_subtree
from dirsize.models.scan_result import Entry, EntryKind, FileReport, ScanRequest, ScanResult
from dirsize.utils import format_elapsed, is_hidden

log = logging.getLogger(__name__)

# Upper bound on concurrent subtree walks, regardless of CPU count.
MAX_WORKERS = 8
PROGRESS_INTERVAL = 0.1

ProgressCallback = Callable[[int, int], None]  # (dirs_scanned, dirs_total)


class ScanError(Exception):
    """Raised when the scan target itself cannot be read."""


@dataclass(frozen=True, slots=True)
class _DirOutcome:
    """What one worker reports back for one immediate subdirectory."""

    name: str
    size: int = 0
    count: int = 0
    error: OSError | None = None


def default_workers() -> int:
    """Pool size used when none is configured: CPU count, capped at MAX_WORKERS."""
    return max(1, min(os.cpu_count() or 1, MAX_WORKERS))


class ProgressThrottle:
    """Forwards "N of M" progress to a callback at most once per interval.

    The first update always goes through. Later updates arriving within
    *interval* seconds of the last forwarded one are dropped.
    """

    def __init__(
        self,
        total: int,
        callback: ProgressCallback | None,
        interval: float = PROGRESS_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.total = total
        self._callback = callback
        self._interval = interval
        self._clock = clock
        self._last: float | None = None

    def update(self, done: int) -> None:
        if self._callback is None:
            return
        now = self._clock()
        if self._last is not None and now - self._last < self._interval:
            return
        self._last = now
        self._callback(done, self.total)


class ScanEngine:
    """Measures a target, fanning immediate subdirectories out to a thread pool."""

    def __init__(
        self,
        max_workers: int | None = None,
        progress_interval: float = PROGRESS_INTERVAL,
    ) -> None:
        self.max_workers = max(1, max_workers or default_workers())
        self.progress_interval = progress_interval

    def measure(
        self,
        target: Path | str,
        include_hidden: bool = False,
        on_progress: ProgressCallback | None = None,
    ) -> FileReport | ScanResult:
        """Measure a file or directory.

        A target that is not a directory is sized from a single stat call
        and never traversed.

        Raises:
            ScanError: If the target cannot be stat'ed or listed.
        """
        path = Path(target)
        try:
            st = path.stat()
        except OSError as e:
            raise ScanError(f"error accessing target: {e}") from e

        if not stat.S_ISDIR(st.st_mode):
            return FileReport(path=Path(os.path.abspath(path)), size=st.st_size)

        return self.list_root(ScanRequest(root=path, include_hidden=include_hidden), on_progress)

    def list_root(
        self,
        request: ScanRequest,
        on_progress: ProgressCallback | None = None,
    ) -> ScanResult:
        """Size every immediate child of ``request.root``.

        Immediate files are stat'ed inline. Immediate subdirectories are
        walked by the worker pool; results are accumulated here, on the
        calling thread, in completion order. A subdirectory that cannot be
        walked is left out of the listing and the totals.

        Args:
            request: Root directory and hidden-entry policy.
            on_progress: Optional ``(scanned, total)`` callback, rate-limited.

        Returns:
            Entries sorted by size (largest first) plus grand totals.

        Raises:
            ScanError: If the root directory cannot be listed.
        """
        start = time.monotonic()
        entries, dirs = self._read_root(request)

        total_size = sum(e.size for e in entries)
        total_count = len(entries)
        skipped = 0

        throttle = ProgressThrottle(len(dirs), on_progress, self.progress_interval)
        for done, outcome in enumerate(self._size_dirs(request, dirs), 1):
            throttle.update(done)
            if outcome.error is not None:
                log.debug("Skipping directory '%s': %s", outcome.name, outcome.error)
                skipped += 1
                continue
            entries.append(Entry(name=outcome.name, size=outcome.size, kind=EntryKind.DIR))
            total_size += outcome.size
            total_count += outcome.count

        entries.sort(key=lambda e: e.size, reverse=True)

        log.info(
            "Scanned %d directories (%d skipped): %d bytes in %d files, %s",
            len(dirs),
            skipped,
            total_size,
            total_count,
            format_elapsed(time.monotonic() - start),
        )
        return ScanResult(
            root=Path(os.path.abspath(request.root)),
            entries=tuple(entries),
            total_size=total_size,
            total_count=total_count,
        )

    def _read_root(self, request: ScanRequest) -> tuple[list[Entry], list[str]]:
        """Split the root's children into sized file entries and directory names."""
        try:
            with os.scandir(request.root) as it:
                children = list(it)
        except OSError as e:
            raise ScanError(f"error walking: {e}") from e

        files: list[Entry] = []
        dirs: list[str] = []
        for child in children:
            if not request.include_hidden and is_hidden(child.name):
                continue
            try:
                if child.is_dir(follow_symlinks=False):
                    dirs.append(child.name)
                    continue
                size = 0 if child.is_symlink() else child.stat(follow_symlinks=False).st_size
            except OSError as e:
                log.debug("Cannot access: %s (%s)", child.path, e)
                continue
            files.append(Entry(name=child.name, size=size, kind=EntryKind.FILE))

        return files, dirs

    def _size_dirs(self, request: ScanRequest, dirs: list[str]) -> Iterator[_DirOutcome]:
        """Yield one outcome per directory, in completion order."""
        if self.max_workers > 1 and len(dirs) > 1:
            yield from self._size_dirs_parallel(request, dirs)
        else:
            for name in dirs:
                yield _measure_dir(request.root, name, request.include_hidden)

    def _size_dirs_parallel(self, request: ScanRequest, dirs: list[str]) -> Iterator[_DirOutcome]:
        """Walk directories concurrently via a bounded thread pool.

        Workers only return immutable outcomes; nothing they touch is shared.
        Leaving the executor block waits for every worker.
        """
        max_workers = min(self.max_workers, len(dirs))
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="dirsize") as executor:
            futures = [
                executor.submit(_measure_dir, request.root, name, request.include_hidden)
                for name in dirs
            ]
            for future in as_completed(futures):
                yield future.result()


def _measure_dir(root: Path, name: str, include_hidden: bool) -> _DirOutcome:
    """Run the subtree walk for one immediate subdirectory."""
    try:
        size, count = size_subtree(os.path.join(root, name), include_hidden)
    except OSError as e:
        return _DirOutcome(name=name, error=e)
    return _DirOutcome(name=name, size=size, count=count)


def list_root(
    root: Path | str,
    include_hidden: bool = False,
    on_progress: ProgressCallback | None = None,
) -> ScanResult:
    """Scan *root* with a default-sized engine."""
    return ScanEngine().list_root(ScanRequest(root=Path(root), include_hidden=include_hidden), on_progress)
