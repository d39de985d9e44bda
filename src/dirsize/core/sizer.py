"""Sequential recursive size walk of a single subtree."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterator

from dirsize.utils import is_hidden

log = logging.getLogger(__name__)


class _Tally:
    """Running byte and file-like counts for one walk."""

    __slots__ = ("total", "count")

    def __init__(self) -> None:
        self.total = 0
        self.count = 0


def size_subtree(path: Path | str, include_hidden: bool = False) -> tuple[int, int]:
    """Calculate total size and file-like count of a directory tree.

    Walks depth-first with ``os.scandir`` and never follows symlinks: a
    link counts as one file-like entry and contributes zero bytes. Hidden
    entries below *path* are skipped unless *include_hidden* is set, and a
    hidden directory prunes its whole branch.

    Errors on individual entries or nested directories are skipped. Only a
    failure to list *path* itself is raised.

    Returns:
        (total_bytes, file_count) tuple.

    Raises:
        OSError: If *path* cannot be listed.
    """
    tally = _Tally()
    stack: list[str] = []

    with os.scandir(path) as it:
        _tally_entries(it, include_hidden, tally, stack)

    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as it:
                _tally_entries(it, include_hidden, tally, stack)
        except OSError as e:
            log.debug("Cannot read directory %s: %s", current, e)

    return tally.total, tally.count


def _tally_entries(
    entries: Iterator[os.DirEntry[str]],
    include_hidden: bool,
    tally: _Tally,
    stack: list[str],
) -> None:
    """Add one directory's entries to *tally*, queueing subdirectories on *stack*."""
    for entry in entries:
        if not include_hidden and is_hidden(entry.name):
            continue
        try:
            if entry.is_dir(follow_symlinks=False):
                stack.append(entry.path)
            elif entry.is_symlink():
                tally.count += 1
            else:
                tally.total += entry.stat(follow_symlinks=False).st_size
                tally.count += 1
        except OSError as e:
            log.debug("Cannot access %s: %s", entry.path, e)
