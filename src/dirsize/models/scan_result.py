"""Scan result dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class EntryKind(str, Enum):
    """Type of an immediate child of the scanned directory."""

    FILE = "file"
    DIR = "dir"

    @property
    def label(self) -> str:
        """Upper-case label used in the text listing."""
        return self.name


@dataclass(frozen=True, slots=True)
class Entry:
    """Single immediate child of the scanned directory.

    For a directory, ``size`` is the recursive sum of every file
    beneath it, not the size of the directory inode itself.
    """

    name: str
    size: int
    kind: EntryKind


@dataclass(frozen=True, slots=True)
class ScanRequest:
    """Parameters of one directory scan."""

    root: Path
    include_hidden: bool = False


@dataclass(frozen=True, slots=True)
class ScanResult:
    """Result of scanning a directory.

    ``entries`` are sorted by size, largest first. ``total_count`` counts
    file-like objects (regular files and symlinks) anywhere in the tree;
    directories are never counted.
    """

    root: Path
    entries: tuple[Entry, ...] = field(default_factory=tuple)
    total_size: int = 0
    total_count: int = 0


@dataclass(frozen=True, slots=True)
class FileReport:
    """Size of a target that is not a directory."""

    path: Path
    size: int
