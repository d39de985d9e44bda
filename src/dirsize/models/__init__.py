"""Dirsize data models."""

from dirsize.models.scan_result import Entry, EntryKind, FileReport, ScanRequest, ScanResult

__all__ = [
    "Entry",
    "EntryKind",
    "FileReport",
    "ScanRequest",
    "ScanResult",
]
