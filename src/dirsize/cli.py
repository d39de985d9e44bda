"""CLI interface for dirsize."""

from __future__ import annotations

import json
import logging
import sys

import click

from dirsize.core.engine import ScanEngine, ScanError
from dirsize.models.scan_result import EntryKind, FileReport, ScanResult
from dirsize.settings import Settings
from dirsize.utils import bytes_to_human

log = logging.getLogger(__name__)

_RULE = "-" * 40
_KIND_COLORS = {EntryKind.DIR: "blue", EntryKind.FILE: None}


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


class _ProgressLine:
    """Transient "Scanned N/M directories..." line on stdout."""

    def __init__(self, enabled: bool) -> None:
        self._enabled = enabled
        self._dirty = False

    def __call__(self, scanned: int, total: int) -> None:
        if not self._enabled:
            return
        click.echo(f"\rScanned {scanned}/{total} directories...", nl=False)
        self._dirty = True

    def clear(self) -> None:
        """Erase the whole line and return the cursor to column 0."""
        if self._dirty:
            click.echo("\033[2K\r", nl=False, color=True)
            self._dirty = False


@click.command(context_settings={"help_option_names": ["-h", "--help"], "ignore_unknown_options": True})
@click.argument("targets", nargs=-1, type=click.Path())
@click.option("-a", "--all", "show_all", is_flag=True, help="Include hidden entries (names starting with '.')")
@click.option("-j", "--jobs", type=click.IntRange(min=1), default=None, help="Number of parallel directory walkers")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug)")
def main(targets: tuple[str, ...], show_all: bool, jobs: int | None, as_json: bool, verbose: int) -> None:
    """Show the disk footprint of TARGET (default: current directory).

    For a directory, every immediate child is listed with its total size,
    largest first.
    """
    _setup_logging(verbose)
    target = _pick_target(targets)

    settings = Settings.instance()
    include_hidden = show_all or settings.include_hidden
    engine = ScanEngine(
        max_workers=jobs or settings.max_workers,
        progress_interval=settings.progress_interval,
    )

    progress = _ProgressLine(enabled=not as_json and sys.stdout.isatty())
    try:
        result = engine.measure(target, include_hidden=include_hidden, on_progress=progress)
    except ScanError as exc:
        progress.clear()
        click.echo(str(exc), err=True)
        sys.exit(1)
    progress.clear()

    if as_json:
        click.echo(json.dumps(_to_json(result), indent=2))
    elif isinstance(result, FileReport):
        _print_file(result)
    else:
        _print_listing(result)


def _pick_target(tokens: tuple[str, ...]) -> str:
    """Return the first token that is not an option, defaulting to the current directory."""
    positionals = [t for t in tokens if not t.startswith("-")]
    ignored = [t for t in tokens if t not in positionals[:1]]
    if ignored:
        log.debug("Ignoring extra arguments: %s", " ".join(ignored))
    return positionals[0] if positionals else "."


def _print_file(report: FileReport) -> None:
    click.echo(f"\nFile: {report.path}")
    click.echo(f"Size: {bytes_to_human(report.size)}")


def _print_listing(result: ScanResult) -> None:
    click.echo(f"\nContents of: {result.root}")
    click.echo(_RULE)
    for entry in result.entries:
        label = click.style(f"{entry.kind.label:<6s}", fg=_KIND_COLORS[entry.kind], bold=entry.kind is EntryKind.DIR)
        click.echo(f"{label} {bytes_to_human(entry.size):<15s} {entry.name}")
    click.echo(_RULE)
    click.echo(f"TOTAL: {click.style(bytes_to_human(result.total_size), bold=True)} ({result.total_count} files)")


def _to_json(result: FileReport | ScanResult) -> dict:
    if isinstance(result, FileReport):
        return {"path": str(result.path), "type": "file", "size": result.size}
    return {
        "path": str(result.root),
        "type": "dir",
        "total_size": result.total_size,
        "total_count": result.total_count,
        "entries": [
            {"name": e.name, "size": e.size, "kind": e.kind.value}
            for e in result.entries
        ],
    }
