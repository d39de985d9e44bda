"""Tests for the recursive subtree walk."""

from __future__ import annotations

import os

import pytest

from dirsize.core.sizer import size_subtree

needs_permissions = pytest.mark.skipif(
    hasattr(os, "geteuid") and os.geteuid() == 0,
    reason="root ignores permission bits",
)


@pytest.fixture
def nested(tmp_path):
    """Three levels of plain files plus hidden entries at each level."""
    top = tmp_path / "top"
    (top / "one" / "two").mkdir(parents=True)
    (top / "f1").write_bytes(b"x" * 10)
    (top / "one" / "f2").write_bytes(b"x" * 20)
    (top / "one" / "two" / "f3").write_bytes(b"x" * 30)
    (top / ".dot").write_bytes(b"x" * 1)
    hidden_dir = top / "one" / ".git"
    hidden_dir.mkdir()
    (hidden_dir / "objects").write_bytes(b"x" * 500)
    (hidden_dir / "config").write_bytes(b"x" * 40)
    return top


class TestSizeSubtree:
    def test_sums_nested_files(self, nested):
        assert size_subtree(nested) == (60, 3)

    def test_hidden_directory_pruned_with_its_visible_children(self, nested):
        total, count = size_subtree(nested, include_hidden=False)
        assert total == 60
        assert count == 3

    def test_include_hidden(self, nested):
        assert size_subtree(nested, include_hidden=True) == (60 + 1 + 500 + 40, 6)

    def test_accepts_str_path(self, nested):
        assert size_subtree(str(nested)) == (60, 3)

    def test_empty_directory(self, tmp_path):
        assert size_subtree(tmp_path) == (0, 0)

    def test_directories_are_not_counted(self, tmp_path):
        (tmp_path / "a" / "b" / "c").mkdir(parents=True)
        assert size_subtree(tmp_path) == (0, 0)

    def test_hidden_root_is_still_measured(self, tmp_path):
        cache = tmp_path / ".cache"
        cache.mkdir()
        (cache / "blob").write_bytes(b"x" * 64)
        assert size_subtree(cache) == (64, 1)

    def test_symlink_counts_once_with_zero_bytes(self, tmp_path):
        (tmp_path / "real").write_bytes(b"x" * 100)
        (tmp_path / "link").symlink_to(tmp_path / "real")
        assert size_subtree(tmp_path) == (100, 2)

    def test_symlink_to_directory_not_followed(self, tmp_path):
        big = tmp_path / "big"
        big.mkdir()
        (big / "data").write_bytes(b"x" * 1000)
        scanned = tmp_path / "scanned"
        scanned.mkdir()
        (scanned / "to_big").symlink_to(big, target_is_directory=True)
        assert size_subtree(scanned) == (0, 1)

    def test_symlink_cycle_terminates(self, tmp_path):
        (tmp_path / "loop").symlink_to(tmp_path, target_is_directory=True)
        (tmp_path / "file").write_bytes(b"x" * 7)
        assert size_subtree(tmp_path) == (7, 2)

    def test_dangling_symlink_counted(self, tmp_path):
        (tmp_path / "dangling").symlink_to(tmp_path / "missing")
        assert size_subtree(tmp_path) == (0, 1)

    def test_missing_path_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            size_subtree(tmp_path / "nope")

    def test_file_path_raises(self, tmp_path):
        target = tmp_path / "plain"
        target.write_bytes(b"x")
        with pytest.raises(OSError):
            size_subtree(target)

    @needs_permissions
    def test_unreadable_top_level_raises(self, tmp_path):
        locked = tmp_path / "locked"
        locked.mkdir()
        (locked / "f").write_bytes(b"x" * 5)
        locked.chmod(0)
        try:
            with pytest.raises(PermissionError):
                size_subtree(locked)
        finally:
            locked.chmod(0o755)

    @needs_permissions
    def test_unreadable_nested_directory_skipped(self, tmp_path):
        (tmp_path / "ok").write_bytes(b"x" * 5)
        locked = tmp_path / "locked"
        locked.mkdir()
        (locked / "secret").write_bytes(b"x" * 999)
        locked.chmod(0)
        try:
            assert size_subtree(tmp_path) == (5, 1)
        finally:
            locked.chmod(0o755)

    def test_nested_directory_listing_failure_skipped(self, tmp_path, monkeypatch):
        (tmp_path / "ok").write_bytes(b"x" * 5)
        (tmp_path / "fine").mkdir()
        (tmp_path / "fine" / "inner").write_bytes(b"x" * 7)
        locked = tmp_path / "locked"
        locked.mkdir()
        (locked / "secret").write_bytes(b"x" * 999)

        real_scandir = os.scandir

        def scandir(path):
            if os.path.basename(path) == "locked":
                raise PermissionError(13, "Permission denied", str(path))
            return real_scandir(path)

        monkeypatch.setattr("dirsize.core.sizer.os.scandir", scandir)
        assert size_subtree(tmp_path) == (12, 2)

    def test_top_level_listing_failure_raises(self, tmp_path, monkeypatch):
        def scandir(path):
            raise PermissionError(13, "Permission denied", str(path))

        monkeypatch.setattr("dirsize.core.sizer.os.scandir", scandir)
        with pytest.raises(PermissionError):
            size_subtree(tmp_path)

    def test_entry_vanishing_mid_walk_is_skipped(self, tmp_path, monkeypatch):
        (tmp_path / "stays").write_bytes(b"x" * 3)
        (tmp_path / "goes").write_bytes(b"x" * 9)

        real_scandir = os.scandir

        class _VanishingEntry:
            def __init__(self, entry):
                self._entry = entry
                self.name = entry.name
                self.path = entry.path

            def is_dir(self, follow_symlinks=True):
                return self._entry.is_dir(follow_symlinks=follow_symlinks)

            def is_symlink(self):
                return self._entry.is_symlink()

            def stat(self, follow_symlinks=True):
                if self.name == "goes":
                    raise FileNotFoundError(self.path)
                return self._entry.stat(follow_symlinks=follow_symlinks)

        class _Wrapper:
            def __init__(self, path):
                self._it = real_scandir(path)

            def __enter__(self):
                return (_VanishingEntry(e) for e in self._it)

            def __exit__(self, *exc):
                self._it.close()

        monkeypatch.setattr("dirsize.core.sizer.os.scandir", _Wrapper)
        assert size_subtree(tmp_path) == (3, 1)

    def test_repeat_walk_is_stable(self, nested):
        assert size_subtree(nested, True) == size_subtree(nested, True)
