"""Shared test fixtures."""

from __future__ import annotations

import pytest

from dirsize.settings import Settings


@pytest.fixture
def isolate_settings(tmp_path, monkeypatch):
    """Point settings at an empty temp config dir and drop the cached singleton."""
    config_home = tmp_path / "config"
    config_home.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    monkeypatch.setattr(Settings, "_instance", None)
    return config_home / "dirsize" / "settings.json"


@pytest.fixture
def scenario_tree(tmp_path):
    """Root with a visible file, a dotfile, and a subdirectory holding a hidden file.

    root/
      a.txt          100 B
      .hidden.txt     50 B
      sub/
        b.txt        200 B
        .subhidden    10 B
    """
    root = tmp_path / "root"
    root.mkdir()
    (root / "a.txt").write_bytes(b"a" * 100)
    (root / ".hidden.txt").write_bytes(b"h" * 50)
    sub = root / "sub"
    sub.mkdir()
    (sub / "b.txt").write_bytes(b"b" * 200)
    (sub / ".subhidden").write_bytes(b"s" * 10)
    return root
