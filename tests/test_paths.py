from __future__ import annotations

import logging
import os
from pathlib import Path

from vaultsite.paths import (
    file_mtime,
    is_local_path,
    local_target,
    posix_path,
    system_path,
    walk_tree,
)


def _write(path: Path, body: str = "x") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(body, encoding="utf-8")


def test_separator_conversion_round_trips() -> None:
    native = os.path.join("notes", "sub", "a.md")
    assert posix_path(native) == "notes/sub/a.md"
    assert system_path("notes/sub/a.md") == native


def test_is_local_path_rejects_schemes_and_hosts() -> None:
    assert is_local_path("notes/a.md")
    assert is_local_path("/absolute/page/")
    assert is_local_path("my note")
    assert not is_local_path("https://example.com/")
    assert not is_local_path("file:///etc/passwd")
    assert not is_local_path("//cdn.example.com/x.png")


def test_local_target_decodes_and_drops_fragment() -> None:
    assert local_target("my%20note#heading") == "my note"
    assert local_target("#heading") is None
    assert local_target("https://example.com/a") is None
    assert local_target("") is None


def test_file_mtime_is_sortable_and_empty_for_missing(tmp_path: Path) -> None:
    older = tmp_path / "older.txt"
    newer = tmp_path / "newer.txt"
    _write(older)
    _write(newer)
    os.utime(older, (1_000_000_000, 1_000_000_000))
    os.utime(newer, (1_700_000_000.5, 1_700_000_000.5))

    assert file_mtime(older) == "2001-09-09T01:46:40.000000Z"
    assert file_mtime(older) < file_mtime(newer)
    assert file_mtime(tmp_path / "missing.txt") == ""


def test_walk_tree_skips_hidden_entries(tmp_path: Path) -> None:
    _write(tmp_path / "a.md")
    _write(tmp_path / "sub" / "b.md")
    _write(tmp_path / "sub" / "deeper" / "c.png")
    _write(tmp_path / ".hidden.md")
    _write(tmp_path / ".obsidian" / "workspace.json")
    _write(tmp_path / "sub" / ".git" / "HEAD")

    found = sorted(posix_path(str(path.relative_to(tmp_path))) for path in walk_tree(tmp_path))

    assert found == ["a.md", "sub/b.md", "sub/deeper/c.png"]


def test_walk_tree_warns_and_continues_on_unreadable_directory(
    tmp_path: Path, caplog, monkeypatch
) -> None:
    _write(tmp_path / "ok" / "a.md")
    _write(tmp_path / "broken" / "b.md")
    broken = tmp_path / "broken"
    original_iterdir = Path.iterdir

    def flaky_iterdir(self: Path):
        if self == broken:
            raise PermissionError("denied")
        return original_iterdir(self)

    monkeypatch.setattr(Path, "iterdir", flaky_iterdir)

    with caplog.at_level(logging.WARNING):
        found = [path.name for path in walk_tree(tmp_path)]

    assert found == ["a.md"]
    assert "could not read directory" in caplog.text


def test_walk_tree_of_missing_root_yields_nothing(tmp_path: Path, caplog) -> None:
    with caplog.at_level(logging.WARNING):
        assert list(walk_tree(tmp_path / "missing")) == []
    assert "could not read directory" in caplog.text
