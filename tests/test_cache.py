from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from vaultsite.cache import CACHE_SCHEMA, load_metadata_cache, save_metadata_cache
from vaultsite.content import ImageProperties, NoteProperties, OtherProperties, SourceItem


def _items(root: Path) -> list[SourceItem]:
    return [
        SourceItem(
            path="notes/a.md",
            file_path=root / "notes" / "a.md",
            mtime="2024-01-01T12:00:00.000000Z",
            properties=NoteProperties(
                permalink="about/",
                date="2024-01-01",
                hide=True,
                tags=["x", "y"],
                links=["b", "photo.jpg"],
            ),
        ),
        SourceItem(
            path="photo.jpg",
            file_path=root / "photo.jpg",
            mtime="2024-01-02T12:00:00.000000Z",
            properties=ImageProperties(width=1600, height=900),
        ),
        SourceItem(
            path="doc.pdf",
            file_path=root / "doc.pdf",
            mtime="2024-01-03T12:00:00.000000Z",
            properties=OtherProperties(),
        ),
    ]


def test_round_trip_reproduces_persisted_fields(tmp_path: Path) -> None:
    cache_path = tmp_path / "out" / ".cache.json"
    items = _items(tmp_path)

    save_metadata_cache(cache_path, items)
    loaded = load_metadata_cache(cache_path)

    assert set(loaded) == {"notes/a.md", "photo.jpg", "doc.pdf"}
    for item in items:
        entry = loaded[item.path]
        assert entry.mtime == item.mtime
        assert entry.properties == item.properties


def test_saved_file_excludes_transient_fields(tmp_path: Path) -> None:
    cache_path = tmp_path / ".cache.json"
    save_metadata_cache(cache_path, _items(tmp_path))

    payload = json.loads(cache_path.read_text(encoding="utf-8"))
    assert payload["schema"] == CACHE_SCHEMA
    assert [entry["path"] for entry in payload["files"]] == ["doc.pdf", "notes/a.md", "photo.jpg"]
    for entry in payload["files"]:
        assert set(entry) == {"path", "mtime", "properties"}


def test_missing_cache_is_empty_without_warning(tmp_path: Path, caplog) -> None:
    with caplog.at_level(logging.WARNING):
        assert load_metadata_cache(tmp_path / "absent.json") == {}
    assert caplog.text == ""


def test_schema_mismatch_loads_as_empty(tmp_path: Path, caplog) -> None:
    cache_path = tmp_path / ".cache.json"
    save_metadata_cache(cache_path, _items(tmp_path))
    payload = json.loads(cache_path.read_text(encoding="utf-8"))
    payload["schema"] = CACHE_SCHEMA + 1
    cache_path.write_text(json.dumps(payload), encoding="utf-8")

    with caplog.at_level(logging.WARNING):
        assert load_metadata_cache(cache_path) == {}
    assert "bad file format" in caplog.text


def test_garbled_cache_loads_as_empty(tmp_path: Path, caplog) -> None:
    cache_path = tmp_path / ".cache.json"
    cache_path.write_text('{"schema": 1, "files": [', encoding="utf-8")

    with caplog.at_level(logging.WARNING):
        assert load_metadata_cache(cache_path) == {}
    assert "error reading cache" in caplog.text


def test_structurally_invalid_cache_loads_as_empty(tmp_path: Path) -> None:
    cache_path = tmp_path / ".cache.json"
    cache_path.write_text(
        json.dumps(
            {
                "schema": CACHE_SCHEMA,
                "files": [{"path": "a.md", "properties": {"kind": "note"}}],
            }
        ),
        encoding="utf-8",
    )
    assert load_metadata_cache(cache_path) == {}

    cache_path.write_text(json.dumps([1, 2, 3]), encoding="utf-8")
    assert load_metadata_cache(cache_path) == {}


def test_unchanged_cache_is_not_rewritten(tmp_path: Path) -> None:
    cache_path = tmp_path / ".cache.json"
    items = _items(tmp_path)
    save_metadata_cache(cache_path, items)
    os.utime(cache_path, (1_704_110_400, 1_704_110_400))

    save_metadata_cache(cache_path, items)
    assert os.stat(cache_path).st_mtime == 1_704_110_400

    save_metadata_cache(cache_path, items[:2])
    assert os.stat(cache_path).st_mtime != 1_704_110_400
    assert set(load_metadata_cache(cache_path)) == {"notes/a.md", "photo.jpg"}
