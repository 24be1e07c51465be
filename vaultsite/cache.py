"""Persisted metadata cache for vault scans."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .content import ItemProperties, SourceItem

logger = logging.getLogger(__name__)

# Bump whenever the serialized property shape changes; older caches are then
# discarded on load instead of being misread.
CACHE_SCHEMA = 1


class CacheEntry(BaseModel):
    """Persisted snapshot of a single source file."""

    model_config = ConfigDict(frozen=True)

    path: str
    mtime: str
    properties: ItemProperties


class CacheFile(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    schema_version: int = Field(alias="schema")
    files: list[CacheEntry] = Field(default_factory=list)


def load_metadata_cache(path: Path) -> dict[str, CacheEntry]:
    """Read cached entries keyed by relative path.

    Any failure yields an empty mapping so the next scan re-extracts everything.
    """
    if not path.exists():
        return {}
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("error reading cache %s: %s", path, exc)
        return {}

    if not isinstance(payload, dict) or payload.get("schema") != CACHE_SCHEMA:
        logger.warning("error reading cache %s: bad file format", path)
        return {}

    try:
        cache = CacheFile.model_validate(payload)
    except ValidationError as exc:
        logger.warning("error reading cache %s: %s", path, exc.errors()[0]["msg"])
        return {}

    return {entry.path: entry for entry in cache.files}


def save_metadata_cache(path: Path, items: Iterable[SourceItem]) -> None:
    """Persist the current item set, dropping transient fields.

    The file is left untouched when its content would not change.
    """
    entries = [
        CacheEntry(path=item.path, mtime=item.mtime, properties=item.properties)
        for item in sorted(items, key=lambda item: item.path)
    ]
    cache = CacheFile(schema=CACHE_SCHEMA, files=entries)
    payload = json.dumps(cache.model_dump(mode="json", by_alias=True), ensure_ascii=False, indent=2)
    try:
        if path.read_text(encoding="utf-8") == payload:
            return
    except (OSError, UnicodeDecodeError):
        pass
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(payload, encoding="utf-8")
    except OSError as exc:
        logger.warning("Failed to write cache %s: %s", path, exc)
