"""Scan a vault directory into source items, reusing cached metadata."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from .cache import load_metadata_cache, save_metadata_cache
from .content import DEFAULT_EXTRACTORS, SourceItem, SourceKind, classify
from .content.models import NOTE_SUFFIX
from .content.parsers import Extractor
from .paths import file_mtime, posix_path, walk_tree

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanStats:
    """Files seen and files whose properties were re-extracted."""

    total: int = 0
    updated: int = 0


class Vault:
    """Collection of vault files keyed by their relative POSIX path."""

    def __init__(
        self,
        root: Path,
        items: Mapping[str, SourceItem],
        *,
        base: str = "/",
        stats: ScanStats | None = None,
    ) -> None:
        self.root = Path(root)
        self.base = _check_base(base)
        self._items = dict(items)
        self.stats = stats or ScanStats(total=len(self._items))

    @classmethod
    def load(
        cls,
        root: str | Path,
        cache_path: Path | None = None,
        base: str = "/",
        extractors: Mapping[SourceKind, Extractor] | None = None,
    ) -> "Vault":
        """Scan ``root``, re-reading metadata only for new or modified files.

        When ``cache_path`` is given the cache is read before the scan and
        rewritten afterwards with exactly the files seen in this run.
        """
        root = Path(root)
        base = _check_base(base)
        registry = dict(DEFAULT_EXTRACTORS)
        if extractors:
            registry.update(extractors)

        cached = load_metadata_cache(cache_path) if cache_path is not None else {}
        items: dict[str, SourceItem] = {}
        total = updated = 0

        for file_path in walk_tree(root):
            path = posix_path(str(file_path.relative_to(root)))
            mtime = file_mtime(file_path)
            total += 1

            entry = cached.get(path)
            if entry is not None and entry.mtime == mtime:
                properties = entry.properties
            else:
                properties = registry[classify(path)](file_path)
                updated += 1

            items[path] = SourceItem(
                path=path,
                file_path=file_path,
                base=base,
                mtime=mtime,
                properties=properties,
            )

        if cache_path is not None:
            save_metadata_cache(cache_path, items.values())

        stats = ScanStats(total=total, updated=updated)
        logger.info("Vault: total=%d, updated=%d", stats.total, stats.updated)
        return cls(root, items, base=base, stats=stats)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, path: object) -> bool:
        return path in self._items

    def get(self, path: str) -> SourceItem | None:
        """Look up a file, falling back to the note with that name."""
        item = self._items.get(path)
        if item is not None:
            return item
        return self._items.get(path + NOTE_SUFFIX)

    def items(self) -> list[SourceItem]:
        return [self._items[key] for key in sorted(self._items)]

    def notes(self) -> list[SourceItem]:
        return [item for item in self.items() if item.kind is SourceKind.NOTE]

    def count_by_kind(self) -> dict[SourceKind, int]:
        counts = {kind: 0 for kind in SourceKind}
        for item in self._items.values():
            counts[item.kind] += 1
        return counts


def _check_base(base: str) -> str:
    if not (base.startswith("/") and base.endswith("/")):
        raise ValueError("base must start and end with /")
    return base
