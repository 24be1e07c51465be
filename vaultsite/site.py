"""Manage the output directory of a static site build."""

from __future__ import annotations

import contextlib
import logging
import posixpath
import shutil
from dataclasses import dataclass
from pathlib import Path

from .paths import file_mtime, posix_path, system_path, walk_tree

logger = logging.getLogger(__name__)

INDEX_FILENAME = "index.html"


@dataclass(frozen=True)
class SiteStats:
    """Counters reported once the output tree has been cleaned up."""

    total: int = 0
    updated: int = 0
    deleted: int = 0


class Site:
    """Output tree that remembers every path written during the run."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)
        self._written: set[Path] = set()
        self.total = 0
        self.updated = 0

    @property
    def written_paths(self) -> frozenset[Path]:
        return frozenset(self._written)

    def prepare(self, url: str) -> Path:
        """Reserve the output file for ``url`` and return its path.

        The path counts as written even if no content ends up being stored,
        so cleanup keeps it. Parent directories are created as needed.
        """
        if not url.startswith("/"):
            raise ValueError(f"URL must be absolute: {url!r}")
        if url.endswith("/"):
            url += INDEX_FILENAME
        relative = posixpath.normpath(url[1:])
        if relative in (".", "..") or relative.startswith(("../", "/")):
            raise ValueError(f"URL does not name a file under the site root: {url!r}")
        path = self.root / system_path(relative)
        self.total += 1
        self._written.add(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        return path

    def mark_updated(self) -> None:
        """Count a write performed by a collaborator on a prepared path."""
        self.updated += 1

    def write_data(self, url: str, data: str | bytes) -> bool:
        """Write ``data`` unless the existing file already holds the same bytes."""
        target = self.prepare(url)
        payload = data.encode("utf-8") if isinstance(data, str) else data
        try:
            if target.read_bytes() == payload:
                return False
        except OSError:
            pass
        target.write_bytes(payload)
        self.updated += 1
        return True

    def write_file(self, url: str, source: Path, mtime: str | None = None) -> bool:
        """Copy ``source`` unless the destination is at least as new."""
        target = self.prepare(url)
        source_time = max(mtime or "", file_mtime(source))
        target_time = file_mtime(target)
        if target_time and target_time >= source_time:
            return False
        shutil.copy2(source, target)
        self.updated += 1
        return True

    def write_dir(self, url: str, root: Path) -> int:
        """Copy every non-hidden file under ``root`` below ``url``."""
        if not url.endswith("/"):
            raise ValueError(f"Directory URL must end with '/': {url!r}")
        root = Path(root)
        copied = 0
        for path in walk_tree(root):
            relative = posix_path(str(path.relative_to(root)))
            if self.write_file(url + relative, path):
                copied += 1
        return copied

    def cleanup(self) -> SiteStats:
        """Delete every file that was not prepared during this run."""
        deleted = 0
        for path in walk_tree(self.root):
            if path in self._written:
                continue
            logger.info("DELETE /%s", posix_path(str(path.relative_to(self.root))))
            with contextlib.suppress(FileNotFoundError):
                path.unlink()
                deleted += 1
        _prune_empty_directories(self.root)

        stats = SiteStats(total=self.total, updated=self.updated, deleted=deleted)
        logger.info(
            "Site: total=%d, updated=%d, deleted=%d", stats.total, stats.updated, stats.deleted
        )
        return stats


def _prune_empty_directories(root: Path) -> None:
    directories = sorted(
        (path for path in root.rglob("*") if path.is_dir()),
        key=lambda item: len(item.parts),
        reverse=True,
    )
    for directory in directories:
        with contextlib.suppress(OSError):
            directory.rmdir()
