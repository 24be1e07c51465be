"""Path conversion and file system helpers shared by the build stages."""

from __future__ import annotations

import logging
import os
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator
from urllib.parse import unquote

logger = logging.getLogger(__name__)

HIDDEN_PREFIX = "."
MTIME_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"

_EXTERNAL_URL_RE = re.compile(r"^(\w+://|//)")


def posix_path(path: str) -> str:
    """Convert a native path string to forward slashes."""
    if os.sep == "/":
        return path
    return path.replace(os.sep, "/")


def system_path(path: str) -> str:
    """Convert a forward-slash path string to the native separator."""
    if os.sep == "/":
        return path
    return path.replace("/", os.sep)


def is_local_path(url: str) -> bool:
    """Return True when ``url`` points inside the vault.

    Anything carrying a scheme (``https://``, ``file://``) or a host (``//``)
    is external.
    """
    return _EXTERNAL_URL_RE.match(url) is None


def local_target(url: str) -> str | None:
    """Return the vault path referenced by ``url``, or None for external URLs.

    Fragments are dropped and percent-escapes decoded.
    """
    if not url or not is_local_path(url):
        return None
    target = unquote(url.split("#", 1)[0])
    return target or None


def file_mtime(path: str | Path) -> str:
    """Return the modification time as a sortable ISO 8601 string, or "" if missing."""
    try:
        stamp = os.stat(path).st_mtime
    except OSError:
        return ""
    return datetime.fromtimestamp(stamp, tz=timezone.utc).strftime(MTIME_FORMAT)


def walk_tree(root: str | Path) -> Iterator[Path]:
    """Yield every file under ``root``, skipping hidden files and directories."""
    stack = [Path(root)]
    while stack:
        directory = stack.pop()
        try:
            entries = sorted(directory.iterdir())
        except OSError as exc:
            logger.warning("could not read directory: %s (%s)", directory, exc)
            continue
        for entry in entries:
            if entry.name.startswith(HIDDEN_PREFIX):
                continue
            if entry.is_dir():
                stack.append(entry)
            else:
                yield entry
