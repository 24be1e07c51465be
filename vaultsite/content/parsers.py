"""Extract cached properties from vault notes and images."""

from __future__ import annotations

import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable

import yaml
from PIL import Image

from ..markdown import find_local_links
from .models import ImageProperties, NoteProperties, OtherProperties, SourceKind

logger = logging.getLogger(__name__)

DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%d.%m.%Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
)

Extractor = Callable[[Path], Any]


class FrontMatterError(ValueError):
    """Raised when a note has malformed front matter."""


def split_front_matter(text: str) -> tuple[dict[str, Any], str]:
    """Separate a leading YAML block from the Markdown body."""
    lines = text.splitlines()
    if not lines:
        return {}, ""
    if lines[0].strip() != "---":
        return {}, text

    front_lines: list[str] = []
    for idx, line in enumerate(lines[1:], start=1):
        if line.strip() == "---":
            raw_front_matter = "\n".join(front_lines)
            body = "\n".join(lines[idx + 1 :])
            try:
                data = yaml.safe_load(raw_front_matter) or {}
            except yaml.YAMLError as exc:
                raise FrontMatterError(f"Invalid YAML front matter: {exc}") from exc
            if not isinstance(data, dict):
                raise FrontMatterError(
                    f"Front matter must be a mapping, got {type(data).__name__}"
                )
            return data, body
        front_lines.append(line)
    raise FrontMatterError("Closing front matter delimiter '---' missing.")


def read_note(path: Path) -> tuple[dict[str, Any], str]:
    """Read a note and return its front matter and body."""
    text = path.read_text(encoding="utf-8")
    try:
        return split_front_matter(text)
    except FrontMatterError as exc:
        raise FrontMatterError(f"{path}: {exc}") from exc


def extract_note_properties(path: Path) -> NoteProperties:
    """Collect permalink, date, visibility, tags and local links of a note."""
    meta, body = read_note(path)
    values: dict[str, Any] = {"links": find_local_links(body)}

    permalink = meta.get("permalink")
    if permalink is not None:
        values["permalink"] = str(permalink)

    hide = meta.get("hide")
    if hide is True or str(hide).strip().lower() == "true":
        values["hide"] = True

    if meta.get("date") is not None:
        values["date"] = normalize_date(meta["date"])

    tags = meta.get("tags")
    if isinstance(tags, str):
        values["tags"] = [tags]
    elif isinstance(tags, list):
        values["tags"] = [str(tag) for tag in tags if tag is not None]

    return NoteProperties(**values)


def extract_image_properties(path: Path) -> ImageProperties:
    """Read pixel dimensions; unreadable images yield empty properties."""
    try:
        with Image.open(path) as image:
            width, height = image.size
    except (OSError, ValueError) as exc:
        logger.warning("Unable to determine dimensions for %s: %s", path, exc)
        return ImageProperties()
    return ImageProperties(width=width, height=height)


def extract_other_properties(path: Path) -> OtherProperties:
    return OtherProperties()


DEFAULT_EXTRACTORS: dict[SourceKind, Extractor] = {
    SourceKind.NOTE: extract_note_properties,
    SourceKind.IMAGE: extract_image_properties,
    SourceKind.OTHER: extract_other_properties,
}


def normalize_date(value: Any) -> str | None:
    """Normalise a front-matter date to YYYY-MM-DD, or None when unparseable."""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    text = str(value).strip()
    if not text:
        return None
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        pass
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date().isoformat()
        except ValueError:
            continue
    logger.warning("Ignoring unparseable date %r", text)
    return None
