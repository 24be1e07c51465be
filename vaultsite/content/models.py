"""Typed representations of vault source files."""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

NOTE_SUFFIX = ".md"


class SourceKind(str, Enum):
    """Closed set of file kinds recognised in a vault."""

    NOTE = "note"
    IMAGE = "image"
    OTHER = "other"


SUFFIX_KINDS: dict[str, SourceKind] = {
    ".png": SourceKind.IMAGE,
    ".jpeg": SourceKind.IMAGE,
    ".jpg": SourceKind.IMAGE,
    ".gif": SourceKind.IMAGE,
    ".webp": SourceKind.IMAGE,
    NOTE_SUFFIX: SourceKind.NOTE,
}


def classify(path: str) -> SourceKind:
    """Classify a vault path by its extension."""
    return SUFFIX_KINDS.get(PurePosixPath(path).suffix.lower(), SourceKind.OTHER)


class NoteProperties(BaseModel):
    """Front-matter values and outgoing local links of a note."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["note"] = "note"
    permalink: Optional[str] = Field(default=None, description="URL path relative to the site base.")
    date: Optional[str] = Field(default=None, description="Publication date as YYYY-MM-DD.")
    hide: bool = Field(default=False)
    tags: list[str] = Field(default_factory=list)
    links: list[str] = Field(default_factory=list, description="Local link and image targets.")

    @field_validator("permalink")
    def _strip_leading_slash(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.lstrip("/")


class ImageProperties(BaseModel):
    """Pixel dimensions of an image, when they could be read."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["image"] = "image"
    width: Optional[int] = Field(default=None, ge=1)
    height: Optional[int] = Field(default=None, ge=1)


class OtherProperties(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["other"] = "other"


ItemProperties = Annotated[
    Union[NoteProperties, ImageProperties, OtherProperties],
    Field(discriminator="kind"),
]

_DASH_RUN_RE = re.compile(r"--+")


class SourceItem(BaseModel):
    """Snapshot of one file in the vault."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(description="Path relative to the vault root, with forward slashes.")
    file_path: Path = Field(description="Location on disk; never persisted.")
    base: str = Field(default="/", description="URL base of the site; never persisted.")
    mtime: str = Field(description="Modification time in ISO 8601 format.")
    properties: ItemProperties

    @property
    def kind(self) -> SourceKind:
        return classify(self.path)

    def title(self) -> str:
        """File name without its extension."""
        name = self.path.rsplit("/", 1)[-1]
        stem, dot, _ = name.rpartition(".")
        return stem if dot else name

    def url(self) -> str:
        """Absolute site URL for the file."""
        permalink = getattr(self.properties, "permalink", None)
        if permalink is not None:
            url = permalink
        else:
            url = self.path
            if url.lower().endswith(NOTE_SUFFIX):
                url = url[: -len(NOTE_SUFFIX)] + "/"
            url = _DASH_RUN_RE.sub("-", url.replace(" ", "-"))
        if "//" in url:
            raise ValueError(f"Invalid URL for {self.path}: {url!r}")
        return self.base + url
