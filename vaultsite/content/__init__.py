"""Models and property extractors for vault source files."""

from .models import (
    ImageProperties,
    ItemProperties,
    NoteProperties,
    OtherProperties,
    SourceItem,
    SourceKind,
    classify,
)
from .parsers import (
    DEFAULT_EXTRACTORS,
    FrontMatterError,
    extract_image_properties,
    extract_note_properties,
    read_note,
)

__all__ = [
    "DEFAULT_EXTRACTORS",
    "FrontMatterError",
    "ImageProperties",
    "ItemProperties",
    "NoteProperties",
    "OtherProperties",
    "SourceItem",
    "SourceKind",
    "classify",
    "extract_image_properties",
    "extract_note_properties",
    "read_note",
]
