"""Generate progressively smaller copies of an image for ``srcset``."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from fractions import Fraction
from pathlib import Path, PurePosixPath

from ..paths import file_mtime
from ..site import Site
from .resize import ResizeError, Resizer

logger = logging.getLogger(__name__)

DEFAULT_FLOOR = 500
DEFAULT_RATIO = 2 / 3


@dataclass(frozen=True)
class DerivedVariant:
    url: str
    width: int
    source_width: int

    @property
    def descriptor(self) -> str:
        return f"{self.url} {self.width}w"


def responsive_widths(
    width: int, floor: int = DEFAULT_FLOOR, ratio: float = DEFAULT_RATIO
) -> list[int]:
    """Return ``width`` followed by each smaller width above ``floor``.

    Widths are ``width * ratio**k`` rounded down, computed with exact
    fractions so 1600 at 2/3 gives 1600, 1066, 711.
    """
    if width < 1:
        raise ValueError(f"Image width must be positive, got {width}")
    step = Fraction(ratio).limit_denominator(1000)
    widths = [width]
    scale = step
    while True:
        candidate = int(width * scale)
        if candidate <= floor:
            break
        widths.append(candidate)
        scale *= step
    return widths


def variant_url(url: str, width: int) -> str:
    """Insert the hexadecimal width before the extension: ``a.jpg`` -> ``a-42a.jpg``."""
    suffix = PurePosixPath(url).suffix
    name = url[: -len(suffix)] if suffix else url
    return f"{name}-{width:x}{suffix}"


def plan_variants(
    url: str, width: int, floor: int = DEFAULT_FLOOR, ratio: float = DEFAULT_RATIO
) -> list[DerivedVariant]:
    """Describe the original and every derived variant, largest first."""
    variants = []
    for index, target_width in enumerate(responsive_widths(width, floor, ratio)):
        target_url = url if index == 0 else variant_url(url, target_width)
        variants.append(DerivedVariant(url=target_url, width=target_width, source_width=width))
    return variants


def format_srcset(variants: list[DerivedVariant]) -> str:
    return ", ".join(variant.descriptor for variant in variants)


def write_responsive_image(
    site: Site,
    url: str,
    source: Path,
    mtime: str | None,
    width: int,
    resizer: Resizer,
    *,
    floor: int = DEFAULT_FLOOR,
    ratio: float = DEFAULT_RATIO,
) -> str:
    """Publish ``source`` at ``url`` plus its smaller variants.

    Only variants older than the source are regenerated. Returns the
    ``srcset`` attribute value.
    """
    mtime = mtime or file_mtime(source)
    variants = plan_variants(url, width, floor, ratio)

    original, *derived = variants
    site.write_file(original.url, source, mtime)

    for variant in derived:
        target = site.prepare(variant.url)
        if file_mtime(target) >= mtime:
            continue
        logger.debug("Resizing %s to %d px", source, variant.width)
        try:
            resizer(source, target, variant.width)
        except Exception as exc:
            raise ResizeError(f"Error resizing {source}: {exc}") from exc
        site.mark_updated()

    return format_srcset(variants)
