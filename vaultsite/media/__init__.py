"""Derived image generation."""

from .resize import CommandResizer, PillowResizer, ResizeError, Resizer, build_resizer
from .responsive import (
    DerivedVariant,
    format_srcset,
    plan_variants,
    responsive_widths,
    variant_url,
    write_responsive_image,
)

__all__ = [
    "CommandResizer",
    "DerivedVariant",
    "PillowResizer",
    "ResizeError",
    "Resizer",
    "build_resizer",
    "format_srcset",
    "plan_variants",
    "responsive_widths",
    "variant_url",
    "write_responsive_image",
]
