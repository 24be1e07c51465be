"""Resize backends used to produce responsive image variants."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Protocol, Sequence

from PIL import Image

from ..config import ResponsiveConfig


class ResizeError(RuntimeError):
    """Raised when a derived image variant cannot be produced."""


class Resizer(Protocol):
    def __call__(self, source: Path, destination: Path, width: int) -> None: ...


class PillowResizer:
    """Resize in-process with Pillow, preserving the aspect ratio."""

    def __init__(self, quality: int = 87) -> None:
        self.quality = quality

    def __call__(self, source: Path, destination: Path, width: int) -> None:
        save_format = _resolve_format(destination.suffix.lstrip("."))
        with Image.open(source) as image:
            orig_width, orig_height = image.size
            height = max(1, round(orig_height * width / orig_width))
            if save_format == "JPEG" and image.mode not in {"RGB", "L"}:
                image = image.convert("RGB")
            resized = image.resize((width, height), Image.Resampling.LANCZOS)
            resized.save(destination, format=save_format, **_build_save_kwargs(save_format, self.quality))


class CommandResizer:
    """Resize by running an external GraphicsMagick/ImageMagick style command."""

    def __init__(self, command: Sequence[str] = ("gm", "convert"), quality: int = 87) -> None:
        self.command = list(command)
        self.quality = quality

    def __call__(self, source: Path, destination: Path, width: int) -> None:
        cmd = [
            *self.command,
            str(source),
            "-resize",
            f"{width}x",
            "-quality",
            str(self.quality),
            str(destination),
        ]
        try:
            subprocess.run(cmd, check=True, capture_output=True, text=True)
        except subprocess.CalledProcessError as exc:
            detail = (exc.stderr or exc.stdout or "").strip()
            raise ResizeError(f"{' '.join(cmd)} exited with {exc.returncode}: {detail}") from exc
        except OSError as exc:
            raise ResizeError(f"Unable to run {self.command[0]}: {exc}") from exc


def build_resizer(config: ResponsiveConfig) -> Resizer:
    if config.resizer == "command":
        return CommandResizer(config.command, quality=config.quality)
    return PillowResizer(quality=config.quality)


def _resolve_format(fmt: str) -> str:
    mapping = {
        "jpg": "JPEG",
        "jpeg": "JPEG",
        "png": "PNG",
        "webp": "WEBP",
        "gif": "GIF",
    }
    return mapping.get(fmt.lower(), fmt.upper())


def _build_save_kwargs(fmt: str, quality: int) -> dict[str, int | bool]:
    kwargs: dict[str, int | bool] = {}
    if fmt in {"JPEG", "WEBP"}:
        kwargs["quality"] = quality
    if fmt == "JPEG":
        kwargs["optimize"] = True
        kwargs["progressive"] = True
    return kwargs
