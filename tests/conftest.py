from __future__ import annotations

from pathlib import Path

import pytest


class RecordingResizer:
    """Resize double that records calls and writes a placeholder file."""

    def __init__(self, fail: bool = False) -> None:
        self.calls: list[tuple[Path, Path, int]] = []
        self.fail = fail

    def __call__(self, source: Path, destination: Path, width: int) -> None:
        self.calls.append((source, destination, width))
        if self.fail:
            raise RuntimeError("convert: unable to open image")
        destination.write_bytes(f"{source.name}@{width}".encode("utf-8"))


@pytest.fixture
def resizer() -> RecordingResizer:
    return RecordingResizer()


@pytest.fixture
def failing_resizer() -> RecordingResizer:
    return RecordingResizer(fail=True)
