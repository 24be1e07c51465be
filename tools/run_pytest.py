"""Run the vaultsite test suite, preferring the project's .venv interpreter."""

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]


def find_interpreter(root: Path = ROOT) -> str:
    bin_dir = root / ".venv" / ("Scripts" if os.name == "nt" else "bin")
    for name in ("python.exe", "python3", "python"):
        candidate = bin_dir / name
        if candidate.exists():
            return str(candidate)
    return sys.executable


def main(argv: list[str] | None = None) -> int:
    args = list(argv or [])
    env = dict(os.environ)
    # Keep rich from wrapping CLI summaries that tests match on.
    env.setdefault("COLUMNS", "200")
    return subprocess.call([find_interpreter(), "-m", "pytest", "-q", *args], cwd=ROOT, env=env)


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
