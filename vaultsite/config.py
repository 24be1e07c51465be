from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, field_validator

CONFIG_FILENAME = "vaultsite.yml"


class ResponsiveConfig(BaseModel):
    """Controls for the responsive image cascade."""

    floor: int = Field(
        default=500,
        ge=1,
        description="Stop emitting smaller variants once the width would drop to or below this value.",
    )
    ratio: float = Field(
        default=2 / 3,
        gt=0,
        lt=1,
        description="Shrink factor applied between consecutive variants.",
    )
    quality: int = Field(default=87, ge=1, le=100)
    resizer: Literal["pillow", "command"] = Field(
        default="pillow",
        description="Resize backend: in-process Pillow or an external command.",
    )
    command: list[str] = Field(
        default_factory=lambda: ["gm", "convert"],
        description="Command prefix used when resizer is 'command'.",
    )

    @field_validator("command")
    def _require_command(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("Resize command cannot be empty.")
        return value


class Config(BaseModel):
    site_name: str = Field(default="vaultsite")
    language: str = Field(default="en")
    source_dir: Path = Field(default=Path("vault"))
    output_dir: Path = Field(default=Path("site"))
    base_url: str = Field(
        default="/",
        description="URL prefix of the generated site; must start and end with '/'.",
    )
    cache_filename: str = Field(
        default=".cache.json",
        description="Metadata cache name, stored under base_url inside the output tree.",
    )
    templates_dir: Path | None = Field(
        default=None,
        description="Optional directory whose page.html overrides the bundled template.",
    )
    responsive: ResponsiveConfig = Field(default_factory=ResponsiveConfig)

    @field_validator("source_dir", "output_dir", mode="before")
    def _ensure_path(cls, value: Any) -> Path:
        return Path(value)

    @field_validator("templates_dir", mode="before")
    def _ensure_optional_path(cls, value: Any) -> Path | None:
        if value is None or value == "":
            return None
        return Path(value)

    @field_validator("base_url")
    def _check_base_url(cls, value: str) -> str:
        text = value.strip()
        if not (text.startswith("/") and text.endswith("/")):
            raise ValueError("base_url must start and end with '/'")
        return text

    @field_validator("cache_filename")
    def _check_cache_filename(cls, value: str) -> str:
        text = value.strip().lstrip("/")
        if not text or text.endswith("/"):
            raise ValueError("cache_filename must name a file")
        return text

    @property
    def cache_url(self) -> str:
        return self.base_url + self.cache_filename


def load_config(path: str | Path) -> Config:
    """Load configuration and resolve relative paths based on the config location.

    The ``path`` argument may point to a file (e.g., ``/site/vaultsite.yml``) or a
    directory containing that file. All relative paths inside the configuration
    are interpreted relative to the directory holding the config file.
    """
    candidate = Path(path)
    data: dict[str, Any] = {}
    base_dir: Path
    if candidate.is_dir():
        config_file = candidate / CONFIG_FILENAME
        if config_file.exists():
            with config_file.open("r", encoding="utf-8") as handle:
                data = yaml.safe_load(handle) or {}
        base_dir = candidate.resolve()
    else:
        if not candidate.exists():
            raise FileNotFoundError(candidate)
        with candidate.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
        base_dir = candidate.parent.resolve()

    cfg = Config(**data)

    def _abs_required(value: Path) -> Path:
        return value if value.is_absolute() else (base_dir / value).resolve()

    cfg.source_dir = _abs_required(cfg.source_dir)
    cfg.output_dir = _abs_required(cfg.output_dir)
    if cfg.templates_dir is not None:
        cfg.templates_dir = _abs_required(cfg.templates_dir)

    return cfg
