from __future__ import annotations

from pathlib import Path

import tomllib
from pydantic import BaseModel, ConfigDict, Field, field_validator

CONFIG_FILENAME = "refmap.toml"
DEFAULT_IGNORE_FILE = ".refmapignore"


class RefMapConfig(BaseModel):
    """Configuration for refmap-core queries."""

    model_config = ConfigDict(extra="forbid")

    include: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to include (empty = all files)",
    )
    exclude: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to exclude",
    )
    nested_gitignore: bool = Field(
        default=False,
        description=(
            "Enable nested .gitignore composition (default: false for root-only)"
        ),
    )
    ignore_file: str = Field(
        default=DEFAULT_IGNORE_FILE,
        description="Gitignore-syntax file at the repo root with extra ignore rules",
    )
    max_results: int = Field(
        default=50,
        ge=1,
        description="Default result budget for refs and impact queries",
    )
    max_depth: int = Field(
        default=3,
        ge=1,
        description="Default traversal depth for impact queries",
    )

    @field_validator("ignore_file")
    @classmethod
    def validate_ignore_file(cls, v: str) -> str:
        """Keep the ignore file a plain relative path inside the repo root."""
        if not v:
            return v
        path = Path(v)
        if path.is_absolute() or v.startswith("~") or ".." in path.parts:
            msg = f"ignore_file '{v}' must be a relative path within the repo root"
            raise ValueError(msg)
        return v


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def load_config(root: Path) -> RefMapConfig:
    """Load configuration from refmap.toml if it exists."""
    config_path = Path(root) / CONFIG_FILENAME

    if not config_path.is_file():
        return RefMapConfig()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return RefMapConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e
