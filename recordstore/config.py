"""Store configuration with YAML support."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

from .persistence import DEFAULT_EXTENSION, resolve_save_path


class StoreConfig(BaseModel):
    """Defaults applied when creating and locating databases."""

    # File extension for paths derived from a database label
    default_extension: str = Field(default=DEFAULT_EXTENSION, min_length=1)

    # Directory that label-derived paths are placed in
    base_dir: str = "."

    strict_duplicates: bool = False
    log_level: str = "WARNING"

    @field_validator("default_extension")
    @classmethod
    def strip_leading_dot(cls, value: str) -> str:
        value = value.lstrip(".")
        if not value:
            raise ValueError("default_extension must not be empty")
        return value

    @field_validator("log_level")
    @classmethod
    def known_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    def resolve_path(self, label: str, save_path: str | Path | None = None) -> Path:
        """Resolve where a database lives; explicit paths bypass ``base_dir``."""
        if save_path is not None and str(save_path):
            return Path(save_path)
        return Path(self.base_dir) / resolve_save_path(label, None, self.default_extension)

    def to_dict(self) -> dict[str, object]:
        return self.model_dump()

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "StoreConfig":
        return cls.model_validate(data)


def load_config(yaml_path: str | Path) -> StoreConfig:
    """Load store configuration from a YAML file.

    Args:
        yaml_path: Path to YAML configuration file

    Returns:
        StoreConfig instance

    Raises:
        FileNotFoundError: If YAML file doesn't exist
        ValueError: If YAML is invalid or has bad values
    """
    yaml_path = Path(yaml_path)

    if not yaml_path.exists():
        raise FileNotFoundError(f"Config file not found: {yaml_path}")

    with open(yaml_path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {yaml_path}: {e}") from e

    if not data or not isinstance(data, dict):
        raise ValueError(f"Empty or invalid YAML file: {yaml_path}")

    try:
        return StoreConfig.from_dict(data)
    except Exception as e:
        raise ValueError(f"Invalid configuration in {yaml_path}: {e}") from e


def save_config(config: StoreConfig, yaml_path: str | Path) -> None:
    """Save store configuration to a YAML file."""
    yaml_path = Path(yaml_path)
    yaml_path.parent.mkdir(parents=True, exist_ok=True)

    with open(yaml_path, "w", encoding="utf-8") as f:
        yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False, indent=2)
