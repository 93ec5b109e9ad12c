"""YAML configuration loading for fileio.

Defaults used by the file helpers are read from fileio.yaml:

    encoding: utf-8       # Text encoding for load/save/replace
    create_dirs: false    # Create missing parent folders on copy/save
    log_level: WARNING    # Level used by configure_logging()

Resolution order (when no explicit path is given):
    1. FILEIO_CONFIG env var
    2. cwd/fileio.yaml
    3. Built-in defaults
"""

from __future__ import annotations

import codecs
import os
from pathlib import Path
from typing import Any

import yaml
from loguru import logger
from pydantic import BaseModel, Field, field_validator

CONFIG_ENV_VAR = "FILEIO_CONFIG"
DEFAULT_CONFIG_FILENAME = "fileio.yaml"


class FileIOConfig(BaseModel):
    """Library-wide defaults for file operations."""

    encoding: str = Field(
        default="utf-8", description="Text encoding for load, save and replace"
    )
    create_dirs: bool = Field(
        default=False,
        description="Create missing parent folders when copying or saving",
    )
    log_level: str = Field(
        default="WARNING", description="Minimum level for configure_logging()"
    )

    @field_validator("encoding")
    @classmethod
    def _check_encoding(cls, value: str) -> str:
        try:
            codecs.lookup(value)
        except LookupError as e:
            raise ValueError(f"Unknown encoding: {value}") from e
        return value

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return level


def _resolve_config_path(config_path: Path | str | None) -> Path | None:
    """Resolve config path from explicit path, env var, or the working directory.

    Returns:
        Path to an existing config file, or None to use defaults

    Raises:
        FileNotFoundError: If an explicit or env var path doesn't exist
    """
    if config_path is not None:
        explicit = Path(config_path).expanduser()
        if not explicit.exists():
            raise FileNotFoundError(f"Config file not found: {explicit}")
        return explicit

    env_config = os.getenv(CONFIG_ENV_VAR)
    if env_config:
        env_path = Path(env_config).expanduser()
        if not env_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {env_path} (from {CONFIG_ENV_VAR})"
            )
        return env_path

    cwd_config = Path.cwd() / DEFAULT_CONFIG_FILENAME
    if cwd_config.exists():
        return cwd_config

    return None


def _load_yaml_file(config_path: Path) -> dict[str, Any]:
    """Load and parse a YAML config file.

    Raises:
        ValueError: If the file can't be read or isn't a YAML mapping
    """
    try:
        with config_path.open() as f:
            raw_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {config_path}: {e}") from e
    except OSError as e:
        raise ValueError(f"Error reading {config_path}: {e}") from e

    if raw_data is None:
        return {}
    if not isinstance(raw_data, dict):
        raise ValueError(f"Expected a mapping in {config_path}, got {type(raw_data).__name__}")
    return raw_data


def load_config(config_path: Path | str | None = None) -> FileIOConfig:
    """Load fileio configuration from YAML.

    Args:
        config_path: Path to config file (overrides resolution)

    Returns:
        Validated FileIOConfig

    Raises:
        FileNotFoundError: If an explicit config path doesn't exist
        ValueError: If YAML is invalid or validation fails
    """
    resolved_path = _resolve_config_path(config_path)

    if resolved_path is None:
        logger.trace("No config file found, using defaults")
        return FileIOConfig()

    logger.trace(f"Loading config from {resolved_path}")
    raw_data = _load_yaml_file(resolved_path)

    try:
        return FileIOConfig.model_validate(raw_data)
    except Exception as e:
        raise ValueError(f"Invalid configuration in {resolved_path}: {e}") from e


# Global config instance
_config: FileIOConfig | None = None


def get_config(
    config_path: Path | str | None = None, reload: bool = False
) -> FileIOConfig:
    """Get or load the global configuration.

    Args:
        config_path: Path to config file (only used on first load)
        reload: Force reload configuration

    Returns:
        FileIOConfig instance
    """
    global _config

    if _config is None or reload:
        _config = load_config(config_path)

    return _config
