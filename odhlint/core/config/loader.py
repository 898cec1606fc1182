"""
Configuration loader: reads odhlint.yml into a LintConfig.

The file is optional. When absent, defaults apply; CLI flags override
whatever the file sets.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from odhlint.core.models.version import SemVer

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "odhlint.yml"


class ConfigError(Exception):
    """Raised when the lint configuration is invalid or unreadable."""


class KubectlConfig(BaseModel):
    context: str | None = None
    kubeconfig: str | None = None


class LintConfig(BaseModel):
    """Settings for one lint run."""

    checks: str = "*"
    exclude: list[str] = Field(default_factory=list)
    output: Literal["table", "json", "yaml"] = "table"
    workers: int = Field(default=4, ge=1, le=64)
    timeout: float = Field(default=30, gt=0)          # per kubectl call, seconds
    target_version: str | None = None
    kubectl: KubectlConfig = Field(default_factory=KubectlConfig)

    @field_validator("target_version", mode="before")
    @classmethod
    def _check_version(cls, v: object) -> str | None:
        if v is None:
            return None
        text = str(v)
        SemVer.parse(text)
        return text

    @field_validator("checks")
    @classmethod
    def _check_pattern(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("checks pattern must not be empty")
        return v.strip()


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for odhlint.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to odhlint.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_config(path: Path | None = None) -> LintConfig:
    """Load and validate the lint configuration.

    Args:
        path: Explicit config path. If None, searches upward; a missing
            file then yields the defaults.

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    if path is None:
        path = find_config_file()
        if path is None:
            logger.debug("No %s found, using defaults", CONFIG_FILE)
            return LintConfig()
    elif not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading lint config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return LintConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        config = LintConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid lint configuration in {path}: {e}") from e

    logger.info("Loaded lint config from %s", path)
    return config
