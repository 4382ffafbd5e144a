"""
Configuration loader — reads devcert.yml into a validated settings model.

The file is optional: every field has a default. Precedence is

    DEVCERT_* env vars  >  devcert.yml  >  built-in defaults
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, field_validator

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "devcert.yml"

DEFAULT_TOOL_VERSION = "1.3.0"
DEFAULT_STORE_DIRNAME = ".devcert"

# Env var → config field
_ENV_OVERRIDES = {
    "DEVCERT_STORE_DIR": "store_dir",
    "DEVCERT_BIN_DIR": "bin_dir",
}


class ConfigError(Exception):
    """Raised when devcert configuration is invalid or unreadable."""


class DevcertConfig(BaseModel):
    """User-tunable settings. ``None`` paths mean "use the default"."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    store_dir: Path | None = None
    bin_dir: Path | None = None
    tool_version: str = DEFAULT_TOOL_VERSION

    @field_validator("store_dir", "bin_dir", mode="before")
    @classmethod
    def _expand_user(cls, v: object) -> object:
        if isinstance(v, (str, Path)):
            return Path(v).expanduser()
        return v


def find_config_file(
    start_dir: Path | None = None,
    home_dir: Path | None = None,
) -> Path | None:
    """Look for devcert.yml in the working directory, then the default store.

    Args:
        start_dir: Directory to check first (default: cwd).
        home_dir: Home directory (default: ``Path.home()``).

    Returns:
        Path to devcert.yml, or None if not found.
    """
    candidates = [
        (start_dir or Path.cwd()) / CONFIG_FILE,
        (home_dir or Path.home()) / DEFAULT_STORE_DIRNAME / CONFIG_FILE,
    ]
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None


def load_config(
    path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> DevcertConfig:
    """Load and validate configuration.

    Args:
        path: Explicit path to devcert.yml. If None, searches the default
            locations; a missing file is not an error.
        environ: Environment mapping for overrides (default: ``os.environ``).

    Returns:
        Validated DevcertConfig.

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    env = os.environ if environ is None else environ
    data: dict = {}

    if path is not None and not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    if path is None:
        path = find_config_file()

    if path is not None:
        logger.debug("Loading config from %s", path)
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot read {path}: {e}") from e

        try:
            loaded = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigError(
                f"Expected a YAML mapping in {path}, got {type(loaded).__name__}"
            )
        data.update(loaded)

    for var, field_name in _ENV_OVERRIDES.items():
        if env.get(var):
            logger.debug("Config override from %s", var)
            data[field_name] = env[var]

    try:
        return DevcertConfig.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid devcert configuration: {e}") from e
