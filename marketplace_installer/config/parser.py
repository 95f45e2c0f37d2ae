"""Configuration file parsing utilities."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from marketplace_installer.config.schemas import InstallerConfig


class ConfigError(Exception):
    """Error loading or parsing configuration."""

    def __init__(self, message: str, path: Path | None = None):
        self.path = path
        super().__init__(message)


def load_yaml(path: Path) -> dict[str, Any]:
    """Load and parse a YAML file.

    Args:
        path: Path to the YAML file

    Returns:
        Parsed YAML as a dictionary

    Raises:
        ConfigError: If the file cannot be read or parsed
    """
    if not path.exists():
        raise ConfigError(f"File not found: {path}", path)

    try:
        with open(path, encoding="utf-8") as f:
            result = yaml.safe_load(f)
            if result is None:
                return {}
            if not isinstance(result, dict):
                raise ConfigError(f"YAML file must contain a mapping: {path}", path)
            return result
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}", path) from e
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}", path) from e


def load_installer_config(
    path: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> InstallerConfig:
    """Load the installer configuration.

    Values from the YAML file replace the defaults, and ``overrides``
    (typically command-line flags) replace both.

    Args:
        path: Optional path to a YAML configuration file
        overrides: Optional explicit values taking precedence over the file

    Returns:
        Parsed InstallerConfig

    Raises:
        ConfigError: If the file is missing or invalid
    """
    data: dict[str, Any] = load_yaml(path) if path is not None else {}
    if overrides:
        data.update(overrides)

    try:
        return InstallerConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid installer config: {e}", path) from e
