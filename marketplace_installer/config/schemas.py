"""Pydantic schemas for installer configuration.

This module defines the data model for the optional YAML configuration file
that overrides the installer defaults (download URLs, plugin naming, theme
sentinels, logging and timeouts).
"""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

# =============================================================================
# Remote Resources
# =============================================================================

DEFAULT_ARCHIVE_URL = (
    "https://github.com/spicetify/marketplace/releases/latest/download/marketplace.zip"
)
DEFAULT_THEME_URL = (
    "https://raw.githubusercontent.com/spicetify/marketplace/main/resources/color.ini"
)
DEFAULT_INSTALL_SCRIPT_URL_WINDOWS = (
    "https://raw.githubusercontent.com/spicetify/cli/main/install.ps1"
)
DEFAULT_INSTALL_SCRIPT_URL_UNIX = "https://raw.githubusercontent.com/spicetify/cli/main/install.sh"


# =============================================================================
# Installer Configuration
# =============================================================================


class InstallerConfig(BaseModel):
    """Installer configuration schema.

    Every field has a default reproducing the stock Marketplace install, so an
    empty configuration file is valid.

    The theme sentinels (``blank_theme_names`` and ``unreadable_theme_marker``)
    mirror what the Spicetify CLI prints for ``config current_theme`` when no
    theme is set or the config file cannot be read. They must be updated if
    the CLI changes its output format.
    """

    model_config = {"extra": "forbid"}

    # CLI tool
    cli_program: str = "spicetify"
    bypass_admin: bool = False
    version_probe_timeout: float = 5.0
    install_script_url_windows: str = DEFAULT_INSTALL_SCRIPT_URL_WINDOWS
    install_script_url_unix: str = DEFAULT_INSTALL_SCRIPT_URL_UNIX
    install_script_answers: list[str] = Field(default_factory=lambda: ["n", "n"])

    # Plugin artifact
    plugin_name: str = "marketplace"
    archive_url: str = DEFAULT_ARCHIVE_URL
    expected_archive_dir: str = "marketplace-dist"
    archive_dir_keyword: str = "marketplace"
    theme_url: str = DEFAULT_THEME_URL
    theme_file_name: str = "color.ini"

    # Theme conflict detection
    blank_theme_names: list[str] = Field(default_factory=lambda: ["blank", "default"])
    unreadable_theme_marker: str = "???"

    # Run behavior
    force_reinstall: bool = False
    locale: str | None = None
    log_file: Path = Path("marketplace-installer.log")
    download_timeout: float | None = None

    @field_validator("plugin_name", "expected_archive_dir", "cli_program")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Reject empty names."""
        if not v.strip():
            raise ValueError("Value cannot be empty")
        return v.strip()

    @field_validator("version_probe_timeout")
    @classmethod
    def validate_probe_timeout(cls, v: float) -> float:
        """The version probe must always be bounded."""
        if v <= 0:
            raise ValueError("version_probe_timeout must be positive")
        return v

    @field_validator("download_timeout")
    @classmethod
    def validate_download_timeout(cls, v: float | None) -> float | None:
        """Validate optional download timeout."""
        if v is not None and v <= 0:
            raise ValueError("download_timeout must be positive when set")
        return v

    @field_validator(
        "archive_url", "theme_url", "install_script_url_windows", "install_script_url_unix"
    )
    @classmethod
    def validate_https(cls, v: str) -> str:
        """Remote resources are only fetched over HTTPS."""
        if not v.startswith("https://"):
            raise ValueError(f"URL must use https: {v}")
        return v
