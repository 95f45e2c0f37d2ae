"""Platform and OS detection utilities."""

import ctypes
import getpass
import os
import platform
from pathlib import Path
from typing import Literal

PlatformOS = Literal["windows", "linux", "macos"]


def get_os() -> PlatformOS:
    """Get the current operating system.

    Returns:
        One of: "windows", "linux", "macos"
    """
    system = platform.system().lower()
    if system == "darwin":
        return "macos"
    elif system == "windows":
        return "windows"
    else:
        return "linux"


def is_windows() -> bool:
    """Check if the current OS is Windows.

    Returns:
        True if running on Windows
    """
    return get_os() == "windows"


def get_home_directory() -> Path:
    """Get the user's home directory."""
    return Path(os.path.expanduser("~"))


def get_env(name: str, default: str | None = None) -> str | None:
    """Get an environment variable.

    Args:
        name: Environment variable name
        default: Default value if not set

    Returns:
        Environment variable value or default
    """
    return os.environ.get(name, default)


def _env_dir(name: str, fallback: Path) -> Path:
    value = get_env(name)
    return Path(value) if value else fallback


def get_config_home() -> Path:
    """Get the per-user application configuration directory.

    Returns:
        %APPDATA% on Windows, $XDG_CONFIG_HOME (or ~/.config) elsewhere
    """
    home = get_home_directory()
    if is_windows():
        return _env_dir("APPDATA", home / "AppData" / "Roaming")
    return _env_dir("XDG_CONFIG_HOME", home / ".config")


def get_data_home() -> Path:
    """Get the per-user local application data directory.

    Returns:
        %LOCALAPPDATA% on Windows, $XDG_DATA_HOME (or ~/.local/share) elsewhere
    """
    home = get_home_directory()
    if is_windows():
        return _env_dir("LOCALAPPDATA", home / "AppData" / "Local")
    return _env_dir("XDG_DATA_HOME", home / ".local" / "share")


def default_user_data_path(program: str) -> Path:
    """Get the conventional user-data directory of a CLI program.

    Args:
        program: Program name used as the directory name

    Returns:
        Path under the platform configuration directory
    """
    return get_config_home() / program


def known_data_directories(program: str) -> list[Path]:
    """Get every directory a CLI program is known to keep data in.

    Args:
        program: Program name

    Returns:
        Configuration, local data and dot-directory locations, in that order
    """
    return [
        get_config_home() / program,
        get_data_home() / program,
        get_home_directory() / f".{program}",
    ]


def is_user_admin() -> bool:
    """Check if the current process runs with administrator rights.

    Returns:
        True for an elevated Windows process or a root process elsewhere
    """
    if is_windows():
        try:
            return bool(ctypes.windll.shell32.IsUserAnAdmin())  # type: ignore[attr-defined]
        except (AttributeError, OSError):
            return False
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


def get_username() -> str:
    """Get the login name of the current user, or an empty string."""
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return ""
