"""Errors that abort an installation flow."""


class InstallError(Exception):
    """Fatal error during installation.

    Raised by installation steps; the orchestrator catches it at the flow
    boundary, reports it and moves on to its closing prompts.
    """

    def __init__(self, message: str, step: str | None = None):
        self.step = step
        super().__init__(message)


class CliToolUnavailableError(InstallError):
    """The CLI tool is missing and could not be installed."""


class PathResolutionError(InstallError):
    """The user-data directory could not be determined."""


class DirectoryPreparationError(InstallError):
    """The plugin directories could not be recreated."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(message, step="prepare-directories")


class ArchiveError(InstallError):
    """The plugin archive could not be extracted or laid out."""
