"""Error definitions for apkstage.

Exceptions carry a stable ``code`` attribute so the CLI can surface them
in JSON output. Only filesystem failures while writing are fatal; a missing
sub-project or a missing artifact is reported as a skipped invocation.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

# Error code constants
PROJECT_NOT_FOUND = "project_not_found"
ARTIFACT_NOT_FOUND = "artifact_not_found"
FILESYSTEM_ERROR = "filesystem_error"
CONFIG_ERROR = "config_error"


class ApkStageError(Exception):
    """Base error for apkstage operations."""

    def __init__(self, message: str, code: str = "apkstage_error") -> None:
        super().__init__(message)
        self.code = code


class ProjectNotFoundError(ApkStageError):
    """Raised when a sub-project identifier does not resolve in the workspace."""

    def __init__(self, project: str, code: str = PROJECT_NOT_FOUND) -> None:
        super().__init__(f"Project :{project} not found", code=code)
        self.project = project


class FilesystemError(ApkStageError):
    """Raised when creating a directory or copying an artifact fails."""

    def __init__(
        self,
        message: str,
        path: Path | None = None,
        code: str = FILESYSTEM_ERROR,
    ) -> None:
        super().__init__(message, code=code)
        self.path = path


class ConfigError(ApkStageError):
    """Raised when a staging config file cannot be read or validated."""

    def __init__(self, message: str, code: str = CONFIG_ERROR) -> None:
        super().__init__(message, code=code)


@dataclass
class StageError:
    """Structured error payload for JSON output.

    Attributes:
        code: Stable error code for programmatic handling.
        message: Human-readable error message.
        details: Optional additional error details.
    """

    code: str
    message: str
    details: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details is not None:
            result["details"] = self.details
        return result


def error_from_exception(exc: ApkStageError) -> StageError:
    """Build a structured error payload from an apkstage exception."""
    details: dict[str, Any] | None = None
    if isinstance(exc, FilesystemError) and exc.path is not None:
        details = {"path": str(exc.path)}
    elif isinstance(exc, ProjectNotFoundError):
        details = {"project": exc.project}
    return StageError(code=exc.code, message=str(exc), details=details)


__all__ = [
    "ARTIFACT_NOT_FOUND",
    "CONFIG_ERROR",
    "FILESYSTEM_ERROR",
    "PROJECT_NOT_FOUND",
    "ApkStageError",
    "ConfigError",
    "FilesystemError",
    "ProjectNotFoundError",
    "StageError",
    "error_from_exception",
]
