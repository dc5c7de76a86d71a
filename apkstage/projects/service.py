"""Sub-project lookup.

A sub-project identifier is a ':'-separated path relative to the workspace
root (':app_skin', ':libs:skin').
"""

from __future__ import annotations

import logging
from pathlib import Path

from apkstage.errors import ProjectNotFoundError

logger = logging.getLogger(__name__)


def normalize_project_name(name: str) -> str:
    """Strip a single leading ':' from a project identifier."""
    return name[1:] if name.startswith(":") else name


def project_path(workspace_root: Path, name: str) -> Path:
    """Map a project identifier to its directory under the workspace root."""
    parts = [p for p in normalize_project_name(name).split(":") if p]
    return workspace_root.joinpath(*parts)


def find_project(workspace_root: Path, name: str) -> Path:
    """Resolve a sub-project identifier to an existing directory.

    Args:
        workspace_root: Root directory of the multi-project build.
        name: Sub-project identifier, with or without a leading ':'.

    Returns:
        Path to the sub-project directory.

    Raises:
        ProjectNotFoundError: If the identifier is empty, the directory does
            not exist, or it lies outside the workspace root.
    """
    normalized = normalize_project_name(name)
    path = project_path(workspace_root, normalized)
    if not normalized or path == workspace_root or not path.is_dir():
        raise ProjectNotFoundError(normalized)
    root = workspace_root.resolve()
    resolved = path.resolve()
    if resolved == root or not resolved.is_relative_to(root):
        logger.warning("Project :%s resolves outside %s", normalized, root)
        raise ProjectNotFoundError(normalized)
    logger.debug("Resolved project :%s -> %s", normalized, path)
    return path


def build_root(project_dir: Path, build_dir_name: str = "build") -> Path:
    """Return the build output root of a project."""
    return project_dir / build_dir_name


__all__ = ["build_root", "find_project", "normalize_project_name", "project_path"]
