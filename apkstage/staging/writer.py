"""File writes performed by a staging invocation.

Every write goes through this module so that I/O failures surface as
FilesystemError. Nothing here retries.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path

from apkstage.errors import FilesystemError
from apkstage.types import StagingTarget

logger = logging.getLogger(__name__)


def ensure_directory(path: Path) -> Path:
    """Create a directory and its parents if absent.

    Raises:
        FilesystemError: If the directory cannot be created.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError(
            f"Failed to create directory {path}: {e}", path=path
        ) from e
    return path


def replace_file(source: Path, dest: Path) -> Path:
    """Overwrite ``dest`` with the bytes of ``source``.

    The copy is written next to ``dest`` and renamed over it, so ``dest`` is
    either the old file or the complete new one.

    Raises:
        FilesystemError: If reading, writing or renaming fails.
    """
    tmp_name: str | None = None
    try:
        with tempfile.NamedTemporaryFile(
            dir=dest.parent, prefix=f".{dest.name}.", delete=False
        ) as tmp:
            tmp_name = tmp.name
            with source.open("rb") as src:
                shutil.copyfileobj(src, tmp)
        shutil.copymode(source, tmp_name)
        os.replace(tmp_name, dest)
        tmp_name = None
    except OSError as e:
        raise FilesystemError(
            f"Failed to copy {source} -> {dest}: {e}", path=dest
        ) from e
    finally:
        if tmp_name is not None:
            Path(tmp_name).unlink(missing_ok=True)
    return dest


def materialize_artifact(source: Path, dest_dir: Path) -> Path:
    """Copy an intermediate artifact into the canonical tree.

    The copy keeps the source file name and modification time.

    Args:
        source: Artifact in the intermediate tree.
        dest_dir: Canonical variant directory (e.g. outputs/apk/debug).

    Returns:
        Path to the materialized copy.

    Raises:
        FilesystemError: If the copy fails.
    """
    ensure_directory(dest_dir)
    dest = dest_dir / source.name
    try:
        shutil.copy2(source, dest)
        size = dest.stat().st_size
    except OSError as e:
        raise FilesystemError(
            f"Failed to materialize {source} -> {dest}: {e}", path=dest
        ) from e
    logger.info("Materialized %s -> %s (%d bytes)", source, dest, size)
    return dest


def stage_artifact(artifact: Path, target: StagingTarget) -> Path:
    """Copy a resolved artifact to the staging destination.

    Creates the staging directory if needed and always overwrites the
    destination file.

    Returns:
        Path to the staged file.

    Raises:
        FilesystemError: If the directory or the copy cannot be written.
    """
    ensure_directory(target.directory)
    dest = replace_file(artifact, target.path)
    logger.info("Staged %s -> %s", artifact, dest)
    return dest


__all__ = [
    "ensure_directory",
    "materialize_artifact",
    "replace_file",
    "stage_artifact",
]
