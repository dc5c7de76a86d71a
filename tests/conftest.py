"""Shared fixtures for building fake sub-project build trees."""

import os
from collections.abc import Callable
from pathlib import Path

import pytest

BASE_MTIME_NS = 1_700_000_000 * 1_000_000_000


@pytest.fixture
def write_apk() -> Callable[..., Path]:
    """Return a helper that writes a file with a fixed modification time.

    The helper takes a path, optional content and an age offset in seconds
    added to a fixed base timestamp (larger is newer).
    """

    def _write(path: Path, content: bytes | None = None, age: int = 0) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content if content is not None else path.name.encode())
        mtime = BASE_MTIME_NS + age * 1_000_000_000
        os.utime(path, ns=(mtime, mtime))
        return path

    return _write


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a workspace with a parent project 'app' and sub-project 'app_skin'."""
    (tmp_path / "app").mkdir()
    (tmp_path / "app_skin" / "build").mkdir(parents=True)
    return tmp_path


@pytest.fixture
def skin_build(workspace: Path) -> Path:
    """Return the build directory of the 'app_skin' sub-project."""
    return workspace / "app_skin" / "build"
