"""Tests for staging/writer.py module."""

from pathlib import Path
from unittest.mock import patch

import pytest

from apkstage.errors import FilesystemError
from apkstage.staging.writer import (
    ensure_directory,
    materialize_artifact,
    replace_file,
    stage_artifact,
)
from apkstage.types import StagingTarget


class TestEnsureDirectory:
    """Tests for ensure_directory function."""

    def test_creates_parents(self, tmp_path: Path) -> None:
        target = tmp_path / "a" / "b" / "c"
        assert ensure_directory(target) == target
        assert target.is_dir()

    def test_existing_ok(self, tmp_path: Path) -> None:
        ensure_directory(tmp_path)
        assert tmp_path.is_dir()

    def test_file_in_the_way(self, tmp_path: Path) -> None:
        blocker = tmp_path / "assets"
        blocker.write_text("file")

        with pytest.raises(FilesystemError) as exc_info:
            ensure_directory(blocker / "sub")
        assert exc_info.value.path == blocker / "sub"


class TestReplaceFile:
    """Tests for replace_file function."""

    def test_overwrites(self, tmp_path: Path) -> None:
        source = tmp_path / "src.apk"
        source.write_bytes(b"new")
        dest = tmp_path / "dest.apk"
        dest.write_bytes(b"old content that is longer")

        replace_file(source, dest)

        assert dest.read_bytes() == b"new"

    def test_no_temp_files_left(self, tmp_path: Path) -> None:
        source = tmp_path / "src.apk"
        source.write_bytes(b"data")
        out = tmp_path / "out"
        out.mkdir()

        replace_file(source, out / "skin.apk")

        assert [p.name for p in out.iterdir()] == ["skin.apk"]

    def test_missing_source(self, tmp_path: Path) -> None:
        dest = tmp_path / "dest.apk"
        dest.write_bytes(b"previous")

        with pytest.raises(FilesystemError):
            replace_file(tmp_path / "missing.apk", dest)

        assert dest.read_bytes() == b"previous"
        assert [p.name for p in tmp_path.iterdir()] == ["dest.apk"]


class TestMaterializeArtifact:
    """Tests for materialize_artifact function."""

    def test_copies_into_new_dir(self, tmp_path: Path, write_apk) -> None:
        source = write_apk(tmp_path / "inter" / "app-debug.apk", content=b"apk", age=3)
        dest_dir = tmp_path / "outputs" / "apk" / "debug"

        copy = materialize_artifact(source, dest_dir)

        assert copy == dest_dir / "app-debug.apk"
        assert copy.read_bytes() == b"apk"
        assert copy.stat().st_mtime_ns == source.stat().st_mtime_ns
        assert source.exists()

    def test_copy_failure(self, tmp_path: Path, write_apk) -> None:
        source = write_apk(tmp_path / "app-debug.apk")

        with patch(
            "apkstage.staging.writer.shutil.copy2", side_effect=OSError("disk full")
        ):
            with pytest.raises(FilesystemError) as exc_info:
                materialize_artifact(source, tmp_path / "out")

        assert "disk full" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_missing_copy_after_copy(self, tmp_path: Path, write_apk) -> None:
        """A copy that is gone before it can be read back is a FilesystemError."""
        source = write_apk(tmp_path / "app-debug.apk")

        with patch("apkstage.staging.writer.shutil.copy2"):
            with pytest.raises(FilesystemError) as exc_info:
                materialize_artifact(source, tmp_path / "out")

        assert exc_info.value.path == tmp_path / "out" / "app-debug.apk"
        assert isinstance(exc_info.value.__cause__, FileNotFoundError)


class TestStageArtifact:
    """Tests for stage_artifact function."""

    def test_creates_directory_and_copies(self, tmp_path: Path) -> None:
        source = tmp_path / "app-debug.apk"
        source.write_bytes(b"payload")
        target = StagingTarget(tmp_path / "app" / "src" / "main" / "assets", "skin.apk")

        dest = stage_artifact(source, target)

        assert dest == target.path
        assert dest.read_bytes() == b"payload"

    def test_idempotent(self, tmp_path: Path) -> None:
        source = tmp_path / "app-debug.apk"
        source.write_bytes(b"payload")
        target = StagingTarget(tmp_path / "assets", "skin.apk")

        first = stage_artifact(source, target).read_bytes()
        second = stage_artifact(source, target).read_bytes()

        assert first == second == b"payload"
