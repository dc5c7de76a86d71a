"""Tests for staging/service.py module.

End-to-end staging invocations against fake build trees.
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from apkstage.config import Settings
from apkstage.errors import FilesystemError
from apkstage.projects.schema import StageConfig
from apkstage.staging.service import (
    locate_artifact,
    stage_subproject,
    staging_target,
)
from apkstage.types import BuildIntent, StageStatus

EXPLICIT_TASKS = [":app:assembleRelease"]
IMPLICIT_TASKS = [":app:installDebug"]


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def config() -> StageConfig:
    return StageConfig(sub_project=":app_skin")


def _assets(workspace: Path) -> Path:
    return workspace / "app" / "src" / "main" / "assets"


class TestStageSubproject:
    """Tests for stage_subproject function."""

    def test_stages_canonical_artifact(
        self, workspace, skin_build, write_apk, config, settings
    ) -> None:
        apk_dir = skin_build / "outputs" / "apk" / "debug"
        write_apk(apk_dir / "app-debug.apk", content=b"aligned", age=1)
        write_apk(apk_dir / "app-debug-unaligned.apk", content=b"unaligned", age=2)

        result = stage_subproject(
            workspace, workspace / "app", config, EXPLICIT_TASKS, settings
        )

        assert result.status is StageStatus.STAGED
        assert result.intent is BuildIntent.EXPLICIT
        assert result.destination == _assets(workspace) / "skin.apk"
        assert result.destination.read_bytes() == b"aligned"

    def test_explicit_materializes_then_stages(
        self, workspace, skin_build, write_apk, config, settings
    ) -> None:
        write_apk(
            skin_build / "intermediates" / "apk" / "debug" / "app-debug.apk",
            content=b"from-intermediates",
        )

        result = stage_subproject(
            workspace, workspace / "app", config, EXPLICIT_TASKS, settings
        )

        materialized = skin_build / "outputs" / "apk" / "debug" / "app-debug.apk"
        assert result.staged
        assert result.artifact.path == materialized
        assert materialized.read_bytes() == b"from-intermediates"
        assert result.destination.read_bytes() == materialized.read_bytes()

    def test_implicit_reads_intermediates(
        self, workspace, skin_build, write_apk, config, settings
    ) -> None:
        source = write_apk(
            skin_build / "intermediates" / "apk" / "debug" / "app-debug.apk",
            content=b"partial",
        )

        result = stage_subproject(
            workspace, workspace / "app", config, IMPLICIT_TASKS, settings
        )

        assert result.staged
        assert result.intent is BuildIntent.IMPLICIT
        assert result.artifact.path == source
        assert result.destination.read_bytes() == b"partial"
        assert not (skin_build / "outputs").exists()

    def test_rerun_is_byte_identical(
        self, workspace, skin_build, write_apk, config, settings
    ) -> None:
        write_apk(
            skin_build / "intermediates" / "apk" / "debug" / "app-debug.apk",
            content=b"same",
        )

        first = stage_subproject(
            workspace, workspace / "app", config, EXPLICIT_TASKS, settings
        )
        first_bytes = first.destination.read_bytes()
        second = stage_subproject(
            workspace, workspace / "app", config, EXPLICIT_TASKS, settings
        )

        assert second.staged
        assert not second.artifact.materialized
        assert second.destination.read_bytes() == first_bytes

    def test_not_found_leaves_previous_copy(
        self, workspace, skin_build, config, settings
    ) -> None:
        assets = _assets(workspace)
        assets.mkdir(parents=True)
        previous = assets / "skin.apk"
        previous.write_bytes(b"previous run")

        result = stage_subproject(
            workspace, workspace / "app", config, EXPLICIT_TASKS, settings
        )

        assert result.status is StageStatus.ARTIFACT_NOT_FOUND
        assert result.destination is None
        assert len(result.searched) == 2
        assert previous.read_bytes() == b"previous run"
        assert [p.name for p in assets.iterdir()] == ["skin.apk"]

    def test_not_found_does_not_create_staging_dir(
        self, workspace, skin_build, config, settings
    ) -> None:
        result = stage_subproject(
            workspace, workspace / "app", config, IMPLICIT_TASKS, settings
        )

        assert result.status is StageStatus.ARTIFACT_NOT_FOUND
        assert not _assets(workspace).exists()

    def test_project_not_found_is_skip(self, tmp_path, settings) -> None:
        config = StageConfig(sub_project=":missing")

        result = stage_subproject(tmp_path, tmp_path, config, EXPLICIT_TASKS, settings)

        assert result.status is StageStatus.PROJECT_NOT_FOUND
        assert "missing" in result.message

    def test_custom_name_and_dir(
        self, workspace, skin_build, write_apk, settings
    ) -> None:
        write_apk(skin_build / "outputs" / "apk" / "debug" / "app-debug.apk")
        config = StageConfig(assets_dir="skins", target_apk_name="theme.apk")

        result = stage_subproject(
            workspace, workspace / "app", config, EXPLICIT_TASKS, settings
        )

        assert result.destination == workspace / "app" / "skins" / "theme.apk"

    def test_release_variant(self, workspace, skin_build, write_apk, settings) -> None:
        write_apk(skin_build / "outputs" / "apk" / "debug" / "app-debug.apk", age=5)
        release = write_apk(
            skin_build / "outputs" / "apk" / "release" / "app-release.apk", age=1
        )
        config = StageConfig(variant="release")

        result = stage_subproject(
            workspace, workspace / "app", config, EXPLICIT_TASKS, settings
        )

        assert result.artifact.path == release

    def test_staging_error_propagates(
        self, workspace, skin_build, write_apk, config, settings
    ) -> None:
        write_apk(skin_build / "outputs" / "apk" / "debug" / "app-debug.apk")

        with patch(
            "apkstage.staging.writer.os.replace",
            side_effect=PermissionError("read-only"),
        ):
            with pytest.raises(FilesystemError):
                stage_subproject(
                    workspace, workspace / "app", config, EXPLICIT_TASKS, settings
                )


class TestLocateArtifact:
    """Tests for locate_artifact function."""

    def test_reports_without_writing(
        self, workspace, skin_build, write_apk, config, settings
    ) -> None:
        source = write_apk(
            skin_build / "intermediates" / "apk" / "debug" / "app-debug.apk"
        )

        result = locate_artifact(workspace, config, IMPLICIT_TASKS, settings)

        assert result.intent is BuildIntent.IMPLICIT
        assert result.build_root == skin_build
        assert len(result.roots) == 3
        assert result.artifact.path == source
        assert not _assets(workspace).exists()

    def test_explicit_reports_pending_promotion(
        self, workspace, skin_build, write_apk, config, settings
    ) -> None:
        """Locate agrees with stage but does not copy into outputs."""
        source = write_apk(
            skin_build / "intermediates" / "apk" / "debug" / "app-debug.apk"
        )

        result = locate_artifact(workspace, config, EXPLICIT_TASKS, settings)

        expected = skin_build / "outputs" / "apk" / "debug" / "app-debug.apk"
        assert result.would_materialize == source
        assert result.artifact.path == expected
        assert not (skin_build / "outputs").exists()

        staged = stage_subproject(
            workspace, workspace / "app", config, EXPLICIT_TASKS, settings
        )
        assert staged.artifact.path == result.artifact.path

    def test_canonical_hit_has_no_pending_promotion(
        self, workspace, skin_build, write_apk, config, settings
    ) -> None:
        apk = write_apk(skin_build / "outputs" / "apk" / "debug" / "app-debug.apk")

        result = locate_artifact(workspace, config, EXPLICIT_TASKS, settings)

        assert result.artifact.path == apk
        assert result.would_materialize is None


class TestStagingTarget:
    """Tests for staging_target function."""

    def test_default_target(self, tmp_path: Path) -> None:
        target = staging_target(tmp_path, StageConfig())
        assert target.path == tmp_path / "src" / "main" / "assets" / "skin.apk"
