"""Tests for resolve/prioritizer.py module."""

from pathlib import Path

from apkstage.resolve.prioritizer import (
    canonical_artifact_dir,
    intermediate_artifact_dir,
    prioritize,
)
from apkstage.types import BuildIntent, RootKind

BUILD = Path("/work/app_skin/build")


class TestPrioritize:
    """Tests for prioritize function."""

    def test_explicit_searches_outputs_only(self) -> None:
        roots = prioritize(BUILD, BuildIntent.EXPLICIT)

        assert [r.path for r in roots] == [
            BUILD / "outputs" / "apk",
            BUILD / "outputs",
        ]
        assert all(r.kind is RootKind.CANONICAL for r in roots)

    def test_implicit_appends_intermediates(self) -> None:
        roots = prioritize(BUILD, BuildIntent.IMPLICIT)

        assert [r.path for r in roots] == [
            BUILD / "outputs" / "apk",
            BUILD / "outputs",
            BUILD / "intermediates" / "apk",
        ]
        assert roots[-1].kind is RootKind.INTERMEDIATE

    def test_ranks_ascending(self) -> None:
        roots = prioritize(BUILD, BuildIntent.IMPLICIT)
        assert [r.rank for r in roots] == [0, 1, 2]

    def test_pure(self, tmp_path: Path) -> None:
        """Prioritizing does not touch the filesystem."""
        prioritize(tmp_path / "build", BuildIntent.IMPLICIT)
        assert not (tmp_path / "build").exists()

    def test_dir_helpers(self) -> None:
        assert canonical_artifact_dir(BUILD) == BUILD / "outputs" / "apk"
        assert intermediate_artifact_dir(BUILD) == BUILD / "intermediates" / "apk"
