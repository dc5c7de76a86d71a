"""Staging service module.

This module provides the high-level staging API:
- stage_subproject(): Main entry point - resolve and stage one artifact
- locate_artifact(): Read-only check of what would be staged

Each call re-derives the build intent and re-walks the build tree; no state
is kept between invocations.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from apkstage.config import get_settings
from apkstage.errors import ProjectNotFoundError
from apkstage.projects.service import build_root, find_project
from apkstage.resolve.intent import classify_intent
from apkstage.resolve.prioritizer import prioritize
from apkstage.resolve.resolver import resolve
from apkstage.resolve.walker import WalkOptions
from apkstage.staging.writer import stage_artifact
from apkstage.types import (
    ArtifactFilter,
    BuildIntent,
    CandidateRoot,
    ResolvedArtifact,
    StageResult,
    StageStatus,
    StagingTarget,
)

if TYPE_CHECKING:
    from apkstage.config import Settings
    from apkstage.projects.schema import StageConfig

logger = logging.getLogger(__name__)


@dataclass
class LocateResult:
    """What a staging invocation would pick, without writing anything."""

    intent: BuildIntent
    build_root: Path
    roots: list[CandidateRoot] = field(default_factory=list)
    artifact: ResolvedArtifact | None = None
    would_materialize: Path | None = None


def staging_target(parent_dir: Path, config: StageConfig) -> StagingTarget:
    """Return the destination for a parent project's staged copy."""
    return StagingTarget(
        directory=parent_dir / config.assets_dir,
        file_name=config.target_apk_name,
    )


def artifact_filter(config: StageConfig, settings: Settings) -> ArtifactFilter:
    """Build the inclusion filter for a staging config."""
    return ArtifactFilter(
        variant=config.variant,
        extension=settings.artifact_extension,
    )


def walk_options(settings: Settings) -> WalkOptions:
    """Build walk limits from settings."""
    return WalkOptions(
        max_depth=settings.max_walk_depth,
        follow_symlinks=settings.follow_symlinks,
    )


def _classify(
    config: StageConfig, task_names: Sequence[str], settings: Settings
) -> BuildIntent:
    intent = classify_intent(
        task_names,
        stage_task_name=config.stage_task_name,
        markers=settings.explicit_task_markers,
    )
    if intent is BuildIntent.EXPLICIT:
        logger.info("Explicit build detected, searching outputs only")
    else:
        logger.info("Non-explicit build detected, allowing fallback to intermediates")
    return intent


def locate_artifact(
    workspace_root: Path,
    config: StageConfig,
    task_names: Sequence[str] = (),
    settings: Settings | None = None,
) -> LocateResult:
    """Resolve the artifact a staging run would use, without writing.

    For an explicit build that would promote an intermediate artifact, the
    returned artifact path is the would-be canonical copy and
    ``would_materialize`` is its intermediate source.

    Raises:
        ProjectNotFoundError: If the sub-project does not exist.
    """
    if settings is None:
        settings = get_settings()

    project_dir = find_project(workspace_root, config.sub_project)
    root = build_root(project_dir, config.build_dir_name)
    intent = _classify(config, task_names, settings)
    roots = prioritize(root, intent)
    artifact = resolve(
        roots,
        intent,
        root,
        artifact_filter(config, settings),
        options=walk_options(settings),
        materialize=False,
    )
    return LocateResult(
        intent=intent,
        build_root=root,
        roots=roots,
        artifact=artifact,
        would_materialize=artifact.materialized_from if artifact else None,
    )


def stage_subproject(
    workspace_root: Path,
    parent_dir: Path,
    config: StageConfig,
    task_names: Sequence[str] = (),
    settings: Settings | None = None,
) -> StageResult:
    """Resolve the sub-project's freshest artifact and stage it.

    Args:
        workspace_root: Root directory of the multi-project build.
        parent_dir: Directory of the parent project receiving the copy.
        config: Staging configuration.
        task_names: Top-level task names requested for this invocation.
        settings: Optional settings; uses environment defaults if not given.

    Returns:
        StageResult. A missing sub-project or artifact is reported in the
        status, not raised.

    Raises:
        FilesystemError: If materialization or the staging copy fails.
    """
    if settings is None:
        settings = get_settings()

    try:
        project_dir = find_project(workspace_root, config.sub_project)
    except ProjectNotFoundError as e:
        logger.warning("%s, skipping staging", e)
        return StageResult(status=StageStatus.PROJECT_NOT_FOUND, message=str(e))

    root = build_root(project_dir, config.build_dir_name)
    intent = _classify(config, task_names, settings)
    roots = prioritize(root, intent)

    artifact = resolve(
        roots,
        intent,
        root,
        artifact_filter(config, settings),
        options=walk_options(settings),
    )

    if artifact is None:
        message = f"No {config.variant} artifact found under {root}"
        logger.warning("No %s artifact found under %s", config.variant, root)
        return StageResult(
            status=StageStatus.ARTIFACT_NOT_FOUND,
            message=message,
            intent=intent,
            searched=roots,
        )

    logger.info("Found artifact: %s", artifact.path)
    dest = stage_artifact(artifact.path, staging_target(parent_dir, config))
    return StageResult(
        status=StageStatus.STAGED,
        message=f"Staged {artifact.path.name} as {dest}",
        intent=intent,
        artifact=artifact,
        destination=dest,
        searched=roots,
    )


__all__ = [
    "LocateResult",
    "artifact_filter",
    "locate_artifact",
    "stage_subproject",
    "staging_target",
    "walk_options",
]
