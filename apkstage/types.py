"""Shared type definitions for apkstage.

This module contains enums and dataclasses shared across subpackages to
avoid circular imports.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from apkstage import errors


class BuildIntent(str, Enum):
    """Why the current invocation is running."""

    EXPLICIT = "explicit"
    IMPLICIT = "implicit"


class RootKind(str, Enum):
    """Which build tree a candidate root belongs to."""

    CANONICAL = "canonical"
    INTERMEDIATE = "intermediate"


class StageStatus(str, Enum):
    """Outcome of a staging invocation."""

    STAGED = "staged"
    ARTIFACT_NOT_FOUND = errors.ARTIFACT_NOT_FOUND
    PROJECT_NOT_FOUND = errors.PROJECT_NOT_FOUND


@dataclass(frozen=True)
class CandidateRoot:
    """A directory to search, ranked by confidence (lower rank first)."""

    path: Path
    rank: int
    kind: RootKind = RootKind.CANONICAL

    @property
    def is_canonical(self) -> bool:
        return self.kind is RootKind.CANONICAL


@dataclass(frozen=True)
class ArtifactCandidate:
    """A matching file found during a walk."""

    path: Path
    mtime_ns: int


@dataclass(frozen=True)
class ArtifactFilter:
    """Inclusion filter applied to every file seen during a walk.

    Attributes:
        variant: Build variant marker (e.g. 'debug'), matched case-insensitively.
        extension: Required file name suffix.
        excluded_marker: Names containing this marker are never selected.
    """

    variant: str
    extension: str = ".apk"
    excluded_marker: str = "unaligned"


@dataclass(frozen=True)
class ResolvedArtifact:
    """The single artifact chosen for an invocation.

    Attributes:
        path: File to stage.
        mtime_ns: Modification time of the file when it was selected.
        root: Candidate root the file was found in, None when materialized.
        materialized_from: Intermediate source file when the artifact was
            promoted into the canonical tree.
    """

    path: Path
    mtime_ns: int
    root: CandidateRoot | None = None
    materialized_from: Path | None = None

    @property
    def materialized(self) -> bool:
        return self.materialized_from is not None


@dataclass(frozen=True)
class StagingTarget:
    """Destination directory and fixed file name of the staged copy."""

    directory: Path
    file_name: str

    @property
    def path(self) -> Path:
        return self.directory / self.file_name


@dataclass
class StageResult:
    """Result of one staging invocation."""

    status: StageStatus
    message: str
    intent: BuildIntent | None = None
    artifact: ResolvedArtifact | None = None
    destination: Path | None = None
    searched: list[CandidateRoot] = field(default_factory=list)

    @property
    def staged(self) -> bool:
        return self.status is StageStatus.STAGED

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "status": self.status.value,
            "message": self.message,
            "intent": self.intent.value if self.intent else None,
            "searched": [
                {"path": str(r.path), "rank": r.rank, "kind": r.kind.value}
                for r in self.searched
            ],
        }
        if self.artifact is not None:
            result["artifact"] = {
                "path": str(self.artifact.path),
                "materialized_from": (
                    str(self.artifact.materialized_from)
                    if self.artifact.materialized_from
                    else None
                ),
            }
        if self.destination is not None:
            result["destination"] = str(self.destination)
        return result


__all__ = [
    "ArtifactCandidate",
    "ArtifactFilter",
    "BuildIntent",
    "CandidateRoot",
    "ResolvedArtifact",
    "RootKind",
    "StageResult",
    "StageStatus",
    "StagingTarget",
]
