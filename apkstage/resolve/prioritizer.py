"""Candidate search roots, highest confidence first.

Layout of a sub-project build directory::

    build/
      outputs/apk/<variant>/*.apk        canonical, fully assembled
      intermediates/apk/<variant>/*.apk  toolchain-internal, may be partial
"""

from __future__ import annotations

from pathlib import Path

from apkstage.types import BuildIntent, CandidateRoot, RootKind

OUTPUTS_DIR = "outputs"
INTERMEDIATES_DIR = "intermediates"
ARTIFACT_KIND_DIR = "apk"


def canonical_artifact_dir(build_root: Path) -> Path:
    """Return the standard location of a fully assembled artifact."""
    return build_root / OUTPUTS_DIR / ARTIFACT_KIND_DIR


def intermediate_artifact_dir(build_root: Path) -> Path:
    """Return the toolchain-internal location of partial artifacts."""
    return build_root / INTERMEDIATES_DIR / ARTIFACT_KIND_DIR


def prioritize(build_root: Path, intent: BuildIntent) -> list[CandidateRoot]:
    """Order the directories to search for an artifact.

    The intermediate tree is only searched directly for implicit builds.
    Explicit builds instead promote an intermediate artifact into the
    canonical tree (see resolver.resolve).

    Args:
        build_root: Build directory of the producing sub-project.
        intent: Build intent of this invocation.

    Returns:
        Candidate roots ordered by rank.
    """
    roots = [
        CandidateRoot(canonical_artifact_dir(build_root), 0, RootKind.CANONICAL),
        CandidateRoot(build_root / OUTPUTS_DIR, 1, RootKind.CANONICAL),
    ]
    if intent is BuildIntent.IMPLICIT:
        roots.append(
            CandidateRoot(
                intermediate_artifact_dir(build_root), 2, RootKind.INTERMEDIATE
            )
        )
    return roots


__all__ = [
    "ARTIFACT_KIND_DIR",
    "INTERMEDIATES_DIR",
    "OUTPUTS_DIR",
    "canonical_artifact_dir",
    "intermediate_artifact_dir",
    "prioritize",
]
