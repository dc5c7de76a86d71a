"""Multi-tier artifact resolution.

Search order for one invocation:

1. Explicit build, canonical root missing: promote the newest intermediate
   match into the canonical tree and use the copy.
2. Walk the prioritized roots; the first root with a match wins, and within
   a root the newest match wins.
3. Explicit build, nothing found: promote from the intermediate tree as in
   step 1 (covers a canonical root that exists but holds no match).
4. Otherwise nothing is found.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from apkstage.resolve.prioritizer import (
    canonical_artifact_dir,
    intermediate_artifact_dir,
)
from apkstage.resolve.walker import WalkOptions, find_newest
from apkstage.staging.writer import materialize_artifact
from apkstage.types import (
    ArtifactFilter,
    BuildIntent,
    CandidateRoot,
    ResolvedArtifact,
)

logger = logging.getLogger(__name__)


def _first_canonical(roots: Sequence[CandidateRoot]) -> CandidateRoot | None:
    canonical = [r for r in roots if r.is_canonical]
    return min(canonical, key=lambda r: r.rank) if canonical else None


def promotion_dir(build_root: Path, variant: str) -> Path:
    """Return the canonical directory an intermediate artifact is promoted into.

    The toolchain names variant directories in lowercase.
    """
    return canonical_artifact_dir(build_root) / variant.lower()


def _promote_from_intermediates(
    build_root: Path,
    flt: ArtifactFilter,
    options: WalkOptions | None,
    dry_run: bool = False,
) -> ResolvedArtifact | None:
    """Copy the newest intermediate match into outputs/apk/<variant>/.

    With ``dry_run`` nothing is copied; the result points at the path the
    copy would have.
    """
    source = find_newest(
        intermediate_artifact_dir(build_root),
        flt,
        canonical=False,
        base=build_root,
        options=options,
    )
    if source is None:
        return None

    dest_dir = promotion_dir(build_root, flt.variant)
    if dry_run:
        logger.debug("Would materialize %s -> %s", source.path, dest_dir)
        copy = dest_dir / source.path.name
    else:
        copy = materialize_artifact(source.path, dest_dir)
    # copy2 keeps the source mtime
    return ResolvedArtifact(
        path=copy,
        mtime_ns=source.mtime_ns,
        materialized_from=source.path,
    )


def resolve(
    candidate_roots: Sequence[CandidateRoot],
    intent: BuildIntent,
    build_root: Path,
    flt: ArtifactFilter,
    *,
    options: WalkOptions | None = None,
    materialize: bool = True,
) -> ResolvedArtifact | None:
    """Find the single artifact to stage for this invocation.

    Args:
        candidate_roots: Roots from prioritize(), searched by rank.
        intent: Build intent of this invocation.
        build_root: Build directory of the producing sub-project.
        flt: Inclusion filter.
        options: Walk limits.
        materialize: If False, never write into the canonical tree. An
            explicit build still reports the intermediate artifact it would
            promote; the returned path is where the copy would be written.

    Returns:
        The resolved artifact, or None if nothing matched.

    Raises:
        FilesystemError: If a materialization copy fails.
    """
    promote = intent is BuildIntent.EXPLICIT
    dry_run = not materialize
    promotion_tried = False

    top = _first_canonical(candidate_roots)
    if promote and top is not None and not top.path.exists():
        logger.debug("Canonical root %s missing, trying intermediates", top.path)
        promotion_tried = True
        resolved = _promote_from_intermediates(build_root, flt, options, dry_run)
        if resolved is not None:
            return resolved

    for root in sorted(candidate_roots, key=lambda r: r.rank):
        if not root.path.exists():
            continue
        found = find_newest(
            root.path,
            flt,
            canonical=root.is_canonical,
            base=build_root,
            options=options,
        )
        if found is not None:
            logger.debug("Found %s in %s (rank %d)", found.path, root.path, root.rank)
            return ResolvedArtifact(path=found.path, mtime_ns=found.mtime_ns, root=root)

    if promote and not promotion_tried:
        logger.debug("No canonical match, trying intermediates")
        return _promote_from_intermediates(build_root, flt, options, dry_run)

    return None


__all__ = ["promotion_dir", "resolve"]
