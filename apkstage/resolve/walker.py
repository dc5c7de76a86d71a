"""Bounded walk of a candidate root.

Walks never descend into scratch directories ('generated', 'tmp'), and a
walk of a canonical root never descends into a nested 'intermediates'
directory, so a canonical search cannot fall through into intermediate
content. Directory symlinks are not followed unless asked, and descent is
capped at a maximum depth.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from apkstage.resolve.prioritizer import INTERMEDIATES_DIR
from apkstage.types import ArtifactCandidate, ArtifactFilter

logger = logging.getLogger(__name__)

SCRATCH_DIR_NAMES = frozenset({"generated", "tmp"})


@dataclass(frozen=True)
class WalkOptions:
    """Limits applied to every walk."""

    max_depth: int = 16
    follow_symlinks: bool = False


def should_descend(dir_name: str, canonical: bool) -> bool:
    """Decide whether a walk enters a subdirectory.

    Args:
        dir_name: Name of the subdirectory.
        canonical: Whether the walk started at a canonical root.
    """
    if dir_name in SCRATCH_DIR_NAMES:
        return False
    if canonical and dir_name == INTERMEDIATES_DIR:
        return False
    return True


def _relative_dirs(path: Path, base: Path | None) -> tuple[str, ...]:
    parent = path.parent
    if base is not None:
        try:
            return parent.relative_to(base).parts
        except ValueError:
            pass
    return parent.parts


def matches(path: Path, flt: ArtifactFilter, base: Path | None = None) -> bool:
    """Apply the inclusion filter to a file name and location.

    The variant marker may appear in the file name or as one of the
    directories between ``base`` and the file. Only the name and location
    are checked here; callers check the file is regular.

    Args:
        path: Candidate file.
        flt: Inclusion filter.
        base: Directory the containing path is measured from (the build root).
    """
    name = path.name
    lower_name = name.lower()
    if not name.endswith(flt.extension):
        return False
    if flt.excluded_marker and flt.excluded_marker.lower() in lower_name:
        return False

    variant = flt.variant.lower()
    if variant in lower_name:
        return True
    return any(part.lower() == variant for part in _relative_dirs(path, base))


def iter_matches(
    root_dir: Path,
    flt: ArtifactFilter,
    *,
    canonical: bool,
    base: Path | None = None,
    options: WalkOptions | None = None,
) -> Iterator[ArtifactCandidate]:
    """Yield every matching regular file below ``root_dir``.

    A missing root yields nothing. Unreadable directories and files that
    vanish mid-walk are logged and skipped.
    """
    if options is None:
        options = WalkOptions()
    if not root_dir.is_dir():
        logger.debug("Search root does not exist: %s", root_dir)
        return

    def _on_error(error: OSError) -> None:
        logger.warning("Skipping unreadable directory %s: %s", error.filename, error)

    for dirpath, dirnames, filenames in os.walk(
        root_dir, onerror=_on_error, followlinks=options.follow_symlinks
    ):
        current = Path(dirpath)
        depth = len(current.relative_to(root_dir).parts)

        if depth >= options.max_depth:
            if dirnames:
                logger.debug("Depth limit reached at %s", current)
            dirnames[:] = []
        else:
            dirnames[:] = sorted(d for d in dirnames if should_descend(d, canonical))

        for filename in sorted(filenames):
            path = current / filename
            if not matches(path, flt, base):
                continue
            if path.is_symlink() and not options.follow_symlinks:
                continue
            try:
                st = path.stat()
            except OSError as e:
                logger.debug("Skipping %s: %s", path, e)
                continue
            if not path.is_file():
                continue
            yield ArtifactCandidate(path=path, mtime_ns=st.st_mtime_ns)


def find_newest(
    root_dir: Path,
    flt: ArtifactFilter,
    *,
    canonical: bool,
    base: Path | None = None,
    options: WalkOptions | None = None,
) -> ArtifactCandidate | None:
    """Return the most recently modified match below ``root_dir``.

    Equal timestamps are broken by path so repeated runs pick the same file.
    """
    newest: ArtifactCandidate | None = None
    for candidate in iter_matches(
        root_dir, flt, canonical=canonical, base=base, options=options
    ):
        if newest is None or (candidate.mtime_ns, str(candidate.path)) > (
            newest.mtime_ns,
            str(newest.path),
        ):
            newest = candidate
    return newest


__all__ = [
    "SCRATCH_DIR_NAMES",
    "WalkOptions",
    "find_newest",
    "iter_matches",
    "matches",
    "should_descend",
]
