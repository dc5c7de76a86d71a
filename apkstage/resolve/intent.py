"""Build intent classification.

An invocation is explicit when the user asked for a full assembly (or for
the staging task itself). Anything else, typically an IDE run/deploy action,
is implicit and may only have left intermediate products behind.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from apkstage.types import BuildIntent

logger = logging.getLogger(__name__)

DEFAULT_EXPLICIT_MARKERS = ("assemble", "build")


def classify_intent(
    task_names: Iterable[str],
    stage_task_name: str | None = None,
    markers: Sequence[str] = DEFAULT_EXPLICIT_MARKERS,
) -> BuildIntent:
    """Classify the invocation from its originally requested task names.

    Matching is a case-sensitive substring test so qualified names such as
    ':app:assembleRelease' count.

    Args:
        task_names: Top-level task names requested for this invocation.
        stage_task_name: Name of the staging task; requesting it directly is
            explicit.
        markers: Name fragments that mark a full build.

    Returns:
        BuildIntent.EXPLICIT or BuildIntent.IMPLICIT.
    """
    fragments = [m for m in markers if m]
    if stage_task_name:
        fragments.append(stage_task_name)

    for name in task_names:
        for fragment in fragments:
            if fragment in name:
                logger.debug("Task %s matched %r, explicit build", name, fragment)
                return BuildIntent.EXPLICIT

    return BuildIntent.IMPLICIT


__all__ = ["DEFAULT_EXPLICIT_MARKERS", "classify_intent"]
