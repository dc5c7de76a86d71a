"""Staging of resolved artifacts.

This module handles:
- Materializing intermediate artifacts into the canonical output tree
- Copying the resolved artifact to the fixed staging destination
- Running one staging invocation end to end
"""

from apkstage.staging.writer import materialize_artifact, stage_artifact

__all__ = ["materialize_artifact", "stage_artifact"]
