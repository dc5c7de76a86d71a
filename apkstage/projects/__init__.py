"""Sub-project configuration and lookup.

This module handles:
- The staging config schema (which sub-project, variant and destination)
- Loading staging config from YAML/JSON files
- Resolving a sub-project identifier to its directory
"""

from apkstage.projects.schema import StageConfig

__all__ = ["StageConfig"]
