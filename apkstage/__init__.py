"""apkstage - Stage a sub-application's freshest APK into a parent build.

This package resolves the correct build output of a producing sub-project,
optionally promotes it from the intermediate tree into the canonical output
tree, and copies it into the parent project's assets under a fixed name.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
