"""Artifact resolution engine.

This module handles:
- Classifying build intent from the requested task names
- Ordering candidate search roots by confidence
- Walking build trees with pruning and the inclusion filter
- Multi-tier resolution with materialization into the canonical tree
"""

from apkstage.resolve.intent import classify_intent
from apkstage.resolve.prioritizer import prioritize
from apkstage.resolve.resolver import resolve

__all__ = ["classify_intent", "prioritize", "resolve"]
