"""Helpers for the polling change scanner."""

from .exclusion import VCS_DIRECTORY_NAMES, ExclusionPolicy
from .tree_walker import WalkOutcome, walk_for_change

__all__ = [
    "VCS_DIRECTORY_NAMES",
    "ExclusionPolicy",
    "WalkOutcome",
    "walk_for_change",
]
