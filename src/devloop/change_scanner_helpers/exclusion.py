"""Skip rules applied while walking the watched tree."""

from __future__ import annotations

from dataclasses import dataclass
from fnmatch import fnmatch

VCS_DIRECTORY_NAMES = frozenset({".git", ".hg", ".svn"})


@dataclass(frozen=True)
class ExclusionPolicy:
    """Decides which directory entries the scanner ignores.

    Attributes:
        skip_vcs: Prune version-control metadata directories (``.git`` and friends).
        ignore_pattern: Glob matched against entry base names; empty disables it.
    """

    skip_vcs: bool = True
    ignore_pattern: str = ""

    def excludes_directory(self, name: str) -> bool:
        """Return True when the directory and everything below it must be pruned."""
        if self.skip_vcs and name in VCS_DIRECTORY_NAMES:
            return True
        return self._matches_pattern(name)

    def excludes_file(self, name: str) -> bool:
        return self._matches_pattern(name)

    @property
    def hides_files(self) -> bool:
        """True when some plain files are invisible to the walk.

        Creating or deleting a hidden file still bumps its parent directory's mtime,
        so directory mtimes stop being evidence of a change under this policy.
        """
        return bool(self.ignore_pattern)

    def describe(self) -> str:
        parts = []
        if self.skip_vcs:
            parts.append("version-control directories")
        if self.ignore_pattern:
            parts.append(f"entries matching {self.ignore_pattern!r}")
        if not parts:
            return "nothing"
        return " and ".join(parts)

    def _matches_pattern(self, name: str) -> bool:
        if not self.ignore_pattern:
            return False
        return fnmatch(name, self.ignore_pattern)
