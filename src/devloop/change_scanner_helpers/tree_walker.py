"""Recursive modification-time walk of the watched tree."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import List, Optional

from .exclusion import ExclusionPolicy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WalkOutcome:
    """Result of a single walk: the first entry newer than the bar, if any."""

    changed_path: Optional[str]
    skipped_entries: int

    @property
    def changed(self) -> bool:
        return self.changed_path is not None


def walk_for_change(root: str, since: float, policy: ExclusionPolicy) -> WalkOutcome:
    """
    Walk ``root`` and stop at the first entry modified strictly after ``since``.

    Excluded directories are pruned before their mtime is read, so nothing at or
    below them can report a change. Directory mtimes (the root's included) only
    count while the policy hides no files; otherwise writing an ignored file would
    surface as a change of its parent. Entries that cannot be inspected are counted
    in ``skipped_entries`` and the walk carries on.

    Args:
        root: Absolute directory to walk
        since: Modification-time bar (seconds since the epoch)
        policy: Skip rules for directories and files

    Returns:
        WalkOutcome naming the changed entry (or None) and the skipped count
    """
    skipped = 0
    directory_mtimes_count = not policy.hides_files
    try:
        root_mtime = os.stat(root).st_mtime
    except OSError as exc:
        logger.debug("Cannot stat watch root %s: %s", root, exc)
        return WalkOutcome(changed_path=None, skipped_entries=1)

    if directory_mtimes_count and root_mtime > since:
        return WalkOutcome(changed_path=root, skipped_entries=0)

    pending: List[str] = [root]
    while pending:
        directory = pending.pop()
        try:
            with os.scandir(directory) as entries:
                for entry in entries:
                    try:
                        is_dir = entry.is_dir(follow_symlinks=False)
                        if is_dir and policy.excludes_directory(entry.name):
                            continue
                        if not is_dir and policy.excludes_file(entry.name):
                            continue
                        mtime = entry.stat(follow_symlinks=False).st_mtime
                    except OSError as exc:
                        skipped += 1
                        logger.debug("Skipping unreadable entry %s: %s", entry.path, exc)
                        continue

                    if is_dir:
                        pending.append(entry.path)
                        if not directory_mtimes_count:
                            continue
                    if mtime > since:
                        return WalkOutcome(changed_path=entry.path, skipped_entries=skipped)
        except OSError as exc:
            skipped += 1
            logger.debug("Skipping unreadable directory %s: %s", directory, exc)

    return WalkOutcome(changed_path=None, skipped_entries=skipped)
