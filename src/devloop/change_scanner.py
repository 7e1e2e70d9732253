"""
Polling change detection for the watched source tree.

Every cycle walks the whole tree (no persistent file index), so cost grows with
the size of the tree. That is fine for developer source trees and is the
documented scalability bound of this scanner.

Usage:
    scanner = ChangeScanner(WatchTarget.for_directory("/src/app"))
    async for event in scanner.changes():
        ...
"""

from __future__ import annotations

import asyncio
import logging
import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import AsyncIterator, Awaitable, Callable, Optional, Union

from .change_scanner_helpers import ExclusionPolicy, walk_for_change
from .exceptions import ResolutionError

logger = logging.getLogger(__name__)

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]

DEFAULT_POLL_INTERVAL_SECONDS = 0.5


@dataclass(frozen=True)
class WatchTarget:
    """Absolute root directory plus the exclusion policy applied below it."""

    path: Path
    exclusion: ExclusionPolicy = field(default_factory=ExclusionPolicy)

    @classmethod
    def for_directory(
        cls,
        directory: Union[str, Path],
        *,
        ignore_pattern: str = "",
        skip_vcs: bool = True,
    ) -> "WatchTarget":
        return cls(
            path=Path(directory).expanduser().absolute(),
            exclusion=ExclusionPolicy(skip_vcs=skip_vcs, ignore_pattern=ignore_pattern),
        )


@dataclass(frozen=True)
class ScanResult:
    """Outcome of one scan pass."""

    changed: bool
    skipped_entries: int
    detected_at: float
    changed_path: Optional[str] = None


@dataclass(frozen=True)
class ChangeEvent:
    """One detected batch of modifications."""

    path: str
    detected_at: float


class ChangeScanner:
    """Detects modifications under a WatchTarget by polling mtimes."""

    def __init__(
        self,
        target: WatchTarget,
        *,
        interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
        clock: Clock = time.time,
        sleep: Sleep = asyncio.sleep,
    ):
        self.target = target
        self.interval_seconds = interval_seconds
        self._clock = clock
        self._sleep = sleep
        self._last_observed = clock()

    @property
    def last_observed(self) -> float:
        """Modification-time bar used by the next poll."""
        return self._last_observed

    def validate_root(self) -> None:
        """Raise ResolutionError when the root directory cannot be listed."""
        root = str(self.target.path)
        try:
            with os.scandir(root):
                pass
        except OSError as exc:
            raise ResolutionError.unreadable_root(root, exc.strerror or str(exc)) from exc

    def scan(self, since: float) -> ScanResult:
        """Walk the tree once and report whether anything is newer than ``since``."""
        outcome = walk_for_change(str(self.target.path), since, self.target.exclusion)
        if outcome.skipped_entries:
            logger.debug("Scan skipped %d unreadable entries", outcome.skipped_entries)
        return ScanResult(
            changed=outcome.changed,
            skipped_entries=outcome.skipped_entries,
            detected_at=self._clock(),
            changed_path=outcome.changed_path,
        )

    def poll(self) -> ScanResult:
        """Scan against the last observation and move the bar to the detection time."""
        result = self.scan(self._last_observed)
        if result.changed:
            self._last_observed = result.detected_at
        return result

    def reset(self) -> None:
        self._last_observed = self._clock()

    async def changes(self) -> AsyncIterator[ChangeEvent]:
        """Yield one ChangeEvent per poll cycle that saw a modification, forever.

        The bar starts at the moment iteration begins, so work done before
        watching (the initial build) is not reported as a change.
        """
        self.reset()
        logger.info("watching %s (ignoring %s)", self.target.path, self.target.exclusion.describe())
        while True:
            result = await asyncio.to_thread(self.poll)
            if result.changed and result.changed_path is not None:
                logger.debug("change detected at %s", result.changed_path)
                yield ChangeEvent(path=result.changed_path, detected_at=result.detected_at)
            await self._sleep(self.interval_seconds)
