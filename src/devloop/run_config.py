"""
Immutable run configuration built once at startup.

Every component receives what it needs from this value explicitly; nothing
reads flags from module-level state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple, Union

from .change_scanner import DEFAULT_POLL_INTERVAL_SECONDS, WatchTarget
from .config import env_seconds
from .pipeline_runner import PipelineConfig

POLL_INTERVAL_ENV = "DEVLOOP_POLL_INTERVAL_SECONDS"


@dataclass(frozen=True)
class RunConfig:
    """
    Everything the development loop needs besides the resolved target.

    Attributes:
        import_path: Target identifier handed to the toolchain
        args: Arguments passed through to the program on every launch
        pipeline: Stage selection and shared stage flags
        never_run: Run the pipeline only; never start the program
        ignore_pattern: Glob of base names excluded from watching
        skip_vcs: Exclude version-control directories from watching
        watch_root: Directory watched instead of the target's source directory
        poll_interval_seconds: Pause between scan passes
    """

    import_path: str
    args: Tuple[str, ...] = ()
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    never_run: bool = False
    ignore_pattern: str = ""
    skip_vcs: bool = True
    watch_root: Optional[Path] = None
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS

    @classmethod
    def poll_interval_from_env(cls) -> float:
        return env_seconds(POLL_INTERVAL_ENV, or_value=DEFAULT_POLL_INTERVAL_SECONDS)

    def watch_target(self, source_directory: Union[str, Path]) -> WatchTarget:
        """WatchTarget for the override directory, or the target's sources."""
        directory = self.watch_root if self.watch_root is not None else source_directory
        return WatchTarget.for_directory(
            directory,
            ignore_pattern=self.ignore_pattern,
            skip_vcs=self.skip_vcs,
        )
