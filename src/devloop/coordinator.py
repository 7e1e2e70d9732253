"""Drives the watch, rebuild and restart cycle."""

from __future__ import annotations

import logging
from typing import Optional

from .change_scanner import ChangeScanner
from .exceptions import ResolutionError
from .pipeline_runner import PipelineResult, PipelineRunner
from .process_supervisor import ProcessSupervisor, RestartSignal
from .run_config import RunConfig
from .toolchain import BuildTarget

logger = logging.getLogger(__name__)


class Coordinator:
    """Wires ChangeScanner to PipelineRunner to ProcessSupervisor."""

    def __init__(
        self,
        config: RunConfig,
        target: BuildTarget,
        *,
        scanner: Optional[ChangeScanner] = None,
        pipeline: Optional[PipelineRunner] = None,
        supervisor: Optional[ProcessSupervisor] = None,
    ):
        self.config = config
        self.target = target
        self.scanner = scanner or ChangeScanner(
            config.watch_target(target.directory),
            interval_seconds=config.poll_interval_seconds,
        )
        self.pipeline = pipeline or PipelineRunner()
        if config.never_run:
            self.supervisor = None
        else:
            self.supervisor = supervisor or ProcessSupervisor(target.binary_path, config.args)

    async def run(self) -> None:
        """
        Run the initial cycle, then one cycle per detected change, forever.

        Raises:
            ResolutionError: If the target is not an executable package or the
                watch root cannot be walked
        """
        if not self.target.is_command:
            raise ResolutionError.not_a_command(self.target.import_path, self.target.package_name)
        self.scanner.validate_root()

        logger.info("setting up %s %s", self.target.import_path, self.config.args)
        if self.supervisor is not None:
            await self.supervisor.start()
        try:
            await self.run_cycle()
            async for _event in self.scanner.changes():
                await self.run_cycle()
        finally:
            if self.supervisor is not None:
                await self.supervisor.close()

    async def run_cycle(self) -> PipelineResult:
        """Run the pipeline once and restart the program if it passed."""
        result = await self.pipeline.run(self.config.pipeline, self.target.import_path)
        if result.passed and self.supervisor is not None:
            await self.supervisor.send(RestartSignal.RESTART)
        return result
