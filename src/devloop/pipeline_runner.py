"""
Build pipeline: optional test, optional build, then install.

Stages run one at a time and the first failure stops the pipeline. Install is
held to a stricter rule than the other stages: a clean ``go install`` prints
nothing, so any output at all counts as a failure even with a zero exit
status. That convention is kept for compatibility; it is a quirk of the
toolchain contract rather than a general error-detection rule.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .pipeline_runner_helpers import (
    CommandResult,
    CommandRunner,
    Stage,
    build_stage_command,
    run_command,
)
from .toolchain import Toolchain

logger = logging.getLogger(__name__)

ConsoleOutput = Callable[[str], None]


def _write_stdout(text: str) -> None:
    sys.stdout.write(text if text.endswith("\n") else text + "\n")
    sys.stdout.flush()


@dataclass(frozen=True)
class PipelineConfig:
    """Which stages run and the flags applied to every stage."""

    run_tests: bool = False
    build_binary: bool = False
    race: bool = False
    toolchain: Toolchain = field(default_factory=Toolchain)

    def enabled_stages(self) -> List[Stage]:
        stages = []
        if self.run_tests:
            stages.append(Stage.TEST)
        if self.build_binary:
            stages.append(Stage.BUILD)
        stages.append(Stage.INSTALL)
        return stages


@dataclass(frozen=True)
class PipelineResult:
    """Passed, or Failed(stage, output)."""

    stage: Optional[Stage] = None
    output: str = ""

    @property
    def passed(self) -> bool:
        return self.stage is None

    @classmethod
    def success(cls) -> "PipelineResult":
        return cls()

    @classmethod
    def failure(cls, stage: Stage, output: str) -> "PipelineResult":
        return cls(stage=stage, output=output)

    def __str__(self):
        if self.passed:
            return "Passed"
        return f"Failed({self.stage})"


class PipelineRunner:
    """Runs the enabled stages in order and remembers the last failure output."""

    def __init__(
        self,
        *,
        command_runner: CommandRunner = run_command,
        console_output_func: ConsoleOutput = _write_stdout,
    ):
        self._command_runner = command_runner
        self._console = console_output_func
        self._last_failure_output: Optional[str] = None

    @property
    def last_failure_output(self) -> Optional[str]:
        return self._last_failure_output

    async def run(self, config: PipelineConfig, build_path: str) -> PipelineResult:
        """
        Execute the pipeline for ``build_path``.

        Args:
            config: Stage selection and shared flags
            build_path: Import path handed to every stage command

        Returns:
            PipelineResult.success() when every stage passed, otherwise the
            failing stage and its captured output
        """
        for stage in config.enabled_stages():
            argv = build_stage_command(config.toolchain.go_command, stage, build_path, race=config.race)
            result = await self._command_runner(argv)
            if self._stage_failed(stage, result):
                self._report_failure(stage, result.output)
                return PipelineResult.failure(stage, result.output)
            self._report_success(stage)

        self._last_failure_output = None
        return PipelineResult.success()

    @staticmethod
    def _stage_failed(stage: Stage, result: CommandResult) -> bool:
        if not result.succeeded:
            return True
        return stage is Stage.INSTALL and len(result.output) > 0

    def _report_success(self, stage: Stage) -> None:
        if stage is Stage.TEST:
            logger.info("tests passed")
        elif stage is Stage.BUILD:
            logger.info("build successful")
        else:
            logger.info("install successful")

    def _report_failure(self, stage: Stage, output: str) -> None:
        logger.info("%s failed", stage)
        if output == self._last_failure_output:
            logger.debug("%s output unchanged since the previous failure", stage)
        elif output:
            self._console(output)
        self._last_failure_output = output
