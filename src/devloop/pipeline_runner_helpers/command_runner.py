"""Run an external command to completion with merged, captured output."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Sequence

logger = logging.getLogger(__name__)

# Exit status reported when the command could not be started at all
LAUNCH_FAILURE_RETURNCODE = 127


@dataclass(frozen=True)
class CommandResult:
    """Exit status and merged stdout/stderr of a finished command."""

    returncode: int
    output: str

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0


CommandRunner = Callable[[Sequence[str]], Awaitable[CommandResult]]


async def run_command(argv: Sequence[str]) -> CommandResult:
    """
    Run ``argv`` and wait for it, capturing stdout and stderr into one buffer.

    There is no timeout; a hung command blocks the caller until it exits.
    A command that cannot be started yields LAUNCH_FAILURE_RETURNCODE with the
    OS error text as its output.
    """
    logger.debug("running %s", " ".join(argv))
    try:
        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
        )
    except OSError as exc:
        logger.debug("could not start %s: %s", argv[0], exc)
        return CommandResult(returncode=LAUNCH_FAILURE_RETURNCODE, output=f"{argv[0]}: {exc}\n")

    stdout, _ = await proc.communicate()
    output = stdout.decode("utf-8", errors="replace") if stdout else ""
    return CommandResult(returncode=proc.returncode or 0, output=output)
