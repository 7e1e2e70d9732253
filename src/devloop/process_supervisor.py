"""
Supervision of the single running instance of the program.

All restart and stop requests go through one single-slot queue that a single
control loop consumes. Only that loop touches the process handle, and it
handles each request to completion (including waiting for the old instance
to exit) before reading the next one. So two instances never overlap and a
new instance's output never interleaves with the old one's last lines.
"""

from __future__ import annotations

import asyncio
import logging
import signal
from enum import Enum
from pathlib import Path
from typing import Any, Awaitable, List, Optional, Sequence, Union

import psutil

from .process_supervisor_helpers import Launcher, launch_instance, terminate_instance

logger = logging.getLogger(__name__)


class RestartSignal(Enum):
    """Request handled by the control loop."""

    RESTART = "restart"
    STOP_ONLY = "stop_only"

    @property
    def relaunch(self) -> bool:
        return self is RestartSignal.RESTART


class SupervisorState(Enum):
    NO_INSTANCE = "no_instance"
    RUNNING = "running"

    def __str__(self):
        return self.name


class ProcessSupervisor:
    """Owns at most one running instance of the program."""

    def __init__(
        self,
        binary_path: Union[str, Path],
        args: Sequence[str] = (),
        *,
        launcher: Launcher = psutil.Popen,
        graceful_signal: int = signal.SIGINT,
    ):
        self.binary_path = str(binary_path)
        self.args: List[str] = list(args)
        self._launcher = launcher
        self._graceful_signal = graceful_signal
        self._signals: asyncio.Queue[RestartSignal] = asyncio.Queue(maxsize=1)
        self._process: Optional[Any] = None
        self._control_task: Optional[asyncio.Task] = None

    @property
    def state(self) -> SupervisorState:
        if self._process is None:
            return SupervisorState.NO_INSTANCE
        return SupervisorState.RUNNING

    @property
    def process(self) -> Optional[Any]:
        return self._process

    @property
    def cmdline(self) -> List[str]:
        return [self.binary_path, *self.args]

    def is_running(self) -> bool:
        """Check if the control loop is running."""
        return self._control_task is not None and not self._control_task.done()

    async def start(self) -> None:
        """Spawn the control loop."""
        if self._control_task is not None:
            return
        self._control_task = asyncio.create_task(self._control_loop())
        logger.debug("Started process supervisor for %s", self.binary_path)

    async def send(self, restart_signal: RestartSignal) -> None:
        """Queue a request, waiting while the previous one still occupies the slot."""
        if self._control_task is None:
            raise RuntimeError("ProcessSupervisor.start() must be called before send()")
        await self._signals.put(restart_signal)

    async def wait_idle(self) -> None:
        """Block until every queued request has been fully handled."""
        await self._signals.join()

    async def close(self) -> None:
        """Stop the current instance, wait for it, and shut the control loop down.

        When the control loop is already gone (cancelled together with its owner,
        or killed by an unexpected error) the instance is stopped here instead.
        """
        task = self._control_task
        if task is None:
            return
        if not task.done():
            if await self._unless_loop_dies(self._signals.put(RestartSignal.STOP_ONLY), task):
                await self._unless_loop_dies(self.wait_idle(), task)

        if task.done():
            self._report_loop_exit(task)
            if self._process is not None:
                await terminate_instance(self._process, graceful_signal=self._graceful_signal)
                self._process = None
        else:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                logger.debug("Process supervisor control loop stopped")
        self._control_task = None

    async def _unless_loop_dies(self, awaitable: Awaitable[Any], task: asyncio.Task) -> bool:
        """Await ``awaitable``; give up and return False if the control loop exits first."""
        waiter = asyncio.ensure_future(awaitable)
        done, _ = await asyncio.wait({waiter, task}, return_when=asyncio.FIRST_COMPLETED)
        if waiter in done:
            return True
        waiter.cancel()
        return False

    @staticmethod
    def _report_loop_exit(task: asyncio.Task) -> None:
        if task.cancelled():
            logger.warning("Process supervisor control loop was cancelled, stopping instance directly")
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Process supervisor control loop died: %r", exc)

    async def _control_loop(self) -> None:
        while True:
            restart_signal = await self._signals.get()
            try:
                await self._handle(restart_signal)
            except (psutil.Error, OSError, RuntimeError):
                logger.exception("Error handling %s request", restart_signal.value)
            finally:
                self._signals.task_done()

    async def _handle(self, restart_signal: RestartSignal) -> None:
        if self._process is not None:
            await terminate_instance(self._process, graceful_signal=self._graceful_signal)
            self._process = None

        if not restart_signal.relaunch:
            return

        self._process = launch_instance(self.cmdline, launcher=self._launcher)
