"""Root pytest configuration and shared fixtures."""

from __future__ import annotations

import logging
import os
from typing import Any, List, Optional, Sequence, Tuple

import pytest

from devloop.config import reset_default_values
from devloop.pipeline_runner_helpers import CommandResult


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep .env files and devloop variables from the host out of every test."""
    for name in list(os.environ):
        if name.startswith("DEVLOOP_") or name == "GOBIN":
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("devloop.config.runtime._DOTENV_CANDIDATES", ())
    reset_default_values()
    yield
    reset_default_values()


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Drop handlers installed by setup_logging so tests do not leak them."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers and type(handler).__module__.startswith("logging"):
            handler.close()
            root.removeHandler(handler)
    root.setLevel(level)


class FakeProcess:
    """Stand-in for a psutil.Popen handle that records every call."""

    def __init__(self, pid: int, cmdline: Sequence[str], events: List[Tuple[Any, ...]], *, signal_error: Optional[BaseException] = None):
        self.pid = pid
        self.cmdline = list(cmdline)
        self.events = events
        self.signal_error = signal_error
        self.alive = True
        self.signals: List[int] = []
        self.kill_called = False

    def send_signal(self, sig: int) -> None:
        self.events.append(("signal", self.pid, sig))
        if self.signal_error is not None:
            raise self.signal_error
        self.signals.append(sig)

    def kill(self) -> None:
        self.events.append(("kill", self.pid))
        self.kill_called = True

    def wait(self) -> int:
        self.events.append(("wait", self.pid))
        self.alive = False
        return 0


class FakeLauncher:
    """Callable matching psutil.Popen(cmdline) that hands out FakeProcess objects."""

    def __init__(self):
        self.events: List[Tuple[Any, ...]] = []
        self.processes: List[FakeProcess] = []
        self.max_alive = 0
        self.fail_with: Optional[BaseException] = None
        self.signal_error: Optional[BaseException] = None

    def __call__(self, cmdline: Sequence[str]) -> FakeProcess:
        if self.fail_with is not None:
            self.events.append(("launch_failed", tuple(cmdline)))
            raise self.fail_with
        proc = FakeProcess(1000 + len(self.processes), cmdline, self.events, signal_error=self.signal_error)
        self.processes.append(proc)
        self.events.append(("launch", proc.pid))
        self.max_alive = max(self.max_alive, len(self.alive_processes))
        return proc

    @property
    def alive_processes(self) -> List[FakeProcess]:
        return [proc for proc in self.processes if proc.alive]


@pytest.fixture
def fake_launcher() -> FakeLauncher:
    return FakeLauncher()


class ScriptedCommandRunner:
    """Async command runner returning canned results keyed by toolchain verb."""

    def __init__(self, results: Optional[dict] = None):
        self.results = dict(results or {})
        self.calls: List[List[str]] = []

    async def __call__(self, argv: Sequence[str]) -> CommandResult:
        self.calls.append(list(argv))
        return self.results.get(argv[1], CommandResult(returncode=0, output=""))

    @property
    def verbs(self) -> List[str]:
        return [call[1] for call in self.calls]


@pytest.fixture
def command_runner() -> ScriptedCommandRunner:
    return ScriptedCommandRunner()
