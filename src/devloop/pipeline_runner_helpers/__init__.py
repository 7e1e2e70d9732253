"""Helpers for running pipeline stage commands."""

from .command_runner import CommandResult, CommandRunner, run_command
from .stage_commands import Stage, build_stage_command

__all__ = [
    "CommandResult",
    "CommandRunner",
    "Stage",
    "build_stage_command",
    "run_command",
]
