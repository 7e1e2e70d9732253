"""Toolchain command lines for each pipeline stage."""

from __future__ import annotations

from enum import Enum
from typing import List


class Stage(Enum):
    TEST = "test"
    BUILD = "build"
    INSTALL = "install"

    def __str__(self):
        return self.value

    @property
    def verbose(self) -> bool:
        # install must stay silent on success, so it never gets -v
        return self is not Stage.INSTALL


def build_stage_command(go_command: str, stage: Stage, import_path: str, *, race: bool = False) -> List[str]:
    """Return ``<go> <verb> [-race] [-v] <import path>``."""
    cmdline = [go_command, stage.value]
    if race:
        cmdline.append("-race")
    if stage.verbose:
        cmdline.append("-v")
    cmdline.append(import_path)
    return cmdline
