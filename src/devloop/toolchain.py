"""
Go toolchain location and build target resolution.

Resolution asks the toolchain itself (``go list -json`` and ``go env -json``)
where a target's sources live, what package it declares, and where
``go install`` will put its binary.
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Any, Dict, Optional

import orjson

from .config import ConfigurationError, env_str
from .exceptions import ResolutionError
from .pipeline_runner_helpers import CommandRunner, run_command

logger = logging.getLogger(__name__)

DEFAULT_GO_COMMAND = "go"


@dataclass(frozen=True)
class Toolchain:
    """The ``go`` command used for every stage and for resolution."""

    go_command: str = DEFAULT_GO_COMMAND

    @classmethod
    def from_root(cls, root: Optional[str]) -> "Toolchain":
        """Locate ``go`` under an alternate toolchain root, or use the one on PATH.

        Raises:
            ConfigurationError: If ``root/bin/go`` is missing or not executable
        """
        if not root:
            return cls()

        candidate = Path(root).expanduser() / "bin" / _executable_name("go")
        if not candidate.is_file():
            raise ConfigurationError.invalid_value("goroot", root, f"{candidate} does not exist")
        if not os.access(candidate, os.X_OK):
            raise ConfigurationError.invalid_value("goroot", root, f"{candidate} is not executable")
        return cls(go_command=str(candidate))


@dataclass(frozen=True)
class BuildTarget:
    """A resolved import path."""

    import_path: str
    directory: Path
    package_name: str
    binary_path: Path

    @property
    def is_command(self) -> bool:
        return self.package_name == "main"

    @property
    def binary_name(self) -> str:
        return self.binary_path.name


def _executable_name(name: str) -> str:
    if sys.platform == "win32":
        return f"{name}.exe"
    return name


def _parse_json_object(raw: str, *, context: str) -> Dict[str, Any]:
    try:
        payload = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise ResolutionError(f"unparsable output from {context}", context=context) from exc
    if not isinstance(payload, dict):
        raise ResolutionError(f"{context} did not return an object", context=context)
    return payload


async def _describe_package(toolchain: Toolchain, import_path: str, runner: CommandRunner) -> Dict[str, Any]:
    result = await runner([toolchain.go_command, "list", "-json", import_path])
    if not result.succeeded:
        raise ResolutionError(result.output.strip() or f"cannot resolve {import_path}", target=import_path)
    return _parse_json_object(result.output, context="go list")


async def _default_bin_dir(toolchain: Toolchain, runner: CommandRunner) -> Path:
    result = await runner([toolchain.go_command, "env", "-json", "GOPATH"])
    if not result.succeeded:
        raise ResolutionError(result.output.strip() or "go env failed")
    gopath = str(_parse_json_object(result.output, context="go env").get("GOPATH") or "")
    first_entry = gopath.split(os.pathsep)[0] if gopath else ""
    if not first_entry:
        raise ResolutionError("GOPATH is empty; set GOBIN to choose where binaries are installed")
    return Path(first_entry) / "bin"


async def resolve_binary_path(toolchain: Toolchain, import_path: str, *, runner: CommandRunner = run_command) -> Path:
    """Return ``$GOBIN/<base name>`` or ``<GOPATH>/bin/<base name>``."""
    binary_name = _executable_name(PurePosixPath(import_path.rstrip("/")).name)
    gobin = env_str("GOBIN")
    if gobin:
        return Path(gobin).expanduser() / binary_name
    return (await _default_bin_dir(toolchain, runner)) / binary_name


async def resolve_target(toolchain: Toolchain, import_path: str, *, runner: CommandRunner = run_command) -> BuildTarget:
    """
    Resolve an import path into its source directory, package name and binary path.

    Raises:
        ResolutionError: If the toolchain cannot resolve the path, or it names a
            standard library package
    """
    package = await _describe_package(toolchain, import_path, runner)
    if package.get("Goroot") or package.get("Standard"):
        raise ResolutionError(f"{import_path} is a standard library package", target=import_path)

    directory = package.get("Dir")
    if not directory:
        raise ResolutionError(f"go list returned no directory for {import_path}", target=import_path)

    # "." and relative paths only get a usable base name once go list expands them
    resolved_import_path = str(package.get("ImportPath") or import_path)
    target = BuildTarget(
        import_path=import_path,
        directory=Path(directory),
        package_name=str(package.get("Name") or ""),
        binary_path=await resolve_binary_path(toolchain, resolved_import_path, runner=runner),
    )
    logger.debug("resolved %s to %s (package %s)", import_path, target.directory, target.package_name)
    return target
