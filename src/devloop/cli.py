"""Command line entry point.

Usage:
    devloop [--test] [--build] [--no-run] [--race] [--ignore GLOB] [--no-skip-vcs]
            [--watch DIR] [--goroot DIR] [--verbose] <import path> [arg]*
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .config import ConfigurationError
from .coordinator import Coordinator
from .exceptions import ResolutionError
from .logging_config import setup_logging
from .pipeline_runner import PipelineConfig
from .run_config import RunConfig
from .toolchain import Toolchain, resolve_target

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="devloop",
        description="Rebuild and restart a Go program whenever its sources change.",
    )
    parser.add_argument("--test", dest="run_tests", action="store_true", help="Run tests (before running program)")
    parser.add_argument("--build", dest="build_binary", action="store_true", help="Build program")
    parser.add_argument("--no-run", dest="never_run", action="store_true", help="Do not run")
    parser.add_argument("--race", action="store_true", help="Run program and tests with the race detector")
    parser.add_argument("--ignore", dest="ignore_pattern", default="", metavar="GLOB", help="Glob of file and directory names to ignore")
    parser.add_argument(
        "--no-skip-vcs",
        dest="skip_vcs",
        action="store_false",
        help="Also watch version-control directories such as .git",
    )
    parser.add_argument("--watch", dest="watch_root", default="", metavar="DIR", help="Watch this directory instead of the package sources")
    parser.add_argument("--goroot", default="", metavar="DIR", help="Alternate toolchain root; its bin/go is used for every command")
    parser.add_argument("--verbose", action="store_true", help="Show log levels and logger names")
    parser.add_argument("import_path", nargs="?", help="Import path of the program to run")
    parser.add_argument("args", nargs=argparse.REMAINDER, help="Arguments passed to the program")
    return parser


USAGE = build_parser().format_usage().strip()


def build_run_config(options: argparse.Namespace) -> RunConfig:
    """Turn parsed options into the immutable RunConfig.

    Raises:
        ConfigurationError: If the alternate toolchain root is invalid
    """
    pipeline = PipelineConfig(
        run_tests=options.run_tests,
        build_binary=options.build_binary,
        race=options.race,
        toolchain=Toolchain.from_root(options.goroot),
    )
    return RunConfig(
        import_path=options.import_path,
        args=tuple(options.args),
        pipeline=pipeline,
        never_run=options.never_run,
        ignore_pattern=options.ignore_pattern,
        skip_vcs=options.skip_vcs,
        watch_root=Path(options.watch_root) if options.watch_root else None,
        poll_interval_seconds=RunConfig.poll_interval_from_env(),
    )


async def run(config: RunConfig) -> None:
    target = await resolve_target(config.pipeline.toolchain, config.import_path)
    await Coordinator(config, target).run()


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    options = parser.parse_args(list(argv) if argv is not None else None)

    if not options.import_path:
        print(USAGE)
        return 1

    try:
        setup_logging(verbose=options.verbose)
        config = build_run_config(options)
    except ConfigurationError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 1

    if config.ignore_pattern:
        logger.info("ignoring entries matching %r", config.ignore_pattern)

    try:
        asyncio.run(run(config))
    except ResolutionError as exc:
        logger.error("error: %s", exc)
        return 1
    except KeyboardInterrupt:
        logger.info("interrupted, stopping")
    return 0


if __name__ == "__main__":
    sys.exit(main())
