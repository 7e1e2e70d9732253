"""Start the supervised program."""

import logging
from typing import Any, Callable, Optional, Sequence

import psutil

logger = logging.getLogger(__name__)

Launcher = Callable[[Sequence[str]], Any]


def launch_instance(cmdline: Sequence[str], *, launcher: Launcher = psutil.Popen) -> Optional[Any]:
    """
    Launch ``cmdline`` with stdout and stderr inherited from this process.

    Args:
        cmdline: Binary path followed by the pass-through arguments
        launcher: Process factory, ``psutil.Popen`` by default

    Returns:
        The process handle, or None when the program could not be started
    """
    logger.info("running %s", " ".join(cmdline))
    try:
        return launcher(list(cmdline))
    except OSError as exc:
        logger.error("error on starting process: '%s'", exc)
        return None
