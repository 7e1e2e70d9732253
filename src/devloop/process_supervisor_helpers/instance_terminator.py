"""Stop the supervised program: interrupt, escalate to kill, always reap."""

import asyncio
import logging
import signal
from typing import Any, Optional

import psutil

logger = logging.getLogger(__name__)

# Failures that mean the interrupt never reached the process
_SIGNAL_DELIVERY_ERRORS = (psutil.Error, OSError, ValueError)


async def terminate_instance(proc: Any, *, graceful_signal: int = signal.SIGINT) -> Optional[int]:
    """
    Ask ``proc`` to exit and block until it has.

    The interrupt is sent first. If it cannot be delivered (the process is
    already gone, or the platform rejects the signal) the process is killed
    outright. The wait happens in every case so no zombie is left behind.

    Args:
        proc: psutil.Popen handle of the running instance
        graceful_signal: Signal used for the graceful request

    Returns:
        Exit status reported by the wait
    """
    pid = proc.pid
    try:
        proc.send_signal(graceful_signal)
    except _SIGNAL_DELIVERY_ERRORS as exc:
        logger.warning("error on sending signal to process %s: '%s', will now hard-kill the process", pid, exc)
        _force_kill(proc)

    try:
        status = await asyncio.to_thread(proc.wait)
    except psutil.NoSuchProcess:
        logger.debug("process %s was already reaped", pid)
        return None
    logger.debug("process %s exited with status %s", pid, status)
    return status


def _force_kill(proc: Any) -> None:
    try:
        proc.kill()
    except psutil.NoSuchProcess:
        logger.debug("process %s no longer exists", proc.pid)
    except (psutil.Error, OSError) as exc:
        logger.error("could not kill process %s: %s", proc.pid, exc)
