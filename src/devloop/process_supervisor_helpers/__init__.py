"""Helpers for launching and terminating the supervised instance."""

from .instance_launcher import Launcher, launch_instance
from .instance_terminator import terminate_instance

__all__ = ["Launcher", "launch_instance", "terminate_instance"]
