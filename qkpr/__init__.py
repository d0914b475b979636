#!/usr/bin/env python3

from .main import cli, configure_logging
from .shell import get_subprocess_env, run_command
from .version import __version__

__all__ = [
    "__version__",
    "cli",
    "configure_logging",
    "get_subprocess_env",
    "run_command",
]
