#!/usr/bin/env python3

import logging
import subprocess
from typing import Optional

from .shell import run_command, run_interactive

__all__ = ["get_staged_diff", "has_staged_changes", "commit_changes"]

log = logging.getLogger(__name__)


async def has_staged_changes(cwd: Optional[str] = None) -> bool:
    """Return True if the index differs from HEAD."""
    try:
        result = await run_command(
            ["git", "diff", "--cached", "--quiet"],
            cwd=cwd,
            check=False,
            capture_output=True,
            text=True,
        )
    except (subprocess.SubprocessError, OSError) as e:
        log.warning(f"Could not check for staged changes: {e}")
        return False
    # --quiet exits 1 when there are differences, >1 on error
    return result.returncode == 1


async def get_staged_diff(cwd: Optional[str] = None) -> str:
    """The staged diff, or "" if git fails."""
    try:
        result = await run_command(
            ["git", "diff", "--cached"],
            cwd=cwd,
            check=True,
            capture_output=True,
            text=True,
        )
    except (RuntimeError, subprocess.SubprocessError, OSError) as e:
        log.warning(f"Could not read staged diff: {e}")
        return ""
    return str(result.stdout)


async def commit_changes(message: str, cwd: Optional[str] = None) -> bool:
    """Commit the staged changes with message, letting git print its output.

    Returns:
        True if git commit succeeded.
    """
    log.debug(f"commit_changes({message!r})")
    try:
        returncode = await run_interactive(["git", "commit", "-m", message], cwd=cwd)
    except OSError as e:
        log.warning(f"Could not run git commit: {e}")
        return False
    if returncode != 0:
        log.warning(f"git commit exited with {returncode}")
        return False
    return True
