#!/usr/bin/env python3

import logging
import subprocess
from dataclasses import dataclass
from typing import List, Optional

from .shell import run_command

__all__ = [
    "RepositoryInfo",
    "get_repository_info",
    "get_repository_root",
    "is_git_repository",
    "get_current_branch",
    "get_remote_url",
    "commits_between",
]

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class RepositoryInfo:
    current_branch: str
    remote_url: str
    is_git_repository: bool


async def get_repository_root(cwd: Optional[str] = None) -> str:
    """Get the root directory of the Git repository containing cwd.

    Raises:
        RuntimeError: If git reports that cwd is not inside a work tree
        subprocess.SubprocessError: If the git command times out
        OSError: If git cannot be executed
    """
    result = await run_command(
        ["git", "rev-parse", "--show-toplevel"],
        cwd=cwd,
        check=True,
        capture_output=True,
        text=True,
    )
    return str(result.stdout.strip())


async def is_git_repository(cwd: Optional[str] = None) -> bool:
    """Check if cwd is within a Git repository.

    Returns:
        True if cwd is in a Git repository, False otherwise
    """
    try:
        await get_repository_root(cwd)
        return True
    except (RuntimeError, subprocess.SubprocessError, OSError):
        return False


async def get_current_branch(cwd: Optional[str] = None) -> str:
    """Short name of the checked-out branch, or "" on a detached HEAD."""
    try:
        result = await run_command(
            ["git", "symbolic-ref", "--quiet", "--short", "HEAD"],
            cwd=cwd,
            check=False,
            capture_output=True,
            text=True,
        )
    except (subprocess.SubprocessError, OSError) as e:
        log.warning(f"Could not determine current branch: {e}")
        return ""
    if result.returncode != 0:
        return ""
    return str(result.stdout.strip())


async def get_remote_url(cwd: Optional[str] = None, remote: str = "origin") -> str:
    """URL of the given remote, or "" if it is not configured."""
    try:
        result = await run_command(
            ["git", "config", "--get", f"remote.{remote}.url"],
            cwd=cwd,
            check=False,
            capture_output=True,
            text=True,
        )
    except (subprocess.SubprocessError, OSError) as e:
        log.warning(f"Could not read remote URL: {e}")
        return ""
    if result.returncode != 0:
        return ""
    return str(result.stdout.strip())


async def get_repository_info(cwd: Optional[str] = None) -> RepositoryInfo:
    """Collect the repository state needed by one qkpr invocation."""
    if not await is_git_repository(cwd):
        return RepositoryInfo(current_branch="", remote_url="", is_git_repository=False)

    return RepositoryInfo(
        current_branch=await get_current_branch(cwd),
        remote_url=await get_remote_url(cwd),
        is_git_repository=True,
    )


async def commits_between(
    target_branch: str, source_branch: str, cwd: Optional[str] = None
) -> List[str]:
    """Subjects of commits in source_branch but not in target_branch.

    Returns:
        One "- <subject>" line per commit, newest first; [] if git fails.
    """
    try:
        result = await run_command(
            [
                "git",
                "log",
                "--pretty=format:- %s",
                f"{target_branch}..{source_branch}",
                "--",
            ],
            cwd=cwd,
            check=True,
            capture_output=True,
            text=True,
        )
    except (RuntimeError, subprocess.SubprocessError, OSError) as e:
        log.warning(f"Could not list commits between {target_branch} and {source_branch}: {e}")
        return []

    return [line for line in str(result.stdout).strip().splitlines() if line]
