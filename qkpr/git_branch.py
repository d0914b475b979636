#!/usr/bin/env python3

"""Branch enumeration, classification and branch-changing git actions."""

import logging
import subprocess
import time
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .shell import run_command, run_interactive

__all__ = [
    "BranchDescriptor",
    "UNKNOWN_TIME",
    "list_all_branches",
    "last_commit_time",
    "format_relative_time",
    "category_of",
    "describe_branches",
    "checkout_branch",
    "create_and_checkout_branch",
    "create_merge_branch",
    "push_branch",
    "is_branch_pushed",
]

log = logging.getLogger(__name__)

UNKNOWN_TIME = (0, "unknown")

_MINUTE = 60
_HOUR = 60 * _MINUTE
_DAY = 24 * _HOUR


@dataclass(frozen=True)
class BranchDescriptor:
    name: str
    last_commit_epoch_seconds: int
    last_commit_time_formatted: str
    category: str


def _clean_branch_line(line: str) -> str:
    line = line.strip()
    # "*" marks the current branch, "+" a branch checked out in another worktree
    if line[:1] in ("*", "+"):
        line = line[1:].strip()
    if line.startswith("remotes/origin/"):
        line = line[len("remotes/origin/") :]
    return line


async def list_all_branches(cwd: Optional[str] = None) -> List[str]:
    """List local and origin branches as a sorted, de-duplicated list of names."""
    try:
        result = await run_command(
            ["git", "branch", "-a"],
            cwd=cwd,
            check=True,
            capture_output=True,
            text=True,
        )
    except (RuntimeError, subprocess.SubprocessError, OSError) as e:
        log.warning(f"Could not list branches: {e}")
        return []

    names = set()
    for raw_line in str(result.stdout).splitlines():
        name = _clean_branch_line(raw_line)
        if not name or name == "HEAD" or "->" in name or name.startswith("("):
            continue
        names.add(name)
    return sorted(names)


async def _tip_timestamp(ref: str, cwd: Optional[str]) -> Optional[int]:
    result = await run_command(
        ["git", "log", "-1", "--format=%ct", ref, "--"],
        cwd=cwd,
        check=False,
        capture_output=True,
        text=True,
    )
    output = str(result.stdout).strip()
    if result.returncode != 0 or not output:
        return None
    try:
        return int(output)
    except ValueError:
        return None


async def last_commit_time(
    branch_name: str, cwd: Optional[str] = None, now: Optional[float] = None
) -> Tuple[int, str]:
    """Timestamp and relative description of a branch's tip commit.

    The origin remote-tracking ref is preferred over the local branch.

    Returns:
        (epoch_seconds, formatted), or UNKNOWN_TIME if neither ref exists.
    """
    try:
        timestamp = await _tip_timestamp(f"origin/{branch_name}", cwd)
        if timestamp is None:
            timestamp = await _tip_timestamp(branch_name, cwd)
    except (subprocess.SubprocessError, OSError) as e:
        log.warning(f"Could not read last commit time of {branch_name}: {e}")
        return UNKNOWN_TIME

    if timestamp is None:
        return UNKNOWN_TIME
    return timestamp, format_relative_time(timestamp, now)


def format_relative_time(timestamp: float, now: Optional[float] = None) -> str:
    """Describe how long ago timestamp was, in coarse buckets.

    The buckets are deliberately approximate: weeks are days // 7, months are
    days // 30 and years are days // 365, with no calendar awareness.
    """
    if now is None:
        now = time.time()
    diff = now - timestamp
    if diff < _MINUTE:
        return "just now"
    if diff < _HOUR:
        return f"{int(diff // _MINUTE)}m ago"

    days = int(diff // _DAY)
    if days == 0:
        return f"{int(diff // _HOUR)}h ago"
    if days == 1:
        return "yesterday"
    if days < 7:
        return f"{days}d ago"
    if days < 30:
        return f"{days // 7}w ago"
    if days < 365:
        return f"{days // 30}mo ago"
    return f"{days // 365}y ago"


def category_of(branch_name: str) -> str:
    """The prefix before the first "/", e.g. "feat" for "feat/login"."""
    prefix, sep, _ = branch_name.partition("/")
    if not sep or not prefix:
        return "other"
    return prefix


async def describe_branches(
    branch_names: List[str], cwd: Optional[str] = None, now: Optional[float] = None
) -> List[BranchDescriptor]:
    if now is None:
        now = time.time()
    descriptors = []
    for name in branch_names:
        timestamp, formatted = await last_commit_time(name, cwd=cwd, now=now)
        descriptors.append(
            BranchDescriptor(
                name=name,
                last_commit_epoch_seconds=timestamp,
                last_commit_time_formatted=formatted,
                category=category_of(name),
            )
        )
    return descriptors


async def _run_git_action(args: List[str], cwd: Optional[str]) -> bool:
    try:
        returncode = await run_interactive(["git", *args], cwd=cwd)
    except OSError as e:
        log.warning(f"Could not run git {' '.join(args)}: {e}")
        return False
    if returncode != 0:
        log.warning(f"git {' '.join(args)} exited with {returncode}")
        return False
    return True


async def checkout_branch(branch_name: str, cwd: Optional[str] = None) -> bool:
    return await _run_git_action(["checkout", branch_name], cwd)


async def create_and_checkout_branch(
    branch_name: str, cwd: Optional[str] = None
) -> bool:
    return await _run_git_action(["checkout", "-b", branch_name], cwd)


async def create_merge_branch(
    target_branch: str, merge_branch_name: str, cwd: Optional[str] = None
) -> bool:
    """Switch to target_branch and create merge_branch_name from it."""
    if not await checkout_branch(target_branch, cwd):
        return False
    return await create_and_checkout_branch(merge_branch_name, cwd)


async def push_branch(branch_name: str, cwd: Optional[str] = None) -> bool:
    return await _run_git_action(["push", "-u", "origin", branch_name], cwd)


async def is_branch_pushed(branch_name: str, cwd: Optional[str] = None) -> bool:
    """Check whether origin has a head named branch_name."""
    try:
        result = await run_command(
            ["git", "ls-remote", "--heads", "origin", branch_name],
            cwd=cwd,
            check=False,
            capture_output=True,
            text=True,
        )
    except (subprocess.SubprocessError, OSError) as e:
        log.warning(f"Could not query origin for {branch_name}: {e}")
        return False
    return result.returncode == 0 and bool(str(result.stdout).strip())
