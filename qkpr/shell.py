#!/usr/bin/env python3

"""The one place qkpr starts subprocesses.

Captured commands (``run_command``) are bounded by the ``git.timeout`` setting;
interactive ones (``run_interactive``) share the terminal with the user and are
not bounded, since git may be waiting for credentials.
"""

import asyncio
import logging
import subprocess
from typing import Dict, List, Optional, Union

__all__ = [
    "CommandError",
    "run_command",
    "run_interactive",
    "get_subprocess_env",
    "get_command_timeout",
]


class CommandError(RuntimeError):
    """A checked command exited with a non-zero status."""

    def __init__(self, cmd: List[str], returncode: int, stdout: str, stderr: str) -> None:
        details = [f"Command failed with exit code {returncode}: {' '.join(cmd)}"]
        if stdout:
            details.append(f"Stdout: {stdout}")
        if stderr:
            details.append(f"Stderr: {stderr}")
        super().__init__("\n".join(details))
        self.cmd = cmd
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


def get_subprocess_env() -> Optional[Dict[str, str]]:
    """Environment for child processes; None inherits ours.

    The e2e tests patch this to pin git's identity, dates and locale.
    """
    return None


def get_command_timeout() -> float:
    """Return the configured timeout for captured git commands, in seconds."""
    from .config import get_git_timeout

    return get_git_timeout()


def _decode(data: Optional[bytes], text: bool) -> Union[str, bytes]:
    if not data:
        return ""
    return data.decode(errors="replace") if text else data


async def run_command(
    cmd: List[str],
    cwd: Optional[str] = None,
    check: bool = True,
    capture_output: bool = True,
    text: bool = True,
    wait_time: Optional[float] = None,
    input: Optional[str] = None,
) -> subprocess.CompletedProcess[Union[str, bytes]]:
    """Run cmd to completion and return its result.

    Args:
        cmd: Program and arguments
        cwd: Working directory, defaults to ours
        check: Raise CommandError on a non-zero exit status
        capture_output: Collect stdout and stderr instead of inheriting them
        text: Decode captured output, replacing undecodable bytes
        wait_time: Timeout in seconds; defaults to the configured git timeout
        input: Text written to the command's stdin

    Raises:
        CommandError: If check is set and the command fails
        subprocess.TimeoutExpired: If the command outlives wait_time; it is killed
        OSError: If the program cannot be started
    """
    logging.info(f"Running command: {' '.join(cmd)}")
    if wait_time is None:
        wait_time = get_command_timeout()

    pipe = asyncio.subprocess.PIPE if capture_output else None
    process = await asyncio.create_subprocess_exec(
        *cmd,
        cwd=cwd,
        env=get_subprocess_env(),
        stdout=pipe,
        stderr=pipe,
        stdin=asyncio.subprocess.PIPE if input is not None else None,
    )

    try:
        stdout_data, stderr_data = await asyncio.wait_for(
            process.communicate(input.encode() if input is not None else None),
            timeout=wait_time,
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        logging.warning(f"Command timed out after {wait_time}s: {' '.join(cmd)}")
        raise subprocess.TimeoutExpired(cmd, wait_time)

    stdout = _decode(stdout_data, text)
    stderr = _decode(stderr_data, text)
    returncode = process.returncode or 0
    logging.debug(f"Command exited with {returncode}")
    if stderr:
        logging.debug(f"Command stderr: {stderr!r}")

    if check and returncode != 0:
        raise CommandError(cmd, returncode, str(stdout), str(stderr))

    return subprocess.CompletedProcess(
        args=cmd, returncode=returncode, stdout=stdout, stderr=stderr
    )


async def run_interactive(cmd: List[str], cwd: Optional[str] = None) -> int:
    """Run cmd attached to our terminal and return its exit status.

    Used for checkout, commit and push so the user sees git's own output.
    """
    logging.info(f"Running interactive command: {' '.join(cmd)}")
    process = await asyncio.create_subprocess_exec(
        *cmd, cwd=cwd, env=get_subprocess_env()
    )
    returncode = await process.wait()
    logging.debug(f"Command exited with {returncode}")
    return returncode
