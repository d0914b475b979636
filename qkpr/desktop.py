#!/usr/bin/env python3

"""Best-effort clipboard and browser access."""

import logging
import shutil
import subprocess
import sys
from typing import List, Optional

import click

__all__ = ["clipboard_command", "copy_to_clipboard", "open_in_browser"]

log = logging.getLogger(__name__)


def clipboard_command(platform: Optional[str] = None) -> Optional[List[str]]:
    """The command that reads stdin into the clipboard on this platform, if any."""
    platform = platform or sys.platform
    if platform == "darwin":
        return ["pbcopy"]
    if platform == "win32":
        return ["clip"]
    if platform.startswith("linux"):
        if shutil.which("xclip"):
            return ["xclip", "-selection", "clipboard"]
        if shutil.which("wl-copy"):
            return ["wl-copy"]
    return None


def copy_to_clipboard(text: str) -> bool:
    """Copy text to the system clipboard.

    Returns:
        False if no clipboard tool is available or it failed.
    """
    cmd = clipboard_command()
    if cmd is None:
        log.warning("No clipboard command available")
        return False

    try:
        subprocess.run(
            cmd,
            input=text.encode("utf-8"),
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=True,
            timeout=5,
        )
    except (subprocess.SubprocessError, OSError) as e:
        log.warning(f"Could not copy to clipboard with {cmd[0]}: {e}")
        return False
    return True


def open_in_browser(url: str) -> bool:
    try:
        returncode = click.launch(url)
    except OSError as e:
        log.warning(f"Could not open browser: {e}")
        return False
    return returncode == 0
