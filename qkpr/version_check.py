#!/usr/bin/env python3

"""Best-effort check for a newer qkpr release on PyPI."""

import logging
import subprocess
import sys
from dataclasses import dataclass
from typing import List

import httpx

from .console import console
from .prompts import confirm

__all__ = [
    "VersionCheckResult",
    "compare_versions",
    "check_for_updates",
    "prompt_for_update",
    "check_and_notify_update",
]

log = logging.getLogger(__name__)

PYPI_URL = "https://pypi.org/pypi/{package}/json"
CHECK_TIMEOUT = 3.0


@dataclass(frozen=True)
class VersionCheckResult:
    has_update: bool
    current_version: str
    latest_version: str


def _numeric_parts(version: str) -> List[int]:
    parts = []
    for piece in version.split("."):
        digits = ""
        for ch in piece:
            if not ch.isdigit():
                break
            digits += ch
        parts.append(int(digits) if digits else 0)
    return parts


def compare_versions(v1: str, v2: str) -> int:
    """Return -1, 0 or 1 as v1 is older than, equal to or newer than v2."""
    parts1 = _numeric_parts(v1)
    parts2 = _numeric_parts(v2)
    for i in range(max(len(parts1), len(parts2))):
        a = parts1[i] if i < len(parts1) else 0
        b = parts2[i] if i < len(parts2) else 0
        if a < b:
            return -1
        if a > b:
            return 1
    return 0


def check_for_updates(package: str, current_version: str) -> VersionCheckResult:
    """Query PyPI for the latest version; any failure means "no update"."""
    try:
        response = httpx.get(PYPI_URL.format(package=package), timeout=CHECK_TIMEOUT)
        response.raise_for_status()
        latest = str(response.json()["info"]["version"])
    except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
        log.debug(f"Update check failed: {e}")
        return VersionCheckResult(False, current_version, current_version)

    return VersionCheckResult(
        has_update=compare_versions(current_version, latest) < 0,
        current_version=current_version,
        latest_version=latest,
    )


def prompt_for_update(package: str, result: VersionCheckResult) -> None:
    if not result.has_update:
        return

    console.print("\n[yellow]📦  Update available[/yellow]")
    console.print(f"[dim]  Current version: {result.current_version}[/dim]")
    console.print(f"[green]  Latest version:  {result.latest_version}[/green]\n")

    install_cmd = [sys.executable, "-m", "pip", "install", "--upgrade", package]
    if not confirm("Would you like to update now?", default=False):
        console.print("[dim]You can update later by running:[/dim]")
        console.print(f"[yellow]  pip install --upgrade {package}[/yellow]\n")
        return

    console.print(f"\n[cyan]⏳  Updating {package}...[/cyan]\n")
    try:
        subprocess.run(install_cmd, check=True)
    except (subprocess.SubprocessError, OSError) as e:
        log.warning(f"Update failed: {e}")
        console.print("[red]❌  Failed to update. Please try manually:[/red]")
        console.print(f"[dim]  pip install --upgrade {package}[/dim]\n")
        return

    console.print(f"\n[green]✅  Successfully updated to version {result.latest_version}![/green]")
    console.print("[yellow]Please restart the command to use the new version.[/yellow]\n")
    sys.exit(0)


def check_and_notify_update(package: str, current_version: str) -> None:
    result = check_for_updates(package, current_version)
    prompt_for_update(package, result)
