#!/usr/bin/env python3

import logging
from typing import List, Optional

from ..console import console, escape
from ..errors import ErrorKind, QkprError
from ..git_branch import list_all_branches
from ..picker import select_branches
from ..preferences import add_pinned_branch, get_pinned_branches, remove_pinned_branch

__all__ = [
    "handle_pin_command",
    "handle_unpin_command",
    "handle_list_pinned_command",
]

log = logging.getLogger(__name__)


def _print_pinned(pinned: List[str]) -> None:
    if not pinned:
        console.print("[dim]\nNo pinned branches[/dim]\n")
        return
    console.print("\n[cyan]📌  Current pinned branches:[/cyan]")
    for index, branch in enumerate(pinned, start=1):
        console.print(f"[dim]  {index}. {escape(branch)}[/dim]")
    console.print()


async def handle_pin_command(
    branch_name: Optional[str] = None, cwd: Optional[str] = None
) -> List[str]:
    """Pin branch_name, or pick branches to pin when it is omitted.

    Returns:
        The branches that were newly pinned.

    Raises:
        QkprError: ALREADY_PINNED if branch_name is already pinned.
    """
    console.print("\n[cyan]📌  Pin Branch[/cyan]")
    console.print("[dim]Pin frequently used branches for quick access[/dim]\n")

    if branch_name:
        if not add_pinned_branch(branch_name):
            raise QkprError(
                ErrorKind.ALREADY_PINNED, f"Branch '{branch_name}' is already pinned"
            )
        console.print(f"[green]✅  Branch '{escape(branch_name)}' has been pinned[/green]")
        _print_pinned(get_pinned_branches())
        return [branch_name]

    branches = await list_all_branches(cwd)
    if not branches:
        raise QkprError(ErrorKind.NO_BRANCHES, "No branches found")

    pinned = get_pinned_branches()
    available = [b for b in branches if b not in pinned]
    if not available:
        console.print("[yellow]⚠️  All branches are already pinned[/yellow]")
        return []

    selected = await select_branches(
        available,
        title="📌  Pin Branches",
        message="Select branches to pin",
        filter_pinned=True,
        pinned_names=pinned,
        cwd=cwd,
    )
    if not selected:
        console.print("[yellow]⚠️  No branches selected[/yellow]")
        return []

    added = [branch for branch in selected if add_pinned_branch(branch)]
    console.print(f"[green]✅  Pinned {len(added)} branch(es)[/green]")
    _print_pinned(get_pinned_branches())
    return added


async def handle_unpin_command(
    branch_name: Optional[str] = None, cwd: Optional[str] = None
) -> List[str]:
    """Unpin branch_name, or pick pinned branches to unpin when it is omitted.

    Returns:
        The branches that were unpinned.

    Raises:
        QkprError: NOT_PINNED if branch_name is not pinned.
    """
    console.print("\n[cyan]📍  Unpin Branch[/cyan]")
    console.print("[dim]Remove a branch from pinned list[/dim]\n")

    pinned = get_pinned_branches()

    if branch_name:
        if not remove_pinned_branch(branch_name):
            raise QkprError(ErrorKind.NOT_PINNED, f"Branch '{branch_name}' is not pinned")
        console.print(f"[green]✅  Branch '{escape(branch_name)}' has been unpinned[/green]")
        _print_pinned(get_pinned_branches())
        return [branch_name]

    if not pinned:
        console.print("[yellow]⚠️  No pinned branches found[/yellow]")
        return []

    selected = await select_branches(
        pinned,
        title="📍  Unpin Branches",
        message="Select branches to unpin",
        pinned_names=pinned,
        cwd=cwd,
    )
    if not selected:
        console.print("[yellow]⚠️  No branches selected[/yellow]")
        return []

    removed = [branch for branch in selected if remove_pinned_branch(branch)]
    console.print(f"[green]✅  Unpinned {len(removed)} branch(es)[/green]")
    _print_pinned(get_pinned_branches())
    return removed


def handle_list_pinned_command() -> List[str]:
    console.print("\n[cyan]📌  Pinned Branches[/cyan]")
    console.print("[dim]List of all pinned branches[/dim]\n")

    pinned = get_pinned_branches()
    if not pinned:
        console.print("[yellow]⚠️  No pinned branches found[/yellow]")
        console.print('[dim]Use "qkpr pin <branch-name>" to pin a branch[/dim]\n')
        return []

    for index, branch in enumerate(pinned, start=1):
        console.print(f"  [green]{index}.[/green] {escape(branch)}")
    console.print()
    return pinned
