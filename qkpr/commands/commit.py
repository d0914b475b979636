#!/usr/bin/env python3

"""Commit message and branch name drafting flows.

Both flows run an explicit loop over DraftState: a draft is produced
(DRAFTED), then the user accepts it (ACCEPTED), asks for a new one
(REGENERATING, which drafts again) or gives up (CANCELLED).
"""

import logging
from typing import Optional

from ..console import console, escape, print_banner
from ..desktop import copy_to_clipboard
from ..drafting import DraftKind, DraftState, draft
from ..errors import DraftError, ErrorKind, QkprError
from ..git_branch import create_and_checkout_branch, is_branch_pushed, push_branch
from ..git_commit import commit_changes, get_staged_diff, has_staged_changes
from ..git_query import get_current_branch
from ..preferences import (
    get_custom_branch_prompt,
    get_custom_commit_prompt,
    get_model,
    get_prompt_language,
)
from ..prompts import choose, confirm
from .settings import ensure_api_key

__all__ = [
    "handle_commit_command",
    "handle_branch_command",
    "prepare_drafting",
    "stream_draft",
]

log = logging.getLogger(__name__)

COMMIT_ACTIONS = [
    ("commit", "✅  Commit with this message"),
    ("copy", "📋  Copy to clipboard"),
    ("branch", "🌿  Generate branch name suggestion"),
    ("regenerate", "🔄  Regenerate"),
    ("cancel", "❌  Cancel"),
]

BRANCH_ACTIONS = [
    ("create", "🌿  Create and switch to this branch"),
    ("copy", "📋  Copy to clipboard"),
    ("regenerate", "🔄  Regenerate"),
    ("cancel", "❌  Cancel"),
]


def _print_prompt_mode(kind: DraftKind, custom_prompt: Optional[str]) -> None:
    label = "commit message" if kind is DraftKind.COMMIT else "branch name"
    if custom_prompt:
        console.print(f"[dim]Using custom {label} prompt[/dim]")
    else:
        console.print(f"[dim]Using {get_prompt_language()} {label} prompt[/dim]")
    console.print()


async def prepare_drafting(kind: DraftKind, cwd: Optional[str] = None) -> tuple[str, str, str]:
    """Check preconditions shared by the drafting flows.

    Returns:
        (api_key, model, diff)

    Raises:
        QkprError: If nothing is staged, no API key is available or the diff
            cannot be read.
    """
    model = get_model()
    console.print(f"[dim]Using model: {escape(model)}[/dim]")
    custom = get_custom_commit_prompt() if kind is DraftKind.COMMIT else get_custom_branch_prompt()
    _print_prompt_mode(kind, custom)

    if not await has_staged_changes(cwd):
        raise QkprError(
            ErrorKind.NO_STAGED_CHANGES,
            "No staged changes found. Please stage your changes using: git add <files>",
        )

    api_key = ensure_api_key()

    diff = await get_staged_diff(cwd)
    if not diff:
        raise QkprError(ErrorKind.COMMAND_FAILED, "Failed to get git diff")
    return api_key, model, diff


async def stream_draft(kind: DraftKind, diff: str, api_key: str, model: str) -> str:
    """Draft with progressive display of the streamed text."""
    title = "commit message" if kind is DraftKind.COMMIT else "branch name"
    console.print(f"[cyan]🤖  Generating {title}...[/cyan]\n")

    def show(chunk: str) -> None:
        console.print(chunk, end="", markup=False)

    result = await draft(kind, diff, api_key, model, on_chunk=show)
    console.print("\n")
    return result


def display_branch_name(branch_name: str) -> None:
    console.print(f"\n[cyan]🌿  Suggested branch name:[/cyan] [green]{escape(branch_name)}[/green]\n")


async def _draft_or_offer_retry(
    kind: DraftKind, diff: str, api_key: str, model: str
) -> Optional[str]:
    """Draft until it succeeds or the user stops retrying; None if they stop."""
    while True:
        try:
            return await stream_draft(kind, diff, api_key, model)
        except DraftError as e:
            console.print(f"\n[red]❌  Error: {escape(e.message)}[/red]\n")
            if not confirm("Regenerate?", default=True):
                return None
            console.print("[yellow]🔄  Regenerating...[/yellow]\n")


async def _commit_and_maybe_push(message: str, cwd: Optional[str]) -> None:
    if not await commit_changes(message, cwd=cwd):
        raise QkprError(ErrorKind.COMMAND_FAILED, "Commit failed")
    console.print("\n[green]✅  Commit successful![/green]\n")

    if not confirm("Push the changes to the remote repository?", default=True):
        return

    branch_name = await get_current_branch(cwd)
    if not branch_name:
        raise QkprError(ErrorKind.COMMAND_FAILED, "Could not determine the current branch name.")
    if not await is_branch_pushed(branch_name, cwd=cwd):
        console.print(f"[dim]Branch '{escape(branch_name)}' is not on origin yet; it will be created.[/dim]")

    console.print(f"[cyan]📤  Pushing branch to remote: {escape(branch_name)}[/cyan]")
    if not await push_branch(branch_name, cwd=cwd):
        raise QkprError(ErrorKind.COMMAND_FAILED, "Failed to push changes")
    console.print(f"[green]✅  Branch pushed successfully: {escape(branch_name)}[/green]\n")


async def handle_commit_command(cwd: Optional[str] = None) -> DraftState:
    """Draft a commit message for the staged changes and act on it.

    Returns:
        The final state of the draft loop (ACCEPTED or CANCELLED).
    """
    print_banner("🤖  AI Commit Message Generator")
    api_key, model, diff = await prepare_drafting(DraftKind.COMMIT, cwd)

    state = DraftState.IDLE
    message = ""
    while True:
        if state in (DraftState.IDLE, DraftState.REGENERATING):
            drafted = await _draft_or_offer_retry(DraftKind.COMMIT, diff, api_key, model)
            if drafted is None:
                console.print("[dim]❌  Cancelled[/dim]\n")
                return DraftState.CANCELLED
            message = drafted
            state = DraftState.DRAFTED

        action = choose("What would you like to do?", COMMIT_ACTIONS)

        if action == "branch":
            try:
                display_branch_name(await stream_draft(DraftKind.BRANCH, diff, api_key, model))
            except DraftError as e:
                console.print(f"\n[red]❌  Error generating branch name: {escape(e.message)}[/red]\n")
        elif action == "regenerate":
            console.print("\n[yellow]🔄  Regenerating...[/yellow]\n")
            state = DraftState.REGENERATING
        elif action == "cancel":
            console.print("\n[dim]❌  Cancelled[/dim]\n")
            return DraftState.CANCELLED
        elif action == "copy":
            if copy_to_clipboard(message):
                console.print("\n[green]✅  Commit message copied to clipboard[/green]\n")
            else:
                console.print("\n[yellow]⚠️  Could not copy to clipboard[/yellow]\n")
            return DraftState.ACCEPTED
        else:
            await _commit_and_maybe_push(message, cwd)
            return DraftState.ACCEPTED


async def handle_branch_command(cwd: Optional[str] = None) -> DraftState:
    """Draft a branch name for the staged changes and act on it."""
    print_banner("🌿  AI Branch Name Generator")
    api_key, model, diff = await prepare_drafting(DraftKind.BRANCH, cwd)

    state = DraftState.IDLE
    branch_name = ""
    while True:
        if state in (DraftState.IDLE, DraftState.REGENERATING):
            drafted = await _draft_or_offer_retry(DraftKind.BRANCH, diff, api_key, model)
            if drafted is None:
                console.print("[dim]❌  Cancelled[/dim]\n")
                return DraftState.CANCELLED
            branch_name = drafted
            display_branch_name(branch_name)
            state = DraftState.DRAFTED

        action = choose("What would you like to do?", BRANCH_ACTIONS)

        if action == "regenerate":
            console.print("\n[yellow]🔄  Regenerating...[/yellow]\n")
            state = DraftState.REGENERATING
        elif action == "cancel":
            console.print("\n[dim]❌  Cancelled[/dim]\n")
            return DraftState.CANCELLED
        elif action == "copy":
            if copy_to_clipboard(branch_name):
                console.print("\n[green]✅  Branch name copied to clipboard[/green]\n")
            else:
                console.print("\n[yellow]⚠️  Could not copy to clipboard[/yellow]\n")
            return DraftState.ACCEPTED
        else:
            console.print(f"[cyan]🌿  Creating and switching to branch: {escape(branch_name)}[/cyan]")
            if not await create_and_checkout_branch(branch_name, cwd=cwd):
                raise QkprError(ErrorKind.COMMAND_FAILED, "Failed to create branch")
            console.print(f"[green]✅  Successfully created and switched to: {escape(branch_name)}[/green]\n")
            return DraftState.ACCEPTED
