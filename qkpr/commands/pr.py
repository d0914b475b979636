#!/usr/bin/env python3

import logging
from typing import Optional

from ..console import console, escape, print_banner
from ..desktop import copy_to_clipboard, open_in_browser
from ..errors import ErrorKind, QkprError
from ..git_branch import create_merge_branch, list_all_branches
from ..git_query import get_repository_info
from ..picker import prompt_target_branch
from ..preferences import get_prompt_language
from ..prompts import confirm
from ..pull_request import PullRequestDraft, create_pull_request
from ..version import __version__

__all__ = ["handle_pr_command", "display_pr_info"]

log = logging.getLogger(__name__)


def display_pr_info(draft: PullRequestDraft) -> None:
    console.print("\n[cyan]📋  PR Description Generated:[/cyan]\n")
    console.print(escape(draft.message))
    console.print("\n[cyan]👉  PR URL:[/cyan]\n")
    console.print(f"[green]{escape(draft.url)}[/green]")


async def handle_pr_command(cwd: Optional[str] = None) -> PullRequestDraft:
    """Pick a target branch, then prepare and open a PR from the current branch.

    Raises:
        QkprError: If cwd is not a repository, HEAD is detached, there are no
            branches, the remote cannot be parsed or the merge branch could
            not be created.
    """
    print_banner("🔧  Quick PR Creator", f"Interactive PR Creation Tool · v{__version__}")

    info = await get_repository_info(cwd)
    if not info.is_git_repository:
        raise QkprError(
            ErrorKind.NOT_A_REPOSITORY,
            "Not a Git repository. Please run this command in a Git repository.",
        )
    if not info.current_branch:
        raise QkprError(
            ErrorKind.DETACHED_HEAD,
            "HEAD is detached. Check out the branch you want to open a PR from.",
        )

    console.print("[cyan]📍  Current Repository Information:[/cyan]")
    console.print(f"[dim]  Branch: {escape(info.current_branch)}[/dim]")
    console.print(f"[dim]  Remote: {escape(info.remote_url)}[/dim]\n")

    branches = await list_all_branches(cwd)
    if not branches:
        raise QkprError(ErrorKind.NO_BRANCHES, "No branches found.")

    target_branch = await prompt_target_branch(branches, info.current_branch, cwd=cwd)

    draft = await create_pull_request(
        info.current_branch,
        target_branch,
        info.remote_url,
        language=get_prompt_language(),
        cwd=cwd,
    )
    if draft is None:
        raise QkprError(
            ErrorKind.UNPARSEABLE_REMOTE,
            f"Could not parse remote URL: {info.remote_url or '(none)'}",
        )

    display_pr_info(draft)

    if copy_to_clipboard(draft.message):
        console.print("\n[green]✅  PR description copied to clipboard[/green]")
    else:
        console.print("\n[yellow]⚠️  Could not copy to clipboard[/yellow]")

    console.print("\n[cyan]🌐  Opening PR page in browser...[/cyan]")
    if open_in_browser(draft.url):
        console.print("[green]✅  Browser opened successfully[/green]")
    else:
        console.print("[yellow]⚠️  Could not open browser automatically[/yellow]")
        console.print(f"[dim]Please open manually: {escape(draft.url)}[/dim]")

    console.print(
        f"\n[yellow]💡  Suggested merge branch name: "
        f"{escape(draft.suggested_merge_branch_name)}[/yellow]"
    )
    if confirm(
        "Do you want to create a merge branch for conflict resolution?", default=False
    ):
        console.print(f"\n[cyan]🔀  Switching to target branch: {escape(target_branch)}[/cyan]")
        if not await create_merge_branch(
            target_branch, draft.suggested_merge_branch_name, cwd=cwd
        ):
            raise QkprError(ErrorKind.COMMAND_FAILED, "Failed to create merge branch")
        console.print(
            f"[green]✅  Successfully created merge branch: "
            f"{escape(draft.suggested_merge_branch_name)}[/green]\n"
        )

    console.print("\n[green]🎉  PR creation process completed![/green]\n")
    return draft
