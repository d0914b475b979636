#!/usr/bin/env python3

import logging
from dataclasses import dataclass
from typing import List, Optional

from .git_query import commits_between
from .locales import DEFAULT_LANGUAGE, get_locale_string
from .remote import generate_compare_url, parse_remote_url

__all__ = [
    "PullRequestDraft",
    "format_draft_message",
    "generate_draft_message",
    "generate_merge_branch_name",
    "create_pull_request",
]

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class PullRequestDraft:
    source_branch: str
    target_branch: str
    url: str
    message: str
    suggested_merge_branch_name: str


def format_draft_message(
    source_branch: str,
    target_branch: str,
    commits: List[str],
    language: str = DEFAULT_LANGUAGE,
) -> str:
    """Render the PR description from already-formatted commit lines."""
    message = (
        f"### 🔧 PR: `{source_branch}` → `{target_branch}`\n\n"
        "#### 📝 Commit Summary:\n"
    )
    if not commits:
        message += "\n" + get_locale_string(language, "NO_DIFFERING_COMMITS")
    else:
        message += "\n".join(commits)
    return message


async def generate_draft_message(
    source_branch: str,
    target_branch: str,
    language: str = DEFAULT_LANGUAGE,
    cwd: Optional[str] = None,
) -> str:
    commits = await commits_between(target_branch, source_branch, cwd=cwd)
    return format_draft_message(source_branch, target_branch, commits, language)


def generate_merge_branch_name(source_branch: str, target_branch: str) -> str:
    """Name for a branch used to resolve conflicts between source and target.

    Distinct pairs can map to the same name (e.g. "a/b" and "a-b"); no attempt
    is made to disambiguate them.
    """
    sanitized_source = source_branch.replace("/", "-")
    sanitized_target = target_branch.replace("/", "-")
    return f"merge/{sanitized_source}-to-{sanitized_target}"


async def create_pull_request(
    source_branch: str,
    target_branch: str,
    remote_url: str,
    language: str = DEFAULT_LANGUAGE,
    cwd: Optional[str] = None,
) -> Optional[PullRequestDraft]:
    """Assemble URL, description and merge branch name for a PR.

    Returns:
        The draft, or None if remote_url cannot be parsed.
    """
    parsed = parse_remote_url(remote_url)
    if parsed is None:
        log.warning(f"Could not parse remote URL: {remote_url!r}")
        return None

    url = generate_compare_url(
        parsed.host, parsed.repo_path, parsed.protocol, source_branch, target_branch
    )
    message = await generate_draft_message(
        source_branch, target_branch, language=language, cwd=cwd
    )
    return PullRequestDraft(
        source_branch=source_branch,
        target_branch=target_branch,
        url=url,
        message=message,
        suggested_merge_branch_name=generate_merge_branch_name(
            source_branch, target_branch
        ),
    )
