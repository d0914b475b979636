#!/usr/bin/env python3

"""Git operations and utilities.

This module provides Git-related functionality for qkpr.
The actual implementation is split across several modules:
- git_query.py: Repository state and commit history queries
- git_branch.py: Branch listing, classification and branch-changing actions
- git_commit.py: Staged changes and commits
"""

# Re-export all functionality from the specialized modules
from .git_branch import (
    BranchDescriptor,
    category_of,
    checkout_branch,
    create_and_checkout_branch,
    create_merge_branch,
    describe_branches,
    format_relative_time,
    is_branch_pushed,
    last_commit_time,
    list_all_branches,
    push_branch,
)
from .git_commit import (
    commit_changes,
    get_staged_diff,
    has_staged_changes,
)
from .git_query import (
    RepositoryInfo,
    commits_between,
    get_current_branch,
    get_remote_url,
    get_repository_info,
    get_repository_root,
    is_git_repository,
)

__all__ = [
    "BranchDescriptor",
    "RepositoryInfo",
    "category_of",
    "checkout_branch",
    "commit_changes",
    "commits_between",
    "create_and_checkout_branch",
    "create_merge_branch",
    "describe_branches",
    "format_relative_time",
    "get_current_branch",
    "get_remote_url",
    "get_repository_info",
    "get_repository_root",
    "get_staged_diff",
    "has_staged_changes",
    "is_branch_pushed",
    "is_git_repository",
    "last_commit_time",
    "list_all_branches",
    "push_branch",
]
