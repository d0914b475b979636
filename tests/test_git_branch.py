#!/usr/bin/env python3

import subprocess
import unittest
from unittest.mock import AsyncMock, patch

from expecttest import TestCase

from qkpr.git_branch import (
    UNKNOWN_TIME,
    category_of,
    describe_branches,
    format_relative_time,
    last_commit_time,
    list_all_branches,
)

NOW = 1_700_000_000
MINUTE = 60
HOUR = 60 * MINUTE
DAY = 24 * HOUR


def completed(stdout="", returncode=0):
    return subprocess.CompletedProcess(
        args=["git"], returncode=returncode, stdout=stdout, stderr=""
    )


class TestFormatRelativeTime(TestCase):
    def ago(self, seconds):
        return format_relative_time(NOW - seconds, now=NOW)

    def test_boundaries(self):
        cases = [
            (0, "just now"),
            (59, "just now"),
            (60, "1m ago"),
            (59 * MINUTE + 59, "59m ago"),
            (HOUR, "1h ago"),
            (23 * HOUR + 59 * MINUTE, "23h ago"),
            (DAY, "yesterday"),
            (2 * DAY - 1, "yesterday"),
            (2 * DAY, "2d ago"),
            (6 * DAY, "6d ago"),
            (7 * DAY, "1w ago"),
            (29 * DAY, "4w ago"),
            (30 * DAY, "1mo ago"),
            (364 * DAY, "12mo ago"),
            (365 * DAY, "1y ago"),
            (800 * DAY, "2y ago"),
        ]
        for seconds, expected in cases:
            with self.subTest(seconds=seconds):
                self.assertEqual(self.ago(seconds), expected)

    def test_future_timestamp(self):
        self.assertEqual(format_relative_time(NOW + 500, now=NOW), "just now")


class TestCategoryOf(TestCase):
    def test_categories(self):
        self.assertEqual(category_of("feat/login"), "feat")
        self.assertEqual(category_of("main"), "other")
        self.assertEqual(category_of("fix/api/timeout"), "fix")
        self.assertEqual(category_of("/weird"), "other")


class TestListAllBranches(unittest.IsolatedAsyncioTestCase):
    async def test_parses_branch_listing(self):
        output = (
            "* main\n"
            "  feat/a\n"
            "+ fix/worktree\n"
            "  remotes/origin/HEAD -> origin/main\n"
            "  remotes/origin/main\n"
            "  remotes/origin/feat/b\n"
        )
        with patch(
            "qkpr.git_branch.run_command", new=AsyncMock(return_value=completed(output))
        ):
            branches = await list_all_branches("/repo")
        self.assertEqual(branches, ["feat/a", "feat/b", "fix/worktree", "main"])

    async def test_detached_head_is_skipped(self):
        output = "* (HEAD detached at 1a2b3c4)\n  main\n"
        with patch(
            "qkpr.git_branch.run_command", new=AsyncMock(return_value=completed(output))
        ):
            self.assertEqual(await list_all_branches(), ["main"])

    async def test_git_failure_yields_empty_list(self):
        with patch(
            "qkpr.git_branch.run_command",
            new=AsyncMock(side_effect=RuntimeError("not a git repository")),
        ):
            self.assertEqual(await list_all_branches(), [])


class TestLastCommitTime(unittest.IsolatedAsyncioTestCase):
    async def test_prefers_remote_ref(self):
        mock_run = AsyncMock(return_value=completed(f"{NOW - 120}\n"))
        with patch("qkpr.git_branch.run_command", new=mock_run):
            result = await last_commit_time("feat/a", cwd="/repo", now=NOW)

        self.assertEqual(result, (NOW - 120, "2m ago"))
        self.assertEqual(mock_run.await_count, 1)
        self.assertIn("origin/feat/a", mock_run.await_args.args[0])

    async def test_falls_back_to_local_ref(self):
        mock_run = AsyncMock(
            side_effect=[completed("", returncode=128), completed(f"{NOW - 3 * DAY}")]
        )
        with patch("qkpr.git_branch.run_command", new=mock_run):
            result = await last_commit_time("feat/a", now=NOW)

        self.assertEqual(result, (NOW - 3 * DAY, "3d ago"))
        self.assertIn("feat/a", mock_run.await_args_list[1].args[0])
        self.assertNotIn("origin/feat/a", mock_run.await_args_list[1].args[0])

    async def test_missing_branch_is_unknown(self):
        mock_run = AsyncMock(return_value=completed("", returncode=128))
        with patch("qkpr.git_branch.run_command", new=mock_run):
            self.assertEqual(await last_commit_time("gone", now=NOW), UNKNOWN_TIME)

    async def test_timeout_is_unknown(self):
        mock_run = AsyncMock(side_effect=subprocess.TimeoutExpired(["git"], 30))
        with patch("qkpr.git_branch.run_command", new=mock_run):
            self.assertEqual(await last_commit_time("slow", now=NOW), UNKNOWN_TIME)

    async def test_describe_branches(self):
        with patch(
            "qkpr.git_branch.run_command",
            new=AsyncMock(return_value=completed(f"{NOW - DAY}")),
        ):
            descriptors = await describe_branches(["feat/a", "main"], now=NOW)

        self.assertEqual([d.category for d in descriptors], ["feat", "other"])
        self.assertEqual(
            [d.last_commit_time_formatted for d in descriptors],
            ["yesterday", "yesterday"],
        )


if __name__ == "__main__":
    unittest.main()
