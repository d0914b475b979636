#!/usr/bin/env python3

"""Shared base class for tests that drive a real git repository."""

import asyncio
import os
import subprocess
import tempfile
import unittest
from typing import Dict, List, Optional
from unittest import mock

from expecttest import TestCase

__all__ = ["GIT_TEST_ENV", "TESTING_TIME", "GitRepositoryTestCase"]

# Fixed commit timestamp, so "last commit" times are predictable
TESTING_TIME = "1112911993"

# Environment for reproducible git behavior
GIT_TEST_ENV: Dict[str, str] = {
    "GIT_TERMINAL_PROMPT": "0",
    "GIT_MERGE_AUTOEDIT": "no",
    "EDITOR": ":",
    "PAGER": "cat",
    "LANG": "C",
    "LC_ALL": "C",
    "TZ": "UTC",
    "TERM": "dumb",
    "GIT_AUTHOR_NAME": "A U Thor",
    "GIT_AUTHOR_EMAIL": "author@example.com",
    "GIT_AUTHOR_DATE": f"{TESTING_TIME} -0700",
    "GIT_COMMITTER_NAME": "C O Mitter",
    "GIT_COMMITTER_EMAIL": "committer@example.com",
    "GIT_COMMITTER_DATE": f"{TESTING_TIME} -0700",
}


class GitRepositoryTestCase(TestCase, unittest.IsolatedAsyncioTestCase):
    """Runs each test in a fresh repository on branch main with one commit.

    Every git command qkpr starts gets the deterministic environment above
    through a patched qkpr.shell.get_subprocess_env, and preferences are kept
    in a throwaway QKPR_CONFIG_DIR.
    """

    testing_time = TESTING_TIME

    async def asyncSetUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.temp_dir.cleanup)
        self.config_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.config_dir.cleanup)

        self.env = {**os.environ, **GIT_TEST_ENV}

        for patcher in [
            mock.patch("qkpr.shell.get_subprocess_env", return_value=self.env),
            mock.patch.dict(os.environ, {"QKPR_CONFIG_DIR": self.config_dir.name}),
        ]:
            patcher.start()
            self.addCleanup(patcher.stop)

        await self.setup_repository()

    async def setup_repository(self):
        """Create the repository; override to start from a different state."""
        try:
            await self.git_run(["init", "-b", "main"])
        except subprocess.CalledProcessError:
            self.fail("git is too old for these tests (needs `git init -b`)")
        await self.git_run(["config", "user.email", "test@example.com"])
        await self.git_run(["config", "user.name", "Test User"])
        await self.commit_file("README.md", "# Test Repository\n", "Initial commit")

    def write_file(self, relative_path: str, content: str) -> str:
        """Write content to a file inside the repository and return its path."""
        path = os.path.join(self.temp_dir.name, relative_path)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w") as f:
            f.write(content)
        return path

    async def commit_file(self, relative_path: str, content: str, message: str) -> None:
        self.write_file(relative_path, content)
        await self.git_run(["add", relative_path])
        await self.git_run(["commit", "-m", message])

    async def git_run(
        self, args: List[str], check: bool = True, cwd: Optional[str] = None
    ) -> subprocess.CompletedProcess[bytes]:
        """Run ``git <args>`` in the test repository, capturing its output.

        Raises:
            subprocess.CalledProcessError: If check is set and git fails
        """
        cmd = ["git", *args]
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            cwd=cwd or self.temp_dir.name,
            env=self.env,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
        stdout, stderr = await proc.communicate()
        returncode = proc.returncode or 0
        if check and returncode != 0:
            raise subprocess.CalledProcessError(
                returncode, " ".join(cmd), output=stdout, stderr=stderr
            )
        return subprocess.CompletedProcess(cmd, returncode, stdout, stderr)

    async def git_output(self, args: List[str]) -> str:
        """Stripped stdout of ``git <args>``."""
        result = await self.git_run(args)
        return result.stdout.decode().strip()
