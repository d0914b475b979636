#!/usr/bin/env python3

import os
import tempfile
import unittest
from unittest.mock import AsyncMock, patch

from qkpr.commands.pin import (
    handle_list_pinned_command,
    handle_pin_command,
    handle_unpin_command,
)
from qkpr.errors import ErrorKind, QkprError
from qkpr.preferences import add_pinned_branch, get_pinned_branches


class PinCommandTestCase(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.temp_dir.cleanup)
        env_patch = patch.dict(os.environ, {"QKPR_CONFIG_DIR": self.temp_dir.name})
        env_patch.start()
        self.addCleanup(env_patch.stop)


class TestPinByName(PinCommandTestCase):
    async def test_pin_then_pin_again(self):
        self.assertEqual(await handle_pin_command("feat/a"), ["feat/a"])
        with self.assertRaises(QkprError) as cm:
            await handle_pin_command("feat/a")
        self.assertIs(cm.exception.kind, ErrorKind.ALREADY_PINNED)
        self.assertEqual(get_pinned_branches(), ["feat/a"])

    async def test_unpin_not_pinned(self):
        add_pinned_branch("main")
        with self.assertRaises(QkprError) as cm:
            await handle_unpin_command("feat/a")
        self.assertIs(cm.exception.kind, ErrorKind.NOT_PINNED)
        self.assertEqual(get_pinned_branches(), ["main"])

    async def test_unpin_by_name(self):
        add_pinned_branch("main")
        add_pinned_branch("develop")
        self.assertEqual(await handle_unpin_command("main"), ["main"])
        self.assertEqual(get_pinned_branches(), ["develop"])

    def test_list_pinned(self):
        self.assertEqual(handle_list_pinned_command(), [])
        add_pinned_branch("main")
        add_pinned_branch("release/1.0")
        self.assertEqual(handle_list_pinned_command(), ["main", "release/1.0"])


class TestPinInteractive(PinCommandTestCase):
    async def test_pin_selected_branches(self):
        add_pinned_branch("main")
        with patch(
            "qkpr.commands.pin.list_all_branches",
            new=AsyncMock(return_value=["feat/a", "feat/b", "main"]),
        ), patch(
            "qkpr.commands.pin.select_branches", new=AsyncMock(return_value=["feat/b"])
        ) as mock_select:
            added = await handle_pin_command()

        self.assertEqual(added, ["feat/b"])
        self.assertEqual(get_pinned_branches(), ["main", "feat/b"])
        self.assertEqual(mock_select.await_args.args[0], ["feat/a", "feat/b"])

    async def test_no_branches(self):
        with patch(
            "qkpr.commands.pin.list_all_branches", new=AsyncMock(return_value=[])
        ):
            with self.assertRaises(QkprError) as cm:
                await handle_pin_command()
        self.assertIs(cm.exception.kind, ErrorKind.NO_BRANCHES)

    async def test_everything_already_pinned(self):
        add_pinned_branch("main")
        with patch(
            "qkpr.commands.pin.list_all_branches", new=AsyncMock(return_value=["main"])
        ), patch("qkpr.commands.pin.select_branches") as mock_select:
            self.assertEqual(await handle_pin_command(), [])
        mock_select.assert_not_called()

    async def test_nothing_selected(self):
        with patch(
            "qkpr.commands.pin.list_all_branches", new=AsyncMock(return_value=["main"])
        ), patch("qkpr.commands.pin.select_branches", new=AsyncMock(return_value=[])):
            self.assertEqual(await handle_pin_command(), [])
        self.assertEqual(get_pinned_branches(), [])

    async def test_unpin_without_pins(self):
        with patch("qkpr.commands.pin.select_branches") as mock_select:
            self.assertEqual(await handle_unpin_command(), [])
        mock_select.assert_not_called()

    async def test_unpin_selected(self):
        for name in ["main", "develop", "feat/a"]:
            add_pinned_branch(name)
        with patch(
            "qkpr.commands.pin.select_branches",
            new=AsyncMock(return_value=["main", "feat/a"]),
        ):
            removed = await handle_unpin_command()
        self.assertEqual(removed, ["main", "feat/a"])
        self.assertEqual(get_pinned_branches(), ["develop"])


if __name__ == "__main__":
    unittest.main()
