#!/usr/bin/env python3

import subprocess
import unittest
from unittest.mock import patch

from expecttest import TestCase

from qkpr.desktop import clipboard_command, copy_to_clipboard, open_in_browser


class TestClipboard(TestCase):
    def test_platform_commands(self):
        self.assertEqual(clipboard_command("darwin"), ["pbcopy"])
        self.assertEqual(clipboard_command("win32"), ["clip"])
        self.assertIsNone(clipboard_command("freebsd13"))

    def test_linux_prefers_xclip(self):
        with patch("qkpr.desktop.shutil.which", return_value="/usr/bin/tool"):
            self.assertEqual(
                clipboard_command("linux"), ["xclip", "-selection", "clipboard"]
            )

    def test_linux_wayland(self):
        def which(name):
            return "/usr/bin/wl-copy" if name == "wl-copy" else None

        with patch("qkpr.desktop.shutil.which", side_effect=which):
            self.assertEqual(clipboard_command("linux"), ["wl-copy"])

    def test_linux_without_tools(self):
        with patch("qkpr.desktop.shutil.which", return_value=None):
            self.assertIsNone(clipboard_command("linux"))

    def test_copy_without_tool(self):
        with patch("qkpr.desktop.clipboard_command", return_value=None):
            self.assertFalse(copy_to_clipboard("text"))

    def test_copy_passes_text_on_stdin(self):
        with patch("qkpr.desktop.clipboard_command", return_value=["pbcopy"]), patch(
            "qkpr.desktop.subprocess.run"
        ) as mock_run:
            self.assertTrue(copy_to_clipboard("héllo"))
        self.assertEqual(mock_run.call_args.kwargs["input"], "héllo".encode("utf-8"))

    def test_copy_failure(self):
        with patch("qkpr.desktop.clipboard_command", return_value=["pbcopy"]), patch(
            "qkpr.desktop.subprocess.run",
            side_effect=subprocess.CalledProcessError(1, ["pbcopy"]),
        ):
            self.assertFalse(copy_to_clipboard("text"))


class TestBrowser(TestCase):
    def test_open_in_browser(self):
        with patch("qkpr.desktop.click.launch", return_value=0) as mock_launch:
            self.assertTrue(open_in_browser("https://example.com"))
        mock_launch.assert_called_once_with("https://example.com")

    def test_open_in_browser_failure(self):
        with patch("qkpr.desktop.click.launch", return_value=1):
            self.assertFalse(open_in_browser("https://example.com"))


if __name__ == "__main__":
    unittest.main()
