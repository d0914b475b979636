#!/usr/bin/env python3

import unittest
from unittest.mock import MagicMock, patch

import httpx
from expecttest import TestCase

from qkpr.version_check import (
    VersionCheckResult,
    check_for_updates,
    compare_versions,
    prompt_for_update,
)


class TestCompareVersions(TestCase):
    def test_ordering(self):
        self.assertEqual(compare_versions("0.4.0", "0.4.0"), 0)
        self.assertEqual(compare_versions("0.4.0", "0.5.0"), -1)
        self.assertEqual(compare_versions("1.10.0", "1.9.3"), 1)
        self.assertEqual(compare_versions("1.2", "1.2.0"), 0)
        self.assertEqual(compare_versions("1.2", "1.2.1"), -1)

    def test_suffixes_compare_numerically(self):
        self.assertEqual(compare_versions("1.0.0rc1", "1.0.0"), 0)
        self.assertEqual(compare_versions("2.0.0b2", "1.9.9"), 1)


class TestCheckForUpdates(TestCase):
    def pypi_response(self, version):
        response = MagicMock()
        response.json.return_value = {"info": {"version": version}}
        return response

    def test_newer_release(self):
        with patch("httpx.get", return_value=self.pypi_response("0.5.1")) as mock_get:
            result = check_for_updates("qkpr", "0.4.0")

        self.assertEqual(result, VersionCheckResult(True, "0.4.0", "0.5.1"))
        self.assertEqual(mock_get.call_args.args[0], "https://pypi.org/pypi/qkpr/json")
        self.assertEqual(mock_get.call_args.kwargs["timeout"], 3.0)

    def test_same_release(self):
        with patch("httpx.get", return_value=self.pypi_response("0.4.0")):
            self.assertFalse(check_for_updates("qkpr", "0.4.0").has_update)

    def test_failure_means_no_update(self):
        with patch("httpx.get", side_effect=httpx.ConnectTimeout("timed out")):
            result = check_for_updates("qkpr", "0.4.0")
        self.assertEqual(result, VersionCheckResult(False, "0.4.0", "0.4.0"))

    def test_unexpected_payload_means_no_update(self):
        response = MagicMock()
        response.json.return_value = {"unexpected": True}
        with patch("httpx.get", return_value=response):
            self.assertFalse(check_for_updates("qkpr", "0.4.0").has_update)


class TestPromptForUpdate(TestCase):
    def test_no_update_does_not_prompt(self):
        with patch("qkpr.version_check.confirm") as mock_confirm:
            prompt_for_update("qkpr", VersionCheckResult(False, "0.4.0", "0.4.0"))
        mock_confirm.assert_not_called()

    def test_declined_update_does_not_install(self):
        with patch("qkpr.version_check.confirm", return_value=False), patch(
            "qkpr.version_check.subprocess.run"
        ) as mock_run:
            prompt_for_update("qkpr", VersionCheckResult(True, "0.4.0", "0.5.0"))
        mock_run.assert_not_called()

    def test_accepted_update_installs_and_exits(self):
        with patch("qkpr.version_check.confirm", return_value=True), patch(
            "qkpr.version_check.subprocess.run"
        ) as mock_run:
            with self.assertRaises(SystemExit) as cm:
                prompt_for_update("qkpr", VersionCheckResult(True, "0.4.0", "0.5.0"))
        self.assertEqual(cm.exception.code, 0)
        self.assertEqual(mock_run.call_args.args[0][-3:], ["install", "--upgrade", "qkpr"])


if __name__ == "__main__":
    unittest.main()
