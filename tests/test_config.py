#!/usr/bin/env python3

import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from expecttest import TestCase

from qkpr.config import (
    get_config_path,
    get_gemini_base_url,
    get_gemini_timeout,
    get_git_timeout,
    get_logger_path,
    get_logger_verbosity,
    is_update_check_enabled,
    load_config,
)


class TestConfig(TestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.temp_dir.cleanup)
        self.config_dir = os.path.join(self.temp_dir.name, "config")
        self.xdg_dir = os.path.join(self.temp_dir.name, "xdg")
        self.home_dir = os.path.join(self.temp_dir.name, "home")
        for path in [self.config_dir, self.xdg_dir, self.home_dir]:
            os.makedirs(path)

        env_patch = patch.dict(
            os.environ,
            {"QKPR_CONFIG_DIR": self.config_dir, "XDG_CONFIG_HOME": self.xdg_dir},
        )
        env_patch.start()
        self.addCleanup(env_patch.stop)

        home_patch = patch("pathlib.Path.home", return_value=Path(self.home_dir))
        home_patch.start()
        self.addCleanup(home_patch.stop)

    def write_rc(self, directory, content, name="qkprrc"):
        path = os.path.join(directory, name)
        with open(path, "w") as f:
            f.write(content)
        return path

    def test_defaults(self):
        self.assertEqual(get_config_path(), Path(self.home_dir) / ".qkprrc")
        self.assertEqual(get_logger_verbosity(), "INFO")
        self.assertEqual(get_git_timeout(), 30.0)
        self.assertEqual(get_gemini_timeout(), 60.0)
        self.assertEqual(
            get_gemini_base_url(), "https://generativelanguage.googleapis.com/v1beta"
        )
        self.assertTrue(is_update_check_enabled())

    def test_lookup_order(self):
        home_rc = self.write_rc(self.home_dir, "", name=".qkprrc")
        self.assertEqual(str(get_config_path()), home_rc)

        xdg_dir = os.path.join(self.xdg_dir, "qkpr")
        os.makedirs(xdg_dir)
        xdg_rc = self.write_rc(xdg_dir, "")
        self.assertEqual(str(get_config_path()), xdg_rc)

        config_rc = self.write_rc(self.config_dir, "")
        self.assertEqual(str(get_config_path()), config_rc)

    def test_user_values_are_merged(self):
        self.write_rc(
            self.config_dir,
            """\
[logger]
verbosity = "DEBUG"
path = "~/qkpr-logs"

[git]
timeout = 5

[gemini]
base_url = "http://localhost:8080/v1beta/"

[updates]
check = false
""",
        )
        self.assertEqual(get_logger_verbosity(), "DEBUG")
        self.assertEqual(get_logger_path(), os.path.expanduser("~/qkpr-logs"))
        self.assertEqual(get_git_timeout(), 5.0)
        self.assertEqual(get_gemini_base_url(), "http://localhost:8080/v1beta")
        self.assertEqual(get_gemini_timeout(), 60.0)
        self.assertFalse(is_update_check_enabled())

    def test_malformed_file_uses_defaults(self):
        self.write_rc(self.config_dir, "[git\ntimeout = ")
        config = load_config()
        self.assertEqual(config["git"]["timeout"], 30.0)

    def test_defaults_are_not_mutated(self):
        self.write_rc(self.config_dir, "[git]\ntimeout = 1\n")
        self.assertEqual(load_config()["git"]["timeout"], 1)
        os.remove(os.path.join(self.config_dir, "qkprrc"))
        self.assertEqual(load_config()["git"]["timeout"], 30.0)


if __name__ == "__main__":
    unittest.main()
