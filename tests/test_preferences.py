#!/usr/bin/env python3

import json
import os
import tempfile
import unittest
from unittest.mock import patch

from expecttest import TestCase

from qkpr import preferences
from qkpr.preferences import (
    DEFAULT_MODEL,
    add_pinned_branch,
    get_api_key,
    get_custom_branch_prompt,
    get_custom_commit_prompt,
    get_model,
    get_pinned_branches,
    get_preferences_path,
    get_prompt_language,
    is_branch_pinned,
    read_preferences,
    remove_pinned_branch,
    set_api_key,
    set_custom_branch_prompt,
    set_custom_commit_prompt,
    set_model,
    set_prompt_language,
)


class PreferencesTestCase(TestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.temp_dir.cleanup)

        env_patch = patch.dict(os.environ, {"QKPR_CONFIG_DIR": self.temp_dir.name})
        env_patch.start()
        self.addCleanup(env_patch.stop)
        for name in preferences.API_KEY_ENV_VARS + preferences.MODEL_ENV_VARS:
            os.environ.pop(name, None)

        self.path = os.path.join(self.temp_dir.name, "config.json")

    def write_raw(self, content):
        with open(self.path, "w", encoding="utf-8") as f:
            f.write(content)

    def read_raw(self):
        with open(self.path, encoding="utf-8") as f:
            return f.read()


class TestPreferenceFile(PreferencesTestCase):
    def test_path_follows_config_dir(self):
        self.assertEqual(str(get_preferences_path()), self.path)

    def test_missing_file_is_empty(self):
        self.assertEqual(read_preferences(), {})
        self.assertEqual(get_pinned_branches(), [])
        self.assertIsNone(get_api_key())
        self.assertEqual(get_model(), DEFAULT_MODEL)

    def test_malformed_json_is_empty(self):
        self.write_raw("{not json")
        self.assertEqual(read_preferences(), {})
        self.assertEqual(get_prompt_language(), "zh")

    def test_non_object_json_is_empty(self):
        self.write_raw("[1, 2, 3]")
        self.assertEqual(read_preferences(), {})

    def test_mutators_keep_other_keys(self):
        set_model("gemini-2.5-pro")
        set_api_key("secret")
        data = json.loads(self.read_raw())
        self.assertEqual(data, {"model": "gemini-2.5-pro", "apiKey": "secret"})

    def test_unknown_keys_survive(self):
        self.write_raw(json.dumps({"somethingElse": 1}))
        add_pinned_branch("main")
        self.assertEqual(
            json.loads(self.read_raw()), {"somethingElse": 1, "pinnedBranches": ["main"]}
        )

    def test_non_ascii_is_written_verbatim(self):
        set_custom_commit_prompt("用中文写提交信息")
        self.assertIn("用中文写提交信息", self.read_raw())


class TestPinnedBranches(PreferencesTestCase):
    def test_pin_is_idempotent(self):
        self.assertTrue(add_pinned_branch("feat/a"))
        before = self.read_raw()
        self.assertFalse(add_pinned_branch("feat/a"))
        self.assertEqual(self.read_raw(), before)
        self.assertEqual(get_pinned_branches(), ["feat/a"])

    def test_pin_order_is_preserved(self):
        for name in ["main", "develop", "release/1.0"]:
            add_pinned_branch(name)
        self.assertTrue(remove_pinned_branch("develop"))
        self.assertEqual(get_pinned_branches(), ["main", "release/1.0"])
        self.assertTrue(is_branch_pinned("main"))
        self.assertFalse(is_branch_pinned("develop"))

    def test_unpin_missing_does_not_write(self):
        self.assertFalse(remove_pinned_branch("feat/a"))
        self.assertFalse(os.path.exists(self.path))

        add_pinned_branch("main")
        before = self.read_raw()
        self.assertFalse(remove_pinned_branch("feat/a"))
        self.assertEqual(self.read_raw(), before)

    def test_duplicates_in_file_are_collapsed(self):
        self.write_raw(json.dumps({"pinnedBranches": ["a", "b", "a"]}))
        self.assertEqual(get_pinned_branches(), ["a", "b"])

    def test_invalid_pinned_value(self):
        self.write_raw(json.dumps({"pinnedBranches": "main"}))
        self.assertEqual(get_pinned_branches(), [])


class TestCredentials(PreferencesTestCase):
    def test_api_key_env_fallbacks(self):
        with patch.dict(os.environ, {"GEMINI_API_KEY": "generic"}):
            self.assertEqual(get_api_key(), "generic")
            with patch.dict(os.environ, {"QUICK_PR_GEMINI_API_KEY": "specific"}):
                self.assertEqual(get_api_key(), "specific")
                set_api_key("stored")
                self.assertEqual(get_api_key(), "stored")

    def test_legacy_api_key(self):
        self.write_raw(json.dumps({"geminiApiKey": "legacy"}))
        self.assertEqual(get_api_key(), "legacy")

    def test_model_fallbacks(self):
        self.assertEqual(get_model(), "gemini-2.0-flash")
        with patch.dict(os.environ, {"GEMINI_MODEL": "gemini-1.5-pro"}):
            self.assertEqual(get_model(), "gemini-1.5-pro")
            with patch.dict(os.environ, {"QUICK_PR_GEMINI_MODEL": "gemini-2.5-flash"}):
                self.assertEqual(get_model(), "gemini-2.5-flash")
        set_model("gemini-2.5-pro")
        self.assertEqual(get_model(), "gemini-2.5-pro")


class TestPromptSettings(PreferencesTestCase):
    def test_prompt_language(self):
        self.assertEqual(get_prompt_language(), "zh")
        set_prompt_language("en")
        self.assertEqual(get_prompt_language(), "en")

    def test_invalid_prompt_language(self):
        with self.assertRaises(ValueError):
            set_prompt_language("fr")
        self.write_raw(json.dumps({"promptLanguage": "fr"}))
        self.assertEqual(get_prompt_language(), "zh")

    def test_custom_prompts(self):
        self.assertIsNone(get_custom_commit_prompt())
        set_custom_commit_prompt("Write a haiku")
        set_custom_branch_prompt("Name it")
        self.assertEqual(get_custom_commit_prompt(), "Write a haiku")
        self.assertEqual(get_custom_branch_prompt(), "Name it")

        set_custom_commit_prompt("")
        self.assertIsNone(get_custom_commit_prompt())
        self.assertEqual(get_custom_branch_prompt(), "Name it")


if __name__ == "__main__":
    unittest.main()
