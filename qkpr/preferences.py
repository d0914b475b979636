"""Preference store for qkpr.

Preferences are the values the tool itself mutates: API key, model, pinned
branches, prompt language and custom prompts. They live in a JSON object at:
1. $QKPR_CONFIG_DIR/config.json if $QKPR_CONFIG_DIR is defined
2. $HOME/.qkpr/config.json

Every mutator performs a full read-modify-write of the file. There is no
locking between concurrent qkpr processes; the last writer wins.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, List, Optional

from .locales import DEFAULT_LANGUAGE, LANGUAGES, Language

__all__ = [
    "DEFAULT_MODEL",
    "get_preferences_path",
    "read_preferences",
    "write_preferences",
    "get_api_key",
    "set_api_key",
    "get_model",
    "set_model",
    "get_pinned_branches",
    "add_pinned_branch",
    "remove_pinned_branch",
    "is_branch_pinned",
    "get_prompt_language",
    "set_prompt_language",
    "get_custom_commit_prompt",
    "set_custom_commit_prompt",
    "get_custom_branch_prompt",
    "set_custom_branch_prompt",
]

log = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.0-flash"

API_KEY_ENV_VARS = ("QUICK_PR_GEMINI_API_KEY", "GEMINI_API_KEY")
MODEL_ENV_VARS = ("QUICK_PR_GEMINI_MODEL", "GEMINI_MODEL")


def get_preferences_path() -> Path:
    if "QKPR_CONFIG_DIR" in os.environ:
        return Path(os.environ["QKPR_CONFIG_DIR"]) / "config.json"
    return Path.home() / ".qkpr" / "config.json"


def read_preferences() -> dict[str, Any]:
    """Read the whole preference object.

    A missing file, unreadable file or malformed JSON all yield an empty dict.
    """
    path = get_preferences_path()
    if not path.exists():
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        log.debug(f"Ignoring unreadable preferences at {path}: {e}")
        return {}

    if not isinstance(data, dict):
        log.debug(f"Ignoring non-object preferences at {path}")
        return {}
    return data


def write_preferences(preferences: dict[str, Any]) -> None:
    """Rewrite the whole preference file."""
    path = get_preferences_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(preferences, f, indent=2, ensure_ascii=False)
    log.debug(f"Wrote preferences to {path}")


def _first_env(names: tuple[str, ...]) -> Optional[str]:
    for name in names:
        value = os.environ.get(name)
        if value:
            return value
    return None


def get_api_key() -> Optional[str]:
    """API key from preferences, then QUICK_PR_GEMINI_API_KEY, then GEMINI_API_KEY."""
    prefs = read_preferences()
    return prefs.get("apiKey") or prefs.get("geminiApiKey") or _first_env(
        API_KEY_ENV_VARS
    )


def set_api_key(api_key: str) -> None:
    prefs = read_preferences()
    prefs["apiKey"] = api_key
    write_preferences(prefs)


def get_model() -> str:
    """Model from preferences, then the model env vars, then DEFAULT_MODEL."""
    prefs = read_preferences()
    return (
        prefs.get("model")
        or prefs.get("geminiModel")
        or _first_env(MODEL_ENV_VARS)
        or DEFAULT_MODEL
    )


def set_model(model: str) -> None:
    prefs = read_preferences()
    prefs["model"] = model
    write_preferences(prefs)


def get_pinned_branches() -> List[str]:
    prefs = read_preferences()
    pinned = prefs.get("pinnedBranches") or []
    if not isinstance(pinned, list):
        return []
    # Collapse duplicates from hand-edited files, keeping first occurrence
    return list(dict.fromkeys(str(b) for b in pinned))


def add_pinned_branch(branch: str) -> bool:
    """Append a branch to the pin list.

    Returns:
        False (and leaves the file untouched) if the branch was already pinned.
    """
    prefs = read_preferences()
    pinned = get_pinned_branches()
    if branch in pinned:
        return False
    pinned.append(branch)
    prefs["pinnedBranches"] = pinned
    write_preferences(prefs)
    return True


def remove_pinned_branch(branch: str) -> bool:
    """Remove a branch from the pin list, preserving the order of the rest.

    Returns:
        False (and leaves the file untouched) if the branch was not pinned.
    """
    prefs = read_preferences()
    pinned = get_pinned_branches()
    if branch not in pinned:
        return False
    pinned.remove(branch)
    prefs["pinnedBranches"] = pinned
    write_preferences(prefs)
    return True


def is_branch_pinned(branch: str) -> bool:
    return branch in get_pinned_branches()


def get_prompt_language() -> Language:
    language = read_preferences().get("promptLanguage")
    if language in LANGUAGES:
        return language
    return DEFAULT_LANGUAGE


def set_prompt_language(language: str) -> None:
    if language not in LANGUAGES:
        raise ValueError(f"Unsupported prompt language: {language}")
    prefs = read_preferences()
    prefs["promptLanguage"] = language
    write_preferences(prefs)


def get_custom_commit_prompt() -> Optional[str]:
    return read_preferences().get("customCommitMessagePrompt") or None


def set_custom_commit_prompt(prompt: str) -> None:
    """Store a custom commit prompt; an empty string clears it."""
    prefs = read_preferences()
    prefs["customCommitMessagePrompt"] = prompt
    write_preferences(prefs)


def get_custom_branch_prompt() -> Optional[str]:
    return read_preferences().get("customBranchNamePrompt") or None


def set_custom_branch_prompt(prompt: str) -> None:
    """Store a custom branch prompt; an empty string clears it."""
    prefs = read_preferences()
    prefs["customBranchNamePrompt"] = prompt
    write_preferences(prefs)
