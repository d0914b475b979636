#!/usr/bin/env python3

from .commit import handle_branch_command, handle_commit_command
from .pin import handle_list_pinned_command, handle_pin_command, handle_unpin_command
from .pr import handle_pr_command
from .settings import (
    handle_config_command,
    handle_config_model_command,
    handle_config_prompt_lang_command,
    handle_config_prompts_command,
)

__all__ = [
    "handle_branch_command",
    "handle_commit_command",
    "handle_config_command",
    "handle_config_model_command",
    "handle_config_prompt_lang_command",
    "handle_config_prompts_command",
    "handle_list_pinned_command",
    "handle_pin_command",
    "handle_pr_command",
    "handle_unpin_command",
]
