#!/usr/bin/env python3

"""Settings flows: API key, model, prompt language and custom prompts."""

import logging
from typing import Optional

from ..console import console, escape, print_banner
from ..drafting import COMMON_MODELS, fetch_available_models
from ..errors import ErrorKind, QkprError
from ..preferences import (
    get_api_key,
    get_custom_branch_prompt,
    get_custom_commit_prompt,
    get_model,
    get_prompt_language,
    set_api_key,
    set_custom_branch_prompt,
    set_custom_commit_prompt,
    set_model,
    set_prompt_language,
)
from ..prompts import ask_secret, ask_text, choose, confirm, edit_text

__all__ = [
    "API_KEY_URL",
    "prompt_api_key",
    "ensure_api_key",
    "prompt_model_selection",
    "handle_config_command",
    "handle_config_model_command",
    "handle_config_prompt_lang_command",
    "handle_config_prompts_command",
]

log = logging.getLogger(__name__)

API_KEY_URL = "https://aistudio.google.com/apikey"


def prompt_api_key() -> Optional[str]:
    """Ask for an API key until one is entered; None if the user goes back."""
    while True:
        action = choose(
            "Please enter your Gemini API Key",
            [("enter", "✏️  Enter API Key"), ("back", "↩️  Go back")],
        )
        if action == "back":
            return None

        api_key = ask_secret("API Key")
        if not api_key:
            console.print("[yellow]⚠️  Please enter a valid API Key, or go back[/yellow]")
            continue
        return api_key


def ensure_api_key() -> str:
    """Return the configured API key, asking for (and optionally saving) one if missing.

    Raises:
        QkprError: If no key is configured and the user declines to enter one.
    """
    api_key = get_api_key()
    if api_key:
        return api_key

    console.print("[yellow]ℹ️  Gemini API Key not found.[/yellow]\n")
    console.print(f"[dim]You can get your API Key from: {API_KEY_URL}[/dim]\n")

    api_key = prompt_api_key()
    if not api_key:
        raise QkprError(ErrorKind.MISSING_API_KEY, "Cancelled: no Gemini API Key")

    if confirm("Save API Key for future use?", default=True):
        set_api_key(api_key)
        console.print("\n[green]✅  API Key saved successfully![/green]\n")
    return api_key


async def prompt_model_selection(api_key: Optional[str]) -> Optional[str]:
    current_model = get_model()
    models = None

    if api_key:
        console.print("[dim]Fetching available models...[/dim]")
        listing = await fetch_available_models(api_key)
        if listing.degraded:
            console.print(
                f"[yellow]⚠️  Could not fetch models dynamically: {escape(listing.error or '')}[/yellow]"
            )
            console.print("[dim]Using common models list instead[/dim]\n")
        else:
            console.print("[green]✅ Successfully fetched available models[/green]\n")
        models = listing.models

    if models is None:
        models = list(COMMON_MODELS)

    search = ask_text("Filter models (leave empty to list all)", default="")
    if search:
        matching = [m for m in models if search.lower() in m.lower()]
        if matching:
            models = matching
        else:
            console.print(f"[yellow]⚠️  No models match '{escape(search)}'[/yellow]")

    choices = [
        (m, f"{m} (current)" if m == current_model else m) for m in models
    ]
    choices.append(("custom", "✏️  Enter custom model name"))
    choices.append(("back", "↩️  Go back"))

    choice = choose("Select a Gemini model", choices, default=current_model)
    if choice == "back":
        return None
    if choice == "custom":
        custom = ask_text("Enter model name (leave empty to go back)", default="")
        return custom or None
    return choice


def handle_config_command() -> None:
    print_banner("⚙️   Configuration")
    console.print(f"[dim]Get your API Key from: {API_KEY_URL}[/dim]\n")

    api_key = prompt_api_key()
    if not api_key:
        console.print("\n[yellow]⚠️  Cancelled[/yellow]\n")
        return

    set_api_key(api_key)
    console.print("\n[green]✅  API Key configured successfully![/green]\n")


async def handle_config_model_command() -> None:
    print_banner("🤖  Model Configuration")
    console.print(f"[dim]Current model: {escape(get_model())}[/dim]\n")

    api_key = get_api_key()
    if not api_key:
        console.print("[yellow]ℹ️  No API Key found. Using common models list.[/yellow]")
        console.print(
            "[dim]Configure API Key first to fetch all available models dynamically.[/dim]\n"
        )

    model = await prompt_model_selection(api_key)
    if not model:
        console.print("\n[yellow]⚠️  Cancelled[/yellow]\n")
        return

    set_model(model)
    console.print(f"\n[green]✅  Model configured successfully: {escape(model)}[/green]\n")


def handle_config_prompt_lang_command() -> None:
    print_banner("🌐  Prompt Language Configuration")
    current = get_prompt_language()
    console.print(f"[dim]Current prompt language: {current}[/dim]\n")

    language = choose(
        "Select a language for the prompts",
        [("zh", "🇨🇳  Chinese"), ("en", "🇺🇸  English"), ("back", "↩️  Go back")],
        default=current,
    )
    if language == "back":
        console.print("\n[yellow]⚠️  Cancelled[/yellow]\n")
        return

    set_prompt_language(language)
    console.print(f"\n[green]✅  Prompt language configured successfully: {language}[/green]\n")


def handle_config_prompts_command() -> None:
    print_banner("📝  Custom Prompts Configuration")
    commit_prompt = get_custom_commit_prompt()
    branch_prompt = get_custom_branch_prompt()

    console.print("[dim]Current custom commit message prompt:[/dim]")
    console.print(f"[yellow]{escape(commit_prompt)}[/yellow]" if commit_prompt else "[dim]Not set[/dim]")
    console.print("[dim]\nCurrent custom branch name prompt:[/dim]")
    console.print(f"[yellow]{escape(branch_prompt)}[/yellow]" if branch_prompt else "[dim]Not set[/dim]")

    action = choose(
        "What would you like to do?",
        [
            ("commit", "✏️  Set custom commit message prompt"),
            ("branch", "✏️  Set custom branch name prompt"),
            ("clear-commit", "🗑️  Clear custom commit message prompt"),
            ("clear-branch", "🗑️  Clear custom branch name prompt"),
            ("back", "↩️  Go back"),
        ],
    )

    if action == "commit":
        prompt = edit_text(commit_prompt)
        if prompt:
            set_custom_commit_prompt(prompt)
            console.print("\n[green]✅  Custom commit message prompt saved![/green]\n")
        else:
            console.print("\n[yellow]⚠️  Cancelled[/yellow]\n")
    elif action == "branch":
        prompt = edit_text(branch_prompt)
        if prompt:
            set_custom_branch_prompt(prompt)
            console.print("\n[green]✅  Custom branch name prompt saved![/green]\n")
        else:
            console.print("\n[yellow]⚠️  Cancelled[/yellow]\n")
    elif action == "clear-commit":
        set_custom_commit_prompt("")
        console.print("\n[green]✅  Custom commit message prompt cleared![/green]\n")
    elif action == "clear-branch":
        set_custom_branch_prompt("")
        console.print("\n[green]✅  Custom branch name prompt cleared![/green]\n")
    else:
        console.print("\n[yellow]⚠️  Cancelled[/yellow]\n")
