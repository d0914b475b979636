#!/usr/bin/env python3

import asyncio
import logging
import os
import sys
from typing import Any, Callable, Dict, Optional

import click

from .commands import (
    handle_branch_command,
    handle_commit_command,
    handle_config_command,
    handle_config_model_command,
    handle_config_prompt_lang_command,
    handle_config_prompts_command,
    handle_list_pinned_command,
    handle_pin_command,
    handle_pr_command,
    handle_unpin_command,
)
from .console import console, escape
from .errors import GUARD_KINDS, ErrorKind, QkprError
from .prompts import choose
from .version import PACKAGE_NAME, __version__

__all__ = ["cli", "configure_logging", "run_flow", "run_menu"]

# Library loggers that are only interesting when debugging
NOISY_LOGGERS = ("httpx", "httpcore")

MENU_ACTIONS = [
    ("pr", "🔧  Create Pull Request"),
    ("commit", "🤖  Generate Commit Message"),
    ("branch", "🌿  Generate Branch Name"),
    ("pin", "📌  Pin Branches"),
    ("unpin", "📍  Unpin Branches"),
    ("pinned", "📋  List Pinned Branches"),
    ("settings", "⚙️   Settings"),
    ("exit", "👋  Exit"),
]

SETTINGS_ACTIONS = [
    ("config", "🔑  Configure API Key"),
    ("config:model", "🤖  Configure Model"),
    ("config:prompt-lang", "🌐  Configure Prompt Language"),
    ("config:prompts", "📝  Configure Custom Prompts"),
    ("back", "↩️   Go back"),
]

FLOWS: Dict[str, Callable[[], Any]] = {
    "pr": handle_pr_command,
    "commit": handle_commit_command,
    "branch": handle_branch_command,
    "pin": handle_pin_command,
    "unpin": handle_unpin_command,
    "pinned": handle_list_pinned_command,
    "config": handle_config_command,
    "config:model": handle_config_model_command,
    "config:prompt-lang": handle_config_prompt_lang_command,
    "config:prompts": handle_config_prompts_command,
}


def configure_logging(log_file: str = "qkpr.log") -> None:
    """Configure logging to write to both a file and the console.

    The log level is determined from the configuration file.
    It can be overridden by setting the QKPR_DEBUG_LEVEL environment variable,
    and QKPR_DEBUG=1 forces DEBUG.

    The log directory is read from the configuration file's logger.path setting.
    By default, logs are written to $HOME/.qkpr.

    The console only shows warnings and errors unless in debug mode, so that
    log records do not interleave with interactive prompts. Logs from httpx
    and httpcore are filtered out unless in debug mode.
    """
    from .config import get_logger_path, get_logger_verbosity

    log_dir = get_logger_path()
    os.makedirs(log_dir, exist_ok=True)
    log_path = os.path.join(log_dir, log_file)

    log_level_str = os.environ.get("QKPR_DEBUG_LEVEL") or get_logger_verbosity()

    log_level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }

    log_level = log_level_map.get(log_level_str.upper(), logging.INFO)

    debug_mode = False
    if os.environ.get("QKPR_DEBUG"):
        log_level = logging.DEBUG
        debug_mode = True

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    file_handler = logging.FileHandler(log_path)
    file_handler.setLevel(log_level)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level if debug_mode else max(log_level, logging.WARNING))

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    file_handler.setFormatter(formatter)
    console_handler.setFormatter(formatter)

    class ModuleFilter(logging.Filter):
        def filter(self, record: logging.LogRecord) -> bool:
            if debug_mode:
                return True
            return not record.name.startswith(NOISY_LOGGERS)

    module_filter = ModuleFilter()
    file_handler.addFilter(module_filter)
    console_handler.addFilter(module_filter)

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    logging.info(f"Logging configured. Log file: {log_path}")
    logging.info(f"Log level set to: {logging.getLevelName(log_level)}")


def report_error(error: QkprError) -> None:
    if error.kind in (ErrorKind.ALREADY_PINNED, ErrorKind.NO_STAGED_CHANGES):
        console.print(f"[yellow]⚠️  {escape(error.message)}[/yellow]\n")
    else:
        console.print(f"[red]❌  {escape(error.message)}[/red]\n")


def _execute(flow: Callable[..., Any], *args: Any) -> None:
    result = flow(*args)
    if asyncio.iscoroutine(result):
        asyncio.run(result)


def run_flow(flow: Callable[..., Any], *args: Any) -> None:
    """Run a flow as a one-shot subcommand.

    Guard failures (not a repository, no branches, unparseable remote) exit
    with status 1; other reported failures exit cleanly.
    """
    try:
        _execute(flow, *args)
    except QkprError as e:
        logging.info(f"Command stopped: {e.kind.value}: {e.message}")
        report_error(e)
        if e.kind in GUARD_KINDS:
            sys.exit(1)
    except (KeyboardInterrupt, click.Abort):
        console.print("\n[dim]Interrupted[/dim]")
        sys.exit(130)


def _run_settings_menu() -> None:
    action = choose("Settings", SETTINGS_ACTIONS)
    if action != "back":
        _execute(FLOWS[action])


def run_menu() -> None:
    """Interactive main menu; every failure returns here until the user exits."""
    console.print(f"[bold cyan]qkpr[/bold cyan] [dim]v{__version__}[/dim]\n")
    while True:
        action = choose("What would you like to do?", MENU_ACTIONS)
        if action == "exit":
            console.print("[dim]👋  Bye![/dim]")
            return
        try:
            if action == "settings":
                _run_settings_menu()
            else:
                _execute(FLOWS[action])
        except QkprError as e:
            logging.info(f"{action} stopped: {e.kind.value}: {e.message}")
            report_error(e)
        except OSError as e:
            logging.warning(f"{action} failed: {e}", exc_info=True)
            report_error(QkprError(ErrorKind.COMMAND_FAILED, str(e)))


def _maybe_check_for_updates() -> None:
    from .config import is_update_check_enabled
    from .version_check import check_and_notify_update

    if is_update_check_enabled():
        check_and_notify_update(PACKAGE_NAME, __version__)


@click.group(
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.version_option(__version__, "-v", "--version", prog_name=PACKAGE_NAME)
@click.pass_context
def cli(ctx: click.Context) -> None:
    """qkpr: create PRs, draft commit messages and branch names, pin branches.

    Run without a subcommand for the interactive menu.
    """
    configure_logging()
    if ctx.invoked_subcommand is None:
        try:
            _maybe_check_for_updates()
            run_menu()
        except (KeyboardInterrupt, click.Abort):
            console.print("\n[dim]Interrupted[/dim]")
            sys.exit(130)


@cli.command()
def pr() -> None:
    """Create a pull/merge request from the current branch."""
    run_flow(handle_pr_command)


@cli.command()
def commit() -> None:
    """Generate a commit message for the staged changes."""
    run_flow(handle_commit_command)


@cli.command()
def branch() -> None:
    """Generate a branch name for the staged changes."""
    run_flow(handle_branch_command)


@cli.command("config")
def config_command() -> None:
    """Configure the Gemini API key."""
    run_flow(handle_config_command)


@cli.command("config:model")
def config_model() -> None:
    """Select the Gemini model."""
    run_flow(handle_config_model_command)


@cli.command("config:prompt-lang")
def config_prompt_lang() -> None:
    """Select the language of the built-in prompts."""
    run_flow(handle_config_prompt_lang_command)


@cli.command("config:prompts")
def config_prompts() -> None:
    """Set or clear custom commit message and branch name prompts."""
    run_flow(handle_config_prompts_command)


@cli.command()
@click.argument("branch_name", required=False)
def pin(branch_name: Optional[str]) -> None:
    """Pin BRANCH_NAME, or pick branches to pin interactively."""
    run_flow(handle_pin_command, branch_name)


@cli.command()
@click.argument("branch_name", required=False)
def unpin(branch_name: Optional[str]) -> None:
    """Unpin BRANCH_NAME, or pick pinned branches to unpin interactively."""
    run_flow(handle_unpin_command, branch_name)


@cli.command()
def pinned() -> None:
    """List pinned branches."""
    run_flow(handle_list_pinned_command)
