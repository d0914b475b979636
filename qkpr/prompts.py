#!/usr/bin/env python3

"""Thin wrappers around click prompts.

Flows call these instead of click directly so that tests can patch a single
seam per kind of question.
"""

from typing import List, Optional, Sequence, Tuple

import click

from .console import console, escape

__all__ = ["confirm", "ask_text", "ask_secret", "choose", "edit_text"]


def confirm(message: str, default: bool = True) -> bool:
    return click.confirm(message, default=default)


def ask_text(message: str, default: str = "") -> str:
    value = click.prompt(
        message, default=default, show_default=bool(default), type=str
    )
    return str(value).strip()


def ask_secret(message: str) -> str:
    value = click.prompt(
        message, default="", show_default=False, hide_input=True, type=str
    )
    return str(value).strip()


def choose(
    message: str,
    choices: Sequence[Tuple[str, str]],
    default: Optional[str] = None,
) -> str:
    """Ask the user to pick one of (value, label) pairs by number.

    Returns:
        The value of the chosen pair.
    """
    values: List[str] = [value for value, _ in choices]
    for index, (_, label) in enumerate(choices, start=1):
        console.print(f"  [green]{index:>2}.[/green] {escape(label)}")

    default_index = values.index(default) + 1 if default in values else 1
    picked = click.prompt(
        message,
        type=click.IntRange(1, len(values)),
        default=default_index,
    )
    return values[picked - 1]


def edit_text(initial: Optional[str] = None) -> Optional[str]:
    """Open $EDITOR on initial; None if the user closed it without saving."""
    edited = click.edit(initial or "")
    if edited is None:
        return None
    return edited.strip()
