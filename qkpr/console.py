#!/usr/bin/env python3

from typing import Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

__all__ = ["console", "escape", "print_banner"]

console = Console(highlight=False)


def print_banner(title: str, subtitle: Optional[str] = None) -> None:
    body = f"[bold cyan]{title}[/bold cyan]"
    if subtitle:
        body += f"\n[dim]{subtitle}[/dim]"
    console.print(
        Panel(
            body,
            expand=False,
            border_style="cyan",
            box=box.HEAVY,
            padding=(0, 4),
        )
    )
