#!/usr/bin/env python3

"""Interactive branch picker.

Candidate branches are merged with the user's pinned branches into one of two
presentations:

- the category view, used to pick a single target branch: pinned branches in
  pin order, then the rest grouped by category (see CATEGORY_ORDER) with the
  most recently updated branch first inside each group;
- the flat view, used by the pin/unpin multi-select: pinned branches in pin
  order, then the rest alphabetically.

Only the first MAX_BRANCHES non-pinned branches are shown.
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from .console import console, escape
from .git_branch import BranchDescriptor, describe_branches
from .preferences import get_pinned_branches
from .prompts import ask_text

__all__ = [
    "CATEGORY_ORDER",
    "MAX_BRANCHES",
    "PickerEntry",
    "category_sort_key",
    "build_category_view",
    "build_flat_view",
    "filter_entries",
    "parse_selection",
    "select_branch",
    "select_branches",
    "prompt_target_branch",
]

log = logging.getLogger(__name__)

CATEGORY_ORDER = ["feat", "fix", "merge", "refactor", "hotfix", "chore", "docs", "test", "style"]
MAX_BRANCHES = 100
NAME_WIDTH = 45


@dataclass(frozen=True)
class PickerEntry:
    branch: BranchDescriptor
    pinned: bool

    @property
    def name(self) -> str:
        return self.branch.name


def category_sort_key(category: str) -> Tuple[int, int, str]:
    """Known categories in CATEGORY_ORDER, then unknown ones A-Z, "other" last."""
    if category in CATEGORY_ORDER:
        return (0, CATEGORY_ORDER.index(category), "")
    if category == "other":
        return (2, 0, "")
    return (1, 0, category)


def _split_pinned(
    descriptors: Iterable[BranchDescriptor],
    pinned_names: Sequence[str],
    filter_pinned: bool,
) -> Tuple[List[BranchDescriptor], List[BranchDescriptor]]:
    pin_index = {name: i for i, name in enumerate(pinned_names)}
    pinned: List[BranchDescriptor] = []
    regular: List[BranchDescriptor] = []
    for descriptor in descriptors:
        if descriptor.name in pin_index:
            if not filter_pinned:
                pinned.append(descriptor)
        else:
            regular.append(descriptor)
    pinned.sort(key=lambda d: pin_index[d.name])
    return pinned, regular


def _assemble(
    pinned: List[BranchDescriptor], regular: List[BranchDescriptor], limit: int
) -> List[PickerEntry]:
    entries = [PickerEntry(branch=d, pinned=True) for d in pinned]
    entries.extend(PickerEntry(branch=d, pinned=False) for d in regular[:limit])
    return entries


def build_category_view(
    descriptors: Iterable[BranchDescriptor],
    pinned_names: Sequence[str],
    filter_pinned: bool = False,
    limit: int = MAX_BRANCHES,
) -> List[PickerEntry]:
    pinned, regular = _split_pinned(descriptors, pinned_names, filter_pinned)
    regular.sort(
        key=lambda d: (
            category_sort_key(d.category),
            -d.last_commit_epoch_seconds,
            d.name,
        )
    )
    return _assemble(pinned, regular, limit)


def build_flat_view(
    descriptors: Iterable[BranchDescriptor],
    pinned_names: Sequence[str],
    filter_pinned: bool = False,
    limit: int = MAX_BRANCHES,
) -> List[PickerEntry]:
    pinned, regular = _split_pinned(descriptors, pinned_names, filter_pinned)
    regular.sort(key=lambda d: d.name)
    return _assemble(pinned, regular, limit)


def filter_entries(entries: Sequence[PickerEntry], text: str) -> List[PickerEntry]:
    """Entries whose name contains text, ignoring case."""
    needle = text.strip().lower()
    if not needle:
        return list(entries)
    return [e for e in entries if needle in e.name.lower()]


_SELECTION_TOKEN = re.compile(r"^(\d+)(?:-(\d+))?$")


def parse_selection(text: str, count: int) -> Optional[List[int]]:
    """Parse "1,3 5-7" into zero-based indices.

    Returns:
        The indices in input order, or None if text is not a valid selection
        for a list of count items (the caller then treats it as a filter).
    """
    tokens = [t for t in re.split(r"[,\s]+", text.strip()) if t]
    if not tokens:
        return None
    indices: List[int] = []
    for token in tokens:
        match = _SELECTION_TOKEN.match(token)
        if match is None:
            return None
        start = int(match.group(1))
        end = int(match.group(2)) if match.group(2) else start
        if start < 1 or end > count or start > end:
            return None
        indices.extend(range(start - 1, end))
    return indices


def _render(
    entries: Sequence[PickerEntry],
    grouped: bool,
    checked: Optional[Set[str]] = None,
) -> None:
    section = None
    for index, entry in enumerate(entries, start=1):
        if entry.pinned:
            heading = "📌 Pinned Branches"
        elif grouped:
            heading = f"🌿 {entry.branch.category}"
        else:
            heading = "🌿 All Branches (Alphabetical)"
        if heading != section:
            style = "magenta" if entry.pinned else "cyan"
            console.print(f"[{style}]━━━━━━━━ {escape(heading)} ━━━━━━━━[/{style}]")
            section = heading

        box = ""
        if checked is not None:
            box = "[x] " if entry.name in checked else "[ ] "
        marker = "📌" if entry.pinned else "  "
        console.print(
            f"[green]{index:>3}.[/green] {escape(box)}{marker} "
            f"{escape(entry.name.ljust(NAME_WIDTH))} "
            f"[dim]({escape(entry.branch.last_commit_time_formatted)})[/dim]"
        )


def _pick_single(entries: List[PickerEntry], message: str) -> str:
    visible = entries
    while True:
        _render(visible, grouped=True)
        answer = ask_text(f"{message} (number, or text to search)", default="1")
        # A branch literally named "2" wins over the second entry
        exact = [e.name for e in entries if e.name == answer.strip()]
        if exact:
            return exact[0]
        selection = parse_selection(answer, len(visible))
        if selection is not None and len(selection) == 1:
            return visible[selection[0]].name

        matches = filter_entries(entries, answer)
        if not matches:
            console.print(f"[yellow]⚠️  No branches match '{escape(answer)}'[/yellow]")
            continue
        if len(matches) == 1:
            return matches[0].name
        visible = matches


def _pick_multiple(
    entries: List[PickerEntry], message: str, default_selected: Iterable[str]
) -> List[str]:
    names = {e.name for e in entries}
    checked = {name for name in default_selected if name in names}
    visible = entries
    while True:
        _render(visible, grouped=False, checked=checked)
        answer = ask_text(
            f"{message} (numbers to toggle e.g. 1,3-5; text to search; Enter to confirm)",
            default="",
        )
        if not answer:
            return [e.name for e in entries if e.name in checked]

        selection = parse_selection(answer, len(visible))
        if selection is not None:
            for index in selection:
                name = visible[index].name
                if name in checked:
                    checked.remove(name)
                else:
                    checked.add(name)
            continue

        matches = filter_entries(entries, answer)
        if not matches:
            console.print(f"[yellow]⚠️  No branches match '{escape(answer)}'[/yellow]")
            continue
        visible = matches


async def _build_entries(
    branches: Sequence[str],
    grouped: bool,
    filter_pinned: bool,
    pinned_names: Optional[Sequence[str]],
    cwd: Optional[str],
) -> List[PickerEntry]:
    descriptors = await describe_branches(list(branches), cwd=cwd)
    if pinned_names is None:
        pinned_names = get_pinned_branches()
    build = build_category_view if grouped else build_flat_view
    return build(descriptors, pinned_names, filter_pinned=filter_pinned)


async def select_branch(
    branches: Sequence[str],
    title: str,
    message: str,
    filter_pinned: bool = False,
    pinned_names: Optional[Sequence[str]] = None,
    cwd: Optional[str] = None,
) -> str:
    """Pick one branch from the category view; "" if there is nothing to pick."""
    console.print(f"\n[cyan]{escape(title)}[/cyan]")
    if not branches:
        console.print("[yellow]⚠️  No branches found[/yellow]")
        return ""

    entries = await _build_entries(branches, True, filter_pinned, pinned_names, cwd)
    if not entries:
        return ""
    return _pick_single(entries, message)


async def select_branches(
    branches: Sequence[str],
    title: str,
    message: str,
    filter_pinned: bool = False,
    default_selected: Iterable[str] = (),
    pinned_names: Optional[Sequence[str]] = None,
    cwd: Optional[str] = None,
) -> List[str]:
    """Pick any number of branches from the flat view; [] if there is nothing to pick."""
    console.print(f"\n[cyan]{escape(title)}[/cyan]")
    if not branches:
        console.print("[yellow]⚠️  No branches found[/yellow]")
        return []

    entries = await _build_entries(branches, False, filter_pinned, pinned_names, cwd)
    if not entries:
        return []
    return _pick_multiple(entries, message, default_selected)


async def prompt_target_branch(
    branches: Sequence[str], current_branch: str, cwd: Optional[str] = None
) -> str:
    """Ask for the branch to merge current_branch into; "main" if none is chosen."""
    console.print(f"[dim]Current branch: {escape(current_branch)}[/dim]")
    available = [b for b in branches if b != current_branch]

    target = await select_branch(
        available,
        title="🎯  Target Branch Selection",
        message="Select target branch",
        cwd=cwd,
    )
    if not target:
        console.print('[yellow]⚠️  No branch selected. Using "main" as default.[/yellow]')
        return "main"

    console.print(f"[green]✅  Selected target branch: {escape(target)}[/green]\n")
    return target
