"""Held-back report rendering.

Presentation only: functions here receive an already computed hold map and
own all of the output. Plain mode prints::

    Example---=>[JSON@1.0.0 {0.21}]
    OtherThing=>[Example@0.6.0 {0.5}, Tables@2.0.0 {1}]

Color mode drops the braces and colors the version and the compat bound.
"""

from __future__ import annotations

import json
import sys
from typing import IO, Any, Dict, List, Mapping, Optional, Sequence

from rich.cells import cell_len
from rich.console import Console
from rich.markup import escape
from rich.text import Text

from compatkeeper.models.held_back import HeldBack
from compatkeeper.utils.console import COMPATKEEPER_THEME

__all__ = [
    "format_held_back",
    "hold_map_to_json",
    "hold_map_to_rows",
    "print_held_back",
]


def _render(held: HeldBack, color: bool) -> Text:
    if not color:
        return Text(str(held))
    return Text.assemble(
        f"{held.name}@",
        (str(held.last_version), "version"),
        " ",
        (str(held.compat), "compat"),
    )


def format_held_back(
    hold_map: Mapping[str, Sequence[HeldBack]],
    *,
    color: bool = False,
) -> List[Text]:
    """Build one report line per holder, sorted by holder name."""
    if not hold_map:
        return []

    # Holder columns are equal in terminal cells, not characters
    pad = max(cell_len(name) for name in hold_map)
    lines: List[Text] = []
    for holder in sorted(hold_map):
        line = Text(holder + "-" * (pad - cell_len(holder)) + "=>[")
        for i, held in enumerate(hold_map[holder]):
            if i:
                line.append(", ")
            line.append_text(_render(held, color))
        line.append("]")
        lines.append(line)
    return lines


def print_held_back(
    output: Optional[IO[str]],
    hold_map: Mapping[str, Sequence[HeldBack]],
    *,
    color: bool = False,
) -> None:
    """Write the held-back report to ``output``.

    Args:
        output: Text stream to write to; ``None`` means stdout.
        hold_map: Holder name -> held-back dependencies.
        color: Emit ANSI colors regardless of whether ``output`` is a TTY.
    """
    console = Console(
        file=output or sys.stdout,
        theme=COMPATKEEPER_THEME,
        force_terminal=color,
        color_system="standard" if color else None,
        highlight=False,
        soft_wrap=True,
        emoji=False,
    )
    for line in format_held_back(hold_map, color=color):
        console.print(line)


def hold_map_to_json(hold_map: Mapping[str, Sequence[HeldBack]]) -> str:
    """Serialize a hold map to JSON with holders in name order."""
    data: Dict[str, Any] = {
        holder: [held.to_json() for held in hold_map[holder]]
        for holder in sorted(hold_map)
    }
    return json.dumps(data, indent=2)


def hold_map_to_rows(hold_map: Mapping[str, Sequence[HeldBack]]) -> List[Dict[str, str]]:
    """Flatten a hold map into table rows with Rich markup escaped."""
    return [
        {
            "Holder": escape(holder),
            "Dependency": escape(held.name),
            "Latest": str(held.last_version),
            "Compat": escape(str(held.compat)),
        }
        for holder in sorted(hold_map)
        for held in hold_map[holder]
    ]
