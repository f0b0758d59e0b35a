"""Interactive prompts on standard input."""

from __future__ import annotations

import re
import sys
from collections.abc import Iterable

from mobilekit.cli import Color, paint

_INDEX = re.compile(r"\+?[0-9]+")


def minimal(msg) -> str:
    """Print ``msg`` followed by a colon and return the stripped reply."""
    print(f"{msg}: ", end="", flush=True)
    line = sys.stdin.readline()
    if not line:
        raise EOFError("no more input")
    return line.strip()


def default(msg, default: str | None = None, default_color: Color | None = None) -> str:
    """Prompt, offering ``default`` when the reply is empty."""
    if default is not None:
        shown = paint(default, default_color, bold=True) if default_color is not None else default
        msg = f"{msg} ({shown})"
    response = minimal(msg)
    if not response and default is not None:
        return default
    return response


def yes_no(msg, default: bool | None = None) -> bool | None:
    """Ask a yes/no question; return None when the answer is unclear."""
    choices = {True: "[Y/n]", False: "[y/N]", None: "[y/n]"}[default]
    response = minimal(f"{msg} {choices}")
    if response.lower() == "y":
        return True
    if response.lower() == "n":
        return False
    if not response:
        return default
    print("That was neither a Y nor an N! You're pretty silly.")
    return None


def list_display_only(choices: Iterable) -> None:
    """Print numbered choices, or a placeholder when there are none."""
    items = list(choices)
    if not items:
        print("  -- none --")
        return
    for index, choice in enumerate(items):
        print(f"  [{paint(str(index), Color.GREEN)}] {choice}")


def choose_from_list(
    header,
    choices: Iterable,
    noun,
    alternative: str | None = None,
    msg="Enter an index",
) -> int:
    """Show choices and keep asking until a valid index is entered."""
    items = list(choices)
    print(f"{header}:")
    list_display_only(items)
    index_word = paint("index", Color.GREEN)
    if alternative is not None:
        print(
            f"  Enter an {index_word} for a {noun} above, "
            f"or enter a {paint(alternative, Color.CYAN)} manually."
        )
    else:
        print(f"  Enter an {index_word} for a {noun} above.")
    offered = "0" if len(items) == 1 else None
    while True:
        response = default(msg, offered, Color.GREEN)
        if not response:
            print("Not to be pushy, but you need to pick a device.")
        elif not _INDEX.fullmatch(response):
            print("Hey, that wasn't a number! You're silly.")
        elif int(response) < len(items):
            return int(response)
        else:
            print("There's no device with an index that high.")