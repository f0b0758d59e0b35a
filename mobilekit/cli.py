"""Terminal reporting: wrapped text, coloured labels and reports."""

from __future__ import annotations

import enum
import os
import shutil
import sys
import textwrap
from dataclasses import dataclass, field, replace


class Color(enum.IntEnum):
    """ANSI foreground colour codes."""

    GREEN = 32
    CYAN = 36
    BRIGHT_RED = 91
    BRIGHT_GREEN = 92
    BRIGHT_YELLOW = 93
    BRIGHT_MAGENTA = 95


ERROR = Color.BRIGHT_RED
WARNING = Color.BRIGHT_YELLOW
ACTION_REQUEST = Color.BRIGHT_MAGENTA
VICTORY = Color.BRIGHT_GREEN


def should_colorize() -> bool:
    """Decide from the environment and stdout whether to emit colour codes."""
    force = os.environ.get("CLICOLOR_FORCE")
    if force is not None and force != "0":
        return True
    if "NO_COLOR" in os.environ:
        return False
    if os.environ.get("CLICOLOR") == "0":
        return False
    isatty = getattr(sys.stdout, "isatty", None)
    return bool(isatty and isatty())


def paint(text: str, color: Color | None = None, *, bold: bool = False) -> str:
    """Wrap ``text`` in ANSI codes when colouring is enabled."""
    if not should_colorize():
        return text
    codes = []
    if bold:
        codes.append("1")
    if color is not None:
        codes.append(str(int(color)))
    if not codes:
        return text
    return f"\x1b[{';'.join(codes)}m{text}\x1b[0m"


def _terminal_width() -> int:
    return shutil.get_terminal_size().columns


@dataclass(frozen=True)
class TextWrapper:
    """Wraps text to a width without splitting words at hyphens."""

    width: int = field(default_factory=_terminal_width)
    initial_indent: str = ""
    subsequent_indent: str = ""

    def indented(self, indent: str) -> TextWrapper:
        return replace(self, initial_indent=indent, subsequent_indent=indent)

    def fill(self, text: str) -> str:
        wrapper = textwrap.TextWrapper(
            width=self.width,
            initial_indent=self.initial_indent,
            subsequent_indent=self.subsequent_indent,
            break_on_hyphens=False,
        )
        return "\n".join(wrapper.fill(line) for line in text.split("\n"))


class Label(enum.Enum):
    ERROR = "error"
    ACTION_REQUEST = "action request"
    VICTORY = "victory"

    @property
    def color(self) -> Color:
        return {
            Label.ERROR: ERROR,
            Label.ACTION_REQUEST: ACTION_REQUEST,
            Label.VICTORY: VICTORY,
        }[self]

    def exit_code(self) -> int:
        return 0 if self is Label.VICTORY else 1

    def __str__(self) -> str:
        return self.value


_INDENT = "    "


@dataclass
class Report:
    """A labelled message with details, printed at the end of a command."""

    label: Label
    msg: str
    details: str

    def __post_init__(self) -> None:
        self.msg = str(self.msg)
        self.details = str(self.details)

    @classmethod
    def error(cls, msg, details) -> Report:
        return cls(Label.ERROR, msg, details)

    @classmethod
    def action_request(cls, msg, details) -> Report:
        return cls(Label.ACTION_REQUEST, msg, details)

    @classmethod
    def victory(cls, msg, details) -> Report:
        return cls(Label.VICTORY, msg, details)

    def exit_code(self) -> int:
        return self.label.exit_code()

    def format(self, wrapper: TextWrapper) -> str:
        if should_colorize():
            color = self.label.color
            head = wrapper.fill(
                f"{paint(f'{self.label.value}:', color, bold=True)} {paint(self.msg, color)}"
            )
        else:
            head = wrapper.fill(f"{self.label.value}: {self.msg}")
        body = wrapper.indented(_INDENT).fill(self.details)
        return f"{head}\n{body}\n"

    def print(self, wrapper: TextWrapper) -> None:
        stream = sys.stderr if self.label is Label.ERROR else sys.stdout
        stream.write(self.format(wrapper))
        stream.flush()