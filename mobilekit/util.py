"""General helpers: list formatting, searching command output and friends."""

from __future__ import annotations

import contextlib
import logging
import os
import re
import shutil
import subprocess
from collections.abc import Callable, Iterable, Iterator, Sequence
from pathlib import Path
from typing import Any, TypeVar

from mobilekit.paths import NoHomeDir, install_dir

logger = logging.getLogger(__name__)

T = TypeVar("T")

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\0": "\\0",
}


def quote_str(text: str) -> str:
    """Quote ``text`` in double quotes, escaping quotes and control characters."""
    pieces = []
    for char in text:
        if char in _ESCAPES:
            pieces.append(_ESCAPES[char])
        elif ord(char) < 0x20 or ord(char) == 0x7F:
            pieces.append(f"\\u{{{ord(char):x}}}")
        else:
            pieces.append(char)
    return '"' + "".join(pieces) + '"'


class RunAndSearchError(Exception):
    """A command failed to run, or its output didn't match the expected pattern."""

    def __init__(
        self,
        message: str,
        *,
        command: str | None = None,
        output: str | None = None,
    ) -> None:
        super().__init__(message)
        self.command = command
        self.output = output

    @classmethod
    def search_failed(cls, command: str, output: str) -> RunAndSearchError:
        return cls(
            f"{quote_str(command)} output failed to match regex: {quote_str(output)}",
            command=command,
            output=output,
        )


class CaptureGroupError(LookupError):
    """A named capture group was absent from a match."""

    def __init__(self, group: str, string: str) -> None:
        self.group = group
        self.string = string
        super().__init__(
            f"Capture group {quote_str(group)} missing from string {quote_str(string)}"
        )


class HostTargetTripleError(Exception):
    """The host target triple could not be detected."""

    def __init__(self, cause: Exception) -> None:
        self.cause = cause
        super().__init__(f"Failed to detect host target triple: {cause}")


class InstalledCommitMsgError(Exception):
    """The installed commit message could not be read."""


def list_display(items: Iterable[Any]) -> str:
    """Join items into an English list: ``a``, ``a and b``, ``a, b, and c``."""
    items = [str(item) for item in items]
    if len(items) == 1:
        return items[0]
    if len(items) == 2:
        return f"{items[0]} and {items[1]}"
    if not items:
        return ""
    return "".join(f"{item}, " for item in items[:-1]) + f"and {items[-1]}"


def reverse_domain(domain: str) -> str:
    """Reverse the dot-separated components of a domain name."""
    return ".".join(reversed(domain.split(".")))


def rustup_add(triple: str) -> int:
    """Install a target through rustup, returning the exit status."""
    return subprocess.run(["rustup", "target", "add", triple], check=True).returncode


def _read(command: Sequence[str]) -> str:
    result = subprocess.run(
        list(command),
        stdout=subprocess.PIPE,
        text=True,
        errors="replace",
        check=True,
    )
    return result.stdout.rstrip("\r\n")


def run_and_search(
    command: Sequence[str],
    pattern: str | re.Pattern[str],
    handler: Callable[[str, re.Match[str]], T],
) -> T:
    """Run ``command``, search its output for ``pattern`` and hand the match on."""
    command_string = " ".join(command)
    try:
        output = _read(command)
    except (OSError, subprocess.SubprocessError) as err:
        raise RunAndSearchError(str(err), command=command_string) from err
    match = re.compile(pattern).search(output)
    if match is None:
        raise RunAndSearchError.search_failed(command_string, output)
    return handler(output, match)


def host_target_triple() -> str:
    """Ask rustc for the host target triple."""

    def found(_text: str, match: re.Match[str]) -> str:
        triple = match.group(1)
        logger.info("detected host target triple %s", quote_str(triple))
        return triple

    try:
        return run_and_search(["rustc", "--verbose", "--version"], r"host: ([\w-]+)", found)
    except RunAndSearchError as err:
        raise HostTargetTripleError(err) from err


def prepend_to_path(path: Any, base_path: Any) -> str:
    return f"{path}:{base_path}"


def command_present(name: str) -> bool:
    """Tell whether ``name`` resolves to an executable on the search path."""
    return shutil.which(name) is not None


def get_string_for_group(match: re.Match[str], group: str, string: str) -> str:
    """Return the text of a named group, raising if it didn't participate."""
    try:
        value = match.group(group)
    except IndexError:
        value = None
    if value is None:
        raise CaptureGroupError(group, string)
    return value


def installed_commit_msg() -> str | None:
    """Read the commit message recorded at install time, if any."""
    try:
        path = install_dir() / "commit"
    except NoHomeDir as err:
        raise InstalledCommitMsgError(str(err)) from err
    if not path.is_file():
        return None
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as err:
        raise InstalledCommitMsgError(
            f"Failed to read version info from {quote_str(str(path))}: {err}"
        ) from err


def format_commit_msg(msg: str) -> str:
    return f"Contains commits up to {quote_str(msg)}"


@contextlib.contextmanager
def with_working_dir(working_dir: str | os.PathLike) -> Iterator[Path]:
    """Temporarily change the working directory."""
    previous = os.getcwd()
    os.chdir(working_dir)
    try:
        yield Path(working_dir)
    finally:
        os.chdir(previous)


def one_or_many(value: Any) -> list:
    """Turn a single value or a list of values into a list."""
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]