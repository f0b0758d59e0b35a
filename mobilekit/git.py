"""Running git in a working tree, and making sure Git LFS is available."""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass
from pathlib import Path

from mobilekit.util import command_present


class LfsError(Exception):
    """Git LFS is missing or couldn't be set up."""


def _run(args: list[str]) -> None:
    subprocess.run(args, check=True)


def _read(args: list[str]) -> str:
    result = subprocess.run(
        args,
        stdout=subprocess.PIPE,
        text=True,
        errors="replace",
        check=True,
    )
    return result.stdout.rstrip("\r\n")


@dataclass(frozen=True)
class Git:
    """Builds and runs git commands against a fixed working tree."""

    root: Path

    def __post_init__(self) -> None:
        object.__setattr__(self, "root", Path(self.root))

    def command(self, *args: str) -> list[str]:
        """Return the argument vector for ``git -C <root> <args...>``."""
        return ["git", "-C", str(self.root), *args]

    def command_parse(self, arg_str: str) -> list[str]:
        """Like :meth:`command`, splitting ``arg_str`` on single spaces."""
        return self.command(*arg_str.split(" "))

    def init(self) -> None:
        """Run ``git init`` unless the tree already has a ``.git``."""
        if not (self.root / ".git").exists():
            _run(self.command("init"))

    def _read_file(self, relative: str) -> str | None:
        path = self.root / relative
        if path.exists():
            return path.read_text(encoding="utf-8")
        return None

    def config(self) -> str | None:
        """Contents of ``.git/config``, or None when absent."""
        return self._read_file(os.path.join(".git", "config"))

    def modules(self) -> str | None:
        """Contents of ``.gitmodules``, or None when absent."""
        return self._read_file(".gitmodules")

    def user_name(self) -> str:
        return _read(self.command("config", "user.name"))

    def user_email(self) -> str:
        return _read(self.command("config", "user.email"))


def ensure_lfs_present() -> None:
    """Check that ``git-lfs`` is installed and run ``git lfs install``."""
    if not command_present("git-lfs"):
        raise LfsError("Git LFS isn't installed; please install it and try again")
    try:
        _run(["git", "lfs", "install"])
    except (OSError, subprocess.SubprocessError) as err:
        raise LfsError(f"Failed to run `git lfs install`: {err}") from err