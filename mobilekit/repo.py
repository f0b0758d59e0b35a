"""Shallow git checkouts kept up to date with their upstream."""

from __future__ import annotations

import enum
import subprocess
from dataclasses import dataclass
from pathlib import Path

from mobilekit.git import Git
from mobilekit.paths import checkouts_dir
from mobilekit.util import quote_str


class RepoError(Exception):
    """A git operation on a checkout failed."""


class Status(enum.Enum):
    STALE = "stale"
    FRESH = "fresh"

    @property
    def stale(self) -> bool:
        return self is Status.STALE

    @property
    def fresh(self) -> bool:
        return self is Status.FRESH


_FAILURES = (OSError, subprocess.SubprocessError)


def _run(args: list[str], message: str) -> None:
    try:
        subprocess.run(args, check=True)
    except _FAILURES as err:
        raise RepoError(f"{message}: {err}") from err


def _capture(args: list[str], message: str) -> bytes:
    try:
        return subprocess.run(args, capture_output=True, check=True).stdout
    except _FAILURES as err:
        raise RepoError(f"{message}: {err}") from err


def _read(args: list[str], message: str) -> str:
    try:
        result = subprocess.run(
            args, stdout=subprocess.PIPE, text=True, errors="replace", check=True
        )
    except _FAILURES as err:
        raise RepoError(f"{message}: {err}") from err
    return result.stdout.strip()


@dataclass(frozen=True)
class Repo:
    """A git checkout at a fixed path."""

    path: Path

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", Path(self.path))

    @classmethod
    def checkouts_dir(cls, checkout: str) -> Repo:
        """The checkout named ``checkout`` inside the install's checkouts dir."""
        return cls(checkouts_dir() / checkout)

    def git(self) -> Git:
        return Git(self.path)

    def status(self) -> Status:
        """Fetch and compare the local head with its upstream."""
        if not self.path.is_dir():
            return Status.STALE
        git = self.git()
        _run(git.command_parse("fetch origin"), "Failed to fetch repo")
        local = _capture(git.command_parse("rev-parse HEAD"), "Failed to get checkout revision")
        remote = _capture(git.command_parse("rev-parse @{u}"), "Failed to get upstream revision")
        return Status.FRESH if local == remote else Status.STALE

    def latest_subject(self) -> str:
        return _read(self.git().command_parse("log -1 --pretty=%s"), "Failed to get commit log")

    def latest_hash(self) -> str:
        return _read(self.git().command_parse("log -1 --pretty=%H"), "Failed to get commit log")

    def update(self, url: str, branch: str) -> None:
        """Clone the repo if missing, otherwise hard-reset it to ``origin/<branch>``."""
        if not self.path.is_dir():
            parent = self.path.parent
            if not parent.is_dir():
                try:
                    parent.mkdir(parents=True, exist_ok=True)
                except OSError as err:
                    raise RepoError(
                        f"Failed to create parent directory {quote_str(str(parent))}: {err}"
                    ) from err
            _run(
                Git(parent).command(
                    "clone", "--depth", "1", "--single-branch", str(url), str(self.path)
                ),
                "Failed to clone repo",
            )
            return
        print(f"Updating `{self.path.name}` repo...")
        git = self.git()
        _run(git.command_parse("fetch --depth 1"), "Failed to fetch repo")
        _run(git.command_parse(f"reset --hard origin/{branch}"), "Failed to reset repo")
        _run(git.command_parse("clean -dfx --exclude /target"), "Failed to clean repo")