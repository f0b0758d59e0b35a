"""Git submodules that template packs can pull in."""

from __future__ import annotations

import logging
import re
import subprocess
from dataclasses import dataclass
from pathlib import Path

from mobilekit.git import Git, LfsError, ensure_lfs_present
from mobilekit.util import quote_str

logger = logging.getLogger(__name__)

_NAME = re.compile(r"(?P<name>\w+)\.git")
_FAILURES = (OSError, subprocess.SubprocessError)


class SubmoduleError(Exception):
    """A submodule couldn't be added, initialized or checked out."""

    def __init__(self, submodule: Submodule, message: str) -> None:
        super().__init__(message)
        self.submodule = submodule


@dataclass
class Submodule:
    """A submodule at ``path`` tracking ``remote``."""

    remote: str
    path: Path
    name: str | None = None
    lfs: bool = False

    def __post_init__(self) -> None:
        self.path = Path(self.path)

    def detected_name(self) -> str | None:
        """The explicit name, or one inferred from the remote's ``<name>.git``."""
        if self.name is not None:
            return self.name
        match = _NAME.search(self.remote)
        name = match.group("name") if match else None
        logger.info("detected submodule name: %r", name)
        return name

    def _header_in(self, text: str | None, name: str) -> bool:
        return text is not None and f"[submodule {quote_str(name)}]" in text

    def init(self, git: Git, commit: str | None = None) -> None:
        """Add and initialize the submodule if needed, optionally checking out ``commit``."""
        name = self.detected_name()
        if name is None:
            raise SubmoduleError(
                self,
                f"Failed to infer name for submodule at remote {quote_str(self.remote)}; "
                "please specify a name explicitly.",
            )
        described = (
            f"submodule {quote_str(name)} with remote {quote_str(self.remote)} "
            f"and path {quote_str(str(self.path))}"
        )
        if self.lfs:
            try:
                ensure_lfs_present()
            except LfsError as err:
                raise SubmoduleError(
                    self,
                    f"Failed to ensure presence of Git LFS for submodule {quote_str(name)}: {err}",
                ) from err
        try:
            in_index = self._header_in(git.modules(), name)
        except OSError as err:
            raise SubmoduleError(
                self, f'Failed to check ".gitmodules" for submodule {quote_str(name)}: {err}'
            ) from err

        if not in_index:
            path_str = str(self.path)
            try:
                path_str.encode("utf-8")
            except UnicodeEncodeError as err:
                raise SubmoduleError(
                    self, f"Submodule path {quote_str(path_str)} wasn't valid utf-8."
                ) from err
            logger.info("adding submodule: %r", self)
            try:
                subprocess.run(
                    git.command("submodule", "add", "--name", name, self.remote, path_str),
                    check=True,
                )
            except _FAILURES as err:
                raise SubmoduleError(self, f"Failed to add {described}: {err}") from err
            initialized = False
        else:
            logger.info("submodule already in index: %r", self)
            try:
                initialized = self._header_in(git.config(), name)
            except OSError as err:
                raise SubmoduleError(
                    self,
                    f'Failed to check ".git/config" for submodule {quote_str(name)}: {err}',
                ) from err

        if not initialized:
            logger.info("initializing submodule: %r", self)
            try:
                subprocess.run(
                    git.command("submodule", "update", "--init", "--recursive"), check=True
                )
            except _FAILURES as err:
                raise SubmoduleError(self, f"Failed to init {described}: {err}") from err
        else:
            logger.info("submodule already initialized: %r", self)

        if commit is not None:
            path = git.root / self.path
            logger.info("checking out commit %r in submodule at %r", commit, str(path))
            try:
                subprocess.run(Git(path).command("checkout", commit), check=True)
            except _FAILURES as err:
                raise SubmoduleError(
                    self,
                    f"Failed to checkout commit {quote_str(commit)} from {described}: {err}",
                ) from err