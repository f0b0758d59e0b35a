"""Creating hard and symbolic links through ``ln``."""

from __future__ import annotations

import enum
import os
import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

from mobilekit.paths import relativize_path
from mobilekit.util import quote_str

MISSING_FILE_NAME = "Neither the source nor target contained a file name."


class LinkType(enum.Enum):
    HARD = "hard"
    SYMBOLIC = "symbolic"

    def __str__(self) -> str:
        return self.value


class Clobber(enum.Enum):
    NEVER = "clobbering disabled"
    FILE_ONLY = "file clobbering enabled"
    FILE_OR_DIRECTORY = "file and directory clobbering enabled"

    def __str__(self) -> str:
        return self.value


class TargetStyle(enum.Enum):
    FILE = "file"
    DIRECTORY = "directory"

    def __str__(self) -> str:
        return self.value


class LinkError(Exception):
    """A link couldn't be created."""

    def __init__(
        self,
        link_type: LinkType,
        force: Clobber,
        source: Path,
        target: Path,
        target_style: TargetStyle,
        cause: str,
    ) -> None:
        self.link_type = link_type
        self.force = force
        self.source = Path(source)
        self.target = Path(target)
        self.target_style = target_style
        self.cause = cause
        super().__init__(
            f"Failed to create a {link_type} link from {quote_str(str(source))} to "
            f"{target_style} {quote_str(str(target))} ({force}): {cause}"
        )


def _file_name(path: Path) -> str | None:
    name = path.name
    return name if name not in ("", "..") else None


@dataclass
class Call:
    """One ``ln`` invocation; a directory target gets the source's name appended."""

    link_type: LinkType
    force: Clobber
    source: Path
    target: Path
    target_style: TargetStyle
    target_override: Path = field(init=False)

    def __post_init__(self) -> None:
        self.source = Path(self.source)
        self.target = Path(self.target)
        if self.target_style is TargetStyle.DIRECTORY:
            name = _file_name(self.source)
            if name is None:
                raise self._error(MISSING_FILE_NAME)
            self.target_override = self.target / name
        else:
            self.target_override = self.target

    def _error(self, cause: str) -> LinkError:
        return LinkError(
            self.link_type, self.force, self.source, self.target, self.target_style, cause
        )

    def _remove_target(self) -> None:
        if self.target.is_symlink():
            self.target.unlink()
        else:
            shutil.rmtree(self.target)

    def exec(self) -> None:
        """Run ``ln``, clearing a directory in the way when clobbering allows it."""
        args = ["-n"]  # don't follow symlinks
        if self.link_type is LinkType.SYMBOLIC:
            args.append("-s")
        if self.force is Clobber.FILE_ONLY:
            args.append("-f")
        elif self.force is Clobber.FILE_OR_DIRECTORY:
            if self.target_override.is_dir():
                try:
                    self._remove_target()
                except OSError as err:
                    raise self._error(f"IO error: {err}") from err
            args.append("-f")
        args += [os.fspath(self.source), os.fspath(self.target_override)]
        try:
            subprocess.run(["ln", *args], check=True)
        except (OSError, subprocess.SubprocessError) as err:
            raise self._error(f"`ln` command failed: {err}") from err


def force_symlink(source, target, target_style: TargetStyle) -> None:
    """Create a symbolic link, replacing files or directories in the way."""
    Call(LinkType.SYMBOLIC, Clobber.FILE_OR_DIRECTORY, source, target, target_style).exec()


def force_symlink_relative(abs_source, abs_target, target_style: TargetStyle) -> None:
    """Like :func:`force_symlink`, with the source made relative to the target."""
    abs_source, abs_target = Path(abs_source), Path(abs_target)
    rel_source = relativize_path(abs_source, abs_target)
    if target_style is TargetStyle.DIRECTORY and _file_name(rel_source) is None:
        name = _file_name(abs_source)
        if name is None:
            raise LinkError(
                LinkType.SYMBOLIC,
                Clobber.FILE_OR_DIRECTORY,
                rel_source,
                abs_target,
                target_style,
                MISSING_FILE_NAME,
            )
        force_symlink(rel_source, abs_target / name, TargetStyle.FILE)
    else:
        force_symlink(rel_source, abs_target, target_style)