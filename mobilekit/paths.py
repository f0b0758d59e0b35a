"""Filesystem path helpers: home expansion, install directories and prefixes."""

from __future__ import annotations

import logging
import os
from pathlib import Path, PurePath, PureWindowsPath

logger = logging.getLogger(__name__)

INSTALL_DIR_NAME = ".mobilekit"
_VERBATIM_PREFIX = "\\\\?\\"


class NoHomeDir(Exception):
    """The user's home directory could not be determined."""

    def __init__(self, message: str = "Failed to get user's home directory!") -> None:
        super().__init__(message)


class ContractHomeError(Exception):
    """A path could not have its home directory replaced by ``~``."""


class PathNotPrefixed(ValueError):
    """A path did not start with the expected prefix."""

    def __init__(self, path: PurePath, prefix: PurePath) -> None:
        self.path = path
        self.prefix = prefix
        super().__init__(f"Path {str(path)!r} didn't have prefix {str(prefix)!r}.")


class NormalizationError(Exception):
    """A path could not be normalized."""

    def __init__(self, path: PurePath, cause: Exception, existing: bool) -> None:
        self.path = path
        self.cause = cause
        self.existing = existing
        if existing:
            message = f"Failed to canonicalize existing path {str(path)!r}: {cause}"
        else:
            message = f"Failed to normalize non-existent path {str(path)!r}: {cause}"
        super().__init__(message)


def home_dir() -> Path:
    """Return the user's home directory."""
    try:
        return Path.home()
    except (RuntimeError, KeyError, OSError) as err:
        raise NoHomeDir() from err


def expand_home(path: str | os.PathLike) -> Path:
    """Replace a leading ``~`` component with the user's home directory."""
    home = home_dir()
    path = Path(path)
    if path.parts and path.parts[0] == "~":
        return home.joinpath(*path.parts[1:])
    return path


def contract_home(path: str | os.PathLike) -> str:
    """Replace occurrences of the home directory in ``path`` with ``~``."""
    text = os.fspath(path)
    try:
        text.encode("utf-8")
    except UnicodeEncodeError as err:
        raise ContractHomeError("Supplied path wasn't valid UTF-8.") from err
    if os.name == "nt":
        return text
    try:
        home = str(home_dir())
    except NoHomeDir as err:
        raise ContractHomeError(str(err)) from err
    try:
        home.encode("utf-8")
    except UnicodeEncodeError as err:
        raise ContractHomeError("User's home directory path wasn't valid UTF-8.") from err
    return text.replace(home, "~")


def install_dir() -> Path:
    """Return the directory holding installed templates and checkouts."""
    cargo_home = os.environ.get("CARGO_HOME")
    if cargo_home is not None:
        return Path(cargo_home) / INSTALL_DIR_NAME
    return home_dir() / ".cargo" / INSTALL_DIR_NAME


def checkouts_dir() -> Path:
    return install_dir() / "checkouts"


def tools_dir() -> Path:
    return install_dir() / "tools"


def _prefix_verbatim(root: str, path: str | os.PathLike) -> PureWindowsPath:
    base = PureWindowsPath(root)
    parts = list(base.parts[1:])
    addition = PureWindowsPath(path)
    if addition.root:
        parts = []
    for part in addition.parts[1 if addition.anchor else 0:]:
        if part == ".":
            continue
        if part == "..":
            if parts:
                parts.pop()
            continue
        parts.append(part)
    return PureWindowsPath(base.anchor, *parts)


def prefix_path(root: str | os.PathLike, path: str | os.PathLike) -> Path:
    """Join ``path`` onto ``root``, resolving components for verbatim roots."""
    root_text = os.fspath(root)
    if not root_text.startswith(_VERBATIM_PREFIX):
        return Path(root_text) / path
    return Path(str(_prefix_verbatim(root_text, path)))


def unprefix_path(root: str | os.PathLike, path: str | os.PathLike) -> Path:
    """Strip ``root`` from the front of ``path``."""
    root, path = Path(root), Path(path)
    try:
        return path.relative_to(root)
    except ValueError as err:
        raise PathNotPrefixed(path, root) from err


def _common_root(abs_src: Path, abs_dest: Path) -> Path:
    for candidate in (abs_dest, *abs_dest.parents):
        if candidate == abs_src or candidate in abs_src.parents:
            return candidate
    raise ValueError(f"{str(abs_src)!r} and {str(abs_dest)!r} have no common root")


def relativize_path(abs_path: str | os.PathLike, abs_relative_to: str | os.PathLike) -> Path:
    """Express ``abs_path`` relative to the directory ``abs_relative_to``."""
    path, relative_to = Path(abs_path), Path(abs_relative_to)
    if not path.is_absolute():
        raise ValueError(f"{str(path)!r} is not absolute")
    if not relative_to.is_absolute():
        raise ValueError(f"{str(relative_to)!r} is not absolute")
    root = _common_root(path, relative_to)
    tail = path.relative_to(root)
    depth = len(relative_to.relative_to(root).parts)
    result = Path(*([os.pardir] * depth)).joinpath(tail)
    logger.info("%r relative to %r is %r", str(path), str(relative_to), str(result))
    return result


def normalize_path(path: str | os.PathLike) -> Path:
    """Canonicalize an existing path, or make a missing one absolute."""
    path = Path(path)
    if path.exists():
        try:
            return path.resolve(strict=True)
        except OSError as err:
            raise NormalizationError(path, err, existing=True) from err
    try:
        return Path(os.path.abspath(path))
    except OSError as err:
        raise NormalizationError(path, err, existing=False) from err


def _simplified(path: Path) -> Path:
    text = str(path)
    if text.startswith(_VERBATIM_PREFIX) and not text.startswith(_VERBATIM_PREFIX + "UNC"):
        return Path(text[len(_VERBATIM_PREFIX):])
    return path


def under_root(path: str | os.PathLike, root: str | os.PathLike) -> bool:
    """Tell whether ``root / path`` stays inside ``root`` once normalized."""
    root = _simplified(Path(root))
    norm = _simplified(normalize_path(root / path))
    return norm == root or root in norm.parents


def _modified(path: Path) -> float:
    try:
        return path.stat().st_mtime
    except OSError:
        return 0.0


def last_modified(first: str | os.PathLike, second: str | os.PathLike) -> Path:
    """Return whichever path was modified most recently, preferring ``first`` on ties."""
    first, second = Path(first), Path(second)
    return second if _modified(first) < _modified(second) else first