"""Template packs: plain directories, or TOML specs with a base and a submodule."""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union

from mobilekit.git import Git
from mobilekit.paths import NoHomeDir, expand_home, install_dir
from mobilekit.submodule import Submodule, SubmoduleError
from mobilekit.util import quote_str

logger = logging.getLogger(__name__)

# Packs that are only offered in special builds; never listed otherwise.
BRAINIUM = ("brainstorm",)


class PackLookupError(Exception):
    """A template pack couldn't be found or loaded."""


class FancyPackParseError(Exception):
    """A template pack spec couldn't be read or parsed."""


class FancyPackResolveError(Exception):
    """A template pack couldn't be resolved to directories on disk."""


class ListError(Exception):
    """The available template packs couldn't be listed."""


def platform_pack_dir() -> Path:
    return install_dir() / "templates" / "platforms"


def app_pack_dir() -> Path:
    return install_dir() / "templates" / "apps"


@dataclass(frozen=True)
class SimplePack:
    """A template pack that is just a directory."""

    path: Path

    def submodule_path(self) -> Path | None:
        return None

    def resolve(self, git: Git, submodule_commit: str | None = None) -> list[Path]:
        if submodule_commit is not None:
            logger.warning(
                "specified a submodule commit, but the template pack %r isn't submodule-based",
                str(self.path),
            )
        return [self.path]

    def expect_local(self) -> Path:
        return self.path


def _optional_str(raw: dict, key: str) -> str | None:
    value = raw.get(key)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"invalid type for `{key}`, expected a string")
    return value


def _required_str(raw: dict, key: str) -> str:
    value = _optional_str(raw, key)
    if value is None:
        raise ValueError(f"missing field `{key}`")
    return value


def _parse_submodule(raw: Any) -> Submodule | None:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise ValueError("invalid type for `submodule`, expected a table")
    lfs = raw.get("lfs", False)
    if not isinstance(lfs, bool):
        raise ValueError("invalid type for `lfs`, expected a boolean")
    return Submodule(
        remote=_required_str(raw, "remote"),
        path=Path(_required_str(raw, "path")),
        name=_optional_str(raw, "name"),
        lfs=lfs,
    )


@dataclass
class FancyPack:
    """A template pack described by a TOML spec."""

    path: Path
    base: Pack | None = None
    submodule: Submodule | None = None

    @classmethod
    def parse(cls, path: str | os.PathLike) -> FancyPack:
        """Load a pack spec; relative paths in it are taken from the spec's directory."""
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as err:
            raise FancyPackParseError(
                f"Failed to read remote template pack spec {path}: {err}"
            ) from err
        try:
            raw = tomllib.loads(text)
            raw_path = _required_str(raw, "path")
            base_name = _optional_str(raw, "base")
            submodule = _parse_submodule(raw.get("submodule"))
        except (tomllib.TOMLDecodeError, ValueError) as err:
            raise FancyPackParseError(
                f"Failed to parse remote template pack spec {path}: {err}"
            ) from err
        try:
            real_path = expand_home(path.parent / raw_path)
        except NoHomeDir as err:
            raise FancyPackParseError(str(err)) from err
        base = None
        if base_name is not None:
            try:
                base = lookup_pack(path.parent, base_name)
            except PackLookupError as err:
                raise FancyPackParseError(f"Failed to lookup base template pack: {err}") from err
        pack = cls(real_path, base, submodule)
        logger.info("template pack %r", pack)
        return pack

    def submodule_path(self) -> Path | None:
        return self.submodule.path if self.submodule is not None else None

    def resolve(self, git: Git, submodule_commit: str | None = None) -> list[Path]:
        """Initialize any submodule and return the base's directories followed by ours."""
        if self.submodule is not None:
            try:
                self.submodule.init(git, submodule_commit)
            except SubmoduleError as err:
                raise FancyPackResolveError(f"Failed to initialize submodule: {err}") from err
        if not self.path.exists():
            raise FancyPackResolveError(f"Template pack wasn't found at {self.path}")
        paths: list[Path] = []
        if self.base is not None:
            commit = (
                submodule_commit
                if self.base.submodule_path() == self.submodule_path()
                else None
            )
            paths = self.base.resolve(git, commit)
        paths.append(self.path)
        return paths

    def expect_local(self) -> Path:
        raise RuntimeError("developer error: called `expect_local` on a fancy pack")


Pack = Union[SimplePack, FancyPack]


def _check_path(name: str, path: Path) -> bool:
    logger.info('checking for template pack "%s" at %r', name, str(path))
    if path.exists():
        logger.info('found template pack "%s" at %r', name, str(path))
        return True
    return False


def lookup_pack(directory: str | os.PathLike, name: str) -> Pack:
    """Find ``<name>.toml`` or ``<name>`` in ``directory``, preferring the spec."""
    directory = Path(directory)
    toml_path = directory / f"{name}.toml"
    plain_path = directory / name
    found = next((c for c in (toml_path, plain_path) if _check_path(name, c)), None)
    if found is None:
        raise PackLookupError(
            f"Didn't find {name} template pack at {toml_path} or {plain_path}"
        )
    if found.suffix == ".toml":
        try:
            return FancyPack.parse(found)
        except FancyPackParseError as err:
            raise PackLookupError(str(err)) from err
    return SimplePack(found)


def _installed_dir(locate) -> Path:
    try:
        return locate()
    except NoHomeDir as err:
        raise PackLookupError(str(err)) from err


def lookup_platform(name: str) -> Pack:
    return lookup_pack(_installed_dir(platform_pack_dir), name)


def lookup_app(name: str) -> Pack:
    return lookup_pack(_installed_dir(app_pack_dir), name)


def list_app_packs() -> list[str]:
    """Names of the installed app packs, sorted and without duplicates."""
    try:
        directory = app_pack_dir()
    except NoHomeDir as err:
        raise ListError(str(err)) from err
    try:
        entries = list(directory.iterdir())
    except OSError as err:
        raise ListError(
            f"Failed to read directory {quote_str(str(directory))}: {err}"
        ) from err
    names = {entry.stem for entry in entries}
    return sorted(name for name in names if name not in BRAINIUM)