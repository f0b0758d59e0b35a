"""Building and running cargo invocations."""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

_CARGO_ENV_VARS = ("CARGO_TARGET_DIR", "CARGO_BUILD_TARGET_DIR")


def _explicit_cargo_env() -> dict[str, str]:
    return {name: os.environ[name] for name in _CARGO_ENV_VARS if name in os.environ}


@dataclass
class CargoCommand:
    """A cargo subcommand with the flags this tool passes to it.

    A manifest path is canonicalized up front, so it must exist.
    """

    subcommand: str
    verbose: bool = False
    package: str | None = None
    manifest_path: Path | None = None
    target: str | None = None
    no_default_features: bool = False
    features: Sequence[str] | None = None
    extra_args: Sequence[str] | None = None
    release: bool = False

    def __post_init__(self) -> None:
        if self.manifest_path is not None:
            self.manifest_path = Path(self.manifest_path).resolve(strict=True)

    def args(self) -> list[str]:
        """The arguments that follow ``cargo`` on the command line."""
        args = [self.subcommand]
        if self.verbose:
            args.append("-vv")
        if self.package is not None:
            args += ["--package", self.package]
        if self.manifest_path is not None:
            if not self.manifest_path.exists():
                logger.error("manifest path %r doesn't exist!", str(self.manifest_path))
            args += ["--manifest-path", str(self.manifest_path)]
        if self.target is not None:
            # The target is always given explicitly, even when it is the host's.
            args += ["--target", self.target]
        if self.no_default_features:
            args.append("--no-default-features")
        if self.features is not None:
            args += ["--features", " ".join(self.features)]
        if self.extra_args is not None:
            args += list(self.extra_args)
        if self.release:
            args.append("--release")
        return args

    def environment(self, env: Mapping[str, str] | None = None) -> dict[str, str]:
        """The inherited environment plus ``env`` and the cargo target-dir variables."""
        merged = dict(os.environ)
        if env:
            merged.update(env)
        merged.update(_explicit_cargo_env())
        return merged

    def run(self, env: Mapping[str, str] | None = None) -> subprocess.CompletedProcess:
        """Run cargo with inherited standard streams, raising if it fails."""
        return subprocess.run(
            ["cargo", *self.args()], env=self.environment(env), check=True
        )