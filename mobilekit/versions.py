"""Version numbers and rustc version detection."""

from __future__ import annotations

import logging
import re
import sys
from dataclasses import dataclass

from mobilekit.util import RunAndSearchError, quote_str, run_and_search

logger = logging.getLogger(__name__)

_U32_MAX = 2**32 - 1

RUSTC_VERSION_PATTERN = re.compile(
    r"rustc (?P<version>(?P<major>\d+)\.(?P<minor>\d+)\.(?P<patch>\d+)"
    r"(-(?P<flavor>\w+)(.(?P<candidate>\d+))?)?)"
    r"(?P<details> \((?P<hash>\w{9}) "
    r"(?P<date>(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2}))\))?"
)


def _parse_u32(text: str) -> int:
    if not text:
        raise ValueError("cannot parse integer from empty string")
    digits = text[1:] if text.startswith("+") else text
    if not digits or not all("0" <= char <= "9" for char in digits):
        raise ValueError("invalid digit found in string")
    value = int(digits)
    if value > _U32_MAX:
        raise ValueError("number too large to fit in target type")
    return value


class VersionTripleError(ValueError):
    """A version string couldn't be parsed into major, minor and patch."""

    def __init__(self, message: str, *, version: str, field: str | None = None) -> None:
        super().__init__(message)
        self.version = version
        self.field = field


class VersionDoubleError(ValueError):
    """A version string couldn't be parsed into major and minor."""

    def __init__(self, message: str, *, version: str, field: str | None = None) -> None:
        super().__init__(message)
        self.version = version
        self.field = field


class RustVersionError(Exception):
    """The rustc version couldn't be determined."""


def _parse_field(text: str, field: str, version: str, error: type) -> int:
    try:
        return _parse_u32(text)
    except ValueError as err:
        raise error(
            f"Failed to parse {field} version from {quote_str(version)}: {err}",
            version=version,
            field=field,
        ) from err


@dataclass(frozen=True, order=True)
class VersionTriple:
    major: int = 0
    minor: int = 0
    patch: int = 0

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    @classmethod
    def parse(cls, text: str) -> VersionTriple:
        """Parse ``<major>[.minor][.patch]``; missing parts default to 0."""
        parts = text.split(".")
        if len(parts) > 3:
            raise VersionTripleError(
                f"Failed to parse version string {quote_str(text)}: string must be in "
                "format <major>[.minor][.patch]",
                version=text,
            )
        fields = ("major", "minor", "patch")
        values = [
            _parse_field(part, field, text, VersionTripleError)
            for part, field in zip(parts, fields)
        ]
        return cls(*values)

    @classmethod
    def from_match(cls, match: re.Match[str]) -> tuple[VersionTriple, str]:
        """Build a triple from a match with version/major/minor/patch groups."""
        version = match.group("version")
        values = [
            _parse_field(match.group(field), field, version, VersionTripleError)
            for field in ("major", "minor", "patch")
        ]
        return cls(*values), version


@dataclass(frozen=True, order=True)
class VersionDouble:
    major: int = 0
    minor: int = 0

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"

    @classmethod
    def parse(cls, text: str) -> VersionDouble:
        """Parse ``<major>[.minor]``; a missing minor defaults to 0."""
        parts = text.split(".")
        if len(parts) > 2:
            raise VersionDoubleError(
                f"Failed to parse version string {quote_str(text)}: string must be in "
                "format <major>[.minor]",
                version=text,
            )
        values = [
            _parse_field(part, field, text, VersionDoubleError)
            for part, field in zip(parts, ("major", "minor"))
        ]
        return cls(*values)


@dataclass(frozen=True)
class RustVersionFlavor:
    flavor: str
    candidate: str | None = None


@dataclass(frozen=True)
class RustVersionDetails:
    hash: str
    date: tuple[int, int, int]


LAST_GOOD_STABLE = VersionTriple(1, 45, 2)
NEXT_GOOD_STABLE = VersionTriple(1, 49, 0)
FIRST_GOOD_NIGHTLY = (2020, 10, 24)


def _parse_date_part(match: re.Match[str], name: str, date: str) -> int:
    try:
        return _parse_u32(match.group(name))
    except ValueError as err:
        raise RustVersionError(
            f"Failed to parse rustc release {name} from {quote_str(date)}: {err}"
        ) from err


@dataclass(frozen=True)
class RustVersion:
    triple: VersionTriple
    flavor: RustVersionFlavor | None = None
    # Absent when Rust wasn't installed through rustup.
    details: RustVersionDetails | None = None

    def __str__(self) -> str:
        text = str(self.triple)
        if self.flavor is not None:
            text += f"-{self.flavor.flavor}"
            if self.flavor.candidate is not None:
                text += f".{self.flavor.candidate}"
        if self.details is not None:
            year, month, day = self.details.date
            text += f" ({self.details.hash} {year}-{month}-{day})"
        return text

    @classmethod
    def _from_match(cls, match: re.Match[str]) -> RustVersion:
        try:
            triple, _ = VersionTriple.from_match(match)
        except VersionTripleError as err:
            raise RustVersionError(str(err)) from err
        flavor = None
        if match.group("flavor") is not None:
            flavor = RustVersionFlavor(match.group("flavor"), match.group("candidate"))
        details = None
        if match.group("details") is not None:
            date = match.group("date")
            details = RustVersionDetails(
                match.group("hash"),
                tuple(_parse_date_part(match, name, date) for name in ("year", "month", "day")),
            )
        version = cls(triple, flavor, details)
        logger.info("detected rustc version %s", version)
        return version

    @classmethod
    def parse(cls, output: str) -> RustVersion:
        """Parse the output of ``rustc --version``."""
        match = RUSTC_VERSION_PATTERN.search(output)
        if match is None:
            raise RustVersionError(
                f"rustc version output failed to match regex: {quote_str(output)}"
            )
        return cls._from_match(match)

    @classmethod
    def check(cls) -> RustVersion:
        """Run ``rustc --version`` and parse what it prints."""
        try:
            return run_and_search(
                ["rustc", "--version"],
                RUSTC_VERSION_PATTERN,
                lambda _text, match: cls._from_match(match),
            )
        except RunAndSearchError as err:
            raise RustVersionError(f"Failed to check rustc version: {err}") from err

    def valid(self) -> bool:
        """Tell whether this rustc is usable; only some macOS releases are not."""
        if sys.platform != "darwin":
            return True
        old_good = self.triple <= LAST_GOOD_STABLE
        if self.details is not None:
            date_good = self.details.date >= FIRST_GOOD_NIGHTLY
        else:
            logger.warning(
                "output of `rustc --version` didn't contain date info; continuing with the "
                "assumption that the release date is at least 2020-10-24"
            )
            date_good = True
        new_good = self.triple >= NEXT_GOOD_STABLE and date_good
        return old_good or new_good