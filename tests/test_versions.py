import sys

import pytest

from mobilekit.versions import (
    RustVersion,
    RustVersionError,
    VersionDouble,
    VersionDoubleError,
    VersionTriple,
    VersionTripleError,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("1.2.3", VersionTriple(1, 2, 3)),
        ("1.2", VersionTriple(1, 2)),
        ("7", VersionTriple(7)),
    ],
)
def test_triple_parse(text, expected):
    assert VersionTriple.parse(text) == expected


@pytest.mark.parametrize("text", ["0.0.0", "1.45.2", "10.20.30"])
def test_triple_round_trip(text):
    assert str(VersionTriple.parse(text)) == text


def test_triple_too_many_parts():
    with pytest.raises(VersionTripleError) as info:
        VersionTriple.parse("1.2.3.4")
    assert info.value.field is None
    assert "<major>[.minor][.patch]" in str(info.value)


@pytest.mark.parametrize(
    "text, field", [("x.1.2", "major"), ("1.y.2", "minor"), ("1.2.z", "patch"), ("", "major")]
)
def test_triple_invalid_field(text, field):
    with pytest.raises(VersionTripleError) as info:
        VersionTriple.parse(text)
    assert info.value.field == field
    assert info.value.version == text


def test_triple_overflow():
    with pytest.raises(VersionTripleError) as info:
        VersionTriple.parse("99999999999")
    assert "number too large to fit in target type" in str(info.value)


def test_triple_ordering():
    assert VersionTriple(1, 45, 2) < VersionTriple(1, 49, 0)
    assert VersionTriple(2, 0, 0) > VersionTriple(1, 99, 99)


def test_double_parse_and_round_trip():
    assert VersionDouble.parse("3.4") == VersionDouble(3, 4)
    assert VersionDouble.parse("3") == VersionDouble(3, 0)
    assert str(VersionDouble.parse("12.5")) == "12.5"


def test_double_errors():
    with pytest.raises(VersionDoubleError):
        VersionDouble.parse("1.2.3")
    with pytest.raises(VersionDoubleError) as info:
        VersionDouble.parse("1.b")
    assert info.value.field == "minor"


def test_rust_version_stable():
    version = RustVersion.parse("rustc 1.72.0 (5680fa18f 2023-08-23)")
    assert version.triple == VersionTriple(1, 72, 0)
    assert version.flavor is None
    assert version.details.hash == "5680fa18f"
    assert version.details.date == (2023, 8, 23)


def test_rust_version_nightly():
    version = RustVersion.parse("rustc 1.75.0-nightly (abcdef123 2023-10-11)")
    assert version.flavor.flavor == "nightly"
    assert version.flavor.candidate is None


def test_rust_version_without_details():
    version = RustVersion.parse("rustc 1.72.0")
    assert version.details is None
    assert str(version) == "1.72.0"


def test_rust_version_no_match():
    with pytest.raises(RustVersionError):
        RustVersion.parse("cargo 1.72.0")


def test_rust_version_bad_triple():
    with pytest.raises(RustVersionError) as info:
        RustVersion.parse("rustc 99999999999.0.0")
    assert "number too large to fit in target type" in str(info.value)


def test_rust_version_check_without_rustc(monkeypatch, tmp_path):
    monkeypatch.setenv("PATH", str(tmp_path))
    with pytest.raises(RustVersionError) as info:
        RustVersion.check()
    assert str(info.value).startswith("Failed to check rustc version: ")


def test_valid_off_macos(monkeypatch):
    monkeypatch.setattr(sys, "platform", "linux")
    assert RustVersion.parse("rustc 1.46.0 (abcdef123 2020-01-01)").valid() is True


@pytest.mark.parametrize(
    "output, expected",
    [
        ("rustc 1.45.2 (abcdef123 2020-08-03)", True),
        ("rustc 1.46.0 (abcdef123 2020-08-24)", False),
        ("rustc 1.49.0 (abcdef123 2020-10-24)", True),
        ("rustc 1.49.0-nightly (abcdef123 2020-10-23)", False),
        ("rustc 1.50.0", True),
    ],
)
def test_valid_on_macos(monkeypatch, output, expected):
    monkeypatch.setattr(sys, "platform", "darwin")
    assert RustVersion.parse(output).valid() is expected