import io

import pytest

from mobilekit import prompt
from mobilekit.cli import Color


@pytest.fixture(autouse=True)
def no_color(monkeypatch):
    monkeypatch.delenv("CLICOLOR_FORCE", raising=False)
    monkeypatch.setenv("NO_COLOR", "1")


def feed(monkeypatch, text):
    monkeypatch.setattr("sys.stdin", io.StringIO(text))


def test_minimal_strips_reply(monkeypatch, capsys):
    feed(monkeypatch, "  bob \n")
    assert prompt.minimal("Name") == "bob"
    assert capsys.readouterr().out == "Name: "


def test_minimal_eof(monkeypatch):
    feed(monkeypatch, "")
    with pytest.raises(EOFError):
        prompt.minimal("Name")


def test_default_used_on_empty(monkeypatch, capsys):
    feed(monkeypatch, "\n")
    assert prompt.default("Pick", "dflt") == "dflt"
    assert capsys.readouterr().out == "Pick (dflt): "


def test_default_overridden(monkeypatch):
    feed(monkeypatch, "mine\n")
    assert prompt.default("Pick", "dflt", Color.GREEN) == "mine"


def test_default_without_default(monkeypatch):
    feed(monkeypatch, "\n")
    assert prompt.default("Pick") == ""


def test_default_colored(monkeypatch, capsys):
    monkeypatch.delenv("NO_COLOR")
    monkeypatch.setenv("CLICOLOR_FORCE", "1")
    feed(monkeypatch, "\n")
    assert prompt.default("Pick", "dflt", Color.GREEN) == "dflt"
    assert "\x1b[" in capsys.readouterr().out


@pytest.mark.parametrize(
    "reply, default, expected",
    [
        ("Y\n", None, True),
        ("y\n", False, True),
        ("N\n", True, False),
        ("\n", True, True),
        ("\n", False, False),
        ("\n", None, None),
    ],
)
def test_yes_no(monkeypatch, reply, default, expected):
    feed(monkeypatch, reply)
    assert prompt.yes_no("Continue?", default) is expected


def test_yes_no_prompt_text(monkeypatch, capsys):
    feed(monkeypatch, "y\n")
    prompt.yes_no("Continue?", True)
    assert capsys.readouterr().out == "Continue? [Y/n]: "


def test_yes_no_silly(monkeypatch, capsys):
    feed(monkeypatch, "maybe\n")
    assert prompt.yes_no("Continue?", True) is None
    assert "That was neither a Y nor an N! You're pretty silly." in capsys.readouterr().out


def test_list_display_only_empty(capsys):
    prompt.list_display_only([])
    assert capsys.readouterr().out == "  -- none --\n"


def test_list_display_only_items(capsys):
    prompt.list_display_only(iter(["apple", "pear"]))
    lines = capsys.readouterr().out.splitlines()
    assert lines == ["  [0] apple", "  [1] pear"]


def test_choose_retries_until_valid(monkeypatch, capsys):
    feed(monkeypatch, "\nx\n5\n1\n")
    index = prompt.choose_from_list("Devices", ["a", "b"], "device", None, "Device")
    out = capsys.readouterr().out
    assert index == 1
    assert "Not to be pushy, but you need to pick a device." in out
    assert "Hey, that wasn't a number! You're silly." in out
    assert "There's no device with an index that high." in out


def test_choose_single_defaults_to_zero(monkeypatch):
    feed(monkeypatch, "\n")
    assert prompt.choose_from_list("Devices", ["only"], "device", "name", "Device") == 0


def test_choose_mentions_alternative(monkeypatch, capsys):
    feed(monkeypatch, "0\n")
    prompt.choose_from_list("Devices", ["a", "b"], "device", "name", "Device")
    out = capsys.readouterr().out
    assert "or enter a name manually." in out
    assert out.startswith("Devices:\n")


def test_choose_rejects_negative(monkeypatch, capsys):
    feed(monkeypatch, "-1\n0\n")
    assert prompt.choose_from_list("Devices", ["a", "b"], "device", None, "Device") == 0
    assert "Hey, that wasn't a number! You're silly." in capsys.readouterr().out


def test_choose_eof(monkeypatch):
    feed(monkeypatch, "")
    with pytest.raises(EOFError):
        prompt.choose_from_list("Devices", ["a", "b"], "device", None, "Device")