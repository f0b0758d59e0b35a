import subprocess
from pathlib import Path
from unittest import mock

import pytest

from mobilekit.git import Git
from mobilekit.submodule import Submodule, SubmoduleError

REMOTE = "https://example.com/group/bar.git"


def test_detected_name_from_remote():
    assert Submodule(REMOTE, "sub").detected_name() == "bar"


def test_explicit_name_wins():
    assert Submodule(REMOTE, "sub", name="custom").detected_name() == "custom"


def test_no_name_detected():
    assert Submodule("https://example.com/group/bar", "sub").detected_name() is None


def test_path_becomes_path():
    assert Submodule(REMOTE, "a/b").path == Path("a/b")


def test_init_without_name_fails(tmp_path):
    submodule = Submodule("https://example.com/nothing", "sub")
    with pytest.raises(SubmoduleError, match="Failed to infer name") as info:
        submodule.init(Git(tmp_path))
    assert info.value.submodule is submodule


def test_init_adds_and_initializes(tmp_path):
    with mock.patch("mobilekit.submodule.subprocess.run") as run:
        Submodule(REMOTE, "sub").init(Git(tmp_path))
    commands = [call.args[0][3:] for call in run.call_args_list]
    assert commands == [
        ["submodule", "add", "--name", "bar", REMOTE, "sub"],
        ["submodule", "update", "--init", "--recursive"],
    ]


def test_init_in_index_not_initialized(tmp_path):
    (tmp_path / ".gitmodules").write_text('[submodule "bar"]\n')
    submodule = Submodule(REMOTE, "sub")
    with mock.patch("mobilekit.submodule.subprocess.run") as run:
        submodule.init(Git(tmp_path))
    commands = [call.args[0][3:] for call in run.call_args_list]
    assert commands == [["submodule", "update", "--init", "--recursive"]]
    assert submodule.detected_name() == "bar"


def test_init_already_initialized_checks_out_commit(tmp_path):
    (tmp_path / ".gitmodules").write_text('[submodule "bar"]\n')
    (tmp_path / ".git").mkdir()
    (tmp_path / ".git" / "config").write_text('[submodule "bar"]\n')
    with mock.patch("mobilekit.submodule.subprocess.run") as run:
        Submodule(REMOTE, "sub").init(Git(tmp_path), "abc123")
    run.assert_called_once_with(
        ["git", "-C", str(tmp_path / "sub"), "checkout", "abc123"], check=True
    )


def test_add_failure(tmp_path):
    error = subprocess.CalledProcessError(1, ["git"])
    with mock.patch("mobilekit.submodule.subprocess.run", side_effect=error):
        with pytest.raises(SubmoduleError, match="Failed to add submodule"):
            Submodule(REMOTE, "sub").init(Git(tmp_path))


def test_checkout_failure_mentions_commit(tmp_path):
    def respond(args, **kwargs):
        if "checkout" in args:
            raise subprocess.CalledProcessError(1, args)
        return subprocess.CompletedProcess(args, 0)

    with mock.patch("mobilekit.submodule.subprocess.run", side_effect=respond):
        with pytest.raises(SubmoduleError, match="Failed to checkout commit") as info:
            Submodule(REMOTE, "sub").init(Git(tmp_path), "abc123")
    assert "abc123" in str(info.value)


def test_lfs_missing_is_reported(tmp_path):
    with mock.patch("mobilekit.util.shutil.which", return_value=None):
        with pytest.raises(SubmoduleError, match="Failed to ensure presence of Git LFS"):
            Submodule(REMOTE, "sub", lfs=True).init(Git(tmp_path))