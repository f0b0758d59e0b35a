import subprocess
from pathlib import Path
from unittest import mock

import pytest

from mobilekit.repo import Repo, RepoError, Status


def _responder(head, upstream):
    def respond(args, **kwargs):
        if args[-2:] == ["rev-parse", "HEAD"]:
            return subprocess.CompletedProcess(args, 0, stdout=head)
        if args[-2:] == ["rev-parse", "@{u}"]:
            return subprocess.CompletedProcess(args, 0, stdout=upstream)
        return subprocess.CompletedProcess(args, 0, stdout=b"")

    return respond


def test_checkouts_dir(monkeypatch, tmp_path):
    monkeypatch.setenv("CARGO_HOME", str(tmp_path))
    repo = Repo.checkouts_dir("thing")
    assert repo.path.name == "thing"
    assert repo.path.parent.name == "checkouts"
    assert repo.path.is_relative_to(tmp_path)


def test_git_root(tmp_path):
    assert Repo(tmp_path).git().root == Path(tmp_path)


def test_status_missing_dir_is_stale(tmp_path):
    with mock.patch("mobilekit.repo.subprocess.run") as run:
        status = Repo(tmp_path / "absent").status()
    assert status is Status.STALE
    assert status.stale and not status.fresh
    assert run.call_count == 0


def test_status_fresh_when_heads_match(tmp_path):
    with mock.patch("mobilekit.repo.subprocess.run", side_effect=_responder(b"a\n", b"a\n")) as run:
        status = Repo(tmp_path).status()
    assert status is Status.FRESH
    assert run.call_args_list[0].args[0] == ["git", "-C", str(tmp_path), "fetch", "origin"]


def test_status_stale_when_heads_differ(tmp_path):
    with mock.patch("mobilekit.repo.subprocess.run", side_effect=_responder(b"a\n", b"b\n")):
        assert Repo(tmp_path).status() is Status.STALE


def test_status_fetch_failure(tmp_path):
    error = subprocess.CalledProcessError(1, ["git"])
    with mock.patch("mobilekit.repo.subprocess.run", side_effect=error):
        with pytest.raises(RepoError, match="Failed to fetch repo"):
            Repo(tmp_path).status()


def test_latest_subject_strips(tmp_path):
    completed = subprocess.CompletedProcess([], 0, stdout="  subject line\n")
    with mock.patch("mobilekit.repo.subprocess.run", return_value=completed) as run:
        assert Repo(tmp_path).latest_subject() == "subject line"
    assert run.call_args.args[0][-3:] == ["log", "-1", "--pretty=%s"]


def test_latest_hash_failure(tmp_path):
    with mock.patch("mobilekit.repo.subprocess.run", side_effect=FileNotFoundError("git")):
        with pytest.raises(RepoError, match="Failed to get commit log"):
            Repo(tmp_path).latest_hash()


def test_update_clones_when_missing(tmp_path):
    target = tmp_path / "deep" / "checkout"
    with mock.patch("mobilekit.repo.subprocess.run") as run:
        Repo(target).update("https://example.com/repo.git", "dev")
    assert target.parent.is_dir()
    args = run.call_args.args[0]
    assert args[:3] == ["git", "-C", str(target.parent)]
    assert args[3:] == [
        "clone",
        "--depth",
        "1",
        "--single-branch",
        "https://example.com/repo.git",
        str(target),
    ]


def test_update_resets_existing(tmp_path, capsys):
    with mock.patch("mobilekit.repo.subprocess.run") as run:
        Repo(tmp_path).update("https://example.com/repo.git", "dev")
    commands = [call.args[0][3:] for call in run.call_args_list]
    assert commands == [
        ["fetch", "--depth", "1"],
        ["reset", "--hard", "origin/dev"],
        ["clean", "-dfx", "--exclude", "/target"],
    ]
    assert f"Updating `{tmp_path.name}` repo..." in capsys.readouterr().out


def test_update_reset_failure(tmp_path):
    def respond(args, **kwargs):
        if "reset" in args:
            raise subprocess.CalledProcessError(1, args)
        return subprocess.CompletedProcess(args, 0)

    with mock.patch("mobilekit.repo.subprocess.run", side_effect=respond):
        with pytest.raises(RepoError, match="Failed to reset repo"):
            Repo(tmp_path).update("https://example.com/repo.git", "dev")