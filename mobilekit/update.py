"""Updating the installed tool from its source checkout."""

from __future__ import annotations

import logging
import subprocess
import sys

from mobilekit.cli import Report, TextWrapper
from mobilekit.paths import NoHomeDir
from mobilekit.repo import Repo, RepoError
from mobilekit.util import format_commit_msg, quote_str

logger = logging.getLogger(__name__)

CHECKOUT_NAME = "mobilekit"
REPO_URL = "https://example.com/mobilekit/mobilekit.git"
REPO_BRANCH = "dev"


class UpdateError(Exception):
    """The tool couldn't be updated."""


def cargo_mobile_repo() -> Repo:
    """The checkout the tool is updated from."""
    return Repo.checkouts_dir(CHECKOUT_NAME)


def updating_marker_path(repo: Repo):
    """The marker file that records an unfinished update."""
    return repo.path.parent.parent / ".updating"


def _install_command(repo: Repo) -> list[str]:
    return [sys.executable, "-m", "pip", "install", "--force-reinstall", str(repo.path)]


def update(wrapper: TextWrapper) -> None:
    """Update the checkout and reinstall from it when stale or half-updated."""
    try:
        repo = cargo_mobile_repo()
    except NoHomeDir as err:
        raise UpdateError(str(err)) from err
    marker = updating_marker_path(repo)
    marker_exists = marker.is_file()
    if marker_exists:
        logger.info("marker file present at %r", str(marker))
    else:
        logger.info("no marker file present at %r", str(marker))

    if not marker_exists:
        try:
            stale = repo.status().stale
        except RepoError as err:
            raise UpdateError(
                f"Failed to check status of `{CHECKOUT_NAME}` repo: {err}"
            ) from err
    if marker_exists or stale:
        try:
            marker.touch()
        except OSError as err:
            raise UpdateError(
                f"Failed to create marker file at {quote_str(str(marker))}: {err}"
            ) from err
        try:
            repo.update(REPO_URL, REPO_BRANCH)
        except RepoError as err:
            raise UpdateError(f"Failed to update `{CHECKOUT_NAME}` repo: {err}") from err
        print(f"Installing updated `{CHECKOUT_NAME}`...")
        try:
            subprocess.run(_install_command(repo), check=True)
        except (OSError, subprocess.SubprocessError) as err:
            raise UpdateError(
                f"Failed to install new version of `{CHECKOUT_NAME}`: {err}"
            ) from err
        try:
            marker.unlink()
        except OSError as err:
            raise UpdateError(
                f"Failed to delete marker file at {quote_str(str(marker))}: {err}"
            ) from err
        logger.info("deleted marker file at %r", str(marker))
        msg = f"installed new version of `{CHECKOUT_NAME}`"
    else:
        msg = f"`{CHECKOUT_NAME}` is already up-to-date"

    try:
        details = format_commit_msg(repo.latest_subject())
    except RepoError as err:
        details = f"But we failed to get the latest commit message: {err}"
    Report.victory(msg, details).print(wrapper)