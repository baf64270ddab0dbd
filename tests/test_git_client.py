"""Tests for GitClient against a local repository."""

import os
import shutil
import subprocess
from datetime import UTC, datetime
from pathlib import Path

import pytest

from pluginhealth.clients.git import GitClient, GitError

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


def _git(repository: Path, *args: str, date: str | None = None) -> None:
    env = dict(os.environ)
    if date:
        env["GIT_AUTHOR_DATE"] = date
        env["GIT_COMMITTER_DATE"] = date
    subprocess.run(
        ["git", "-c", "user.name=Test", "-c", "user.email=test@example.org", *args],
        cwd=repository,
        env=env,
        check=True,
        capture_output=True,
    )


@pytest.fixture
def repository(tmp_path: Path) -> Path:
    """Repository with a root commit and a later commit in a sub-folder."""
    repository = tmp_path / "origin"
    repository.mkdir()
    _git(repository, "init", "--quiet")

    (repository / "pom.xml").write_text("<project/>")
    _git(repository, "add", ".")
    _git(repository, "commit", "--quiet", "-m", "root", date="2024-01-10T10:00:00+02:00")

    module = repository / "module"
    module.mkdir()
    (module / "pom.xml").write_text("<project/>")
    _git(repository, "add", ".")
    _git(repository, "commit", "--quiet", "-m", "module", date="2024-03-05T12:30:00+00:00")
    return repository


class TestGitClient:
    """Tests for GitClient class."""

    @pytest.mark.asyncio
    async def test_last_commit_date(self, repository: Path) -> None:
        client = GitClient()

        date = await client.last_commit_date(repository)

        assert date == datetime(2024, 3, 5, 12, 30, tzinfo=UTC)

    @pytest.mark.asyncio
    async def test_last_commit_date_in_folder(self, repository: Path) -> None:
        """Test that the date is restricted to commits touching the folder."""
        (repository / "pom.xml").write_text("<project><changed/></project>")
        _git(repository, "commit", "--quiet", "-am", "root again", date="2024-04-01T00:00:00+00:00")
        client = GitClient()

        date = await client.last_commit_date(repository, "module")

        assert date == datetime(2024, 3, 5, 12, 30, tzinfo=UTC)

    @pytest.mark.asyncio
    async def test_last_commit_date_converted_to_utc(self, repository: Path) -> None:
        date = await GitClient().last_commit_date(repository, "pom.xml")

        assert date == datetime(2024, 1, 10, 8, 0, tzinfo=UTC)

    @pytest.mark.asyncio
    async def test_last_commit_date_unknown_folder(self, repository: Path) -> None:
        assert await GitClient().last_commit_date(repository, "missing") is None

    @pytest.mark.asyncio
    async def test_clone(self, repository: Path, tmp_path: Path) -> None:
        destination = tmp_path / "clone"

        path = await GitClient().clone(repository.as_uri(), destination)

        assert path == destination
        assert (destination / "module" / "pom.xml").exists()

    @pytest.mark.asyncio
    async def test_clone_failure(self, tmp_path: Path) -> None:
        with pytest.raises(GitError):
            await GitClient().clone((tmp_path / "nowhere").as_uri(), tmp_path / "clone")

    def test_is_git_installed(self) -> None:
        assert GitClient().is_git_installed()
        assert not GitClient(git_path="definitely-not-git").is_git_installed()
