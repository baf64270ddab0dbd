"""Git CLI wrapper for cloning plugin repositories."""

import asyncio
import logging
import shutil
from datetime import UTC, datetime
from pathlib import Path

from pluginhealth.consts import GIT_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


class GitError(Exception):
    """Raised when a git command fails."""


class GitClient:
    """Wraps the git CLI."""

    def __init__(self, git_path: str = "git", timeout: int = GIT_TIMEOUT_SECONDS):
        """Initialize GitClient.

        Args:
            git_path: Path to git executable (default: "git")
            timeout: Command timeout in seconds (default: 300)
        """
        self.git_path = git_path
        self.timeout = timeout

    def is_git_installed(self) -> bool:
        """Check if git is installed and accessible."""
        return shutil.which(self.git_path) is not None

    async def _run(self, *args: str, cwd: Path | None = None) -> str:
        """Run a git command and return its stdout.

        Raises:
            GitError: On timeout or non-zero exit code
        """
        cmd = [self.git_path, *args]
        logger.debug(f"Running: {' '.join(cmd)}")
        process = await asyncio.create_subprocess_exec(
            *cmd,
            cwd=str(cwd) if cwd else None,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=self.timeout)
        except TimeoutError:
            process.kill()
            await process.wait()
            raise GitError(f"git {args[0]} timeout ({self.timeout}s)") from None

        if process.returncode != 0:
            error_msg = stderr.decode("utf-8", errors="replace").strip()
            raise GitError(f"git {args[0]} failed ({process.returncode}): {error_msg}")

        return stdout.decode("utf-8", errors="replace")

    async def clone(self, url: str, destination: Path) -> Path:
        """Clone a repository without file contents history (blobless clone).

        Args:
            url: Repository URL
            destination: Directory to clone into (must not exist or be empty)

        Returns:
            Path to the cloned repository
        """
        await self._run("clone", "--quiet", "--filter=blob:none", url, str(destination))
        logger.info(f"Cloned {url} into {destination}")
        return destination

    async def last_commit_date(self, repository: Path, folder: str | None = None) -> datetime | None:
        """Date of the most recent commit, optionally restricted to a sub-folder.

        Args:
            repository: Path to a local clone
            folder: Optional sub-folder the commit must touch

        Returns:
            Author date of the commit in UTC, truncated to seconds,
            or None when no commit matches
        """
        args = ["log", "-1", "--format=%aI"]
        if folder and folder.strip():
            args.extend(["--", folder.strip()])
        output = (await self._run(*args, cwd=repository)).strip()
        if not output:
            return None
        return datetime.fromisoformat(output).astimezone(UTC).replace(microsecond=0)
