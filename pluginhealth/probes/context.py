"""Per-plugin execution context shared by the probes of one run."""

import logging
import re
import shutil
import tempfile
from datetime import datetime
from pathlib import Path

from pluginhealth.clients.git import GitClient, GitError
from pluginhealth.clients.github import GitHubClient
from pluginhealth.consts import SCM_URL_PATTERN
from pluginhealth.models.model_update_center import UpdateCenter, UpdateCenterPlugin

logger = logging.getLogger(__name__)

SCM_PATTERN = re.compile(SCM_URL_PATTERN)


class ProbeContext:
    """Resources and intermediate findings for probing a single plugin.

    A context is owned by exactly one plugin task. The update-center
    snapshot and documentation index are shared read-only between contexts;
    the working directory (and the repository cloned in it) is private and
    removed on cleanup().

    Use as an async context manager so cleanup happens on every exit path:

        async with ProbeContext("mailer", update_center) as context:
            ...
    """

    def __init__(
        self,
        plugin_name: str,
        update_center: UpdateCenter,
        documentation_urls: dict[str, str] | None = None,
        github: GitHubClient | None = None,
        git: GitClient | None = None,
    ):
        self.plugin_name = plugin_name
        self.update_center = update_center
        self.documentation_urls = documentation_urls or {}
        self.github = github
        self.git = git

        self.scm_repository: Path | None = None
        self.scm_folder_path: str | None = None
        self.last_commit_date: datetime | None = None

        self._work_dir: Path | None = None
        self._clone_attempted = False

    @property
    def work_dir(self) -> Path:
        """Private temporary directory, created on first use."""
        if self._work_dir is None:
            self._work_dir = Path(tempfile.mkdtemp(prefix=f"{self.plugin_name}-"))
        return self._work_dir

    def update_center_plugin(self) -> UpdateCenterPlugin | None:
        return self.update_center.plugins.get(self.plugin_name)

    @staticmethod
    def repository_name(scm: str | None) -> str | None:
        """Extract "owner/name" from a supported SCM URL."""
        if not scm:
            return None
        match = SCM_PATTERN.match(scm.strip())
        return match.group("repo") if match else None

    @staticmethod
    def folder_path(scm: str | None) -> str | None:
        """Sub-folder of the repository holding the plugin, for monorepo links."""
        if not scm:
            return None
        match = SCM_PATTERN.match(scm.strip())
        return match.group("folder") if match else None

    async def ensure_repository(self, scm: str | None) -> Path | None:
        """Clone the plugin repository once and return its local path.

        Returns:
            Path to the clone, or None when there is no usable SCM link,
            no git client, or the clone failed (failure is logged)
        """
        if self.scm_repository is not None:
            return self.scm_repository
        if self._clone_attempted:
            return None
        self._clone_attempted = True

        if self.git is None or not scm:
            return None
        match = SCM_PATTERN.match(scm.strip())
        if not match:
            return None

        url = f"https://{match.group('server')}/{match.group('repo')}"
        try:
            self.scm_repository = await self.git.clone(url, self.work_dir / "repository")
        except GitError as e:
            logger.warning(f"Could not clone {url} for {self.plugin_name}: {e}")
            return None
        return self.scm_repository

    def cleanup(self) -> None:
        """Remove the working directory and everything cloned in it."""
        if self._work_dir is None:
            return
        try:
            if self._work_dir.exists():
                shutil.rmtree(self._work_dir)
                logger.debug(f"Cleaned up working directory: {self._work_dir}")
        except OSError as e:
            logger.warning(f"Failed to cleanup working directory {self._work_dir}: {e}")
        finally:
            self._work_dir = None
            self.scm_repository = None

    async def __aenter__(self) -> "ProbeContext":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.cleanup()
