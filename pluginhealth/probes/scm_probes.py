"""Probes validating the plugin source repository."""

import logging

import httpx

from pluginhealth.clients.git import GitError
from pluginhealth.models.model_plugin import Plugin, ProbeResult
from pluginhealth.probes.base import Probe
from pluginhealth.probes.context import ProbeContext
from pluginhealth.probes.update_center_probes import UpdateCenterPluginPublicationProbe

logger = logging.getLogger(__name__)

SCM_LINK_VALID = "The plugin SCM link is valid."
SCM_LINK_EMPTY = "The plugin SCM link is empty."
SCM_LINK_NOT_SUPPORTED = "SCM link doesn't match GitHub plugin repositories."
SCM_LINK_INVALID = "The plugin SCM link is invalid."


class SCMLinkValidationProbe(Probe):
    """Validates through the GitHub API that the plugin SCM link points to a repository."""

    key = "scm"
    description = (
        "The SCMLinkValidation probe validates with GitHub API "
        "if the known SCM link of a plugin is correct or not."
    )
    order = UpdateCenterPluginPublicationProbe.order + 100
    requires_release = True
    requirements = (UpdateCenterPluginPublicationProbe.key,)

    async def _do_apply(self, plugin: Plugin, context: ProbeContext) -> ProbeResult:
        if not plugin.scm or not plugin.scm.strip():
            logger.warning(f"{plugin.name} has no SCM link")
            return self.success(SCM_LINK_EMPTY)

        repository = context.repository_name(plugin.scm)
        if repository is None:
            logger.debug(f"{plugin.scm} is not respecting the SCM URL template")
            return self.success(SCM_LINK_NOT_SUPPORTED)

        if context.github is None:
            return self.error("No GitHub client available to validate the SCM link.")

        try:
            payload = await context.github.get_repository(repository)
        except httpx.HTTPError as e:
            logger.warning(f"Could not validate {repository} for {plugin.name}: {e}")
            return self.error(f"Could not reach GitHub to validate {repository}.")

        if payload is None:
            return self.success(SCM_LINK_INVALID)

        context.scm_folder_path = context.folder_path(plugin.scm)
        return self.success(SCM_LINK_VALID)


class LastCommitDateProbe(Probe):
    """Registers the date of the last commit touching the plugin.

    The date is stored in the context so that source-code-related probes
    running afterwards can decide whether the repository changed. The probe
    declares neither requires_release nor is_source_code_related and is
    therefore executed on every run.
    """

    key = "last-commit-date"
    description = "Register the last commit date on the official plugin repository"
    order = SCMLinkValidationProbe.order + 100
    requirements = (SCMLinkValidationProbe.key,)
    report_raw_results = False

    async def _do_apply(self, plugin: Plugin, context: ProbeContext) -> ProbeResult:
        repository = await context.ensure_repository(plugin.scm)
        if repository is None or context.git is None:
            return self.error(f"There is no local repository for plugin {plugin.name}.")

        folder = context.scm_folder_path or context.folder_path(plugin.scm)
        try:
            commit_date = await context.git.last_commit_date(repository, folder)
        except GitError as e:
            logger.error(f"There was an issue while accessing the repository of {plugin.name}: {e}")
            return self.error("Could not access the plugin repository.")

        if commit_date is None:
            return self.error("Last commit cannot be extracted. Please validate sub-folder if any.")

        context.last_commit_date = commit_date
        return self.success(commit_date.isoformat())
