"""Probes about the plugin documentation."""

from pluginhealth.models.model_plugin import Plugin, ProbeResult
from pluginhealth.probes.base import Probe
from pluginhealth.probes.context import ProbeContext
from pluginhealth.probes.scm_probes import SCMLinkValidationProbe

DOCUMENTATION_IN_REPOSITORY = "Documentation is located in the plugin repository."
DOCUMENTATION_NOT_IN_REPOSITORY = "Documentation is not located in the plugin repository."
NOT_LISTED_IN_MIGRATION = "Plugin is not listed in documentation migration source."


class DocumentationMigrationProbe(Probe):
    """Reports whether the documentation link points inside the plugin repository."""

    key = "documentation-migration"
    description = "Reports if the plugin documentation was migrated from the Wiki to GitHub"
    order = SCMLinkValidationProbe.order + 100
    requires_release = True
    requirements = (SCMLinkValidationProbe.key,)

    async def _do_apply(self, plugin: Plugin, context: ProbeContext) -> ProbeResult:
        links = context.documentation_urls
        if not links:
            return self.error("No link to documentation can be confirmed.")

        link = links.get(plugin.name)
        if link is None:
            return self.success(NOT_LISTED_IN_MIGRATION)
        if _is_within_repository(link, plugin.scm):
            return self.success(DOCUMENTATION_IN_REPOSITORY)
        return self.success(DOCUMENTATION_NOT_IN_REPOSITORY)


def _is_within_repository(link: str, scm: str | None) -> bool:
    """True when the link is the repository URL or a page inside it."""
    if not scm:
        return False
    repository = scm.strip().rstrip("/")
    link = link.strip().rstrip("/")
    return link == repository or link.startswith(f"{repository}/")
