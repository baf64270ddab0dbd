"""Probes reading the update-center snapshot."""

import logging
import re

from pluginhealth.consts import ADOPTION_LABEL, DEPRECATED_LABEL
from pluginhealth.models.model_plugin import Plugin, ProbeResult
from pluginhealth.probes.base import Probe
from pluginhealth.probes.context import ProbeContext

logger = logging.getLogger(__name__)

NOT_UP_FOR_ADOPTION = "This plugin is not up for adoption."
UP_FOR_ADOPTION = "This plugin is up for adoption."

NOT_DEPRECATED = "This plugin is NOT deprecated."
MARKED_DEPRECATED = "This plugin is marked as deprecated."

STILL_PUBLISHED = "This plugin is still actively published by the update-center."
PUBLICATION_STOPPED = "This plugin's publication has been stopped by the update-center."

NO_KNOWN_VULNERABILITY = "Plugin is OK"


class DeprecatedPluginProbe(Probe):
    """Detects plugins deprecated in the update-center.

    A plugin listed in the deprecations map reports the deprecation URL as
    its message; otherwise the "deprecated" label decides.
    """

    key = "deprecation"
    description = "This probe detects if a specified plugin is deprecated from the update-center."
    order = 0

    async def _do_apply(self, plugin: Plugin, context: ProbeContext) -> ProbeResult:
        deprecation = context.update_center.deprecations.get(plugin.name)
        if deprecation is not None:
            return self.success(deprecation.url)

        uc_plugin = context.update_center_plugin()
        if uc_plugin is None:
            return self.error("This plugin is not in update-center.")

        if DEPRECATED_LABEL in uc_plugin.labels:
            return self.success(MARKED_DEPRECATED)
        return self.success(NOT_DEPRECATED)


class UpForAdoptionProbe(Probe):
    key = "up-for-adoption"
    description = "This probe detects if a specified plugin is declared as up for adoption."
    order = 0

    async def _do_apply(self, plugin: Plugin, context: ProbeContext) -> ProbeResult:
        uc_plugin = context.update_center_plugin()
        if uc_plugin is None:
            logger.info(f"Could not find {plugin.name} in update-center")
            return self.error("This plugin is not in the update-center.")

        if ADOPTION_LABEL in uc_plugin.labels:
            return self.success(UP_FOR_ADOPTION)
        return self.success(NOT_UP_FOR_ADOPTION)


class UpdateCenterPluginPublicationProbe(Probe):
    """Checks the plugin is still distributed by the update-center.

    A plugin missing from the snapshot is a durable finding, not a transient
    failure, so it is reported as a SUCCESS with a negative message.
    """

    key = "update-center-plugin-publication"
    description = (
        "This probe detects if a specified plugin is still actively published by the update-center."
    )
    order = 100

    async def _do_apply(self, plugin: Plugin, context: ProbeContext) -> ProbeResult:
        if context.update_center_plugin() is None:
            return self.success(PUBLICATION_STOPPED)
        return self.success(STILL_PUBLISHED)


class KnownSecurityVulnerabilityProbe(Probe):
    """Lists the security warnings affecting the latest released version."""

    key = "security"
    description = "Detects if the latest version of the plugin is affected by a published security warning."
    order = 100

    async def _do_apply(self, plugin: Plugin, context: ProbeContext) -> ProbeResult:
        uc_plugin = context.update_center_plugin()
        if uc_plugin is None:
            return self.error("This plugin is not in the update-center.")

        version = uc_plugin.version or plugin.version
        if not version:
            return self.error("Cannot determine the released version of the plugin.")

        active = [
            warning.id
            for warning in context.update_center.warnings_for(plugin.name)
            if any(_version_matches(v.pattern, version) for v in warning.versions)
        ]
        if not active:
            return self.success(NO_KNOWN_VULNERABILITY)
        return self.success(", ".join(sorted(active)))


def _version_matches(pattern: str, version: str) -> bool:
    try:
        return re.fullmatch(pattern, version) is not None
    except re.error:
        logger.warning(f"Ignoring invalid security warning version pattern: {pattern}")
        return False
