"""Scorings derived from update-center probes."""

from collections.abc import Mapping

from pluginhealth.models.model_plugin import Plugin, ProbeResult
from pluginhealth.models.model_score import Resolution, ScoringComponentResult
from pluginhealth.probes.update_center_probes import (
    MARKED_DEPRECATED,
    NO_KNOWN_VULNERABILITY,
    NOT_DEPRECATED,
    PUBLICATION_STOPPED,
    STILL_PUBLISHED,
    DeprecatedPluginProbe,
    KnownSecurityVulnerabilityProbe,
    UpdateCenterPluginPublicationProbe,
)
from pluginhealth.scores.base import Scoring, ScoringComponent


class DeprecationComponent(ScoringComponent):
    description = "The plugin must not be marked as deprecated."

    def evaluate(self, plugin: Plugin, details: Mapping[str, ProbeResult]) -> ScoringComponentResult:
        result = self.successful(details, DeprecatedPluginProbe.key)
        if result is None:
            return self.result(0, ["Cannot determine if the plugin is marked as deprecated or not."])
        if result.message == NOT_DEPRECATED:
            return self.result(100, ["Plugin is not marked as deprecated."])
        if result.message == MARKED_DEPRECATED:
            return self.result(0, ["Plugin is marked as deprecated."])
        # Deprecation notices carry their URL as message
        return self.result(
            0,
            ["Plugin is marked as deprecated."],
            [Resolution(text="Read the deprecation notice", link=result.message)],
        )


class DeprecatedPluginScoring(Scoring):
    key = "deprecation"
    description = "Scores plugin based on its deprecation status."
    weight = 0.8
    probe_keys = (DeprecatedPluginProbe.key,)

    def components(self) -> list[ScoringComponent]:
        return [DeprecationComponent()]


class PublicationComponent(ScoringComponent):
    description = "Plugin should be present in the update-center to be distributed."

    def evaluate(self, plugin: Plugin, details: Mapping[str, ProbeResult]) -> ScoringComponentResult:
        result = self.successful(details, UpdateCenterPluginPublicationProbe.key)
        if result is None:
            return self.result(0, ["Cannot determine if the plugin is part of the update-center."])
        if result.message == STILL_PUBLISHED:
            return self.result(100, ["The plugin appears in the update-center."])
        if result.message == PUBLICATION_STOPPED:
            return self.result(0, ["The plugin is not part of the update-center."])
        return self.result(
            0,
            ["Cannot determine if the plugin is part of the update-center or not.", result.message],
        )


class UpdateCenterPublishedPluginDetectionScoring(Scoring):
    key = "update-center-plugin-publication"
    description = "Scores a plugin based on its presence or not in the update-center."
    weight = 1.0
    probe_keys = (UpdateCenterPluginPublicationProbe.key,)

    def components(self) -> list[ScoringComponent]:
        return [PublicationComponent()]


class SecurityWarningComponent(ScoringComponent):
    description = "The latest release must not be affected by a published security warning."

    def evaluate(self, plugin: Plugin, details: Mapping[str, ProbeResult]) -> ScoringComponentResult:
        result = self.successful(details, KnownSecurityVulnerabilityProbe.key)
        if result is None:
            return self.result(0, ["Cannot determine if the plugin has active security warnings."])
        if result.message == NO_KNOWN_VULNERABILITY:
            return self.result(100, ["No active security warning on the latest release."])
        return self.result(
            0,
            [f"Active security warnings: {result.message}"],
            [Resolution(text="Read the security advisories", link="https://www.jenkins.io/security/advisories/")],
        )


class SecurityWarningScoring(Scoring):
    key = "security"
    description = "Scores plugin based on current and active security warnings."
    weight = 1.0
    probe_keys = (KnownSecurityVulnerabilityProbe.key,)

    def components(self) -> list[ScoringComponent]:
        return [SecurityWarningComponent()]
