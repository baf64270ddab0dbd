"""Informational scorings read from the Maven project configuration."""

import json
from collections.abc import Mapping

from pluginhealth.models.model_plugin import Plugin, ProbeResult
from pluginhealth.models.model_score import Resolution, ScoringComponentResult
from pluginhealth.probes.repository_probes import MavenPropertiesProbe
from pluginhealth.scores.base import Scoring, ScoringComponent

JUNIT4_BAN_SKIP_PROPERTY = "ban-junit4-imports.skip"
JUNIT4_BAN_TUTORIAL = "https://github.com/jenkinsci/plugin-pom/pull/1178"


class JUnit4BanComponent(ScoringComponent):
    description = "The plugin should ban JUnit 4 imports."

    def evaluate(self, plugin: Plugin, details: Mapping[str, ProbeResult]) -> ScoringComponentResult:
        result = self.successful(details, MavenPropertiesProbe.key)
        if result is None:
            return self.result(0, ["Cannot find Maven properties for the plugin."])

        try:
            properties = json.loads(result.message)
        except ValueError:
            properties = None
        if not isinstance(properties, dict):
            return self.result(0, ["Cannot use the Maven properties from the plugin."])

        # The parent pom skips the ban unless the plugin opts in
        if str(properties.get(JUNIT4_BAN_SKIP_PROPERTY, "true")).lower() == "true":
            return self.result(
                0,
                [f"{JUNIT4_BAN_SKIP_PROPERTY} property is not set or true on the plugin."],
                [Resolution(text="How to set up JUnit 4 import ban", link=JUNIT4_BAN_TUTORIAL)],
            )
        return self.result(100, ["JUnit4 imports are banned on the plugin."])


class JUnit4BanScoring(Scoring):
    """Reports whether JUnit 4 imports are banned.

    The weight is zero: the result is listed with the score details but does
    not move the plugin score.
    """

    key = "junit4-ban"
    description = (
        "Shows if the plugin bans JUnit 4 imports. Not used in general plugin score, just for information."
    )
    weight = 0.0
    probe_keys = (MavenPropertiesProbe.key,)

    def components(self) -> list[ScoringComponent]:
        return [JUnit4BanComponent()]
