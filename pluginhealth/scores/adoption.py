"""Adoption scoring: is the plugin maintained?"""

from collections.abc import Mapping
from datetime import datetime

from pluginhealth.models.common import _as_utc
from pluginhealth.models.model_plugin import Plugin, ProbeResult
from pluginhealth.models.model_score import Resolution, ScoringComponentResult
from pluginhealth.probes.scm_probes import LastCommitDateProbe
from pluginhealth.probes.update_center_probes import (
    NOT_UP_FOR_ADOPTION,
    UP_FOR_ADOPTION,
    UpForAdoptionProbe,
)
from pluginhealth.scores.base import Scoring, ScoringComponent

# (maximum days between last commit and release, value)
COMMIT_RECENCY_TIERS = (
    (6 * 30, 100),
    (365, 75),
    (2 * 365, 50),
    (4 * 365, 25),
)


class AdoptionComponent(ScoringComponent):
    description = "The plugin must not be marked as up for adoption."
    weight = 0.7

    def evaluate(self, plugin: Plugin, details: Mapping[str, ProbeResult]) -> ScoringComponentResult:
        result = self.successful(details, UpForAdoptionProbe.key)
        if result is None:
            return self.result(0, ["Cannot determine if the plugin is up for adoption."])
        if result.message == NOT_UP_FOR_ADOPTION:
            return self.result(100, ["The plugin is not marked as up for adoption."])
        if result.message == UP_FOR_ADOPTION:
            return self.result(
                0,
                ["The plugin is marked as up for adoption."],
                [Resolution(text="See how to adopt a plugin", link="https://www.jenkins.io/doc/developer/plugin-governance/adopt-a-plugin/")],
            )
        return self.result(0, ["Cannot determine if the plugin is up for adoption.", result.message])


class CommitRecencyComponent(ScoringComponent):
    """Rewards plugins whose last release is close to their last commit.

    The gap is measured from the last commit to the latest release:
        <= 6 months: 100
        <= 1 year:   75
        <= 2 years:  50
        <= 4 years:  25
        otherwise:   0
    """

    description = "The plugin must have a commit close to its latest release."
    weight = 0.3

    def evaluate(self, plugin: Plugin, details: Mapping[str, ProbeResult]) -> ScoringComponentResult:
        result = self.successful(details, LastCommitDateProbe.key)
        if result is None:
            return self.result(0, ["Cannot determine the last commit date."])
        if plugin.release_timestamp is None:
            return self.result(0, ["Cannot determine the latest release date."])

        try:
            commit_date = _as_utc(datetime.fromisoformat(result.message))
        except ValueError:
            return self.result(0, [f"Cannot read the last commit date: {result.message}"])

        days = (plugin.release_timestamp - commit_date).days
        for max_days, value in COMMIT_RECENCY_TIERS:
            if days <= max_days:
                return self.result(value, [f"Last commit happened {max(days, 0)} days before the latest release."])
        return self.result(0, ["No commit in the 4 years before the latest release."])


class AdoptionScoring(Scoring):
    key = "adoption"
    description = "Scores plugin based on its adoption status and the time between the last commit and the last release."
    weight = 0.8
    probe_keys = (UpForAdoptionProbe.key, LastCommitDateProbe.key)
    requires_release = True

    def components(self) -> list[ScoringComponent]:
        return [AdoptionComponent(), CommitRecencyComponent()]
