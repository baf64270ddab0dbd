"""Tests for scorings and their components."""

import json
from datetime import UTC, datetime, timedelta

import pytest

from pluginhealth.models.model_plugin import Plugin, ProbeResult
from pluginhealth.probes.documentation_probes import DOCUMENTATION_IN_REPOSITORY, DOCUMENTATION_NOT_IN_REPOSITORY
from pluginhealth.probes.repository_probes import (
    CD_WORKFLOW_FOUND,
    CONTRIBUTING_FOUND,
    CONTRIBUTING_MISSING,
    DEPENDABOT_CONFIGURED,
    DEPENDABOT_NOT_CONFIGURED,
    JENKINSFILE_FOUND,
    JENKINSFILE_MISSING,
    RENOVATE_CONFIGURED,
    RENOVATE_NOT_CONFIGURED,
)
from pluginhealth.probes.update_center_probes import (
    MARKED_DEPRECATED,
    NO_KNOWN_VULNERABILITY,
    NOT_DEPRECATED,
    NOT_UP_FOR_ADOPTION,
    PUBLICATION_STOPPED,
    STILL_PUBLISHED,
    UP_FOR_ADOPTION,
)
from pluginhealth.scores.adoption import AdoptionScoring, CommitRecencyComponent
from pluginhealth.scores.base import Scoring, ScoringComponent, aggregate_components
from pluginhealth.scores.documentation import DocumentationScoring
from pluginhealth.scores.maintenance import DependencyManagementScoring, PluginMaintenanceScoring
from pluginhealth.scores.maven import JUnit4BanScoring
from pluginhealth.scores.registry import ScoringRegistry
from pluginhealth.scores.update_center_scorings import (
    DeprecatedPluginScoring,
    SecurityWarningScoring,
    UpdateCenterPublishedPluginDetectionScoring,
)

RELEASE = datetime(2024, 6, 1, tzinfo=UTC)


def _plugin(*results: ProbeResult, release: datetime | None = RELEASE) -> Plugin:
    return Plugin(name="mailer", release_timestamp=release, details={r.id: r for r in results})


def _commit(days_before_release: int) -> ProbeResult:
    return ProbeResult.success("last-commit-date", (RELEASE - timedelta(days=days_before_release)).isoformat())


class TestAdoptionScoring:
    """Tests for AdoptionScoring."""

    def test_maintained_recent_plugin(self) -> None:
        plugin = _plugin(ProbeResult.success("up-for-adoption", NOT_UP_FOR_ADOPTION), _commit(10))

        result = AdoptionScoring().apply(plugin)

        assert result.key == "adoption"
        assert result.value == 100
        assert result.weight == 0.8
        assert len(result.components) == 2

    def test_up_for_adoption(self) -> None:
        plugin = _plugin(ProbeResult.success("up-for-adoption", UP_FOR_ADOPTION), _commit(10))

        result = AdoptionScoring().apply(plugin)

        assert result.value == 30
        assert result.components[0].resolutions

    @pytest.mark.parametrize(
        "days,expected",
        [(0, 100), (180, 100), (181, 75), (365, 75), (700, 50), (1000, 25), (1460, 25), (2000, 0)],
    )
    def test_commit_recency_tiers(self, days: int, expected: int) -> None:
        component = CommitRecencyComponent()
        plugin = _plugin(_commit(days))

        assert component.evaluate(plugin, plugin.details).value == expected

    def test_commit_recency_without_data(self) -> None:
        component = CommitRecencyComponent()

        no_commit = _plugin()
        no_release = _plugin(_commit(10), release=None)
        unreadable = _plugin(ProbeResult.success("last-commit-date", "yesterday"))

        assert component.evaluate(no_commit, no_commit.details).value == 0
        assert component.evaluate(no_release, no_release.details).value == 0
        assert component.evaluate(unreadable, unreadable.details).value == 0

    def test_error_result_counts_as_missing(self) -> None:
        plugin = _plugin(ProbeResult.error("up-for-adoption", "boom"))

        result = AdoptionScoring().apply(plugin)

        assert result.value == 0


class TestUpdateCenterScorings:
    """Tests for scorings reading update-center probes."""

    def test_deprecation(self) -> None:
        scoring = DeprecatedPluginScoring()

        assert scoring.apply(_plugin(ProbeResult.success("deprecation", NOT_DEPRECATED))).value == 100
        assert scoring.apply(_plugin(ProbeResult.success("deprecation", MARKED_DEPRECATED))).value == 0
        assert scoring.apply(_plugin()).value == 0

    def test_deprecation_url_becomes_resolution(self) -> None:
        url = "https://www.jenkins.io/doc/old-plugin-deprecated"

        result = DeprecatedPluginScoring().apply(_plugin(ProbeResult.success("deprecation", url)))

        assert result.value == 0
        assert result.components[0].resolutions[0].link == url

    def test_publication(self) -> None:
        scoring = UpdateCenterPublishedPluginDetectionScoring()

        published = _plugin(ProbeResult.success("update-center-plugin-publication", STILL_PUBLISHED))
        stopped = _plugin(ProbeResult.success("update-center-plugin-publication", PUBLICATION_STOPPED))

        assert scoring.apply(published).value == 100
        assert scoring.apply(stopped).value == 0

    def test_security(self) -> None:
        scoring = SecurityWarningScoring()

        assert scoring.apply(_plugin(ProbeResult.success("security", NO_KNOWN_VULNERABILITY))).value == 100
        vulnerable = scoring.apply(_plugin(ProbeResult.success("security", "SECURITY-123, SECURITY-456")))
        assert vulnerable.value == 0
        assert "SECURITY-123" in vulnerable.components[0].reasons[0]


class TestDocumentationScoring:
    def test_full_documentation(self) -> None:
        plugin = _plugin(
            ProbeResult.success("contributing-guidelines", CONTRIBUTING_FOUND),
            ProbeResult.success("documentation-migration", DOCUMENTATION_IN_REPOSITORY),
        )

        assert DocumentationScoring().apply(plugin).value == 100

    def test_partial_documentation(self) -> None:
        plugin = _plugin(
            ProbeResult.success("contributing-guidelines", CONTRIBUTING_MISSING),
            ProbeResult.success("documentation-migration", DOCUMENTATION_IN_REPOSITORY),
        )

        assert DocumentationScoring().apply(plugin).value == 60

    def test_not_migrated(self) -> None:
        plugin = _plugin(
            ProbeResult.success("contributing-guidelines", CONTRIBUTING_FOUND),
            ProbeResult.success("documentation-migration", DOCUMENTATION_NOT_IN_REPOSITORY),
        )

        result = DocumentationScoring().apply(plugin)

        assert result.value == 40
        assert result.components[1].resolutions


class TestPluginMaintenanceScoring:
    """Tests for PluginMaintenanceScoring."""

    def test_fully_configured(self) -> None:
        plugin = _plugin(
            ProbeResult.success("jenkinsfile", JENKINSFILE_FOUND),
            ProbeResult.success("contributing-guidelines", CONTRIBUTING_FOUND),
            ProbeResult.success("dependabot", DEPENDABOT_CONFIGURED),
            ProbeResult.success("jep-229", CD_WORKFLOW_FOUND),
        )

        assert PluginMaintenanceScoring().apply(plugin).value == 100

    def test_jenkinsfile_only(self) -> None:
        plugin = _plugin(ProbeResult.success("jenkinsfile", JENKINSFILE_FOUND))

        assert PluginMaintenanceScoring().apply(plugin).value == 65

    def test_without_jenkinsfile(self) -> None:
        plugin = _plugin(
            ProbeResult.success("jenkinsfile", JENKINSFILE_MISSING),
            ProbeResult.success("contributing-guidelines", CONTRIBUTING_FOUND),
            ProbeResult.success("dependabot", DEPENDABOT_CONFIGURED),
            ProbeResult.success("jep-229", CD_WORKFLOW_FOUND),
        )

        assert PluginMaintenanceScoring().apply(plugin).value == 35


class TestDependencyManagementScoring:
    """Tests for DependencyManagementScoring."""

    @pytest.mark.parametrize(
        "results",
        [
            [ProbeResult.success("dependabot", DEPENDABOT_CONFIGURED)],
            [
                ProbeResult.success("dependabot", DEPENDABOT_NOT_CONFIGURED),
                ProbeResult.success("renovate", RENOVATE_CONFIGURED, version=2),
            ],
        ],
    )
    def test_either_bot_configured(self, results: list[ProbeResult]) -> None:
        result = DependencyManagementScoring().apply(_plugin(*results))

        assert result.value == 100
        assert result.weight == 0.2

    def test_no_bot_configured(self) -> None:
        plugin = _plugin(
            ProbeResult.success("dependabot", DEPENDABOT_NOT_CONFIGURED),
            ProbeResult.success("renovate", RENOVATE_NOT_CONFIGURED, version=2),
        )

        result = DependencyManagementScoring().apply(plugin)

        assert result.value == 0
        assert result.components[0].reasons == ["No dependency update bot is configured."]
        assert result.components[0].resolutions

    def test_without_details(self) -> None:
        result = DependencyManagementScoring().apply(_plugin())

        assert result.value == 0
        assert result.components[0].reasons == ["Could not retrieve details required to score the plugin."]
        assert result.components[0].resolutions[0].link.endswith("/issues/new/choose")


class TestJUnit4BanScoring:
    """Tests for JUnit4BanScoring."""

    def test_does_not_weigh_in_plugin_score(self) -> None:
        assert JUnit4BanScoring().weight == 0

    def test_ban_enabled(self) -> None:
        properties = ProbeResult.success("maven-properties", json.dumps({"ban-junit4-imports.skip": "false"}))

        result = JUnit4BanScoring().apply(_plugin(properties))

        assert result.value == 100
        assert result.components[0].reasons == ["JUnit4 imports are banned on the plugin."]

    @pytest.mark.parametrize("properties", [{}, {"ban-junit4-imports.skip": "true"}, {"jenkins.version": "2.440"}])
    def test_ban_skipped(self, properties: dict[str, str]) -> None:
        result = JUnit4BanScoring().apply(_plugin(ProbeResult.success("maven-properties", json.dumps(properties))))

        assert result.value == 0
        assert result.components[0].reasons == ["ban-junit4-imports.skip property is not set or true on the plugin."]
        assert result.components[0].resolutions[0].text == "How to set up JUnit 4 import ban"

    def test_without_maven_properties(self) -> None:
        result = JUnit4BanScoring().apply(_plugin())

        assert result.value == 0
        assert result.components[0].reasons == ["Cannot find Maven properties for the plugin."]

    def test_unreadable_maven_properties(self) -> None:
        result = JUnit4BanScoring().apply(_plugin(ProbeResult.success("maven-properties", "foo")))

        assert result.components[0].reasons == ["Cannot use the Maven properties from the plugin."]


class ZeroWeightComponent(ScoringComponent):
    description = "Never counts"
    weight = 0.0

    def evaluate(self, plugin, details):
        return self.result(100, ["ignored"])


class ZeroWeightScoring(Scoring):
    key = "zero"
    description = "Only zero-weight components"
    weight = 0.5

    def components(self) -> list[ScoringComponent]:
        return [ZeroWeightComponent()]


class TestAggregation:
    def test_zero_weight_components_give_zero(self) -> None:
        result = ZeroWeightScoring().apply(_plugin())

        assert result.value == 0
        assert aggregate_components(result.components) == 0

    def test_component_weights_within_bounds(self) -> None:
        """Test that every shipped component reports a weight in [0, 1]."""
        plugin = _plugin()
        for scoring in ScoringRegistry():
            result = scoring.apply(plugin)
            assert 0 <= result.value <= 100
            assert 0 <= result.weight <= 1
            for component in result.components:
                assert 0 <= component.weight <= 1


class TestScoringRegistry:
    def test_default_scorings(self) -> None:
        registry = ScoringRegistry()

        assert set(registry.keys()) == {
            "adoption",
            "deprecation",
            "update-center-plugin-publication",
            "security",
            "documentation",
            "repository-configuration",
            "dependency-management",
            "junit4-ban",
        }
        assert registry.get("adoption").weight == 0.8
        assert registry.get("junit4-ban").weight == 0
        assert registry.get("unknown") is None

    def test_duplicate_key_rejected(self) -> None:
        with pytest.raises(ValueError, match="Duplicate scoring key"):
            ScoringRegistry([AdoptionScoring(), AdoptionScoring()])

    def test_views(self) -> None:
        view = next(v for v in ScoringRegistry().views() if v.key == "documentation")

        assert view.weight == 0.5
        assert view.probe_keys == ("contributing-guidelines", "documentation-migration")
        assert not view.requires_release
        assert next(v for v in ScoringRegistry().views() if v.key == "adoption").requires_release
