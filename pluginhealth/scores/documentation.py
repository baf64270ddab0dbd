"""Documentation scoring."""

from collections.abc import Mapping

from pluginhealth.models.model_plugin import Plugin, ProbeResult
from pluginhealth.models.model_score import Resolution, ScoringComponentResult
from pluginhealth.probes.documentation_probes import (
    DOCUMENTATION_IN_REPOSITORY,
    DOCUMENTATION_NOT_IN_REPOSITORY,
    DocumentationMigrationProbe,
)
from pluginhealth.probes.repository_probes import CONTRIBUTING_FOUND, ContributingGuidelinesProbe
from pluginhealth.scores.base import Scoring, ScoringComponent

CONTRIBUTING_GUIDE_TUTORIAL = "https://www.jenkins.io/doc/developer/tutorial-improve/add-a-contributing-guide/"
DOCUMENTATION_MIGRATION_TUTORIAL = (
    "https://www.jenkins.io/doc/developer/tutorial-improve/migrate-documentation-to-github/"
)


class ContributingGuideComponent(ScoringComponent):
    description = "The plugin should have a specific contributing guide."
    weight = 0.4

    def evaluate(self, plugin: Plugin, details: Mapping[str, ProbeResult]) -> ScoringComponentResult:
        result = self.successful(details, ContributingGuidelinesProbe.key)
        if result is None:
            return self.result(0, ["Cannot determine if the plugin has contributing guide."])
        if result.message == CONTRIBUTING_FOUND:
            return self.result(100, ["Plugin seems to have a dedicated contributing guide."])
        return self.result(
            0,
            ["The plugin relies on the global contributing guide."],
            [Resolution(text="See why and how to add a contributing guide", link=CONTRIBUTING_GUIDE_TUTORIAL)],
        )


class DocumentationMigrationComponent(ScoringComponent):
    description = "Plugin documentation should be migrated from the wiki."
    weight = 0.6

    def evaluate(self, plugin: Plugin, details: Mapping[str, ProbeResult]) -> ScoringComponentResult:
        result = self.successful(details, DocumentationMigrationProbe.key)
        if result is None:
            return self.result(0, ["Cannot confirm or not the documentation migration."])
        if result.message == DOCUMENTATION_IN_REPOSITORY:
            return self.result(100, ["Documentation is in plugin repository."])
        if result.message == DOCUMENTATION_NOT_IN_REPOSITORY:
            return self.result(
                0,
                ["Documentation should be migrated in plugin repository."],
                [Resolution(text="See how to migrate the documentation", link=DOCUMENTATION_MIGRATION_TUTORIAL)],
            )
        return self.result(0, ["Cannot confirm or not the documentation migration.", result.message])


class DocumentationScoring(Scoring):
    key = "documentation"
    description = "Validates that the plugin has a specific contributing guide and a documentation."
    weight = 0.5
    probe_keys = (ContributingGuidelinesProbe.key, DocumentationMigrationProbe.key)

    def components(self) -> list[ScoringComponent]:
        return [ContributingGuideComponent(), DocumentationMigrationComponent()]
