"""Plugin maintenance scoring based on repository configuration."""

from collections.abc import Mapping

from pluginhealth.models.model_plugin import Plugin, ProbeResult
from pluginhealth.models.model_score import Resolution, ScoringComponentResult
from pluginhealth.probes.repository_probes import (
    CD_WORKFLOW_FOUND,
    CONTRIBUTING_FOUND,
    DEPENDABOT_CONFIGURED,
    JENKINSFILE_FOUND,
    RENOVATE_CONFIGURED,
    ContinuousDeliveryProbe,
    ContributingGuidelinesProbe,
    DependabotProbe,
    JenkinsfileProbe,
    RenovateProbe,
)
from pluginhealth.scores.base import Scoring, ScoringComponent

ISSUE_TRACKER = "https://github.com/jenkins-infra/plugin-health-scoring/issues/new/choose"
DEPENDABOT_TUTORIAL = "https://docs.github.com/en/code-security/dependabot/dependabot-version-updates"


class ProbeMessageComponent(ScoringComponent):
    """Gives 100 when a probe reported the expected message, 0 otherwise."""

    probe_key: str
    expected: str
    present: str
    absent: str

    def evaluate(self, plugin: Plugin, details: Mapping[str, ProbeResult]) -> ScoringComponentResult:
        result = self.successful(details, self.probe_key)
        if result is None:
            return self.result(0, [f"Cannot determine the result of {self.probe_key}."])
        if result.message == self.expected:
            return self.result(100, [self.present])
        return self.result(0, [self.absent])


class JenkinsfileComponent(ProbeMessageComponent):
    description = "Plugin should have a Jenkinsfile for continuous integration."
    weight = 0.65
    probe_key = JenkinsfileProbe.key
    expected = JENKINSFILE_FOUND
    present = "Jenkinsfile found."
    absent = "No Jenkinsfile found."


class ContributingComponent(ProbeMessageComponent):
    description = "Plugin should have contributing guidelines."
    weight = 0.15
    probe_key = ContributingGuidelinesProbe.key
    expected = CONTRIBUTING_FOUND
    present = "Contributing guidelines found."
    absent = "No contributing guidelines found."


class DependabotComponent(ProbeMessageComponent):
    description = "Plugin should have dependabot configured."
    weight = 0.15
    probe_key = DependabotProbe.key
    expected = DEPENDABOT_CONFIGURED
    present = "Dependabot is configured."
    absent = "Dependabot is not configured."


class ContinuousDeliveryComponent(ProbeMessageComponent):
    description = "Plugin should be released through continuous delivery (JEP-229)."
    weight = 0.05
    probe_key = ContinuousDeliveryProbe.key
    expected = CD_WORKFLOW_FOUND
    present = "JEP-229 workflow found."
    absent = "JEP-229 workflow not found."


class PluginMaintenanceScoring(Scoring):
    """Scores the repository configuration.

    Component weights:
        Jenkinsfile:              0.65
        Contributing guidelines:  0.15
        Dependabot:               0.15
        Continuous delivery:      0.05
    """

    key = "repository-configuration"
    description = (
        "Scores plugin based on Jenkinsfile presence, Contributing Guidelines presence, "
        "dependabot and JEP-229 configuration."
    )
    weight = 0.5
    probe_keys = (
        JenkinsfileProbe.key,
        ContributingGuidelinesProbe.key,
        DependabotProbe.key,
        ContinuousDeliveryProbe.key,
    )

    def components(self) -> list[ScoringComponent]:
        return [
            JenkinsfileComponent(),
            ContributingComponent(),
            DependabotComponent(),
            ContinuousDeliveryComponent(),
        ]


class DependencyBotComponent(ScoringComponent):
    description = "Plugin should have a dependency update bot configured."

    def evaluate(self, plugin: Plugin, details: Mapping[str, ProbeResult]) -> ScoringComponentResult:
        dependabot = self.successful(details, DependabotProbe.key)
        renovate = self.successful(details, RenovateProbe.key)
        if dependabot is not None and dependabot.message == DEPENDABOT_CONFIGURED:
            return self.result(100, ["Dependabot is configured."])
        if renovate is not None and renovate.message == RENOVATE_CONFIGURED:
            return self.result(100, ["Renovate is configured."])
        if dependabot is None and renovate is None:
            return self.result(
                0,
                ["Could not retrieve details required to score the plugin."],
                [Resolution(text="Please open an issue on the project.", link=ISSUE_TRACKER)],
            )
        return self.result(
            0,
            ["No dependency update bot is configured."],
            [Resolution(text="See how to configure Dependabot", link=DEPENDABOT_TUTORIAL)],
        )


class DependencyManagementScoring(Scoring):
    key = "dependency-management"
    description = "We encourage the usage of Dependency Management tools"
    weight = 0.2
    probe_keys = (DependabotProbe.key, RenovateProbe.key)

    def components(self) -> list[ScoringComponent]:
        return [DependencyBotComponent()]


def main() -> None:
    """Demonstrate repository configuration scoring on sample plugins."""
    print("Repository Configuration Scoring Demo")
    print("=" * 50)

    scoring = PluginMaintenanceScoring()
    samples = {
        "well-configured": [
            ProbeResult.success(JenkinsfileProbe.key, JENKINSFILE_FOUND),
            ProbeResult.success(ContributingGuidelinesProbe.key, CONTRIBUTING_FOUND),
            ProbeResult.success(DependabotProbe.key, DEPENDABOT_CONFIGURED),
            ProbeResult.success(ContinuousDeliveryProbe.key, CD_WORKFLOW_FOUND),
        ],
        "jenkinsfile-only": [
            ProbeResult.success(JenkinsfileProbe.key, JENKINSFILE_FOUND),
        ],
        "unprobed": [],
    }

    for name, results in samples.items():
        plugin = Plugin(name=name, details={r.id: r for r in results})
        result = scoring.apply(plugin)
        print(f"\n{name}: {result.value:.0f}")
        for component in result.components:
            print(f"  {component.value:3d} (w={component.weight:.2f}) {'; '.join(component.reasons)}")


if __name__ == "__main__":
    main()
