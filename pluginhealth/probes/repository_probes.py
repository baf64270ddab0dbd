"""Probes inspecting the content of the cloned plugin repository."""

import json
import logging
from abc import abstractmethod
from pathlib import Path
from typing import Any, ClassVar
from xml.etree import ElementTree

import yaml

from pluginhealth.consts import CD_WORKFLOW_REFERENCE
from pluginhealth.models.model_plugin import Plugin, ProbeResult
from pluginhealth.probes.base import Probe
from pluginhealth.probes.context import ProbeContext
from pluginhealth.probes.scm_probes import LastCommitDateProbe, SCMLinkValidationProbe

logger = logging.getLogger(__name__)

JENKINSFILE_FOUND = "Jenkinsfile found"
JENKINSFILE_MISSING = "No Jenkinsfile found"

CONTRIBUTING_FOUND = "Contributing guidelines found."
CONTRIBUTING_MISSING = "No contributing guidelines found."

DEPENDABOT_CONFIGURED = "Dependabot is configured."
DEPENDABOT_NOT_CONFIGURED = "Dependabot is not configured."
RENOVATE_CONFIGURED = "Renovate is configured."
RENOVATE_NOT_CONFIGURED = "Renovate is not configured."
NO_GITHUB_FOLDER = "No GitHub configuration folder found."

POM_NAMESPACE = "{http://maven.apache.org/POM/4.0.0}"

CD_WORKFLOW_FOUND = "JEP-229 workflow definition found."
CD_WORKFLOW_MISSING = "Could not find JEP-229 workflow definition."
NO_GITHUB_ACTIONS = "Plugin has no GitHub Action configured."


class RepositoryProbe(Probe):
    """Base for probes reading files from the local clone.

    These probes only re-run when the repository received a newer commit
    than their stored result.
    """

    order = LastCommitDateProbe.order + 100
    is_source_code_related = True
    requirements = (SCMLinkValidationProbe.key, LastCommitDateProbe.key)

    async def _do_apply(self, plugin: Plugin, context: ProbeContext) -> ProbeResult:
        repository = await context.ensure_repository(plugin.scm)
        if repository is None:
            return self.error(f"There is no local repository for plugin {plugin.name}.")
        try:
            return self.inspect(repository)
        except OSError as e:
            logger.warning(f"Could not browse repository of {plugin.name} during {self.key}: {e}")
            return self.error("Could not browse the plugin folder.")

    @abstractmethod
    def inspect(self, repository: Path) -> ProbeResult:
        """Examine the repository content.

        Args:
            repository: Root of the local clone

        Returns:
            The probe result
        """
        ...


class JenkinsfileProbe(RepositoryProbe):
    key = "jenkinsfile"
    description = (
        "Validates the existence of a `Jenkinsfile` file in the repository. "
        "This file is used to configure the plugin Continuous Integration on ci.jenkins.io."
    )

    def inspect(self, repository: Path) -> ProbeResult:
        if (repository / "Jenkinsfile").is_file():
            return self.success(JENKINSFILE_FOUND)
        return self.success(JENKINSFILE_MISSING)


class ContributingGuidelinesProbe(RepositoryProbe):
    """Looks for CONTRIBUTING.md or CONTRIBUTING.adoc at the root or one folder deep."""

    key = "contributing-guidelines"
    description = (
        "Validates the existence of a `CONTRIBUTING.adoc` or `CONTRIBUTING.md` file in the repository."
    )

    NAMES = ("contributing.md", "contributing.adoc")

    def inspect(self, repository: Path) -> ProbeResult:
        candidates = list(repository.iterdir())
        for entry in list(candidates):
            if entry.is_dir() and entry.name != ".git":
                candidates.extend(entry.iterdir())

        if any(p.is_file() and p.name.lower() in self.NAMES for p in candidates):
            return self.success(CONTRIBUTING_FOUND)
        return self.success(CONTRIBUTING_MISSING)


class DependencyBotProbe(RepositoryProbe):
    """Looks for the configuration file of a dependency update bot in `.github`."""

    bot_name: ClassVar[str]

    def inspect(self, repository: Path) -> ProbeResult:
        github_config = repository / ".github"
        if not github_config.is_dir():
            logger.debug(f"No GitHub configuration folder in {repository}")
            return self.success(NO_GITHUB_FOLDER)

        bot = self.bot_name.capitalize()
        if any(p.is_file() and p.name.startswith(self.bot_name) for p in github_config.iterdir()):
            return self.success(f"{bot} is configured.")
        return self.success(f"{bot} is not configured.")


class DependabotProbe(DependencyBotProbe):
    key = "dependabot"
    description = "Checks if dependabot is configured on a plugin."
    bot_name = "dependabot"


class RenovateProbe(DependencyBotProbe):
    key = "renovate"
    description = "Checks if Renovate is configured in a plugin."
    version = 2
    bot_name = "renovate"


class MavenPropertiesProbe(RepositoryProbe):
    """Reads the `<properties>` of the root `pom.xml`.

    The message is the JSON object of property names to values, keys sorted,
    so an unchanged configuration yields an equal result.
    """

    key = "maven-properties"
    description = "Reads the Maven properties declared in the plugin project configuration."
    report_raw_results = False

    def inspect(self, repository: Path) -> ProbeResult:
        pom = repository / "pom.xml"
        if not pom.is_file():
            return self.error("There is no pom.xml file for the plugin.")

        try:
            root = ElementTree.parse(pom).getroot()
        except ElementTree.ParseError as e:
            return self.error(f"Could not process project configuration file because of {e}")

        namespace = POM_NAMESPACE if root.tag.startswith(POM_NAMESPACE) else ""
        properties = root.find(f"{namespace}properties")
        values: dict[str, str] = {}
        if properties is not None:
            for prop in properties:
                if isinstance(prop.tag, str):
                    values[prop.tag.removeprefix(namespace)] = (prop.text or "").strip()
        return self.success(json.dumps(values, sort_keys=True))


class ContinuousDeliveryProbe(RepositoryProbe):
    """Detects the reusable JEP-229 continuous delivery workflow."""

    key = "jep-229"
    description = "Checks if JEP-229 (Continuous Delivery) has been activated on the plugin"

    def inspect(self, repository: Path) -> ProbeResult:
        workflows = repository / ".github" / "workflows"
        if not workflows.is_dir():
            return self.success(NO_GITHUB_ACTIONS)

        for path in sorted(workflows.iterdir()):
            if not path.is_file():
                continue
            if any(uses.startswith(CD_WORKFLOW_REFERENCE) for uses in _job_uses(path)):
                return self.success(CD_WORKFLOW_FOUND)
        return self.success(CD_WORKFLOW_MISSING)


def _job_uses(path: Path) -> list[str]:
    """Reusable workflow references ("uses") of every job in a workflow file."""
    try:
        with open(path, encoding="utf-8") as f:
            definition: Any = yaml.safe_load(f)
    except (yaml.YAMLError, UnicodeDecodeError) as e:
        logger.warning(f"Could not read workflow {path}: {e}")
        return []

    if not isinstance(definition, dict):
        return []
    jobs = definition.get("jobs")
    if not isinstance(jobs, dict):
        return []
    return [
        job["uses"]
        for job in jobs.values()
        if isinstance(job, dict) and isinstance(job.get("uses"), str)
    ]
