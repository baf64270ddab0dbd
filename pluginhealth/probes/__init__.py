"""Probes and the engine running them.

Provides:
- Probe: base class of every probe
- ProbeContext: per-plugin execution context
- ProbeRegistry: ordered probes built at start-up
- ProbeEngine: runs the probes and persists results
"""

from pluginhealth.probes.base import Probe
from pluginhealth.probes.context import ProbeContext
from pluginhealth.probes.documentation_probes import DocumentationMigrationProbe
from pluginhealth.probes.engine import ProbeEngine
from pluginhealth.probes.registry import ProbeRegistry, ProbeView, default_probes
from pluginhealth.probes.repository_probes import (
    ContinuousDeliveryProbe,
    ContributingGuidelinesProbe,
    DependabotProbe,
    DependencyBotProbe,
    JenkinsfileProbe,
    MavenPropertiesProbe,
    RenovateProbe,
    RepositoryProbe,
)
from pluginhealth.probes.scm_probes import LastCommitDateProbe, SCMLinkValidationProbe
from pluginhealth.probes.update_center_probes import (
    DeprecatedPluginProbe,
    KnownSecurityVulnerabilityProbe,
    UpdateCenterPluginPublicationProbe,
    UpForAdoptionProbe,
)

__all__ = [
    "ContinuousDeliveryProbe",
    "ContributingGuidelinesProbe",
    "DependabotProbe",
    "DependencyBotProbe",
    "DeprecatedPluginProbe",
    "DocumentationMigrationProbe",
    "JenkinsfileProbe",
    "KnownSecurityVulnerabilityProbe",
    "LastCommitDateProbe",
    "MavenPropertiesProbe",
    "Probe",
    "ProbeContext",
    "ProbeEngine",
    "ProbeRegistry",
    "ProbeView",
    "RenovateProbe",
    "RepositoryProbe",
    "SCMLinkValidationProbe",
    "UpForAdoptionProbe",
    "UpdateCenterPluginPublicationProbe",
    "default_probes",
]
