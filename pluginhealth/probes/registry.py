"""Probe registry: the ordered list of probes executed on every plugin."""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from pluginhealth.probes.base import Probe
from pluginhealth.probes.documentation_probes import DocumentationMigrationProbe
from pluginhealth.probes.repository_probes import (
    ContinuousDeliveryProbe,
    ContributingGuidelinesProbe,
    DependabotProbe,
    JenkinsfileProbe,
    MavenPropertiesProbe,
    RenovateProbe,
)
from pluginhealth.probes.scm_probes import LastCommitDateProbe, SCMLinkValidationProbe
from pluginhealth.probes.update_center_probes import (
    DeprecatedPluginProbe,
    KnownSecurityVulnerabilityProbe,
    UpdateCenterPluginPublicationProbe,
    UpForAdoptionProbe,
)


@dataclass(frozen=True)
class ProbeView:
    """Read-only description of a registered probe, for listings."""

    key: str
    description: str
    order: int
    version: int
    requirements: tuple[str, ...]


def default_probes() -> list[Probe]:
    """All probes shipped with the system, in declaration order."""
    return [
        UpForAdoptionProbe(),
        DeprecatedPluginProbe(),
        UpdateCenterPluginPublicationProbe(),
        KnownSecurityVulnerabilityProbe(),
        SCMLinkValidationProbe(),
        LastCommitDateProbe(),
        DocumentationMigrationProbe(),
        JenkinsfileProbe(),
        ContributingGuidelinesProbe(),
        DependabotProbe(),
        RenovateProbe(),
        ContinuousDeliveryProbe(),
        MavenPropertiesProbe(),
    ]


class ProbeRegistry:
    """Ordered, immutable set of probes built once at start-up.

    Probes are sorted by their order attribute; probes sharing an order keep
    their declaration order. Keys must be unique since they identify the
    results stored in plugin details.
    """

    def __init__(self, probes: Iterable[Probe] | None = None) -> None:
        """Initialize registry.

        Args:
            probes: Probes to register (default: default_probes())

        Raises:
            ValueError: If two probes share a key
        """
        probes = list(default_probes() if probes is None else probes)
        seen: set[str] = set()
        for probe in probes:
            if probe.key in seen:
                raise ValueError(f"Duplicate probe key: {probe.key}")
            seen.add(probe.key)
        # sorted() is stable, ties keep declaration order
        self._probes: tuple[Probe, ...] = tuple(sorted(probes, key=lambda p: p.order))
        self._by_key = {probe.key: probe for probe in self._probes}

    @property
    def probes(self) -> tuple[Probe, ...]:
        return self._probes

    def get(self, key: str) -> Probe | None:
        return self._by_key.get(key)

    def keys(self) -> list[str]:
        return [probe.key for probe in self._probes]

    def views(self) -> list[ProbeView]:
        return [
            ProbeView(
                key=probe.key,
                description=probe.description,
                order=probe.order,
                version=probe.version,
                requirements=tuple(probe.requirements),
            )
            for probe in self._probes
        ]

    def __iter__(self) -> Iterator[Probe]:
        return iter(self._probes)

    def __len__(self) -> int:
        return len(self._probes)
