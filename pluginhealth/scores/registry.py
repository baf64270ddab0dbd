"""Scoring registry: the scorings aggregated into a plugin score."""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from pluginhealth.scores.adoption import AdoptionScoring
from pluginhealth.scores.base import Scoring
from pluginhealth.scores.documentation import DocumentationScoring
from pluginhealth.scores.maintenance import DependencyManagementScoring, PluginMaintenanceScoring
from pluginhealth.scores.maven import JUnit4BanScoring
from pluginhealth.scores.update_center_scorings import (
    DeprecatedPluginScoring,
    SecurityWarningScoring,
    UpdateCenterPublishedPluginDetectionScoring,
)


@dataclass(frozen=True)
class ScoringView:
    """Read-only description of a registered scoring, for listings."""

    key: str
    description: str
    weight: float
    version: int
    probe_keys: tuple[str, ...]
    requires_release: bool


def default_scorings() -> list[Scoring]:
    return [
        AdoptionScoring(),
        DeprecatedPluginScoring(),
        UpdateCenterPublishedPluginDetectionScoring(),
        SecurityWarningScoring(),
        DocumentationScoring(),
        PluginMaintenanceScoring(),
        DependencyManagementScoring(),
        JUnit4BanScoring(),
    ]


class ScoringRegistry:
    """Immutable set of scorings built once at start-up, keyed by scoring key."""

    def __init__(self, scorings: Iterable[Scoring] | None = None) -> None:
        """Initialize registry.

        Args:
            scorings: Scorings to register (default: default_scorings())

        Raises:
            ValueError: If two scorings share a key
        """
        scorings = list(default_scorings() if scorings is None else scorings)
        self._by_key: dict[str, Scoring] = {}
        for scoring in scorings:
            if scoring.key in self._by_key:
                raise ValueError(f"Duplicate scoring key: {scoring.key}")
            self._by_key[scoring.key] = scoring
        self._scorings = tuple(scorings)

    @property
    def scorings(self) -> tuple[Scoring, ...]:
        return self._scorings

    def get(self, key: str) -> Scoring | None:
        return self._by_key.get(key)

    def keys(self) -> list[str]:
        return [scoring.key for scoring in self._scorings]

    def views(self) -> list[ScoringView]:
        return [
            ScoringView(
                key=scoring.key,
                description=scoring.description,
                weight=scoring.weight,
                version=scoring.version,
                probe_keys=tuple(scoring.probe_keys),
                requires_release=scoring.requires_release,
            )
            for scoring in self._scorings
        ]

    def __iter__(self) -> Iterator[Scoring]:
        return iter(self._scorings)

    def __len__(self) -> int:
        return len(self._scorings)
