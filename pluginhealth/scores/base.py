"""Base classes for scorings and their components."""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import ClassVar

from pluginhealth.models.common import weighted_mean
from pluginhealth.models.model_plugin import Plugin, ProbeResult, ResultStatus
from pluginhealth.models.model_score import Resolution, ScoreResult, ScoringComponentResult


class ScoringComponent(ABC):
    """One weighted criterion of a scoring.

    Components are pure: they read the plugin and its probe results and
    return a value on the 0-100 scale with a weight between 0 and 1.
    """

    description: ClassVar[str]
    weight: ClassVar[float] = 1.0

    @abstractmethod
    def evaluate(self, plugin: Plugin, details: Mapping[str, ProbeResult]) -> ScoringComponentResult:
        """Evaluate the component.

        Args:
            plugin: Plugin being scored
            details: Its probe results keyed by probe id

        Returns:
            Component result (value 0-100, weight 0-1)
        """
        ...

    def result(
        self,
        value: int,
        reasons: Sequence[str],
        resolutions: Sequence[Resolution] = (),
        weight: float | None = None,
    ) -> ScoringComponentResult:
        return ScoringComponentResult(
            value=value,
            weight=self.weight if weight is None else weight,
            reasons=list(reasons),
            resolutions=list(resolutions),
        )

    @staticmethod
    def successful(details: Mapping[str, ProbeResult], key: str) -> ProbeResult | None:
        """The stored result of a probe, if it is a SUCCESS."""
        result = details.get(key)
        if result is None or result.status != ResultStatus.SUCCESS:
            return None
        return result


def aggregate_components(components: Sequence[ScoringComponentResult]) -> int:
    """Weighted mean of component values; 0 when the weights sum to zero."""
    return weighted_mean((c.value, c.weight) for c in components)


class Scoring(ABC):
    """Groups components into one weighted result of the final score.

    Class attributes:
        key: Unique identifier of the scoring result
        description: What the scoring measures
        weight: Weight of the result in the final score (0-1)
        version: Bumped when the scoring logic changes, forcing recomputation
        probe_keys: Probe results this scoring reads; a newer result for any
            of them makes the stored score stale
        requires_release: The scoring reads the release timestamp, so a release
            newer than the stored score makes it stale
    """

    key: ClassVar[str]
    description: ClassVar[str]
    weight: ClassVar[float]
    version: ClassVar[int] = 1
    probe_keys: ClassVar[tuple[str, ...]] = ()
    requires_release: ClassVar[bool] = False

    @abstractmethod
    def components(self) -> list[ScoringComponent]:
        ...

    def apply(self, plugin: Plugin) -> ScoreResult:
        """Score a plugin.

        Args:
            plugin: Plugin with its probe results

        Returns:
            ScoreResult carrying the aggregated value and this scoring's weight
        """
        results = [component.evaluate(plugin, plugin.details) for component in self.components()]
        return ScoreResult(
            key=self.key,
            value=aggregate_components(results),
            weight=self.weight,
            components=results,
            version=self.version,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(key={self.key!r}, version={self.version})"
