"""Score models: per-scoring results and the aggregated plugin score."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from pluginhealth.models.common import _as_utc, _utc_now, weighted_mean


class Resolution(BaseModel):
    """Suggested action to improve a scoring component."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(description="What to do")
    link: str = Field(description="Where to read more about it")


class ScoringComponentResult(BaseModel):
    """Outcome of one component of a scoring."""

    model_config = ConfigDict(frozen=True)

    value: int = Field(ge=0, le=100, description="Component score (0-100)")
    weight: float = Field(ge=0.0, le=1.0, description="Weight inside the parent scoring")
    reasons: list[str] = Field(default_factory=list, description="Why this value was given")
    resolutions: list[Resolution] = Field(
        default_factory=list, description="How the value could be improved"
    )


class ScoreResult(BaseModel):
    """Outcome of one scoring on one plugin.

    Results are identified by their key only: a Score holds at most one
    result per scoring.
    """

    model_config = ConfigDict(frozen=True)

    key: str = Field(description="Key of the scoring which produced this result")
    value: float = Field(ge=0.0, le=100.0, description="Scoring value (0-100)")
    weight: float = Field(ge=0.0, le=1.0, description="Weight of the scoring in the final score")
    components: list[ScoringComponentResult] = Field(default_factory=list)
    version: int = Field(default=1, ge=0, description="Version of the scoring at computation")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ScoreResult):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)


class Score(BaseModel):
    """Aggregated health score of a plugin at a point in time.

    The value is always derived from the details; it is recomputed on every
    construction (including when loading from disk) and whenever a detail
    is added through add_detail().
    """

    plugin_name: str = Field(description="Name of the scored plugin")
    computed_at: datetime = Field(default_factory=_utc_now, description="Computation time")
    value: int = Field(default=0, ge=0, le=100, description="Weighted aggregate (0-100)")
    details: list[ScoreResult] = Field(default_factory=list, description="One result per scoring")

    @field_validator("computed_at", mode="after")
    @classmethod
    def computed_at_is_utc(cls, value: datetime) -> datetime:
        return _as_utc(value)

    @model_validator(mode="after")
    def derive_value(self) -> "Score":
        """Deduplicate details by key (last wins) and derive the value from them."""
        unique: dict[str, ScoreResult] = {}
        for result in self.details:
            unique[result.key] = result
        self.details = list(unique.values())
        self.value = compute_score_value(self.details)
        return self

    def add_detail(self, result: ScoreResult) -> "Score":
        """Add or replace the result for result.key and recompute the value."""
        details = [d for d in self.details if d.key != result.key]
        details.append(result)
        self.details = details
        self.value = compute_score_value(details)
        return self

    def get_detail(self, key: str) -> ScoreResult | None:
        for result in self.details:
            if result.key == key:
                return result
        return None


def compute_score_value(details: list[ScoreResult]) -> int:
    """Weighted mean of the score results, 0 when their weights sum to zero."""
    return weighted_mean((result.value, result.weight) for result in details)
