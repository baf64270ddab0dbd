"""Plugin entity and probe result models."""

import logging
from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pluginhealth.models.common import _as_utc, _utc_now

logger = logging.getLogger(__name__)


class ResultStatus(str, Enum):
    """Outcome of a probe execution."""

    SUCCESS = "SUCCESS"
    ERROR = "ERROR"


class ProbeResult(BaseModel):
    """Immutable outcome of one probe execution on one plugin.

    Two results are equal when they share id, status, version and message.
    The timestamp is informative only, so re-running a probe that reaches
    the same conclusion does not count as a change.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Key of the probe which produced this result")
    message: str = Field(default="", description="Human-readable summary of the outcome")
    status: ResultStatus = Field(description="SUCCESS, or ERROR for transient failures")
    timestamp: datetime = Field(default_factory=_utc_now, description="Execution time")
    version: int = Field(default=1, ge=0, description="Version of the probe at execution")

    @field_validator("status", mode="before")
    @classmethod
    def legacy_failure_is_error(cls, value: Any) -> Any:
        """Read the retired FAILURE status as ERROR so the probe runs again."""
        if isinstance(value, str) and value.upper() == "FAILURE":
            return ResultStatus.ERROR
        return value

    @field_validator("timestamp", mode="after")
    @classmethod
    def timestamp_is_utc(cls, value: datetime) -> datetime:
        return _as_utc(value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ProbeResult):
            return NotImplemented
        return (self.id, self.status, self.version, self.message) == (
            other.id,
            other.status,
            other.version,
            other.message,
        )

    def __hash__(self) -> int:
        return hash((self.id, self.status, self.version, self.message))

    @property
    def is_success(self) -> bool:
        return self.status == ResultStatus.SUCCESS

    @classmethod
    def success(cls, probe_id: str, message: str, version: int = 1) -> "ProbeResult":
        return cls(id=probe_id, message=message, status=ResultStatus.SUCCESS, version=version)

    @classmethod
    def error(cls, probe_id: str, message: str, version: int = 1) -> "ProbeResult":
        return cls(id=probe_id, message=message, status=ResultStatus.ERROR, version=version)


def merge_details(
    details: Mapping[str, ProbeResult],
    incoming: ProbeResult,
) -> dict[str, ProbeResult]:
    """Merge a probe result into a details mapping.

    The input mapping is never modified; a new dict is returned.

    - No previous record, or a different one (by id/status/version/message): replaced.
    - Equal record: the previous one is kept, original timestamp included.
    - ERROR records are transient and never enter the mapping.

    Args:
        details: Current probe results keyed by probe id
        incoming: Result to merge

    Returns:
        New mapping containing the merged results
    """
    merged = dict(details)
    if incoming.status == ResultStatus.ERROR:
        logger.debug(f"Refusing to merge error result for {incoming.id}: {incoming.message}")
        return merged

    previous = merged.get(incoming.id)
    if previous is not None and previous == incoming:
        return merged

    merged[incoming.id] = incoming
    return merged


class Plugin(BaseModel):
    """A plugin registered in the update-center, with its probe results."""

    name: str = Field(description="Unique plugin identifier")
    version: str | None = Field(default=None, description="Latest released version")
    scm: str | None = Field(default=None, description="Source-control URL")
    release_timestamp: datetime | None = Field(
        default=None, description="Timestamp of the latest release"
    )
    details: dict[str, ProbeResult] = Field(
        default_factory=dict, description="Latest non-error probe result per probe id"
    )

    @field_validator("release_timestamp", mode="after")
    @classmethod
    def release_timestamp_is_utc(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)

    def add_details(self, result: ProbeResult) -> "Plugin":
        """Merge a probe result into this plugin's details in place."""
        self.details = merge_details(self.details, result)
        return self

    def with_details(self, details: Mapping[str, ProbeResult]) -> "Plugin":
        """Return a copy of this plugin carrying the given details."""
        return self.model_copy(update={"details": dict(details)})

    def latest_result_timestamp(self) -> datetime | None:
        """Most recent timestamp among the stored probe results."""
        if not self.details:
            return None
        return max(result.timestamp for result in self.details.values())
