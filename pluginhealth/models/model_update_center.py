"""Update-center catalog models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from pluginhealth.models.model_plugin import Plugin


class IssueTracker(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: str
    view_url: str | None = Field(default=None, alias="viewUrl")
    report_url: str | None = Field(default=None, alias="reportUrl")


class UpdateCenterPlugin(BaseModel):
    """A plugin entry as published by the update-center."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str
    version: str | None = None
    scm: str | None = None
    release_timestamp: datetime | None = Field(default=None, alias="releaseTimestamp")
    popularity: int = 0
    labels: list[str] = Field(default_factory=list)
    required_core: str | None = Field(default=None, alias="requiredCore")
    default_branch: str | None = Field(default=None, alias="defaultBranch")
    issue_trackers: list[IssueTracker] = Field(default_factory=list, alias="issueTrackers")

    def to_plugin(self) -> Plugin:
        """Create a fresh Plugin record (without probe details) from this entry."""
        return Plugin(
            name=self.name,
            version=self.version,
            scm=self.scm,
            release_timestamp=self.release_timestamp,
        )


class Deprecation(BaseModel):
    model_config = ConfigDict(extra="ignore")

    url: str


class SecurityWarningVersion(BaseModel):
    """Range of versions affected by a security warning."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    last_version: str | None = Field(default=None, alias="lastVersion")
    pattern: str


class SecurityWarning(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    type: str
    url: str
    versions: list[SecurityWarningVersion] = Field(default_factory=list)


class UpdateCenter(BaseModel):
    """Snapshot of the update-center, shared read-only by a probe batch."""

    model_config = ConfigDict(extra="ignore")

    plugins: dict[str, UpdateCenterPlugin] = Field(default_factory=dict)
    deprecations: dict[str, Deprecation] = Field(default_factory=dict)
    warnings: list[SecurityWarning] = Field(default_factory=list)

    def warnings_for(self, plugin_name: str) -> list[SecurityWarning]:
        """Security warnings published for a plugin."""
        return [w for w in self.warnings if w.type == "plugin" and w.name == plugin_name]
