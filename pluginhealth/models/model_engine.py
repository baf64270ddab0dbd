"""Data models for probe and score engine runs."""

from dataclasses import dataclass, field

from pluginhealth.models.model_plugin import Plugin


@dataclass
class PluginProbeOutcome:
    """Result of running the probes on a single plugin."""

    plugin_name: str
    executed: int = 0
    skipped: int = 0
    errors: dict[str, str] = field(default_factory=dict)  # probe key → error message
    saved: bool = False
    plugin: Plugin | None = None


@dataclass
class ProbeEngineReport:
    """Result of running the probe engine on many plugins."""

    total: int
    executed: int
    skipped: int
    errored: int
    save_failures: int
    outcomes: list[PluginProbeOutcome]
    duration_seconds: float


@dataclass
class ScoreEngineReport:
    """Result of running the score engine on many plugins."""

    total: int
    computed: int
    unchanged: int
    failures: dict[str, str]  # plugin name → error
    duration_seconds: float
