"""Pydantic models for the plugin health scoring system."""

from pluginhealth.models.common import round_half_up, weighted_mean
from pluginhealth.models.model_engine import (
    PluginProbeOutcome,
    ProbeEngineReport,
    ScoreEngineReport,
)
from pluginhealth.models.model_plugin import (
    Plugin,
    ProbeResult,
    ResultStatus,
    merge_details,
)
from pluginhealth.models.model_score import (
    Resolution,
    Score,
    ScoreResult,
    ScoringComponentResult,
    compute_score_value,
)
from pluginhealth.models.model_update_center import (
    Deprecation,
    IssueTracker,
    SecurityWarning,
    SecurityWarningVersion,
    UpdateCenter,
    UpdateCenterPlugin,
)

__all__ = [
    # Plugin models
    "Plugin",
    "ProbeResult",
    "ResultStatus",
    "merge_details",
    # Score models
    "Resolution",
    "Score",
    "ScoreResult",
    "ScoringComponentResult",
    "compute_score_value",
    # Update-center models
    "Deprecation",
    "IssueTracker",
    "SecurityWarning",
    "SecurityWarningVersion",
    "UpdateCenter",
    "UpdateCenterPlugin",
    # Engine models
    "PluginProbeOutcome",
    "ProbeEngineReport",
    "ScoreEngineReport",
    # Helpers
    "round_half_up",
    "weighted_mean",
]
