"""Scorings and the engine aggregating them into plugin scores."""

from pluginhealth.scores.adoption import AdoptionScoring
from pluginhealth.scores.base import Scoring, ScoringComponent, aggregate_components
from pluginhealth.scores.documentation import DocumentationScoring
from pluginhealth.scores.engine import ScoreEngine
from pluginhealth.scores.maintenance import DependencyManagementScoring, PluginMaintenanceScoring
from pluginhealth.scores.maven import JUnit4BanScoring
from pluginhealth.scores.registry import ScoringRegistry, ScoringView, default_scorings
from pluginhealth.scores.update_center_scorings import (
    DeprecatedPluginScoring,
    SecurityWarningScoring,
    UpdateCenterPublishedPluginDetectionScoring,
)

__all__ = [
    "AdoptionScoring",
    "DependencyManagementScoring",
    "DeprecatedPluginScoring",
    "DocumentationScoring",
    "JUnit4BanScoring",
    "PluginMaintenanceScoring",
    "ScoreEngine",
    "Scoring",
    "ScoringComponent",
    "ScoringRegistry",
    "ScoringView",
    "SecurityWarningScoring",
    "UpdateCenterPublishedPluginDetectionScoring",
    "aggregate_components",
    "default_scorings",
]
