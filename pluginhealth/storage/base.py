"""Abstract persistence interfaces used by the probe and score engines.

Each plugin and its score history are stored independently, so engines
can save one entity without coordinating with the others.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from pluginhealth.models.model_plugin import Plugin
from pluginhealth.models.model_score import Score


class PluginStore(ABC):
    """Storage of plugin records and their probe results."""

    @abstractmethod
    def save_plugin(self, plugin: Plugin) -> Path:
        """Persist a plugin, replacing any previous record with the same name.

        Args:
            plugin: Plugin to store.

        Returns:
            Path or identifier where data was stored.
        """
        ...

    @abstractmethod
    def load_plugin(self, name: str) -> Plugin | None:
        """Load a plugin by name.

        Args:
            name: Plugin name.

        Returns:
            The plugin if found, None otherwise.
        """
        ...

    @abstractmethod
    def list_plugins(self) -> list[Plugin]:
        """Load every stored plugin, sorted by name."""
        ...


class ScoreStore(ABC):
    """Storage of the score history of each plugin."""

    @abstractmethod
    def save_score(self, score: Score) -> Path:
        """Append a score to its plugin's history.

        Args:
            score: Score to store.

        Returns:
            Path or identifier where data was stored.
        """
        ...

    @abstractmethod
    def latest_score(self, plugin_name: str) -> Score | None:
        """Most recent score of a plugin, or None if never scored."""
        ...

    @abstractmethod
    def list_scores(self, plugin_name: str) -> list[Score]:
        """Full score history of a plugin, oldest first."""
        ...
