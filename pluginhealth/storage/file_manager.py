"""File-based storage layer for plugin and score persistence.

Provides operations for:
- Plugin records with their probe results (one file per plugin)
- Score history (one file per plugin, appended on every new score)
- A summary of stored data for the CLI
"""

import json
import logging
import os
import tempfile
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pluginhealth.consts import DEFAULT_DATA_DIR
from pluginhealth.models.model_plugin import Plugin
from pluginhealth.models.model_score import Score
from pluginhealth.storage.base import PluginStore, ScoreStore

logger = logging.getLogger(__name__)


class FileManager(PluginStore, ScoreStore):
    """File-based storage manager for plugins and scores.

    Directory structure:
        data/
        ├── plugins/{name}.json    # Plugin record and its probe results
        └── scores/{name}.json     # Score history of the plugin
    """

    def __init__(self, data_dir: Path | str = DEFAULT_DATA_DIR):
        """Initialize FileManager with data directory.

        Args:
            data_dir: Root directory for all data files.
        """
        self.data_dir = Path(data_dir)
        self._plugins_dir = self.data_dir / "plugins"
        self._scores_dir = self.data_dir / "scores"

    def _ensure_dirs(self, *dirs: Path) -> None:
        """Create directories if they don't exist."""
        for d in dirs:
            d.mkdir(parents=True, exist_ok=True)

    def _write_json(self, path: Path, data: Any) -> None:
        """Write JSON atomically so readers never see a half-written file."""
        self._ensure_dirs(path.parent)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _plugin_path(self, name: str) -> Path:
        return self._plugins_dir / f"{name}.json"

    def _score_path(self, plugin_name: str) -> Path:
        return self._scores_dir / f"{plugin_name}.json"

    # === PLUGIN OPERATIONS ===

    def save_plugin(self, plugin: Plugin) -> Path:
        """Save a plugin record with its probe results.

        Args:
            plugin: Plugin to save.

        Returns:
            Path to the saved file.
        """
        path = self._plugin_path(plugin.name)
        self._write_json(path, plugin.model_dump(mode="json"))
        logger.debug(f"Saved plugin {plugin.name} ({len(plugin.details)} probe results)")
        return path

    def save_plugins(self, plugins: list[Plugin]) -> int:
        """Save several plugins.

        Returns:
            Number of plugins saved.
        """
        for plugin in plugins:
            self.save_plugin(plugin)
        logger.info(f"Saved {len(plugins)} plugins to {self._plugins_dir}")
        return len(plugins)

    def load_plugin(self, name: str) -> Plugin | None:
        """Load a plugin record.

        Args:
            name: Plugin name.

        Returns:
            Plugin if found, None otherwise.
        """
        path = self._plugin_path(name)
        if not path.exists():
            logger.debug(f"Plugin not found: {path}")
            return None

        data = json.loads(path.read_text(encoding="utf-8"))
        return Plugin.model_validate(data)

    def list_plugins(self) -> list[Plugin]:
        """Load every stored plugin, sorted by name.

        Files that cannot be parsed are logged and skipped.
        """
        if not self._plugins_dir.exists():
            return []

        plugins: list[Plugin] = []
        for path in sorted(self._plugins_dir.glob("*.json")):
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
                plugins.append(Plugin.model_validate(data))
            except (OSError, ValueError) as e:
                logger.warning(f"Skipping unreadable plugin file {path}: {e}")
        return plugins

    def list_plugin_names(self) -> list[str]:
        if not self._plugins_dir.exists():
            return []
        return sorted(p.stem for p in self._plugins_dir.glob("*.json"))

    # === SCORE OPERATIONS ===

    def save_score(self, score: Score) -> Path:
        """Append a score to the plugin's history.

        Args:
            score: Score to save.

        Returns:
            Path to the history file.
        """
        path = self._score_path(score.plugin_name)
        history = self._load_score_history(path)
        history.append(score.model_dump(mode="json"))

        data = {
            "plugin_name": score.plugin_name,
            "updated_at": datetime.now(UTC).isoformat(),
            "scores": history,
        }
        self._write_json(path, data)
        logger.debug(f"Saved score {score.value} for {score.plugin_name} ({len(history)} in history)")
        return path

    def _load_score_history(self, path: Path) -> list[dict[str, Any]]:
        if not path.exists():
            return []
        data = json.loads(path.read_text(encoding="utf-8"))
        return list(data.get("scores", []))

    def list_scores(self, plugin_name: str) -> list[Score]:
        """Load the score history of a plugin, oldest first.

        Args:
            plugin_name: Plugin name.

        Returns:
            List of scores, empty if the plugin was never scored.
        """
        history = self._load_score_history(self._score_path(plugin_name))
        scores = [Score.model_validate(s) for s in history]
        return sorted(scores, key=lambda s: s.computed_at)

    def latest_score(self, plugin_name: str) -> Score | None:
        """Load the most recent score of a plugin.

        Args:
            plugin_name: Plugin name.

        Returns:
            The latest Score if found, None otherwise.
        """
        scores = self.list_scores(plugin_name)
        return scores[-1] if scores else None

    def latest_scores(self) -> list[Score]:
        """Latest score of every scored plugin."""
        if not self._scores_dir.exists():
            return []
        latest: list[Score] = []
        for path in sorted(self._scores_dir.glob("*.json")):
            score = self.latest_score(path.stem)
            if score is not None:
                latest.append(score)
        return latest

    # === UTILITY METHODS ===

    def get_data_summary(self) -> dict[str, Any]:
        """Get summary of stored data.

        Returns:
            Dict with counts about stored plugins and scores.
        """
        summary: dict[str, Any] = {
            "plugins": {"count": 0},
            "scores": {"plugin_count": 0, "total": 0},
        }

        summary["plugins"]["count"] = len(self.list_plugin_names())

        if self._scores_dir.exists():
            files = list(self._scores_dir.glob("*.json"))
            summary["scores"]["plugin_count"] = len(files)
            summary["scores"]["total"] = sum(len(self._load_score_history(f)) for f in files)

        return summary
