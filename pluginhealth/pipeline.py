"""Pipeline orchestration for the plugin health workflow.

This module coordinates the steps run by the CLI:
1. Sync plugins from the update-center into the plugin store
2. Probe plugins (probe engine)
3. Score plugins (score engine)
"""

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path

from pluginhealth.clients.git import GitClient
from pluginhealth.clients.github import GitHubClient
from pluginhealth.clients.update_center import UpdateCenterClient
from pluginhealth.consts import DEFAULT_DATA_DIR, PROBE_ENGINE_CONCURRENCY, SCORE_ENGINE_CONCURRENCY
from pluginhealth.models.model_engine import ProbeEngineReport, ScoreEngineReport
from pluginhealth.models.model_plugin import Plugin
from pluginhealth.models.model_score import Score
from pluginhealth.models.model_update_center import UpdateCenter
from pluginhealth.probes.engine import ProbeEngine
from pluginhealth.probes.registry import ProbeRegistry
from pluginhealth.scores.engine import ScoreEngine
from pluginhealth.scores.registry import ScoringRegistry
from pluginhealth.storage.base import PluginStore
from pluginhealth.storage.file_manager import FileManager

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


def sync_plugins(update_center: UpdateCenter, store: PluginStore) -> tuple[int, int]:
    """Create or refresh plugin records from the update-center.

    Existing plugins get their version, SCM link and release timestamp
    refreshed while keeping their probe results. Plugins which disappeared
    from the update-center are left untouched.

    Args:
        update_center: Update-center snapshot
        store: Plugin store to update

    Returns:
        Tuple of (created, updated) counts
    """
    created = 0
    updated = 0

    for name, uc_plugin in sorted(update_center.plugins.items()):
        existing = store.load_plugin(name)
        if existing is None:
            store.save_plugin(uc_plugin.to_plugin())
            created += 1
            continue

        refreshed = existing.model_copy(
            update={
                "version": uc_plugin.version,
                "scm": uc_plugin.scm,
                "release_timestamp": uc_plugin.release_timestamp,
            }
        )
        if refreshed != existing:
            store.save_plugin(refreshed)
            updated += 1

    logger.info(f"Synced plugins: {created} created, {updated} updated")
    return created, updated


def _resolve_plugins(store: FileManager, plugin_name: str | None) -> list[Plugin] | None:
    """Plugins targeted by a run: one plugin by name, or None for all."""
    if plugin_name is None:
        return None
    plugin = store.load_plugin(plugin_name)
    if plugin is None:
        raise ValueError(f"Unknown plugin '{plugin_name}'. Run 'phs sync' first.")
    return [plugin]


def run_sync_pipeline(data_dir: Path | None = None) -> tuple[int, int]:
    """Fetch the update-center and sync plugins into the store.

    Args:
        data_dir: Data directory path. Uses default if None.

    Returns:
        Tuple of (created, updated) counts

    Raises:
        UpdateCenterError: If the update-center cannot be fetched
    """
    store = FileManager(Path(data_dir) if data_dir else DEFAULT_DATA_DIR)

    async def fetch() -> UpdateCenter:
        async with UpdateCenterClient() as client:
            return await client.fetch_update_center()

    update_center = asyncio.run(fetch())
    return sync_plugins(update_center, store)


def run_probe_pipeline(
    data_dir: Path | None = None,
    plugin_name: str | None = None,
    concurrency: int = PROBE_ENGINE_CONCURRENCY,
    progress_callback: ProgressCallback | None = None,
) -> ProbeEngineReport:
    """Run the probe engine on stored plugins.

    Args:
        data_dir: Data directory path. Uses default if None.
        plugin_name: Only probe this plugin when given.
        concurrency: Maximum number of plugins probed in parallel.
        progress_callback: Optional callback for progress updates (current, total)

    Returns:
        ProbeEngineReport of the run

    Raises:
        UpdateCenterError: If the update-center cannot be fetched
        ValueError: If plugin_name is not in the store
    """
    store = FileManager(Path(data_dir) if data_dir else DEFAULT_DATA_DIR)
    plugins = _resolve_plugins(store, plugin_name)

    git = GitClient()
    if not git.is_git_installed():
        logger.warning("git is not installed, repository probes will report errors")
        git = None

    async def probe() -> ProbeEngineReport:
        async with UpdateCenterClient() as update_center_client, GitHubClient() as github:
            engine = ProbeEngine(
                ProbeRegistry(),
                store,
                update_center_client=update_center_client,
                github=github,
                git=git,
                concurrency=concurrency,
            )
            return await engine.run(plugins, progress_callback=progress_callback)

    return asyncio.run(probe())


def run_score_pipeline(
    data_dir: Path | None = None,
    plugin_name: str | None = None,
    concurrency: int = SCORE_ENGINE_CONCURRENCY,
    progress_callback: ProgressCallback | None = None,
) -> ScoreEngineReport:
    """Run the score engine on stored plugins.

    Args:
        data_dir: Data directory path. Uses default if None.
        plugin_name: Only score this plugin when given.
        concurrency: Maximum number of plugins scored in parallel.
        progress_callback: Optional callback for progress updates (current, total)

    Returns:
        ScoreEngineReport of the run

    Raises:
        ValueError: If plugin_name is not in the store
    """
    store = FileManager(Path(data_dir) if data_dir else DEFAULT_DATA_DIR)
    plugins = _resolve_plugins(store, plugin_name)
    engine = ScoreEngine(ScoringRegistry(), store, store, concurrency=concurrency)
    return asyncio.run(engine.run(plugins, progress_callback=progress_callback))


def load_plugin_overview(
    plugin_name: str,
    data_dir: Path | None = None,
) -> tuple[Plugin | None, Score | None]:
    """Load a plugin and its latest score.

    Args:
        plugin_name: Plugin name.
        data_dir: Data directory path. Uses default if None.

    Returns:
        Tuple of (plugin, latest score), each None when missing
    """
    store = FileManager(Path(data_dir) if data_dir else DEFAULT_DATA_DIR)
    return store.load_plugin(plugin_name), store.latest_score(plugin_name)
