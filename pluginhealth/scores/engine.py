"""Score engine: incremental computation of plugin scores."""

import asyncio
import logging
import time
from collections.abc import Callable

from pluginhealth.consts import SCORE_ENGINE_CONCURRENCY
from pluginhealth.models.model_engine import ScoreEngineReport
from pluginhealth.models.model_plugin import Plugin
from pluginhealth.models.model_score import Score, ScoreResult
from pluginhealth.scores.base import Scoring
from pluginhealth.scores.registry import ScoringRegistry
from pluginhealth.storage.base import PluginStore, ScoreStore

logger = logging.getLogger(__name__)


class ScoreEngine:
    """Computes plugin scores, re-applying only the scorings whose inputs changed."""

    def __init__(
        self,
        registry: ScoringRegistry,
        plugin_store: PluginStore,
        score_store: ScoreStore,
        concurrency: int = SCORE_ENGINE_CONCURRENCY,
    ):
        """Initialize ScoreEngine.

        Args:
            registry: Scorings composing the score
            plugin_store: Where plugins are read from
            score_store: Where scores are read from and appended to
            concurrency: Maximum number of plugins scored in parallel
        """
        self.registry = registry
        self.plugin_store = plugin_store
        self.score_store = score_store
        self.concurrency = max(1, concurrency)

    @staticmethod
    def is_stale(scoring: Scoring, plugin: Plugin, previous: Score | None) -> bool:
        """Check whether a scoring must be re-applied.

        A scoring is stale when:
        - there is no previous score, or it has no result for this scoring
        - the stored result was computed by another scoring version
        - a probe result read by the scoring is newer than the previous score
          (all probe results when the scoring declares none)
        - the scoring reads the release timestamp and the plugin was released
          after the previous score

        Args:
            scoring: Scoring to check
            plugin: Plugin with its current probe results
            previous: Latest stored score of the plugin

        Returns:
            True if the scoring must be re-applied
        """
        if previous is None:
            return True

        stored = previous.get_detail(scoring.key)
        if stored is None or stored.version != scoring.version:
            return True

        if (
            scoring.requires_release
            and plugin.release_timestamp is not None
            and plugin.release_timestamp > previous.computed_at
        ):
            return True

        keys = scoring.probe_keys or tuple(plugin.details)
        for key in keys:
            result = plugin.details.get(key)
            if result is not None and result.timestamp > previous.computed_at:
                return True
        return False

    def _score(self, plugin: Plugin) -> tuple[Score | None, bool]:
        """Compute the score of a plugin.

        Returns:
            (score, recomputed): the new score and True when something was
            re-applied and saved; otherwise the previous score (possibly
            None) and False
        """
        previous = self.score_store.latest_score(plugin.name)
        details: dict[str, ScoreResult] = {}
        recomputed = False

        for scoring in self.registry:
            stored = previous.get_detail(scoring.key) if previous is not None else None
            if stored is not None and not self.is_stale(scoring, plugin, previous):
                details[scoring.key] = stored
                continue

            try:
                details[scoring.key] = scoring.apply(plugin)
                recomputed = True
            except Exception as e:
                logger.error(f"Scoring {scoring.key} failed on {plugin.name}: {e}", exc_info=True)
                if stored is not None:
                    details[scoring.key] = stored

        if not recomputed:
            logger.debug(f"Score of {plugin.name} is up to date")
            return previous, False

        score = Score(plugin_name=plugin.name, details=list(details.values()))
        self.score_store.save_score(score)
        logger.debug(f"Scored {plugin.name}: {score.value}")
        return score, True

    def run_on(self, plugin: Plugin) -> Score | None:
        """Score one plugin.

        When no scoring needs to be re-applied, the previously stored Score
        object is returned as is and nothing is saved.

        Args:
            plugin: Plugin with its probe results

        Returns:
            The current score of the plugin, or None if it could not be scored

        Raises:
            Exception: Persistence errors from the score store
        """
        score, _ = self._score(plugin)
        return score

    async def run(
        self,
        plugins: list[Plugin] | None = None,
        progress_callback: Callable[[int, int], None] | None = None,
    ) -> ScoreEngineReport:
        """Score many plugins on a bounded worker pool.

        A failure on one plugin is logged and does not stop the others.

        Args:
            plugins: Plugins to score (default: every stored plugin)
            progress_callback: Optional callback for progress updates (current, total)

        Returns:
            ScoreEngineReport with aggregated counters
        """
        start_time = time.time()
        if plugins is None:
            plugins = self.plugin_store.list_plugins()
        total = len(plugins)
        logger.info(f"Scoring {total} plugins with {len(self.registry)} scorings")

        semaphore = asyncio.Semaphore(self.concurrency)
        failures: dict[str, str] = {}
        computed = 0
        unchanged = 0
        completed = 0

        async def score_one(plugin: Plugin) -> None:
            nonlocal computed, unchanged, completed

            async with semaphore:
                try:
                    _, recomputed = await asyncio.to_thread(self._score, plugin)
                    if recomputed:
                        computed += 1
                    else:
                        unchanged += 1
                except Exception as e:
                    logger.error(f"Scoring {plugin.name} failed: {e}")
                    failures[plugin.name] = str(e)

                completed += 1
                if progress_callback:
                    progress_callback(completed, total)

        await asyncio.gather(*[score_one(plugin) for plugin in plugins])

        duration = time.time() - start_time
        logger.info(
            f"Score run complete: {computed} computed, {unchanged} unchanged, "
            f"{len(failures)} failed in {duration:.2f}s"
        )
        return ScoreEngineReport(
            total=total,
            computed=computed,
            unchanged=unchanged,
            failures=failures,
            duration_seconds=duration,
        )
