"""Probe engine: runs the registered probes on every plugin."""

import asyncio
import logging
import time
from collections.abc import Callable

from pluginhealth.clients.git import GitClient
from pluginhealth.clients.github import GitHubClient
from pluginhealth.clients.update_center import UpdateCenterClient
from pluginhealth.consts import PROBE_ENGINE_CONCURRENCY
from pluginhealth.models.model_engine import PluginProbeOutcome, ProbeEngineReport
from pluginhealth.models.model_plugin import Plugin, ProbeResult, ResultStatus, merge_details
from pluginhealth.models.model_update_center import UpdateCenter
from pluginhealth.probes.base import Probe
from pluginhealth.probes.context import ProbeContext
from pluginhealth.probes.registry import ProbeRegistry
from pluginhealth.storage.base import PluginStore

logger = logging.getLogger(__name__)


class ProbeEngine:
    """Runs the ordered probes on plugins and persists their results.

    Plugins are processed concurrently (bounded by a semaphore); the probes
    of one plugin run strictly one after the other, each seeing the results
    merged by the probes before it.
    """

    def __init__(
        self,
        registry: ProbeRegistry,
        plugin_store: PluginStore,
        update_center_client: UpdateCenterClient | None = None,
        github: GitHubClient | None = None,
        git: GitClient | None = None,
        concurrency: int = PROBE_ENGINE_CONCURRENCY,
    ):
        """Initialize ProbeEngine.

        Args:
            registry: Probes to run, in execution order
            plugin_store: Where plugins are read from and saved to
            update_center_client: Client fetching the update-center for run()
            github: GitHub client handed to probe contexts
            git: Git client handed to probe contexts
            concurrency: Maximum number of plugins probed in parallel
        """
        self.registry = registry
        self.plugin_store = plugin_store
        self.update_center_client = update_center_client
        self.github = github
        self.git = git
        self.concurrency = max(1, concurrency)

    @staticmethod
    def should_execute(probe: Probe, plugin: Plugin, context: ProbeContext) -> bool:
        """Decide whether a probe must run on a plugin.

        Rules, in order:
        1. No previous result: run
        2. Previous result from another probe version: run
        3. Release-dependent probe and the plugin was released since: run
        4. Source-dependent probe and a commit happened since: run
        5. Probe depending on neither: run every time
        6. Otherwise: skip and keep the previous result

        Args:
            probe: Probe to check
            plugin: Plugin with its current details
            context: Context holding the last commit date, when known

        Returns:
            True if the probe must be executed
        """
        previous = plugin.details.get(probe.key)
        if previous is None:
            return True

        if previous.version != probe.version:
            return True

        if (
            probe.requires_release
            and plugin.release_timestamp is not None
            and plugin.release_timestamp > previous.timestamp
        ):
            return True

        if (
            probe.is_source_code_related
            and context.last_commit_date is not None
            and context.last_commit_date > previous.timestamp
        ):
            return True

        return not probe.requires_release and not probe.is_source_code_related

    async def _execute(self, probe: Probe, plugin: Plugin, context: ProbeContext) -> ProbeResult:
        """Run a probe, turning any raised exception into an ERROR result."""
        try:
            return await probe.apply(plugin, context)
        except Exception as e:
            logger.error(f"Probe {probe.key} failed on {plugin.name}: {e}", exc_info=True)
            return ProbeResult.error(probe.key, f"Probe raised {type(e).__name__}: {e}", probe.version)

    async def run_on(
        self,
        plugin: Plugin,
        update_center: UpdateCenter,
        documentation_urls: dict[str, str] | None = None,
    ) -> PluginProbeOutcome:
        """Run every probe on one plugin and save it.

        The stored details are folded sequentially: each successful result is
        merged before the next probe runs. ERROR results are counted but never
        merged, so the previous record (if any) stays in place.

        Args:
            plugin: Plugin to probe (left unmodified)
            update_center: Update-center snapshot shared by the batch
            documentation_urls: Documentation index shared by the batch

        Returns:
            PluginProbeOutcome with the updated plugin and counters
        """
        outcome = PluginProbeOutcome(plugin_name=plugin.name)
        current = plugin

        async with ProbeContext(
            plugin.name,
            update_center,
            documentation_urls=documentation_urls,
            github=self.github,
            git=self.git,
        ) as context:
            for probe in self.registry:
                if not self.should_execute(probe, current, context):
                    logger.debug(f"Skipping {probe.key} on {plugin.name}")
                    outcome.skipped += 1
                    continue

                result = await self._execute(probe, current, context)
                outcome.executed += 1

                if result.status == ResultStatus.ERROR:
                    logger.info(f"{probe.key} on {plugin.name}: {result.message}")
                    outcome.errors[probe.key] = result.message
                    continue

                current = current.with_details(merge_details(current.details, result))

        outcome.plugin = current
        try:
            self.plugin_store.save_plugin(current)
            outcome.saved = True
        except Exception as e:
            logger.warning(f"Failed to save {plugin.name}: {e}")

        return outcome

    async def run(
        self,
        plugins: list[Plugin] | None = None,
        progress_callback: Callable[[int, int], None] | None = None,
    ) -> ProbeEngineReport:
        """Run the probes on many plugins.

        The update-center and documentation index are fetched once and
        shared by all plugins.

        Args:
            plugins: Plugins to probe (default: every stored plugin)
            progress_callback: Optional callback for progress updates (current, total)

        Returns:
            ProbeEngineReport with aggregated counters

        Raises:
            UpdateCenterError: If the update-center cannot be fetched
            ValueError: If no update-center client was configured
        """
        if self.update_center_client is None:
            raise ValueError("An update-center client is required to run the probe engine")

        start_time = time.time()
        update_center = await self.update_center_client.fetch_update_center()
        documentation_urls = await self.update_center_client.fetch_documentation_urls()

        if plugins is None:
            plugins = self.plugin_store.list_plugins()
        total = len(plugins)
        logger.info(f"Probing {total} plugins with {len(self.registry)} probes")

        semaphore = asyncio.Semaphore(self.concurrency)
        completed = 0

        async def probe_one(plugin: Plugin) -> PluginProbeOutcome:
            nonlocal completed

            async with semaphore:
                try:
                    outcome = await self.run_on(plugin, update_center, documentation_urls)
                except Exception as e:
                    logger.error(f"Probing {plugin.name} failed: {e}", exc_info=True)
                    outcome = PluginProbeOutcome(plugin_name=plugin.name, errors={"*": str(e)})

                completed += 1
                if progress_callback:
                    progress_callback(completed, total)
                return outcome

        outcomes = await asyncio.gather(*[probe_one(plugin) for plugin in plugins])

        duration = time.time() - start_time
        report = ProbeEngineReport(
            total=total,
            executed=sum(o.executed for o in outcomes),
            skipped=sum(o.skipped for o in outcomes),
            errored=sum(len(o.errors) for o in outcomes),
            save_failures=sum(1 for o in outcomes if not o.saved),
            outcomes=list(outcomes),
            duration_seconds=duration,
        )
        logger.info(
            f"Probe run complete: {report.executed} executed, {report.skipped} skipped, "
            f"{report.errored} errors, {report.save_failures} save failures "
            f"in {duration:.2f}s"
        )
        return report
