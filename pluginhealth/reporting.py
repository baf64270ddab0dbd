"""Aggregated views over probe results and scores."""

import logging
from collections import Counter
from collections.abc import Iterable

from pluginhealth.models.model_plugin import Plugin, ResultStatus
from pluginhealth.models.model_score import Score
from pluginhealth.probes.registry import ProbeRegistry

logger = logging.getLogger(__name__)


def probe_raw_result_counts(
    plugins: Iterable[Plugin],
    registry: ProbeRegistry,
) -> dict[str, dict[str, int]]:
    """Count how many plugins got each message, per probe.

    Probes whose messages are plugin specific (dates, URLs...) declare
    report_raw_results = False and are left out.

    Args:
        plugins: Plugins with their probe results
        registry: Registered probes

    Returns:
        Mapping of probe key to {message: number of plugins}
    """
    reported = [probe.key for probe in registry if probe.report_raw_results]
    counters: dict[str, Counter[str]] = {key: Counter() for key in reported}

    for plugin in plugins:
        for key in reported:
            result = plugin.details.get(key)
            if result is not None and result.status == ResultStatus.SUCCESS:
                counters[key][result.message] += 1

    return {key: dict(counter.most_common()) for key, counter in counters.items()}


def scoring_distribution(scores: Iterable[Score]) -> dict[str, dict[str, float]]:
    """Summarize the values of each scoring across plugins.

    Args:
        scores: Latest score of each plugin

    Returns:
        Mapping of scoring key to {"count", "average", "min", "max"}
    """
    values: dict[str, list[float]] = {}
    for score in scores:
        for result in score.details:
            values.setdefault(result.key, []).append(result.value)

    distribution: dict[str, dict[str, float]] = {}
    for key, key_values in sorted(values.items()):
        distribution[key] = {
            "count": len(key_values),
            "average": round(sum(key_values) / len(key_values), 2),
            "min": min(key_values),
            "max": max(key_values),
        }
    logger.debug(f"Computed distribution for {len(distribution)} scorings")
    return distribution
