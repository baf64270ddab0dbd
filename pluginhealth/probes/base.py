"""Base class defining the contract for all probes."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

from pluginhealth.models.model_plugin import Plugin, ProbeResult, ResultStatus

if TYPE_CHECKING:
    from pluginhealth.probes.context import ProbeContext


class Probe(ABC):
    """A single check run against one plugin.

    Probes look at one aspect of a plugin (catalog metadata, repository
    content...) and report it as a ProbeResult. A valid negative finding
    ("no Jenkinsfile found") is a SUCCESS with a descriptive message; ERROR
    is reserved for failures to reach a conclusion, which are never stored
    and get retried on the next run.

    Class attributes:
        key: Unique identifier, also the key of the result in plugin details
        description: Human-readable explanation of what is checked
        order: Execution order; lower runs first
        version: Bumped when the probe logic changes, forcing a re-run
        requires_release: Re-run only when the plugin has a newer release
        is_source_code_related: Re-run only when the repository has a newer commit
        requirements: Probe keys that must have a SUCCESS result first
        report_raw_results: Whether messages are meaningful to aggregate in reports
    """

    key: ClassVar[str]
    description: ClassVar[str]
    order: ClassVar[int] = 0
    version: ClassVar[int] = 1
    requires_release: ClassVar[bool] = False
    is_source_code_related: ClassVar[bool] = False
    requirements: ClassVar[tuple[str, ...]] = ()
    report_raw_results: ClassVar[bool] = True

    async def apply(self, plugin: Plugin, context: "ProbeContext") -> ProbeResult:
        """Run the probe on a plugin if its requirements are met.

        Args:
            plugin: Plugin to probe, with the results of earlier probes
            context: Per-plugin execution context

        Returns:
            The probe result; ERROR if a required probe result is missing
        """
        missing = [key for key in self.requirements if not self._has_success(plugin, key)]
        if missing:
            return self.error(f"{self.key} does not meet the criteria to be executed on {plugin.name}")
        return await self._do_apply(plugin, context)

    @staticmethod
    def _has_success(plugin: Plugin, key: str) -> bool:
        result = plugin.details.get(key)
        return result is not None and result.status == ResultStatus.SUCCESS

    @abstractmethod
    async def _do_apply(self, plugin: Plugin, context: "ProbeContext") -> ProbeResult:
        """Probe body, only called once requirements are met."""
        ...

    def success(self, message: str) -> ProbeResult:
        return ProbeResult.success(self.key, message, self.version)

    def error(self, message: str) -> ProbeResult:
        return ProbeResult.error(self.key, message, self.version)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(key={self.key!r}, version={self.version})"
