import logging
import random

logger = logging.getLogger(__name__)


class RateLimiter:
    """Rate limiter with exponential backoff and jitter."""

    def __init__(
        self,
        initial_delay: float = 1.0,
        max_delay: float = 60.0,
        backoff_factor: float = 2.0,
        jitter_factor: float = 0.1,
    ):
        self.initial_delay = initial_delay
        self.max_delay = max_delay
        self.backoff_factor = backoff_factor
        self.jitter_factor = jitter_factor
        self._current_delay = initial_delay
        self._consecutive_errors = 0

    @property
    def consecutive_errors(self) -> int:
        return self._consecutive_errors

    def reset(self) -> None:
        """Reset delay after successful request."""
        self._current_delay = self.initial_delay
        self._consecutive_errors = 0

    def backoff(self, retry_after: float | None = None) -> float:
        """Calculate next delay with exponential backoff and jitter.

        Args:
            retry_after: Delay requested by the server (Retry-After header), if any.
                A server-provided delay wins when it is longer than the backoff.

        Returns:
            Seconds to wait before the next attempt
        """
        self._consecutive_errors += 1
        self._current_delay = min(
            self._current_delay * self.backoff_factor,
            self.max_delay,
        )
        # Add jitter: +/- jitter_factor of the delay
        jitter = self._current_delay * self.jitter_factor * (2 * random.random() - 1)
        delay = self._current_delay + jitter
        if retry_after is not None and retry_after > delay:
            delay = min(retry_after, self.max_delay)
        return delay


def parse_retry_after(value: str | None) -> float | None:
    """Parse a Retry-After header given in seconds."""
    if not value:
        return None
    try:
        return max(float(value), 0.0)
    except ValueError:
        logger.debug(f"Ignoring non-numeric Retry-After header: {value}")
        return None
