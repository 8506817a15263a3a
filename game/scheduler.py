"""
Fixed-interval tick scheduler, polled once per frame.
"""

import logging

logger = logging.getLogger(__name__)


MIN_INTERVAL_MS = 10.0
MAX_INTERVAL_MS = 5000.0


def clamp_interval(interval_ms: float) -> float:
    return min(max(float(interval_ms), MIN_INTERVAL_MS), MAX_INTERVAL_MS)


class TickScheduler:
    """
    Repeating countdown decoupled from the frame rate.

    Elapsed time accumulates on every ``advance``; once it reaches the
    interval a single tick fires and the remainder carries over.
    """

    def __init__(self, interval_ms: float = 250.0):
        self.interval_ms = clamp_interval(interval_ms)
        self.elapsed_ms = 0.0
        self.ticks = 0

    def set_interval(self, interval_ms: float) -> None:
        """
        Changes the interval at runtime.

        Elapsed progress is kept but capped at the new interval, so a
        shorter interval fires at most once on the next advance.
        """
        new_interval = clamp_interval(interval_ms)
        if new_interval == self.interval_ms:
            return
        logger.debug("Tick interval %.1f ms -> %.1f ms", self.interval_ms, new_interval)
        self.interval_ms = new_interval
        self.elapsed_ms = min(self.elapsed_ms, self.interval_ms)

    def advance(self, delta_seconds: float) -> bool:
        """
        Accumulates frame time.

        Returns:
            True if a discrete step fires this frame
        """
        if delta_seconds > 0:
            self.elapsed_ms += delta_seconds * 1000.0

        if self.elapsed_ms < self.interval_ms:
            return False

        self.elapsed_ms %= self.interval_ms
        self.ticks += 1
        return True

    def reset(self) -> None:
        self.elapsed_ms = 0.0
        self.ticks = 0
