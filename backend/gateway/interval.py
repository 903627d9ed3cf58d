"""Scrape cadence estimation."""

MAX_INTERVAL_SECONDS = 3600.0


class SampleIntervalEstimator:
    """Tracks the gap between successive scrapes.

    Gaps outside (0, 3600) seconds, such as the first scrape or a clock
    jump, keep the previous estimate.
    """

    def __init__(self):
        self.interval = 0.0
        self.last_scrape = 0.0

    def observe(self, now: float) -> float:
        gap = now - self.last_scrape
        if 0.0 < gap < MAX_INTERVAL_SECONDS:
            self.interval = gap
        self.last_scrape = now
        return self.interval
