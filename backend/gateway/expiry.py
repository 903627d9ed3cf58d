"""Expiry bookkeeping for pushed series."""

import logging
import math

logger = logging.getLogger(__name__)


class ExpiryEntry:
    """Deadline of one series, identified by its label values."""

    __slots__ = ('label_values', 'deadline')

    def __init__(self, label_values: tuple, deadline: float):
        self.label_values = tuple(label_values)
        self.deadline = deadline

    def __repr__(self):
        return f'ExpiryEntry({self.label_values!r}, {self.deadline!r})'


class ExpiryTracker:
    """Per metric name, unordered lists of series deadlines.

    Series are kept alive for twice the sample interval after their last
    push and removed from the family registry by sweep().
    """

    def __init__(self):
        self.entries = {}

    def __len__(self):
        return sum(len(entries) for entries in self.entries.values())

    def refresh(self, name: str, label_values: tuple, now: float, interval: float) -> bool:
        """Push back the deadline of a series, tracking it if new."""
        horizon = round(interval * 2, 2)
        if not math.isfinite(horizon) or horizon < 0:
            logger.warning(f"Not tracking expiry for {name}: bad sample interval {interval}")
            return False
        deadline = now + horizon
        label_values = tuple(label_values)

        entries = self.entries.get(name)
        if entries is None:
            self.entries[name] = [ExpiryEntry(label_values, deadline)]
            return True

        for entry in entries:
            if entry.label_values == label_values:
                entry.deadline = deadline
                return True

        entries.append(ExpiryEntry(label_values, deadline))
        return True

    def sweep(self, now: float, registry) -> int:
        """Delete every expired series from registry; return how many."""
        removed = 0
        remaining = {}
        for name, entries in self.entries.items():
            live = []
            for entry in entries:
                if now >= entry.deadline and registry.delete_series(name, entry.label_values):
                    removed += 1
                    continue
                live.append(entry)
            if live:
                remaining[name] = live
        self.entries = remaining

        if removed:
            logger.debug(f"Expired {removed} pushed series")
        return removed
