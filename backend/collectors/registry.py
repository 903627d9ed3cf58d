"""Collector registration and the per-scrape collection cycle."""

import logging
import time

from prometheus_client.core import GaugeMetricFamily

logger = logging.getLogger(__name__)

NAMESPACE = 'node'

# name -> (default_enabled, update)
_collectors = {}


def register_collector(name: str, default_enabled: bool, update):
    """Record a collector; update() returns metric families or raises."""
    _collectors[name] = (default_enabled, update)


def available_collectors() -> dict:
    """Return every registered collector name with its default state."""
    return {name: enabled for name, (enabled, _) in sorted(_collectors.items())}


def enabled_collectors(names=None) -> dict:
    """Resolve collector names to update callables.

    With no names, every default-enabled collector is returned.
    """
    if not names:
        return {name: update for name, (enabled, update) in _collectors.items() if enabled}

    unknown = [name for name in names if name not in _collectors]
    if unknown:
        raise ValueError(f"Unknown collectors: {unknown}. Valid: {sorted(_collectors)}")
    return {name: _collectors[name][1] for name in names}


class ExporterCollector:
    """Runs every enabled collector once per scrape."""

    def __init__(self, collectors: dict):
        self.collectors = collectors

    def describe(self):
        return []

    def collect(self):
        duration = GaugeMetricFamily(
            f'{NAMESPACE}_scrape_collector_duration_seconds',
            'Duration of a collector scrape.',
            labels=['collector'],
        )
        success = GaugeMetricFamily(
            f'{NAMESPACE}_scrape_collector_success',
            'Whether a collector succeeded.',
            labels=['collector'],
        )

        for name, update in self.collectors.items():
            start = time.monotonic()
            try:
                metrics = list(update())
                ok = 1
            except Exception as e:
                logger.error(f"Error collecting {name} metrics: {e}")
                metrics = []
                ok = 0
            duration.add_metric([name], time.monotonic() - start)
            success.add_metric([name], ok)
            yield from metrics

        yield duration
        yield success
