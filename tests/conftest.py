"""Shared fixtures for exporter tests."""

import os

import pytest

FIXTURES_PROC = os.path.join(os.path.dirname(__file__), 'fixtures', 'proc')

# Far enough from the epoch that the first observed scrape gap is ignored
START_TIME = 1_700_000_000.0


class FakeClock:
    """Manually advanced clock returning seconds since the epoch."""

    def __init__(self, now: float = START_TIME):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class ImmediateScheduler:
    """Stands in for BackgroundScheduler by running jobs on submission."""

    def __init__(self):
        self.jobs = []

    def add_job(self, func, args=(), **kwargs):
        self.jobs.append((func, args, kwargs))
        func(*args)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler():
    return ImmediateScheduler()


@pytest.fixture
def gateway(clock):
    from gateway import GatewayCollector

    return GatewayCollector(clock=clock)


def samples_of(metrics) -> dict:
    """Flatten metric families into {(sample name, sorted labels): value}."""
    result = {}
    for metric in metrics:
        for sample in metric.samples:
            result[(sample.name, tuple(sorted(sample.labels.items())))] = sample.value
    return result
