"""Tests for series expiry and scrape interval estimation."""

import pytest

from gateway.expiry import ExpiryTracker
from gateway.families import GAUGE, FamilyRegistry
from gateway.interval import SampleIntervalEstimator


@pytest.fixture
def registry():
    registry = FamilyRegistry()
    family = registry.ensure_family('x', GAUGE, ('a',), 'h')
    registry.apply_gauge(family, ('1',), '1')
    registry.apply_gauge(family, ('2',), '2')
    return registry


class TestRefresh:

    def test_creates_entry(self):
        tracker = ExpiryTracker()
        assert tracker.refresh('x', ('1',), 100.0, 15.0)
        assert len(tracker) == 1
        assert tracker.entries['x'][0].deadline == 130.0

    def test_updates_existing_deadline(self):
        tracker = ExpiryTracker()
        tracker.refresh('x', ('1',), 100.0, 15.0)
        tracker.refresh('x', ('1',), 110.0, 15.0)
        assert len(tracker) == 1
        assert tracker.entries['x'][0].deadline == 140.0

    def test_appends_new_label_values(self):
        tracker = ExpiryTracker()
        tracker.refresh('x', ('1',), 100.0, 15.0)
        tracker.refresh('x', ('2',), 100.0, 15.0)
        assert [e.label_values for e in tracker.entries['x']] == [('1',), ('2',)]

    def test_horizon_rounded_to_hundredths(self):
        tracker = ExpiryTracker()
        tracker.refresh('x', (), 100.0, 1.23456)
        assert tracker.entries['x'][0].deadline == pytest.approx(102.47)

    @pytest.mark.parametrize('interval', [float('nan'), float('inf'), -1.0])
    def test_bad_interval_abandons_refresh(self, interval):
        tracker = ExpiryTracker()
        assert not tracker.refresh('x', ('1',), 100.0, interval)
        assert tracker.entries == {}


class TestSweep:

    def test_nothing_expires_before_deadline(self, registry):
        tracker = ExpiryTracker()
        tracker.refresh('x', ('1',), 100.0, 10.0)
        assert tracker.sweep(119.99, registry) == 0
        assert ('1',) in registry.get('x').series

    def test_expires_at_deadline(self, registry):
        tracker = ExpiryTracker()
        tracker.refresh('x', ('1',), 100.0, 10.0)
        tracker.refresh('x', ('2',), 110.0, 10.0)

        assert tracker.sweep(120.0, registry) == 1
        assert registry.get('x').series == {('2',): 2.0}
        assert [e.label_values for e in tracker.entries['x']] == [('2',)]

    def test_empty_lists_pruned(self, registry):
        tracker = ExpiryTracker()
        tracker.refresh('x', ('1',), 100.0, 10.0)
        tracker.sweep(200.0, registry)
        assert tracker.entries == {}

    def test_entry_without_family_kept(self, registry):
        tracker = ExpiryTracker()
        tracker.refresh('unknown', ('1',), 100.0, 10.0)
        assert tracker.sweep(200.0, registry) == 0
        assert len(tracker) == 1


class TestSampleIntervalEstimator:

    def test_initially_unset(self):
        assert SampleIntervalEstimator().interval == 0.0

    def test_first_scrape_gap_ignored(self):
        estimator = SampleIntervalEstimator()
        assert estimator.observe(1_700_000_000.0) == 0.0
        assert estimator.last_scrape == 1_700_000_000.0

    def test_tracks_scrape_gap(self):
        estimator = SampleIntervalEstimator()
        estimator.observe(1_700_000_000.0)
        assert estimator.observe(1_700_000_015.0) == 15.0
        assert estimator.observe(1_700_000_045.0) == 30.0

    def test_long_gap_keeps_estimate(self):
        estimator = SampleIntervalEstimator()
        estimator.observe(1_700_000_000.0)
        estimator.observe(1_700_000_015.0)
        assert estimator.observe(1_700_003_615.0) == 15.0
        assert estimator.last_scrape == 1_700_003_615.0

    def test_clock_going_backwards_keeps_estimate(self):
        estimator = SampleIntervalEstimator()
        estimator.observe(1_700_000_000.0)
        estimator.observe(1_700_000_015.0)
        assert estimator.observe(1_700_000_010.0) == 15.0
        assert estimator.observe(1_700_000_010.0) == 15.0
