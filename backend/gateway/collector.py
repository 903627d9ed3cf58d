"""Push gateway: accepts pushed metrics and republishes them on scrape."""

import logging
import threading
import time

from flask import Response
from werkzeug.exceptions import ClientDisconnected

from .expiry import ExpiryTracker
from .exposition import parse_exposition
from .families import COUNTER, FamilyRegistry
from .interval import SampleIntervalEstimator

logger = logging.getLogger(__name__)


class GatewayCollector:
    """Pushed series exposed through the prometheus_client collector protocol.

    POSTs to the metrics path are parsed in the background into counter and
    gauge families. Series that are not pushed again within twice the
    observed scrape interval are dropped at the next scrape. One lock
    guards all state; pushes and scrapes never interleave.
    """

    def __init__(self, clock=time.time):
        self.clock = clock
        self.families = FamilyRegistry()
        self.expiry = ExpiryTracker()
        self.estimator = SampleIntervalEstimator()
        self.next_handler = None
        self.scheduler = None
        self._lock = threading.Lock()

    def set_next_handler(self, next_handler):
        """Set the view answering everything that is not a push."""
        self.next_handler = next_handler

    def set_scheduler(self, scheduler):
        """Run push ingestion as jobs on an APScheduler scheduler."""
        self.scheduler = scheduler

    @property
    def sample_interval(self) -> float:
        with self._lock:
            return self.estimator.interval

    def serve(self, request):
        """Route a request on the metrics path."""
        if request.method == 'POST' and self.next_handler is not None:
            return self._post_handler(request)
        if self.next_handler is None:
            return Response('no handler configured\n', status=404, mimetype='text/plain')
        return self.next_handler()

    def _post_handler(self, request):
        try:
            # undecodable bytes only spoil the lines holding them
            body = request.get_data(cache=False).decode('utf-8', errors='replace')
        except (ClientDisconnected, OSError) as e:
            logger.error(f"Error reading body: {e}")
            return Response("can't read body\n", status=400, mimetype='text/plain')

        response = Response(status=200)
        interval = self.sample_interval
        if interval > 0.0:
            response.headers['SampleRate'] = f'{interval:3.2f}'
            self._submit(body)
        return response

    def _submit(self, body: str):
        if self.scheduler is not None:
            self.scheduler.add_job(self._ingest, args=[body], misfire_grace_time=None)
        else:
            threading.Thread(target=self._ingest, args=(body,), daemon=True).start()

    def _ingest(self, body: str):
        try:
            applied = self.parse_post_metrics(body)
            logger.debug(f"Applied {applied} pushed samples")
        except Exception:
            logger.exception("Error ingesting pushed metrics")

    def parse_post_metrics(self, body: str) -> int:
        """Apply every valid sample of body; return the number applied."""
        applied = 0
        with self._lock:
            now = self.clock()
            interval = self.estimator.interval
            for sample in parse_exposition(body):
                family = self.families.ensure_family(
                    sample.name, sample.kind, sample.label_keys, sample.help
                )
                if family is None:
                    continue
                if family.kind == COUNTER:
                    ok = self.families.apply_counter(family, sample.label_values, sample.value)
                else:
                    ok = self.families.apply_gauge(family, sample.label_values, sample.value)
                if not ok:
                    logger.debug(f"Dropping sample for {sample.name}{list(sample.label_values)}: {sample.value!r}")
                    continue
                self.expiry.refresh(family.name, sample.label_values, now, interval)
                applied += 1
        return applied

    def update(self):
        """Per-scrape hook: feed the scrape cadence to the interval estimator."""
        with self._lock:
            self.estimator.observe(self.clock())
        return []

    def describe(self):
        with self._lock:
            return list(self.families.collect())

    def collect(self):
        with self._lock:
            self.expiry.sweep(self.clock(), self.families)
            metrics = list(self.families.collect())
        return iter(metrics)
