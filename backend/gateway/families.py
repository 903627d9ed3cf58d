"""Registry of pushed metric families and their live series."""

import logging
import re
from typing import Iterator, Optional

from prometheus_client.core import CounterMetricFamily, GaugeMetricFamily

from .exposition import SUPPORTED_TYPES

logger = logging.getLogger(__name__)

COUNTER = 'counter'
GAUGE = 'gauge'
KINDS = SUPPORTED_TYPES

METRIC_NAME_RE = re.compile(r'^[a-zA-Z_:][a-zA-Z0-9_:]*$')
LABEL_NAME_RE = re.compile(r'^[a-zA-Z_][a-zA-Z0-9_]*$')
# float() alone also takes digit underscores and surrounding whitespace
VALUE_RE = re.compile(r'^[+-]?((\d+\.?\d*|\.\d+)([eE][+-]?\d+)?|inf(inity)?|nan)$',
                      re.IGNORECASE | re.ASCII)


def exposed_name(name: str, kind: str) -> str:
    """Name a family's samples appear under once scraped.

    prometheus_client always exposes counters with a ``_total`` suffix.
    """
    if kind == COUNTER:
        if name.endswith('_total'):
            name = name[:-len('_total')]
        return name + '_total'
    return name


class MetricFamily:
    """Schema of one pushed metric name plus its label values -> value table.

    The name, kind and label keys are fixed when the family is created.
    """

    def __init__(self, name: str, kind: str, label_keys: tuple, help_text: str):
        self.name = name
        self.kind = kind
        self.label_keys = tuple(label_keys)
        self.help = help_text
        self.series = {}

    def to_metric(self):
        """Build the prometheus_client family holding the current series."""
        if self.kind == COUNTER:
            metric = CounterMetricFamily(self.name, self.help, labels=self.label_keys)
        else:
            metric = GaugeMetricFamily(self.name, self.help, labels=self.label_keys)
        for label_values, value in self.series.items():
            metric.add_metric(list(label_values), value)
        return metric


def _parse_value(value: str) -> Optional[float]:
    if not VALUE_RE.fullmatch(value):
        return None
    try:
        return float(value)
    except ValueError:
        return None


class FamilyRegistry:
    """Pushed families keyed by metric name.

    Not thread-safe; the gateway serializes access with its own lock.
    """

    def __init__(self):
        self.families = {}
        self.exposed = {}

    def __len__(self):
        return len(self.families)

    def get(self, name: str) -> Optional[MetricFamily]:
        return self.families.get(name)

    def ensure_family(self, name: str, kind: str, label_keys: tuple,
                      help_text: str) -> Optional[MetricFamily]:
        """Return the family for name, creating it on first use.

        The label keys of the first definition stay authoritative. None is
        returned for unknown kinds, invalid names, kind conflicts and names
        already exposed by another family.
        """
        family = self.families.get(name)
        if family is not None:
            if family.kind != kind:
                logger.debug(f"Ignoring {kind} sample for {family.kind} family {name}")
                return None
            return family

        if kind not in KINDS:
            return None
        if not METRIC_NAME_RE.match(name):
            logger.debug(f"Ignoring invalid metric name {name!r}")
            return None
        if not all(LABEL_NAME_RE.match(key) for key in label_keys):
            logger.debug(f"Ignoring {name} with invalid label names {label_keys}")
            return None
        if len(set(label_keys)) != len(label_keys):
            logger.debug(f"Ignoring {name} with duplicate label names {label_keys}")
            return None

        exposed = exposed_name(name, kind)
        taken = self.exposed.get(exposed)
        if taken is not None:
            logger.debug(f"Ignoring {kind} {name}: {exposed} is already exposed by {taken}")
            return None

        family = MetricFamily(name, kind, label_keys, help_text)
        self.families[name] = family
        self.exposed[exposed] = name
        logger.info(f"Registered pushed {kind} {name} with labels {list(family.label_keys)}")
        return family

    def apply_counter(self, family: MetricFamily, label_values: tuple, value: str) -> bool:
        """Replace the counter series with the pushed absolute value."""
        label_values = tuple(label_values)
        if len(label_values) != len(family.label_keys):
            return False
        amount = _parse_value(value)
        if amount is None or amount < 0:
            return False
        family.series.pop(label_values, None)
        family.series[label_values] = 0.0 + amount
        return True

    def apply_gauge(self, family: MetricFamily, label_values: tuple, value: str) -> bool:
        """Set the gauge series to the pushed value."""
        label_values = tuple(label_values)
        if len(label_values) != len(family.label_keys):
            return False
        amount = _parse_value(value)
        if amount is None:
            return False
        family.series[label_values] = amount
        return True

    def delete_series(self, name: str, label_values: tuple) -> bool:
        """Remove one series; False when no family has that name."""
        family = self.families.get(name)
        if family is None:
            return False
        family.series.pop(tuple(label_values), None)
        return True

    def collect(self) -> Iterator:
        for family in self.families.values():
            # families whose series all expired expose nothing
            if family.series:
                yield family.to_metric()
