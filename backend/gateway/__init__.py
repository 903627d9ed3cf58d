"""Push gateway for metrics submitted over HTTP."""

from .collector import GatewayCollector
from .exposition import Sample, parse_exposition, parse_labels
from .families import COUNTER, GAUGE, FamilyRegistry, MetricFamily

# Shared instance wired into the exporter and the HTTP service
DEFAULT_GATEWAY = GatewayCollector()

__all__ = [
    'COUNTER',
    'DEFAULT_GATEWAY',
    'GAUGE',
    'FamilyRegistry',
    'GatewayCollector',
    'MetricFamily',
    'Sample',
    'parse_exposition',
    'parse_labels',
]
