"""Host metric collectors for the exporter."""

from .registry import ExporterCollector, available_collectors, enabled_collectors, register_collector
from .cpu import collect_cpu_metrics
from .memory import collect_memory_metrics
from .network import collect_network_metrics
from .diskstats import collect_diskstats_metrics
from .supervisord import collect_supervisord_metrics
from . import gateway

__all__ = [
    'ExporterCollector',
    'available_collectors',
    'collect_cpu_metrics',
    'collect_diskstats_metrics',
    'collect_memory_metrics',
    'collect_network_metrics',
    'collect_supervisord_metrics',
    'enabled_collectors',
    'register_collector',
]
