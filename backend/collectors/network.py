"""Network interface traffic metrics collector."""

import os
import logging

from prometheus_client.core import CounterMetricFamily

from .registry import NAMESPACE, register_collector

logger = logging.getLogger(__name__)

PROC_BASE = '/host/proc' if os.path.exists('/host/proc') else '/proc'

_SKIP_IFACES = frozenset({'lo'})
_SKIP_PREFIXES = ('docker', 'br-', 'veth', 'virbr', 'dummy', 'tunl', 'sit')

# /proc/net/dev column offsets after the interface name
RECEIVE_FIELDS = {'bytes': 0, 'packets': 1, 'errs': 2, 'drop': 3}
TRANSMIT_FIELDS = {'bytes': 8, 'packets': 9, 'errs': 10, 'drop': 11}


def parse_net_dev(lines) -> dict:
    """Map interface name to its counter columns from /proc/net/dev."""
    stats = {}
    for line in list(lines)[2:]:
        if ':' not in line:
            continue
        iface, counters = line.split(':', 1)
        iface = iface.strip()
        if iface in _SKIP_IFACES or any(iface.startswith(p) for p in _SKIP_PREFIXES):
            continue
        parts = counters.split()
        if len(parts) < 16:
            logger.debug(f"Short /proc/net/dev line for {iface}: {line!r}")
            continue
        stats[iface] = [int(p) for p in parts[:16]]
    return stats


def collect_network_metrics() -> list:
    """Return receive and transmit counters per interface."""
    with open(f'{PROC_BASE}/net/dev', 'r') as f:
        stats = parse_net_dev(f)

    metrics = []
    for direction, fields in (('receive', RECEIVE_FIELDS), ('transmit', TRANSMIT_FIELDS)):
        for field, offset in fields.items():
            counter = CounterMetricFamily(
                f'{NAMESPACE}_network_{direction}_{field}_total',
                f'Network device statistic {direction}_{field}.',
                labels=['device'],
            )
            for iface, values in sorted(stats.items()):
                counter.add_metric([iface], values[offset])
            metrics.append(counter)
    return metrics


register_collector('netdev', True, collect_network_metrics)
