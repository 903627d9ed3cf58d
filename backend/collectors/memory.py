"""Memory usage metrics collector."""

import os
import re
import logging

from prometheus_client.core import GaugeMetricFamily

from .registry import NAMESPACE, register_collector

logger = logging.getLogger(__name__)

# Support both native and Docker-mounted paths
PROC_BASE = '/host/proc' if os.path.exists('/host/proc') else '/proc'

_PAREN_RE = re.compile(r'\((.*)\)')


def parse_meminfo(lines) -> dict:
    """Parse /proc/meminfo lines into bytes keyed by metric-safe field name."""
    meminfo = {}
    for line in lines:
        parts = line.split(':')
        if len(parts) != 2:
            continue
        fields = parts[1].split()
        if not fields:
            continue
        key = _PAREN_RE.sub(r'_\1', parts[0].strip())
        try:
            value = float(fields[0])
        except ValueError:
            logger.debug(f"Could not parse meminfo line: {line!r}")
            continue
        if len(fields) > 1 and fields[1] == 'kB':
            value *= 1024
        meminfo[key] = value
    return meminfo


def collect_memory_metrics() -> list:
    """Collect memory usage from /proc/meminfo."""
    with open(f'{PROC_BASE}/meminfo', 'r') as f:
        meminfo = parse_meminfo(f)

    return [
        GaugeMetricFamily(
            f'{NAMESPACE}_memory_{key}_bytes',
            f'Memory information field {key}_bytes.',
            value=value,
        )
        for key, value in sorted(meminfo.items())
    ]


register_collector('meminfo', True, collect_memory_metrics)
