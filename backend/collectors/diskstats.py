"""Block device I/O statistics collector."""

import os
import re
import logging

from prometheus_client.core import CounterMetricFamily, GaugeMetricFamily

from .registry import NAMESPACE, register_collector

logger = logging.getLogger(__name__)

PROC_BASE = '/host/proc' if os.path.exists('/host/proc') else '/proc'

IGNORED_DEVICES = re.compile(r'^(ram|loop|fd|(h|s|v|xv)d[a-z]|nvme\d+n\d+p)\d+$')
SECTOR_SIZE = 512

# (field index, name, help, scale); times in /proc/diskstats are milliseconds
COUNTERS = (
    (0, 'reads_completed_total', 'The total number of reads completed successfully.', 1),
    (1, 'reads_merged_total', 'The total number of reads merged.', 1),
    (2, 'read_bytes_total', 'The total number of bytes read successfully.', SECTOR_SIZE),
    (3, 'read_time_seconds_total', 'The total number of seconds spent by all reads.', 0.001),
    (4, 'writes_completed_total', 'The total number of writes completed successfully.', 1),
    (5, 'writes_merged_total', 'The number of writes merged.', 1),
    (6, 'written_bytes_total', 'The total number of bytes written successfully.', SECTOR_SIZE),
    (7, 'write_time_seconds_total', 'This is the total number of seconds spent by all writes.', 0.001),
    (9, 'io_time_seconds_total', 'Total seconds spent doing I/Os.', 0.001),
    (10, 'io_time_weighted_seconds_total', 'The weighted number of seconds spent doing I/Os.', 0.001),
)
IO_NOW_FIELD = 8


def parse_diskstats(lines) -> dict:
    """Map device name to its statistic columns, as strings."""
    stats = {}
    for line in lines:
        parts = line.split()
        if len(parts) < 14:
            if parts:
                logger.debug(f"Invalid diskstats line: {line!r}")
            continue
        stats[parts[2]] = parts[3:]
    return stats


def collect_diskstats_metrics() -> list:
    """Collect per-device I/O counters from /proc/diskstats."""
    with open(f'{PROC_BASE}/diskstats', 'r') as f:
        stats = parse_diskstats(f)

    counters = [
        (index, scale, CounterMetricFamily(f'{NAMESPACE}_disk_{name}', help_text, labels=['device']))
        for index, name, help_text, scale in COUNTERS
    ]
    io_now = GaugeMetricFamily(
        f'{NAMESPACE}_disk_io_now',
        'The number of I/Os currently in progress.',
        labels=['device'],
    )

    for device, values in sorted(stats.items()):
        if IGNORED_DEVICES.match(device):
            continue
        try:
            numbers = [float(v) for v in values[:11]]
        except ValueError as e:
            logger.debug(f"Could not parse diskstats for {device}: {e}")
            continue
        for index, scale, counter in counters:
            counter.add_metric([device], numbers[index] * scale)
        io_now.add_metric([device], numbers[IO_NOW_FIELD])

    return [counter for _, _, counter in counters] + [io_now]


register_collector('diskstats', True, collect_diskstats_metrics)
