"""CPU temperature and load metrics collector."""

import os
import logging

from prometheus_client.core import GaugeMetricFamily

from .registry import NAMESPACE, register_collector

logger = logging.getLogger(__name__)

# Support both native and Docker-mounted paths
SYS_BASE = '/host/sys' if os.path.exists('/host/sys') else '/sys'
PROC_BASE = '/host/proc' if os.path.exists('/host/proc') else '/proc'


def collect_cpu_metrics() -> list:
    """Collect system load averages and thermal zone temperatures."""
    metrics = _get_load_averages()
    temperature = _get_cpu_temperature()
    if temperature is not None:
        metrics.append(temperature)
    return metrics


def parse_loadavg(text: str) -> tuple:
    """Return the 1, 5 and 15 minute load averages."""
    parts = text.strip().split()
    return float(parts[0]), float(parts[1]), float(parts[2])


def _get_load_averages() -> list:
    """Read system load averages from /proc/loadavg."""
    with open(f'{PROC_BASE}/loadavg', 'r') as f:
        loads = parse_loadavg(f.read())

    return [
        GaugeMetricFamily(f'{NAMESPACE}_load{minutes}', f'{minutes}m load average.', value=load)
        for minutes, load in zip((1, 5, 15), loads)
    ]


def _get_cpu_temperature():
    """Read CPU temperature from thermal zones."""
    thermal_base = f'{SYS_BASE}/class/thermal'
    if not os.path.exists(thermal_base):
        logger.debug("Thermal zone directory not found")
        return None

    temps = GaugeMetricFamily(
        f'{NAMESPACE}_thermal_zone_temp',
        'Zone temperature in Celsius',
        labels=['zone', 'type'],
    )
    found = False

    for entry in sorted(os.listdir(thermal_base)):
        if not entry.startswith('thermal_zone'):
            continue
        zone_path = os.path.join(thermal_base, entry)
        temp_file = os.path.join(zone_path, 'temp')
        type_file = os.path.join(zone_path, 'type')

        if not os.path.exists(temp_file):
            continue
        try:
            with open(temp_file, 'r') as f:
                temp_celsius = int(f.read().strip()) / 1000.0

            zone_type = 'unknown'
            if os.path.exists(type_file):
                with open(type_file, 'r') as f:
                    zone_type = f.read().strip()
        except (IOError, ValueError) as e:
            logger.debug(f"Could not read {entry}: {e}")
            continue

        temps.add_metric([entry[len('thermal_zone'):], zone_type], temp_celsius)
        found = True

    return temps if found else None


register_collector('cpu', True, collect_cpu_metrics)
