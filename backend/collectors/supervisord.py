"""
Collector for processes managed by supervisord.
"""
import logging
import xmlrpc.client

from prometheus_client.core import GaugeMetricFamily

from config import Config
from .registry import NAMESPACE, register_collector

logger = logging.getLogger(__name__)

# http://supervisord.org/subprocess.html#process-states
STOPPED = 0
STARTING = 10
RUNNING = 20
BACKOFF = 30
STOPPING = 40
EXITED = 100
FATAL = 200
UNKNOWN = 1000

RUNNING_STATES = (STARTING, RUNNING, STOPPING)


def _get_process_info(url: str) -> list:
    proxy = xmlrpc.client.ServerProxy(url)
    try:
        return proxy.supervisor.getAllProcessInfo()
    except (OSError, xmlrpc.client.Error) as e:
        raise RuntimeError(f"unable to call supervisord: {e}") from e


def collect_supervisord_metrics() -> list:
    """
    Collect state of every supervisord process.

    Returns:
        list: state, exit status and up gauges plus start times of running
              processes, labelled by process name and group
    """
    labels = ['name', 'group']
    state = GaugeMetricFamily(f'{NAMESPACE}_supervisord_state', 'Process State', labels=labels)
    exit_status = GaugeMetricFamily(f'{NAMESPACE}_supervisord_exit_status', 'Process Exit Status', labels=labels)
    up = GaugeMetricFamily(f'{NAMESPACE}_supervisord_up', 'Process Up', labels=labels)
    start_time = GaugeMetricFamily(f'{NAMESPACE}_supervisord_start_time_seconds', 'Process start time', labels=labels)

    for info in _get_process_info(Config.SUPERVISORD_URL):
        values = [info.get('name', ''), info.get('group', '')]
        process_state = info.get('state', UNKNOWN)

        state.add_metric(values, process_state)
        exit_status.add_metric(values, info.get('exitstatus', 0))

        if process_state in RUNNING_STATES:
            up.add_metric(values, 1)
            start_time.add_metric(values, info.get('start', 0))
        else:
            up.add_metric(values, 0)

        logger.debug(f"{values[1]}:{values[0]} is {info.get('statename')} on pid {info.get('pid')}")

    return [state, exit_status, up, start_time]


register_collector('supervisord', False, collect_supervisord_metrics)
