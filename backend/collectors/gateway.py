"""Push gateway hook into the per-scrape collector cycle."""

from gateway import DEFAULT_GATEWAY
from .registry import register_collector

register_collector('gateway', True, DEFAULT_GATEWAY.update)
