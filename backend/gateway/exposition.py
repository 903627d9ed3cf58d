"""Parser for pushed Prometheus text exposition payloads."""

import logging
from typing import Iterator, NamedTuple

logger = logging.getLogger(__name__)

HELP_PREFIX = '# HELP '
TYPE_PREFIX = '# TYPE '
SUPPORTED_TYPES = ('counter', 'gauge')


class Sample(NamedTuple):
    """One accepted sample line of a pushed payload."""

    name: str
    kind: str
    help: str
    label_keys: tuple
    label_values: tuple
    value: str


def parse_labels(labels_block: str) -> tuple:
    """Split a label block into keys and values ordered by key.

    Pairs without '=' and values shorter than two characters are skipped.
    Surrounding double quotes are stripped from values, nothing else is
    unescaped.
    """
    pairs = []
    for pair in labels_block.split(','):
        if '=' not in pair:
            continue
        key, value = pair.split('=', 1)
        if len(value) < 2:
            continue
        if value[0] == '"' and value[-1] == '"':
            value = value[1:-1]
        pairs.append((key.strip(), value))

    pairs.sort(key=lambda p: p[0])
    return tuple(k for k, _ in pairs), tuple(v for _, v in pairs)


def _parse_directive(line: str, prefix: str) -> tuple:
    rest = line[len(prefix):]
    if ' ' not in rest:
        return rest, ''
    name, text = rest.split(' ', 1)
    return name, text


def _split_sample_line(line: str):
    """Return (name, labels_block, value) or None for a rejected line."""
    if '{' in line:
        open_brace = line.index('{')
        if '}' not in line:
            return None
        close_brace = line.index('}')
        if close_brace < open_brace:
            return None
        name = line[:open_brace]
        labels_block = line[open_brace + 1:close_brace]
        rest = line[close_brace + 1:]
    else:
        name, rest = line.split(' ', 1)
        labels_block = ''

    tokens = rest.split()
    if not tokens:
        return None
    return name, labels_block, tokens[0]


def parse_exposition(payload: str) -> Iterator[Sample]:
    """Yield the samples of a payload whose HELP and TYPE precede them.

    Directives are scoped to the payload they appear in. Lines that cannot
    be split into name, labels and value are dropped without side effects.
    """
    metric_help = {}
    metric_type = {}

    for line in payload.split('\n'):
        if line.startswith(HELP_PREFIX):
            name, text = _parse_directive(line, HELP_PREFIX)
            metric_help[name] = text
            continue
        if line.startswith(TYPE_PREFIX):
            name, kind = _parse_directive(line, TYPE_PREFIX)
            metric_type[name] = kind.strip()
            continue
        if ' ' not in line:
            continue

        parts = _split_sample_line(line)
        if parts is None:
            logger.debug(f"Dropping malformed line: {line!r}")
            continue
        name, labels_block, value = parts

        if name not in metric_help or name not in metric_type:
            continue
        if metric_type[name] not in SUPPORTED_TYPES:
            continue

        label_keys, label_values = parse_labels(labels_block)
        yield Sample(
            name=name,
            kind=metric_type[name],
            help=metric_help[name],
            label_keys=label_keys,
            label_values=label_values,
            value=value,
        )
