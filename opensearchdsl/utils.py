from typing import Any, Dict, Optional

from opensearchdsl.aggs import Aggregation, BucketAggregation, Stats
from opensearchdsl.registry import AggregationRegistry

STATS_KEYS = ('count', 'min', 'max', 'avg', 'sum')


def _iter_buckets(buckets):
    # keyed aggregations return {key: bucket} instead of a list
    if isinstance(buckets, dict):
        for key, b in buckets.items():
            yield key, b
    else:
        for b in buckets:
            yield b['key'], b


def parse_aggregation(node: Aggregation, level: dict):
    if isinstance(node, BucketAggregation):
        result = {}
        for key, b in _iter_buckets(level['buckets']):
            children = parse_aggregations(b, node.aggregations)
            result[key] = children if children else b['doc_count']
        return result
    if isinstance(node, Stats):
        return {k: level[k] for k in STATS_KEYS}
    return level['value']


def parse_aggregations(data: dict, registry: AggregationRegistry) -> Optional[Dict[str, Any]]:
    """
    Flatten an ``aggregations`` response along the declared tree.

    Buckets map to their nested results, or to ``doc_count`` for leaf
    buckets; metrics map to their value.
    """
    result = {}
    for name, node in registry.items():
        level = data.get(name, None)
        if level is None:
            continue
        result[name] = parse_aggregation(node, level)
    return result or None
