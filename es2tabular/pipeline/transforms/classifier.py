from enum import Enum, auto
from typing import Any, Dict, List, Mapping, Tuple

# Bucket properties that never hold a nested aggregation or a metric
RESERVED_BUCKET_KEYS = frozenset({
    "key",
    "key_as_string",
    "doc_count",
    "doc_count_error_upper_bound",
    "sum_other_doc_count",
})


class NodeKind(Enum):
    """
    Shape of an aggregation node, detected from its `buckets` property.
    """
    TERMS = auto()    # buckets is an ordered list
    FILTERS = auto()  # buckets is a name -> bucket mapping
    METRIC = auto()   # no buckets at all
    UNKNOWN = auto()  # buckets present but neither list nor mapping


def classify(node: Mapping[str, Any]) -> NodeKind:
    if "buckets" not in node:
        return NodeKind.METRIC

    buckets = node["buckets"]
    if isinstance(buckets, list):
        return NodeKind.TERMS
    if isinstance(buckets, dict):
        return NodeKind.FILTERS
    return NodeKind.UNKNOWN


def bucket_key(bucket: Mapping[str, Any]) -> Any:
    """Returns key_as_string when the bucket has one, otherwise key (None if neither)."""
    if "key_as_string" in bucket:
        return bucket["key_as_string"]
    return bucket.get("key")


def has_bucket_key(bucket: Mapping[str, Any]) -> bool:
    return "key_as_string" in bucket or "key" in bucket


def _candidate_properties(bucket: Mapping[str, Any]):
    for name, value in bucket.items():
        if name in RESERVED_BUCKET_KEYS:
            continue
        if isinstance(value, dict):
            yield name, value


def find_nested_aggregations(bucket: Mapping[str, Any]) -> List[Tuple[str, Dict[str, Any]]]:
    """
    Returns (name, node) for every bucket property that is itself an aggregation,
    i.e. an object carrying `buckets`. Order follows the bucket's own key order.
    """
    return [
        (name, value)
        for name, value in _candidate_properties(bucket)
        if "buckets" in value
    ]


def find_metrics(bucket: Mapping[str, Any]) -> List[Tuple[str, Any]]:
    """
    Returns (name, value) for every metric sub-aggregation of the bucket.

    Filter-style metrics report their doc_count, numeric metrics their value.
    Objects with neither are skipped.
    """
    metrics = []
    for name, value in _candidate_properties(bucket):
        if "buckets" in value:
            continue
        if "doc_count" in value:
            metrics.append((name, value["doc_count"]))
        elif "value" in value:
            metrics.append((name, value["value"]))
    return metrics
