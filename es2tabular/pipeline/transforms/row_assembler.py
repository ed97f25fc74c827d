from typing import Any, Dict, Mapping

from es2tabular.pipeline.transforms.classifier import bucket_key, has_bucket_key, find_metrics
from es2tabular.pipeline.transforms.path import Path

Row = Dict[str, Any]


def create_row_from_bucket(bucket: Mapping[str, Any], path: Path) -> Row:
    """
    Builds the flat row for a terminal bucket.

    Columns come in this order: the path (ancestors first), the bucket's own
    key when it is not already the last path value, doc_count, then metrics.
    """
    row: Row = {}

    # Repeated column names are not deduplicated: the deepest entry wins
    for entry in path:
        row[entry.column] = entry.value

    if has_bucket_key(bucket):
        key = bucket_key(bucket)
        if not path or path[-1].value != key:
            row["key"] = key

    if "doc_count" in bucket:
        row["doc_count"] = bucket["doc_count"]

    for name, value in find_metrics(bucket):
        row[name] = value

    return row
