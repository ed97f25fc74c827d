from dataclasses import dataclass, replace
from typing import Any, Dict, List, Mapping, Optional

from es2tabular.pipeline.transforms.classifier import (
    NodeKind,
    classify,
    bucket_key,
    has_bucket_key,
    find_nested_aggregations,
)
from es2tabular.pipeline.transforms.path import Path, EMPTY_PATH, extend_path
from es2tabular.pipeline.transforms.row_assembler import Row, create_row_from_bucket

OTHER_BUCKET_VALUE = "_other_"
DEFAULT_FILTER_COLUMN = "filter"
DEFAULT_TERMS_COLUMN = "aggregation"


@dataclass(frozen=True)
class WalkContext:
    """
    Naming context handed down the recursion. Never mutated; nested levels
    get a copy with current_aggregation_name set.
    """
    top_level_aggregation_name: Optional[str] = None
    filter_column_name: Optional[str] = None
    current_aggregation_name: Optional[str] = None

    def nested(self, name: str) -> "WalkContext":
        return replace(self, current_aggregation_name=name)

    def filters_column(self) -> str:
        return self.current_aggregation_name or self.filter_column_name or DEFAULT_FILTER_COLUMN

    def terms_column(self) -> str:
        return self.current_aggregation_name or self.top_level_aggregation_name or DEFAULT_TERMS_COLUMN


def process_aggregation(
        node: Mapping[str, Any],
        context: WalkContext = WalkContext(),
        path: Path = EMPTY_PATH,
) -> List[Row]:
    """
    Flattens one aggregation node into rows, depth-first and in bucket order.

    Filters buckets contribute (column, bucket name) to the path, terms buckets
    (column, key). Buckets without nested aggregations become rows. Metric
    nodes and unrecognised shapes produce nothing.
    """
    kind = classify(node)

    if kind is NodeKind.FILTERS:
        return _process_filters(node["buckets"], context, path)
    if kind is NodeKind.TERMS:
        return _process_terms(node, context, path)
    return []


def _process_filters(buckets: Dict[str, Any], context: WalkContext, path: Path) -> List[Row]:
    rows: List[Row] = []
    column = context.filters_column()

    for bucket_name, bucket in buckets.items():
        if not isinstance(bucket, dict):
            continue
        rows.extend(_descend(bucket, context, extend_path(path, column, bucket_name)))

    return rows


def _process_terms(node: Mapping[str, Any], context: WalkContext, path: Path) -> List[Row]:
    rows: List[Row] = []
    column = context.terms_column()

    for bucket in node["buckets"]:
        if not isinstance(bucket, dict):
            continue
        bucket_path = extend_path(path, column, bucket_key(bucket)) if has_bucket_key(bucket) else path
        rows.extend(_descend(bucket, context, bucket_path))

    # Remainder documents outside the returned top-N buckets
    other_count = node.get("sum_other_doc_count")
    if _is_positive_number(other_count):
        remainder = {"doc_count": other_count}
        rows.append(create_row_from_bucket(remainder, extend_path(path, column, OTHER_BUCKET_VALUE)))

    return rows


def _descend(bucket: Dict[str, Any], context: WalkContext, path: Path) -> List[Row]:
    nested = find_nested_aggregations(bucket)
    if not nested:
        return [create_row_from_bucket(bucket, path)]

    rows: List[Row] = []
    for name, aggregation in nested:
        rows.extend(process_aggregation(aggregation, context.nested(name), path))
    return rows


def _is_positive_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0
