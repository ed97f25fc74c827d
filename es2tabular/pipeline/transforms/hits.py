import json
from typing import Any, Dict, List, Mapping, Sequence

from es2tabular.pipeline.transforms.row_assembler import Row

ID_COLUMN = "_id"


def _cell(value: Any) -> Any:
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return value


def _source(hit: Mapping[str, Any]) -> Dict[str, Any]:
    source = hit.get("_source")
    return source if isinstance(source, dict) else {}


def hit_columns(hits: Sequence[Mapping[str, Any]]) -> List[str]:
    """`_id` followed by every _source field in first-seen order across hits."""
    # dict keeps insertion order, so it doubles as an ordered set
    seen: Dict[str, None] = {ID_COLUMN: None}
    for hit in hits:
        for field in _source(hit):
            seen.setdefault(field, None)
    return list(seen)


def hits_to_table(hits: Sequence[Mapping[str, Any]]) -> List[Row]:
    """
    One row per hit, in hit order. Missing fields become "", objects and
    arrays become compact JSON text, scalars (and null) are kept as they are.
    """
    columns = hit_columns(hits)
    table: List[Row] = []

    for hit in hits:
        source = _source(hit)
        row: Row = {ID_COLUMN: hit.get(ID_COLUMN)}
        for column in columns[1:]:
            row[column] = _cell(source[column]) if column in source else ""
        table.append(row)

    return table
