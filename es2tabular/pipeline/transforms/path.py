from dataclasses import dataclass
from typing import Any, Tuple


@dataclass(frozen=True)
class PathEntry:
    """
    One level of ancestry collected while descending into nested aggregations.
    """
    column: str   # e.g., "status" (aggregation name) or "filter"
    value: Any    # bucket key, filter bucket name or "_other_"


Path = Tuple[PathEntry, ...]

EMPTY_PATH: Path = ()


def extend_path(path: Path, column: str, value: Any) -> Path:
    return path + (PathEntry(column, value),)
