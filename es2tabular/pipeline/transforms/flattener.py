from typing import Any, Dict, List, Mapping, Optional

from es2tabular.errors import AggregationNotFound, NoDataError
from es2tabular.pipeline.core import Transform
from es2tabular.pipeline.transforms.hits import hits_to_table
from es2tabular.pipeline.transforms.row_assembler import Row
from es2tabular.pipeline.transforms.walker import WalkContext, process_aggregation


def _hits(es_output: Mapping[str, Any]) -> List[Dict[str, Any]]:
    hits = es_output.get("hits")
    if not isinstance(hits, dict):
        return []
    inner = hits.get("hits")
    return inner if isinstance(inner, list) else []


def es_to_table(
        es_output: Mapping[str, Any],
        aggregation_name: Optional[str] = None,
        filter_column_name: Optional[str] = None,
) -> List[Row]:
    """
    Converts an Elasticsearch search response into a list of flat rows.

    Aggregations win over hits. The aggregation flattened is `aggregation_name`
    or, when not given, the first one in the response.

    Raises:
        AggregationNotFound: aggregation_name is not in the response
        NoDataError: the response has neither aggregations nor hits
    """
    aggregations = es_output.get("aggregations")

    if isinstance(aggregations, dict) and aggregations:
        name = aggregation_name or next(iter(aggregations))
        node = aggregations.get(name)
        if node is None:
            raise AggregationNotFound(name)

        context = WalkContext(
            top_level_aggregation_name=name,
            filter_column_name=filter_column_name or name,
        )
        return process_aggregation(node, context) if isinstance(node, dict) else []

    hits = _hits(es_output)
    if hits:
        return hits_to_table(hits)

    raise NoDataError()


class Flattenizer(Transform):
    def __init__(self, aggregation_name: Optional[str] = None, filter_column_name: Optional[str] = None):
        self.aggregation_name = aggregation_name
        self.filter_column_name = filter_column_name

    def process(self, data: Mapping[str, Any]) -> List[Row]:
        return es_to_table(
            data,
            aggregation_name=self.aggregation_name,
            filter_column_name=self.filter_column_name,
        )
