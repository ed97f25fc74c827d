import logging
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional, Union

from es2tabular.pipeline.sinks.csv_sink import CsvSink, HeaderMode, table_to_csv
from es2tabular.pipeline.sources.json_file import JsonFileSource
from es2tabular.pipeline.transforms.flattener import Flattenizer

logger = logging.getLogger(__name__)


class ConversionResult(NamedTuple):
    table: List[Dict[str, Any]]
    csv: str


def convert_file(
        input_path: Union[str, Path],
        output_path: Optional[Union[str, Path]] = None,
        aggregation_name: Optional[str] = None,
        filter_column_name: Optional[str] = None,
        delimiter: str = ",",
        include_headers: bool = True,
        header_mode: HeaderMode = "first_row",
) -> ConversionResult:
    """
    Reads an Elasticsearch response from a JSON file, flattens it and encodes
    it as CSV. The CSV is written to `output_path` when one is given.
    """
    es_output = JsonFileSource(input_path).read()
    table = Flattenizer(aggregation_name, filter_column_name).process(es_output)
    csv = table_to_csv(table, delimiter=delimiter, include_headers=include_headers, header_mode=header_mode)

    if output_path:
        sink = CsvSink(output_path, delimiter=delimiter, include_headers=include_headers, header_mode=header_mode)
        sink.write_all(table)
        sink.flush()
        logger.info("Converted %s to %s", input_path, output_path)
        logger.info("Generated %d rows", len(table))

    return ConversionResult(table, csv)
