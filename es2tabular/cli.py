"""
CLI for converting stored Elasticsearch responses to CSV.

Usage:
    es2tabular response.json                      # CSV to stdout
    es2tabular response.json -o response.csv --aggregation by_day
    es2tabular raw_hits.json --delimiter ';' --no-headers
"""

import logging
import sys

import click

from es2tabular import __version__
from es2tabular.convert import convert_file
from es2tabular.errors import TabularError


@click.command()
@click.version_option(version=__version__, prog_name="es2tabular")
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", "output_path", type=click.Path(dir_okay=False), help="Write CSV here instead of stdout")
@click.option("--aggregation", "aggregation_name", help="Aggregation to flatten (default: the first one)")
@click.option("--filter-column", "filter_column_name", help="Column name for top-level filters buckets")
@click.option("--delimiter", default=",", show_default=True, help="Cell delimiter")
@click.option("--no-headers", is_flag=True, help="Omit the header line")
@click.option("--union-headers", is_flag=True, help="Build the header from every row's columns, not just the first row's")
@click.option("--verbose", "-v", is_flag=True, help="Log progress to stderr")
def main(input_path, output_path, aggregation_name, filter_column_name, delimiter, no_headers, union_headers, verbose):
    """
    Flatten an Elasticsearch search response (aggregations or hits) into CSV.

    INPUT_PATH: JSON file holding the raw search response
    """
    logging.basicConfig(level=logging.INFO if verbose else logging.WARNING, stream=sys.stderr)

    try:
        result = convert_file(
            input_path,
            output_path,
            aggregation_name=aggregation_name,
            filter_column_name=filter_column_name,
            delimiter=delimiter,
            include_headers=not no_headers,
            header_mode="union" if union_headers else "first_row",
        )
    except (TabularError, ValueError) as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)

    if output_path:
        click.echo(f"Generated {len(result.table)} rows -> {output_path}", err=True)
    else:
        click.echo(result.csv, nl=False)


if __name__ == "__main__":
    main()
