import csv
import io

import pytest

from es2tabular.pipeline.sinks.csv_sink import CsvSink, escape_csv, table_headers, table_to_csv


@pytest.mark.parametrize("value, expected", [
    ("plain", "plain"),
    ("x,y", '"x,y"'),
    ('say "hi"', '"say ""hi"""'),
    ("two\nlines", '"two\nlines"'),
    (5, "5"),
    (12.5, "12.5"),
    (230.0, "230"),
    (True, "true"),
    (False, "false"),
    (None, ""),
    ("", ""),
])
def test_escape_csv(value, expected):
    assert escape_csv(value) == expected


def test_escape_respects_custom_delimiter():
    assert escape_csv("a;b", delimiter=";") == '"a;b"'
    assert escape_csv("a,b", delimiter=";") == "a,b"


def test_quoting_and_round_trip():
    table = [{"a": "x,y", "b": 'say "hi"', "c": 5}]

    text = table_to_csv(table)
    line = text.splitlines()[1]

    assert '"x,y"' in line
    assert '"say ""hi"""' in line
    assert line.endswith(",5")

    header, parsed = list(csv.reader(io.StringIO(text)))
    assert header == ["a", "b", "c"]
    assert parsed[:2] == ["x,y", 'say "hi"']
    assert int(parsed[2]) == 5


def test_every_record_ends_with_newline():
    text = table_to_csv([{"a": 1}, {"a": 2}])

    assert text == "a\n1\n2\n"


def test_empty_table():
    assert table_to_csv([]) == ""
    assert table_headers([]) == []


def test_without_headers_and_custom_delimiter():
    text = table_to_csv([{"a": 1, "b": "x"}], delimiter="\t", include_headers=False)

    assert text == "1\tx\n"


def test_missing_cells_render_empty():
    text = table_to_csv([{"a": 1, "b": 2}, {"a": 3}, {"a": None, "b": 4}])

    assert text == "a,b\n1,2\n3,\n,4\n"


def test_header_comes_from_first_row_only():
    # Columns that only later rows carry are dropped from the output
    table = [
        {"region": "eu", "by_host": "h1", "doc_count": 3},
        {"region": "eu", "by_status": "ok", "doc_count": 2},
    ]

    text = table_to_csv(table)

    assert text == "region,by_host,doc_count\neu,h1,3\neu,,2\n"
    assert "ok" not in text


def test_union_header_mode_keeps_every_column():
    table = [
        {"region": "eu", "by_host": "h1", "doc_count": 3},
        {"region": "eu", "by_status": "ok", "doc_count": 2},
    ]

    assert table_headers(table, "union") == ["region", "by_host", "doc_count", "by_status"]
    assert table_to_csv(table, header_mode="union") == (
        "region,by_host,doc_count,by_status\n"
        "eu,h1,3,\n"
        "eu,,2,ok\n"
    )


def test_unknown_header_mode():
    with pytest.raises(ValueError):
        table_headers([{"a": 1}], "columns")


def test_csv_sink_writes_on_flush(tmp_path):
    target = tmp_path / "out.csv"
    sink = CsvSink(target, delimiter=";")

    sink.write({"a": "1;2", "b": 3})
    assert not target.exists()

    sink.flush()

    assert target.read_text(encoding="utf-8") == 'a;b\n"1;2";3\n'


def test_csv_sink_empty_flush_writes_nothing(tmp_path):
    target = tmp_path / "out.csv"

    CsvSink(target).flush()

    assert not target.exists()
