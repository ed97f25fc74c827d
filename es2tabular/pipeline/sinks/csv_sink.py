import logging
from pathlib import Path
from typing import Any, Dict, List, Literal, Sequence, Union

from es2tabular.pipeline.core import Sink

logger = logging.getLogger(__name__)

HeaderMode = Literal["first_row", "union"]


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def escape_csv(value: Any, delimiter: str = ",") -> str:
    """
    Renders one cell. Quotes it (doubling inner quotes) only when it holds the
    delimiter, a newline or a quote.
    """
    text = _text(value)
    if delimiter in text or "\n" in text or '"' in text:
        return '"' + text.replace('"', '""') + '"'
    return text


def table_headers(table: Sequence[Dict[str, Any]], header_mode: HeaderMode = "first_row") -> List[str]:
    """
    Column list used for the whole file.

    "first_row" takes the first row's keys only, so columns that appear only
    in later rows are left out. "union" collects every key in first-seen order.
    """
    if not table:
        return []
    if header_mode == "union":
        seen: Dict[str, None] = {}
        for row in table:
            for column in row:
                seen.setdefault(column, None)
        return list(seen)
    if header_mode != "first_row":
        raise ValueError(f"Unknown header_mode: {header_mode!r}")
    return list(table[0])


def table_to_csv(
        table: Sequence[Dict[str, Any]],
        delimiter: str = ",",
        include_headers: bool = True,
        header_mode: HeaderMode = "first_row",
) -> str:
    if not table:
        return ""

    delimiter = delimiter or ","
    headers = table_headers(table, header_mode)
    lines = []

    if include_headers:
        lines.append(delimiter.join(escape_csv(h, delimiter) for h in headers))

    for row in table:
        lines.append(delimiter.join(escape_csv(row.get(h), delimiter) for h in headers))

    return "".join(line + "\n" for line in lines)


class CsvSink(Sink):
    def __init__(
            self,
            path: Union[str, Path],
            delimiter: str = ",",
            include_headers: bool = True,
            header_mode: HeaderMode = "first_row",
    ):
        """
        Args:
            path: Destination CSV file.
            delimiter: Cell separator.
            include_headers: Emit the header line.
            header_mode: "first_row" or "union" (see table_headers).
        """
        self.path = Path(path)
        self.delimiter = delimiter
        self.include_headers = include_headers
        self.header_mode = header_mode
        self._buffer: List[Dict[str, Any]] = []

    def write(self, row: Dict[str, Any]) -> None:
        self._buffer.append(row)

    def write_all(self, table: Sequence[Dict[str, Any]]) -> None:
        self._buffer.extend(table)

    def flush(self) -> None:
        if not self._buffer:
            return

        try:
            csv = table_to_csv(
                self._buffer,
                delimiter=self.delimiter,
                include_headers=self.include_headers,
                header_mode=self.header_mode,
            )
            self.path.write_text(csv, encoding="utf-8")
            logger.info("[CsvSink] Wrote %d rows to %s", len(self._buffer), self.path)
        finally:
            self._buffer.clear()
