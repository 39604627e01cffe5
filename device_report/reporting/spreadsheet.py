"""
Delimited text rendering of report rows
"""

from typing import Any, List, Mapping, Sequence


def _format_value(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def spreadsheet_columns(rows: Sequence[Mapping[str, Any]]) -> List[str]:
    """Union of the keys of all rows, in order of first appearance"""
    columns = {}
    for row in rows:
        for key in row:
            columns.setdefault(key, None)
    return list(columns)


def create_spreadsheet(rows: Sequence[Mapping[str, Any]], delimiter: str = "\t") -> str:
    """
    Render rows as a header line followed by one line per row.

    Rows may carry different keys; a column missing from a row renders as
    an empty field. There is no trailing newline.
    """
    columns = spreadsheet_columns(rows)
    lines = [delimiter.join(columns)]
    for row in rows:
        lines.append(delimiter.join(_format_value(row.get(column, "")) for column in columns))
    return "\n".join(lines)
