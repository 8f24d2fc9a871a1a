from __future__ import annotations

from typing import Sequence

MIN_COLUMN_WIDTH = 3


def _escape_cell(value: str) -> str:
    return str(value).replace("|", "\\|").replace("\n", " ")


def _format_row(cells: Sequence[str], widths: Sequence[int]) -> str:
    padded = [cell.ljust(width) for cell, width in zip(cells, widths)]
    return "| " + " | ".join(padded) + " |"


def render_markdown_table(header: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    """Pipe-delimited markdown table with every column padded to its widest cell.

    Rows are emitted in the order given. A row whose width differs from the
    header is a programming error and raises ``ValueError``.
    """
    if not header:
        raise ValueError("Table header must have at least one column.")
    column_count = len(header)
    for index, row in enumerate(rows):
        if len(row) != column_count:
            raise ValueError(
                f"Row {index} has {len(row)} cells, expected {column_count} to match the header."
            )

    header_cells = [_escape_cell(cell) for cell in header]
    body_cells = [[_escape_cell(cell) for cell in row] for row in rows]
    widths = [
        max([MIN_COLUMN_WIDTH, len(header_cells[column])] + [len(row[column]) for row in body_cells])
        for column in range(column_count)
    ]

    lines = [_format_row(header_cells, widths)]
    lines.append("| " + " | ".join("-" * width for width in widths) + " |")
    lines.extend(_format_row(row, widths) for row in body_cells)
    return "\n".join(lines)
