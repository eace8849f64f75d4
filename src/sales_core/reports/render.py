"""Renderers for formatted tables: console text and CSV export."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from sales_core.reports.format import TableData

logger = logging.getLogger(__name__)


def sanitize_for_console(text: str) -> str:
    """Remove non-ASCII characters and HTML tags from text for console output.

    Windows consoles using cp1252 raise UnicodeEncodeError on emojis and
    other non-ASCII characters.
    """
    text = re.sub(r"[^\x00-\x7F]+", "", text)
    text = re.sub(r"<[^>]+>", "", text)
    return text


def _cell_text(cell: object) -> str:
    if isinstance(cell, float):
        return f"{cell:,.2f}"
    return sanitize_for_console(str(cell))


def render_text(table: TableData) -> str:
    """Build a human-readable text table for console output.

    The title (if any) is underlined with ``=``, followed by the remaining
    metadata, the header row, a ``-`` separator and one line per row.
    Numbers are right-aligned, everything else left-aligned.

    Args:
        table: Formatted table.

    Returns:
        Text ready to print.
    """
    lines = []
    if table.title:
        lines.append(sanitize_for_console(table.title))
        lines.append("=" * max(len(table.title), 20))
    for key, value in table.metadata.items():
        if key != "title":
            lines.append(f"{key.capitalize()}: {sanitize_for_console(value)}")
    if lines:
        lines.append("")

    if not table.rows:
        lines.append("No rows.")
        return "\n".join(lines)

    texts = [[_cell_text(cell) for cell in row] for row in table.rows]
    widths = [
        max(len(header), *(len(row[i]) for row in texts))
        for i, header in enumerate(table.headers)
    ]
    numeric = [
        all(isinstance(row[i], (int, float)) and not isinstance(row[i], bool) for row in table.rows)
        for i in range(len(table.headers))
    ]

    def fmt(cells: list[str]) -> str:
        parts = [
            cell.rjust(width) if is_num else cell.ljust(width)
            for cell, width, is_num in zip(cells, widths, numeric)
        ]
        return "  ".join(parts).rstrip()

    lines.append(fmt(list(table.headers)))
    lines.append("  ".join("-" * w for w in widths))
    lines.extend(fmt(row) for row in texts)
    return "\n".join(lines)


def write_csv(table: TableData, path: Path) -> Path:
    """Write the table to a CSV file with the headers as the first row.

    Parent directories are created as needed.

    Returns:
        The path written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    table.to_frame().to_csv(path, index=False, encoding="utf-8")
    logger.info("Wrote %d row(s) to %s", len(table), path)
    return path
