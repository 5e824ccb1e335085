# inspection/schema.py

import logging
from collections.abc import Sequence

from tabular_integrity.schemas import ColumnCategory, ColumnDescriptor
from tabular_integrity.storage import (
    AnalysisSession,
    Row,
    quote_identifier,
    quote_table_name,
)

logger = logging.getLogger(__name__)

SAMPLE_ROWS = 3
CELL_WIDTH = 15

_CATEGORY_ICONS = {
    ColumnCategory.NUMERIC: "🔢",
    ColumnCategory.TEXT: "📝",
    ColumnCategory.TEMPORAL: "📅",
    ColumnCategory.BOOLEAN: "✅",
}


def inspect_table(session: AnalysisSession, table_name: str) -> str:
    """
    Describe a table's schema, size and first few rows as text.

    Args:
        session: Session holding the table.
        table_name: Table to inspect.

    Returns:
        str: Multi-line inspection summary.
    """
    columns = session.describe(table_name)
    row_count = session.count_rows(table_name)
    sample = session.execute(
        f"SELECT * FROM {quote_table_name(table_name)} LIMIT {SAMPLE_ROWS}"
    )

    lines = [
        f'📊 TABLE INSPECTION: "{table_name}"',
        "━" * 51,
        f"📈 Total Rows: {row_count:,}",
        "",
        "🏗️ SCHEMA:",
    ]
    lines.extend(
        f"  {index}. {_column_icon(column)} {column.name} ({column.declared_type})"
        f"{' - nullable' if column.nullable else ''}"
        for index, column in enumerate(columns, start=1)
    )

    if sample:
        lines.append("")
        lines.append(f"👀 SAMPLE DATA (first {len(sample)} rows):")
        lines.extend(format_sample_rows(sample, [column.name for column in columns]))

    lines.append("")
    lines.append("💡 Ready for analysis! Query the table with SQL to explore the data.")
    return "\n".join(lines)


def format_sample_rows(rows: Sequence[Row], column_names: Sequence[str]) -> list[str]:
    """
    Lay out rows as a fixed-width text grid.

    Cells are padded to a fixed width and values longer than the width are
    truncated with an ellipsis. NULL is shown for missing values.

    Args:
        rows: Rows to render.
        column_names: Column order for the grid.

    Returns:
        list[str]: Header, separator and one line per row.
    """
    if not rows:
        return ["  No data available"]

    header = "  " + " | ".join(name.ljust(CELL_WIDTH) for name in column_names)
    rule = "  " + "─┼─".join("─" * CELL_WIDTH for _ in column_names)
    body = [
        "  " + " | ".join(_format_cell(row.get(name)) for name in column_names)
        for row in rows
    ]
    return [header, rule, *body]


def summarise_columns(
    session: AnalysisSession,
    table_name: str,
    columns: Sequence[str] = (),
) -> dict[str, object]:
    """
    Compute quick per-column statistics.

    With no columns, only the table's row count is returned. Otherwise each
    column contributes its non-null count, distinct count, minimum, maximum and
    numeric average (None when the column is not numeric).

    Args:
        session: Session holding the table.
        table_name: Table to summarise.
        columns: Columns to include.

    Returns:
        dict[str, object]: Flat mapping of statistic name to value.
    """
    if not columns:
        return {"total_rows": session.count_rows(table_name)}

    selections = ", ".join(_column_statistics(column) for column in columns)
    rows = session.execute(f"SELECT {selections} FROM {quote_table_name(table_name)}")
    return dict(rows[0]) if rows else {}


def _column_statistics(column: str) -> str:
    """
    Build the select list computing statistics for one column.

    Returns:
        str: Comma-separated aggregate expressions with stable aliases.
    """
    name = quote_identifier(column)
    return ", ".join(
        (
            f"COUNT({name}) AS {quote_identifier(column + '_count')}",
            f"COUNT(DISTINCT {name}) AS {quote_identifier(column + '_unique')}",
            f"MIN({name}) AS {quote_identifier(column + '_min')}",
            f"MAX({name}) AS {quote_identifier(column + '_max')}",
            f"AVG(TRY_CAST({name} AS DOUBLE)) AS {quote_identifier(column + '_avg')}",
        ),
    )


def _column_icon(column: ColumnDescriptor) -> str:
    """
    Pick an icon for a column based on its category.

    Returns:
        str: A single emoji.
    """
    return _CATEGORY_ICONS.get(column.category, "📊")


def _format_cell(value: object) -> str:
    """
    Render one grid cell at the fixed width.

    Returns:
        str: The padded or truncated cell text.
    """
    text = "NULL" if value is None else str(value)
    if len(text) > CELL_WIDTH:
        return text[: CELL_WIDTH - 3] + "..."
    return text.ljust(CELL_WIDTH)
