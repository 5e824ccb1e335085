# integrity/analysers/business_logic.py

import logging
from collections.abc import Sequence
from functools import partial

from tabular_integrity.schemas import ColumnCategory, ColumnDescriptor
from tabular_integrity.storage import (
    AnalysisSession,
    QueryExecutionError,
    as_count,
    quote_identifier,
    quote_table_name,
)

from ..models import (
    AnomalyKind,
    DetectionSettings,
    DetectorResult,
    Finding,
    Severity,
)
from ._helpers import FindingCollector, columns_of_category

logger = logging.getLogger(__name__)


def detect_business_logic(
    session: AnalysisSession,
    table_name: str,
    columns: Sequence[ColumnDescriptor],
    settings: DetectionSettings,
) -> DetectorResult:
    """
    Apply domain-agnostic heuristics to amount-like and date columns.

    Amount-like columns are recognised by name and checked for excessive zero
    values. The first two temporal columns in schema order are checked for
    rows where the first is later than the second; further temporal columns
    are not compared.

    Args:
        session: Session holding the table.
        table_name: Table to scan.
        columns: Table schema.
        settings: Detection thresholds.

    Returns:
        DetectorResult: Zero-value and date-order findings.
    """
    collector = FindingCollector("business_logic")

    for column in amount_columns(columns, settings):
        collector.run(
            column.name,
            partial(zero_amount_finding, session, table_name, column.name, settings),
        )

    temporal = columns_of_category(columns, ColumnCategory.TEMPORAL)
    if len(temporal) >= 2:
        first, second = temporal[0].name, temporal[1].name
        collector.run(
            f"{first} > {second}",
            partial(date_order_finding, session, table_name, first, second, settings),
        )

    return collector.result()


def amount_columns(
    columns: Sequence[ColumnDescriptor],
    settings: DetectionSettings,
) -> tuple[ColumnDescriptor, ...]:
    """
    Select columns whose names suggest monetary amounts.

    Args:
        columns: Table schema.
        settings: Detection thresholds.

    Returns:
        tuple[ColumnDescriptor, ...]: Columns whose lower-cased name contains
            one of the amount keywords.
    """
    return tuple(
        column
        for column in columns
        if any(keyword in column.name.lower() for keyword in settings.amount_keywords)
    )


def zero_amount_finding(
    session: AnalysisSession,
    table_name: str,
    column: str,
    settings: DetectionSettings,
) -> Finding | None:
    """
    Build the excessive-zero finding for one amount column.

    Negative amounts are counted afterwards and logged at debug level only;
    they never produce a finding, and a failed negative count leaves the zero
    finding intact.

    Args:
        session: Session holding the table.
        table_name: Table to scan.
        column: Amount-like column.
        settings: Detection thresholds.

    Returns:
        Finding | None: None unless the zero count exceeds the threshold.
    """
    name = quote_identifier(column)
    table = quote_table_name(table_name)
    rows = session.execute(
        f"SELECT COUNT(*) FILTER (WHERE {name} = 0) AS zero_count FROM {table}",
    )
    zero_count = as_count(rows[0]["zero_count"]) if rows else 0

    logger.debug("%s.%s: %d zero values", table_name, column, zero_count)
    _log_negative_count(session, table_name, column)

    if zero_count <= settings.zero_amount_count:
        return None

    return Finding(
        kind=AnomalyKind.BUSINESS_LOGIC,
        severity=(
            Severity.HIGH
            if zero_count > settings.zero_amount_high_count
            else Severity.MEDIUM
        ),
        title=f"Excessive Zero Values in {column}",
        impact="Revenue loss, processing errors",
        affected_records=zero_count,
        description=(
            f"{zero_count} records with zero charges"
            " - potential pricing or billing errors"
        ),
        recommendation="Review billing logic and pricing rules",
    )


def _log_negative_count(
    session: AnalysisSession,
    table_name: str,
    column: str,
) -> None:
    """
    Log the number of negative values in an amount column at debug level.

    Columns that cannot be compared with a number, such as text amounts, are
    logged as skipped.

    Args:
        session: Session holding the table.
        table_name: Table to scan.
        column: Amount-like column.

    Returns:
        None
    """
    try:
        rows = session.execute(
            f"""
            SELECT COUNT(*) FILTER (WHERE {quote_identifier(column)} < 0)
                AS negative_count
            FROM {quote_table_name(table_name)}
            """,
        )
    except QueryExecutionError as error:
        logger.debug("%s.%s: negative count skipped: %s", table_name, column, error)
        return

    negative_count = as_count(rows[0]["negative_count"]) if rows else 0
    logger.debug("%s.%s: %d negative values", table_name, column, negative_count)


def date_order_finding(
    session: AnalysisSession,
    table_name: str,
    first: str,
    second: str,
    settings: DetectionSettings,
) -> Finding | None:
    """
    Build the finding for rows where one date column is later than another.

    Args:
        session: Session holding the table.
        table_name: Table to scan.
        first: Column expected to hold the earlier date.
        second: Column expected to hold the later date.
        settings: Detection thresholds.

    Returns:
        Finding | None: None when every row is in order.
    """
    start, end = quote_identifier(first), quote_identifier(second)
    rows = session.execute(
        f"""
        SELECT COUNT(*) AS invalid_order_count
        FROM {quote_table_name(table_name)}
        WHERE {start} IS NOT NULL AND {end} IS NOT NULL AND {start} > {end}
        """,
    )
    invalid = as_count(rows[0]["invalid_order_count"]) if rows else 0
    if invalid == 0:
        return None

    return Finding(
        kind=AnomalyKind.BUSINESS_LOGIC,
        severity=(
            Severity.HIGH if invalid > settings.date_order_high_count else Severity.MEDIUM
        ),
        title="Invalid Date Sequence",
        impact="Data integrity, timeline analysis errors",
        affected_records=invalid,
        description=f"{invalid} records where {first} > {second}",
        recommendation="Review data entry process and add validation constraints",
    )
