# integrity/analysers/null_values.py

from collections.abc import Sequence
from functools import partial

from tabular_integrity.schemas import ColumnDescriptor
from tabular_integrity.storage import (
    AnalysisSession,
    as_count,
    quote_identifier,
    quote_table_name,
)

from ..formatters import format_number, percentage_of
from ..models import (
    AnomalyKind,
    DetectionSettings,
    DetectorResult,
    Finding,
    Severity,
)
from ._helpers import FindingCollector, candidate_names


def detect_null_values(
    session: AnalysisSession,
    table_name: str,
    columns: Sequence[ColumnDescriptor],
    focus_columns: Sequence[str],
    total_rows: int,
    settings: DetectionSettings,
) -> DetectorResult:
    """
    Report columns with a notable share or number of nulls.

    Every considered column is checked; the per-column query is a single
    aggregate so no column cap applies.

    Args:
        session: Session holding the table.
        table_name: Table to scan.
        columns: Table schema.
        focus_columns: Caller's focus list, possibly empty.
        total_rows: Row count of the table, shared across detectors.
        settings: Detection thresholds.

    Returns:
        DetectorResult: At most one finding per column.
    """
    collector = FindingCollector("nulls")

    for column in candidate_names(columns, focus_columns):
        collector.run(
            column,
            partial(null_finding, session, table_name, column, total_rows, settings),
        )

    return collector.result()


def null_finding(
    session: AnalysisSession,
    table_name: str,
    column: str,
    total_rows: int,
    settings: DetectionSettings,
) -> Finding | None:
    """
    Build the null-rate finding for a single column.

    Args:
        session: Session holding the table.
        table_name: Table to scan.
        column: Column to count nulls in.
        total_rows: Row count of the table.
        settings: Detection thresholds.

    Returns:
        Finding | None: None when the column has no nulls, or when its null
            rate is low and the raw count does not exceed the count floor.
    """
    rows = session.execute(
        f"""
        SELECT COUNT(*) - COUNT({quote_identifier(column)}) AS null_count
        FROM {quote_table_name(table_name)}
        """,
    )
    null_count = as_count(rows[0]["null_count"]) if rows else 0
    if null_count == 0:
        return None

    percentage = percentage_of(null_count, total_rows)
    severity = null_severity(percentage, settings)

    if severity is Severity.LOW and null_count <= settings.null_count_floor:
        return None

    return Finding(
        kind=AnomalyKind.NULL_VALUES,
        severity=severity,
        title=f"High Null Rate in {column}",
        impact="Data completeness, analysis accuracy",
        affected_records=null_count,
        percentage=percentage,
        description=f"{null_count} null values ({format_number(percentage)}% of total)",
        recommendation=(
            "Investigate data source, implement validation"
            if percentage > settings.null_high_percentage
            else "Consider default values or imputation"
        ),
    )


def null_severity(percentage: float, settings: DetectionSettings) -> Severity:
    """
    Grade a column's null rate.

    Args:
        percentage: Share of rows that are null, 0-100.
        settings: Detection thresholds.

    Returns:
        Severity: The matching level.
    """
    if percentage > settings.null_critical_percentage:
        return Severity.CRITICAL
    if percentage > settings.null_high_percentage:
        return Severity.HIGH
    if percentage > settings.null_medium_percentage:
        return Severity.MEDIUM
    return Severity.LOW
