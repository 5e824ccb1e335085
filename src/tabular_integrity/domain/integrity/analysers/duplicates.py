# integrity/analysers/duplicates.py

from collections.abc import Sequence
from functools import partial

from tabular_integrity.schemas import ColumnDescriptor
from tabular_integrity.storage import (
    AnalysisSession,
    as_count,
    quote_identifier,
    quote_table_name,
)

from ..formatters import format_value, limit_items
from ..models import (
    AnomalyKind,
    DetectionSettings,
    DetectorResult,
    Finding,
    Severity,
)
from ._helpers import FindingCollector, candidate_names


def detect_duplicates(
    session: AnalysisSession,
    table_name: str,
    columns: Sequence[ColumnDescriptor],
    focus_columns: Sequence[str],
    settings: DetectionSettings,
) -> DetectorResult:
    """
    Report repeated non-null values per column.

    Scans the focus columns, or the leading schema columns when no focus is
    given, up to the configured column limit.

    Args:
        session: Session holding the table.
        table_name: Table to scan.
        columns: Table schema.
        focus_columns: Caller's focus list, possibly empty.
        settings: Detection thresholds.

    Returns:
        DetectorResult: At most one finding per column.
    """
    collector = FindingCollector("duplicates")

    for column in candidate_names(
        columns, focus_columns, settings.duplicate_column_limit
    ):
        collector.run(
            column,
            partial(duplicate_finding, session, table_name, column, settings),
        )

    return collector.result()


def duplicate_finding(
    session: AnalysisSession,
    table_name: str,
    column: str,
    settings: DetectionSettings,
) -> Finding | None:
    """
    Build the duplicate finding for a single column.

    Args:
        session: Session holding the table.
        table_name: Table to scan.
        column: Column to group by.
        settings: Detection thresholds.

    Returns:
        Finding | None: Finding aggregating the top duplicate groups, or None
            when every value is unique.
    """
    name = quote_identifier(column)
    groups = session.execute(
        f"""
        SELECT {name} AS value, COUNT(*) AS duplicate_count
        FROM {quote_table_name(table_name)}
        WHERE {name} IS NOT NULL
        GROUP BY {name}
        HAVING COUNT(*) > 1
        ORDER BY duplicate_count DESC
        LIMIT {settings.duplicate_group_limit}
        """,
    )
    if not groups:
        return None

    counts = [as_count(group["duplicate_count"]) for group in groups]
    largest = max(counts)

    examples = "\n".join(
        limit_items(
            (
                f"{format_value(group['value'])}: {count} occurrences"
                for group, count in zip(groups, counts, strict=True)
            ),
            settings.duplicate_example_limit,
        ),
    )

    return Finding(
        kind=AnomalyKind.DUPLICATE,
        severity=duplicate_severity(largest, settings),
        title=f"Duplicate Values in {column}",
        impact="Data integrity, potential processing errors",
        affected_records=sum(counts),
        description=(
            f"Found {len(groups)} unique values with duplicates,"
            f" max {largest} occurrences"
        ),
        examples=examples,
        recommendation=(
            "URGENT: Investigate data corruption, identifier system failure"
            if largest > settings.duplicate_high_count
            else "Review business logic for duplicates"
        ),
    )


def duplicate_severity(largest: int, settings: DetectionSettings) -> Severity:
    """
    Grade duplication by the largest repeat count observed.

    Args:
        largest: Highest occurrence count across duplicate groups.
        settings: Detection thresholds.

    Returns:
        Severity: LOW for any duplication up to the medium threshold.
    """
    if largest > settings.duplicate_critical_count:
        return Severity.CRITICAL
    if largest > settings.duplicate_high_count:
        return Severity.HIGH
    if largest > settings.duplicate_medium_count:
        return Severity.MEDIUM
    return Severity.LOW
