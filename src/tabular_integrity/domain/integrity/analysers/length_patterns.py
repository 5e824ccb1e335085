# integrity/analysers/length_patterns.py

from collections.abc import Sequence
from functools import partial

from tabular_integrity.schemas import ColumnCategory, ColumnDescriptor
from tabular_integrity.storage import (
    AnalysisSession,
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


def detect_length_patterns(
    session: AnalysisSession,
    table_name: str,
    columns: Sequence[ColumnDescriptor],
    focus_columns: Sequence[str],
    settings: DetectionSettings,
) -> DetectorResult:
    """
    Report text columns containing empty or extremely long values.

    Args:
        session: Session holding the table.
        table_name: Table to scan.
        columns: Table schema.
        focus_columns: Caller's focus list, possibly empty.
        settings: Detection thresholds.

    Returns:
        DetectorResult: At most one finding per text column.
    """
    collector = FindingCollector("patterns")
    text_columns = columns_of_category(columns, ColumnCategory.TEXT, focus_columns)

    for column in text_columns[: settings.pattern_column_limit]:
        collector.run(
            column.name,
            partial(length_finding, session, table_name, column.name, settings),
        )

    return collector.result()


def length_finding(
    session: AnalysisSession,
    table_name: str,
    column: str,
    settings: DetectionSettings,
) -> Finding | None:
    """
    Build the length-pattern finding for a single text column.

    Only the most frequent length buckets are inspected, so rare extreme
    lengths in a column with many distinct lengths can go unreported.

    Args:
        session: Session holding the table.
        table_name: Table to scan.
        column: Text column to examine.
        settings: Detection thresholds.

    Returns:
        Finding | None: None when no inspected bucket is extreme.
    """
    name = quote_identifier(column)
    buckets = session.execute(
        f"""
        SELECT LENGTH({name}) AS str_length, COUNT(*) AS count
        FROM {quote_table_name(table_name)}
        WHERE {name} IS NOT NULL
        GROUP BY LENGTH({name})
        ORDER BY count DESC
        LIMIT {settings.length_bucket_limit}
        """,
    )

    extreme = [
        (as_count(bucket["str_length"]), as_count(bucket["count"]))
        for bucket in buckets
        if is_extreme_length(as_count(bucket["str_length"]), settings)
    ]
    if not extreme:
        return None

    affected = sum(count for _, count in extreme)

    return Finding(
        kind=AnomalyKind.LENGTH_PATTERN,
        severity=(
            Severity.MEDIUM if affected > settings.pattern_medium_count else Severity.LOW
        ),
        title=f"Unusual Length Patterns in {column}",
        impact="Potential data truncation or corruption",
        affected_records=affected,
        description="Found values with extreme lengths",
        examples="\n".join(
            f"Length {length}: {count} records" for length, count in extreme
        ),
        recommendation="Review data input validation and field constraints",
    )


def is_extreme_length(length: int, settings: DetectionSettings) -> bool:
    """
    Check whether a string length falls outside the expected range.

    Returns:
        bool: True for lengths above the maximum or below the minimum.
    """
    return length > settings.max_text_length or length < settings.min_text_length
