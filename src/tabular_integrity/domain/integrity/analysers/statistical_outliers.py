# integrity/analysers/statistical_outliers.py

from collections.abc import Sequence
from dataclasses import dataclass
from functools import partial

from tabular_integrity.schemas import ColumnCategory, ColumnDescriptor
from tabular_integrity.storage import (
    AnalysisSession,
    Row,
    as_count,
    as_float,
    quote_identifier,
    quote_table_name,
)

from ..formatters import format_number, format_value, percentage_of
from ..models import (
    AnomalyKind,
    DetectionSettings,
    DetectorResult,
    Finding,
    Severity,
)
from ._helpers import FindingCollector, columns_of_category


@dataclass(frozen=True)
class ColumnStatistics:
    """
    Distribution summary of one numeric column's non-null values.
    """

    mean: float
    stddev: float
    minimum: object
    maximum: object
    count: int


@dataclass(frozen=True)
class OutlierFences:
    """
    Inclusive bounds outside which a value counts as an outlier.
    """

    method: str
    lower: float
    upper: float


def detect_statistical_outliers(
    session: AnalysisSession,
    table_name: str,
    columns: Sequence[ColumnDescriptor],
    focus_columns: Sequence[str],
    settings: DetectionSettings,
) -> DetectorResult:
    """
    Report numeric values far from the bulk of their column's distribution.

    Small samples use interquartile-range fences, larger ones use fences at a
    fixed number of standard deviations from the mean. Constant and all-null
    columns are skipped.

    Args:
        session: Session holding the table.
        table_name: Table to scan.
        columns: Table schema.
        focus_columns: Caller's focus list, possibly empty.
        settings: Detection thresholds.

    Returns:
        DetectorResult: At most one finding per numeric column.
    """
    collector = FindingCollector("outliers")
    numeric = columns_of_category(columns, ColumnCategory.NUMERIC, focus_columns)

    for column in numeric[: settings.outlier_column_limit]:
        collector.run(
            column.name,
            partial(outlier_finding, session, table_name, column.name, settings),
        )

    return collector.result()


def outlier_finding(
    session: AnalysisSession,
    table_name: str,
    column: str,
    settings: DetectionSettings,
) -> Finding | None:
    """
    Build the outlier finding for a single numeric column.

    Args:
        session: Session holding the table.
        table_name: Table to scan.
        column: Numeric column to examine.
        settings: Detection thresholds.

    Returns:
        Finding | None: None for constant or empty columns, or when no value
            falls outside the fences.
    """
    stats = column_statistics(session, table_name, column)
    if stats is None:
        return None

    fences = choose_fences(session, table_name, column, stats, settings)

    outlier_count = _count_outliers(session, table_name, column, fences)
    if outlier_count == 0:
        return None

    percentage = percentage_of(outlier_count, stats.count)
    examples = _outlier_examples(session, table_name, column, fences, stats, settings)

    return Finding(
        kind=AnomalyKind.STATISTICAL_OUTLIER,
        severity=outlier_severity(percentage, settings),
        title=f"Statistical Outliers in {column}",
        impact="Potential data quality issues, skewed analysis",
        affected_records=outlier_count,
        percentage=percentage,
        description=f"{outlier_count} values identified using {fences.method}",
        examples=(
            f"Range: {format_value(stats.minimum)} to {format_value(stats.maximum)}\n"
            f"Outlier examples: {', '.join(examples)}"
        ),
        recommendation="Investigate extreme values, consider data validation rules",
    )


def column_statistics(
    session: AnalysisSession,
    table_name: str,
    column: str,
) -> ColumnStatistics | None:
    """
    Summarise a column's non-null values.

    Args:
        session: Session holding the table.
        table_name: Table to scan.
        column: Numeric column to summarise.

    Returns:
        ColumnStatistics | None: None when the sample standard deviation is
            missing or zero.
    """
    name = quote_identifier(column)
    rows = session.execute(
        f"""
        SELECT
            AVG({name}) AS mean,
            MIN({name}) AS min_val,
            MAX({name}) AS max_val,
            STDDEV_SAMP({name}) AS stddev,
            COUNT({name}) AS total_count
        FROM {quote_table_name(table_name)}
        WHERE {name} IS NOT NULL
        """,
    )
    if not rows:
        return None

    row: Row = rows[0]
    mean = as_float(row["mean"])
    stddev = as_float(row["stddev"])

    if mean is None or not stddev:
        return None

    return ColumnStatistics(
        mean=mean,
        stddev=stddev,
        minimum=row["min_val"],
        maximum=row["max_val"],
        count=as_count(row["total_count"]),
    )


def choose_fences(
    session: AnalysisSession,
    table_name: str,
    column: str,
    stats: ColumnStatistics,
    settings: DetectionSettings,
) -> OutlierFences:
    """
    Pick the outlier method suited to the sample size and compute its fences.

    Args:
        session: Session holding the table.
        table_name: Table to scan.
        column: Numeric column to examine.
        stats: The column's distribution summary.
        settings: Detection thresholds.

    Returns:
        OutlierFences: IQR fences below the sample cutoff, sigma fences otherwise.
    """
    if stats.count < settings.iqr_sample_cutoff:
        return _iqr_fences(session, table_name, column, settings)
    return sigma_fences(stats, settings)


def sigma_fences(stats: ColumnStatistics, settings: DetectionSettings) -> OutlierFences:
    """
    Fences at a fixed number of standard deviations either side of the mean.

    Args:
        stats: The column's distribution summary.
        settings: Detection thresholds.

    Returns:
        OutlierFences: Bounds labelled with the mean and standard deviation.
    """
    spread = settings.sigma_multiplier * stats.stddev
    multiplier = format_number(settings.sigma_multiplier)
    return OutlierFences(
        method=(
            f"{multiplier}σ (mean: {format_number(stats.mean)},"
            f" σ: {format_number(stats.stddev)})"
        ),
        lower=stats.mean - spread,
        upper=stats.mean + spread,
    )


def iqr_fences(q1: float, q3: float, settings: DetectionSettings) -> OutlierFences:
    """
    Tukey fences around the interquartile range.

    Args:
        q1: 25th percentile.
        q3: 75th percentile.
        settings: Detection thresholds.

    Returns:
        OutlierFences: Bounds labelled with the quartiles.
    """
    spread = settings.iqr_multiplier * (q3 - q1)
    return OutlierFences(
        method=f"IQR (Q1={format_number(q1)}, Q3={format_number(q3)})",
        lower=q1 - spread,
        upper=q3 + spread,
    )


def outlier_severity(percentage: float, settings: DetectionSettings) -> Severity:
    """
    Grade the share of outlying values.

    Args:
        percentage: Outliers as a share of non-null values, 0-100.
        settings: Detection thresholds.

    Returns:
        Severity: HIGH, MEDIUM or LOW; outliers are never critical.
    """
    if percentage > settings.outlier_high_percentage:
        return Severity.HIGH
    if percentage > settings.outlier_medium_percentage:
        return Severity.MEDIUM
    return Severity.LOW


def _iqr_fences(
    session: AnalysisSession,
    table_name: str,
    column: str,
    settings: DetectionSettings,
) -> OutlierFences:
    """
    Query the quartiles with continuous interpolation and build IQR fences.

    Returns:
        OutlierFences: Bounds from iqr_fences.
    """
    name = quote_identifier(column)
    rows = session.execute(
        f"""
        SELECT
            QUANTILE_CONT({name}, 0.25) AS q1,
            QUANTILE_CONT({name}, 0.75) AS q3
        FROM {quote_table_name(table_name)}
        WHERE {name} IS NOT NULL
        """,
    )
    row = rows[0] if rows else {}
    q1 = as_float(row.get("q1")) or 0.0
    q3 = as_float(row.get("q3")) or 0.0
    return iqr_fences(q1, q3, settings)


def _count_outliers(
    session: AnalysisSession,
    table_name: str,
    column: str,
    fences: OutlierFences,
) -> int:
    """
    Count non-null values outside the fences.

    Returns:
        int: Number of outlying rows.
    """
    name = quote_identifier(column)
    rows = session.execute(
        f"""
        SELECT COUNT(*) AS outlier_count
        FROM {quote_table_name(table_name)}
        WHERE {name} IS NOT NULL AND ({name} < ? OR {name} > ?)
        """,
        [fences.lower, fences.upper],
    )
    return as_count(rows[0]["outlier_count"]) if rows else 0


def _outlier_examples(
    session: AnalysisSession,
    table_name: str,
    column: str,
    fences: OutlierFences,
    stats: ColumnStatistics,
    settings: DetectionSettings,
) -> list[str]:
    """
    Fetch the outliers furthest from the mean.

    Returns:
        list[str]: Formatted values, furthest first.
    """
    name = quote_identifier(column)
    rows = session.execute(
        f"""
        SELECT {name} AS value
        FROM {quote_table_name(table_name)}
        WHERE {name} IS NOT NULL AND ({name} < ? OR {name} > ?)
        ORDER BY ABS({name} - ?) DESC
        LIMIT {settings.outlier_example_limit}
        """,
        [fences.lower, fences.upper, stats.mean],
    )
    return [format_value(row["value"]) for row in rows]
