# integrity/analyse.py

import logging
from collections.abc import Iterable, Sequence
from contextlib import nullcontext

from tabular_integrity.schemas import ColumnDescriptor
from tabular_integrity.schemas.integrity import AnomalyReport
from tabular_integrity.storage import AnalysisSession

from .analysers import (
    detect_business_logic,
    detect_duplicates,
    detect_length_patterns,
    detect_null_values,
    detect_statistical_outliers,
)
from .models import (
    DEFAULT_ANOMALY_TYPES,
    AnomalyType,
    DetectionRequest,
    DetectionSettings,
    DetectorResult,
    Finding,
    Severity,
    default_settings,
)
from .report import build_anomaly_report, render_anomaly_report

logger = logging.getLogger(__name__)


def detect_anomalies(
    session: AnalysisSession,
    table_name: str,
    severity_threshold: str | Severity | None = "medium",
    focus_columns: Sequence[str] = (),
    anomaly_types: Iterable[str | AnomalyType] = DEFAULT_ANOMALY_TYPES,
    settings: DetectionSettings | None = None,
) -> AnomalyReport:
    """
    Run the selected anomaly detectors against a table.

    Fetches the schema and row count once, dispatches the detectors in a fixed
    order, drops findings below the severity threshold and ranks the rest
    most severe first. A failing detector step is recorded as a diagnostic and
    never aborts the run; failures of the initial schema or row count fetch
    propagate.

    Args:
        session: Session holding the table.
        table_name: Table to analyse.
        severity_threshold: Minimum severity to report; unrecognised values
            fall back to medium.
        focus_columns: Columns to restrict detection to; empty means all.
        anomaly_types: Detector toggles; empty runs nothing.
        settings: Optional detection thresholds (defaults to standard settings).

    Returns:
        AnomalyReport: The ranked findings and run metadata.
    """
    request = DetectionRequest(
        table_name=table_name,
        severity_threshold=Severity.parse(severity_threshold),
        focus_columns=tuple(focus_columns),
        anomaly_types=parse_anomaly_types(anomaly_types),
    )
    active_settings = settings or default_settings()

    budget = (
        session.time_budget(active_settings.query_timeout_seconds)
        if active_settings.query_timeout_seconds is not None
        else nullcontext()
    )

    with budget:
        columns = session.describe(request.table_name)
        total_rows = session.count_rows(request.table_name)
        results = _run_detectors(session, request, columns, total_rows, active_settings)

    findings = rank_findings(
        (finding for _, result in results for finding in result.findings),
        request.severity_threshold,
    )
    diagnostics = [
        diagnostic for _, result in results for diagnostic in result.diagnostics
    ]

    report = build_anomaly_report(
        request.table_name,
        total_rows,
        request.severity_threshold,
        tuple(name for name, _ in results),
        findings,
        diagnostics,
    )

    logger.info(
        "Anomaly detection complete for %s: %d findings from %d detectors"
        " (%d checks skipped)",
        request.table_name,
        report.total_findings,
        len(results),
        len(diagnostics),
    )

    return report


def run_anomaly_detection(
    session: AnalysisSession,
    table_name: str,
    severity_threshold: str | Severity | None = "medium",
    focus_columns: Sequence[str] = (),
    anomaly_types: Iterable[str | AnomalyType] = DEFAULT_ANOMALY_TYPES,
    settings: DetectionSettings | None = None,
) -> str:
    """
    Run anomaly detection and return the rendered text report.

    Args:
        session: Session holding the table.
        table_name: Table to analyse.
        severity_threshold: Minimum severity to report.
        focus_columns: Columns to restrict detection to; empty means all.
        anomaly_types: Detector toggles; empty runs nothing.
        settings: Optional detection thresholds.

    Returns:
        str: The rendered report.
    """
    report = detect_anomalies(
        session,
        table_name,
        severity_threshold,
        focus_columns,
        anomaly_types,
        settings,
    )
    return render_anomaly_report(report)


def rank_findings(
    findings: Iterable[Finding],
    threshold: Severity,
) -> tuple[Finding, ...]:
    """
    Drop findings below the threshold and order the rest by severity.

    The sort is stable, so equally severe findings keep their dispatch order.

    Args:
        findings: Findings in detector dispatch order.
        threshold: Minimum severity to keep.

    Returns:
        tuple[Finding, ...]: Kept findings, most severe first.
    """
    kept = [finding for finding in findings if finding.severity >= threshold]
    return tuple(sorted(kept, key=lambda finding: finding.severity, reverse=True))


def parse_anomaly_types(
    values: Iterable[str | AnomalyType],
) -> frozenset[AnomalyType]:
    """
    Resolve detector toggles, ignoring names that match no detector.

    Args:
        values: Toggle names (any case) or AnomalyType members.

    Returns:
        frozenset[AnomalyType]: Recognised toggles.
    """
    resolved: set[AnomalyType] = set()
    for value in values:
        if isinstance(value, AnomalyType):
            resolved.add(value)
            continue
        try:
            resolved.add(AnomalyType(str(value).strip().lower()))
        except ValueError:
            logger.warning("Ignoring unknown anomaly type %r", value)
    return frozenset(resolved)


def _run_detectors(
    session: AnalysisSession,
    request: DetectionRequest,
    columns: list[ColumnDescriptor],
    total_rows: int,
    settings: DetectionSettings,
) -> tuple[tuple[str, DetectorResult], ...]:
    """
    Execute the requested detectors in dispatch order.

    Args:
        session: Session holding the table.
        request: The detection request.
        columns: Table schema, fetched once.
        total_rows: Row count, fetched once.
        settings: Detection thresholds.

    Returns:
        tuple[tuple[str, DetectorResult], ...]: (detector name, result) pairs.
    """
    table, focus, types = request.table_name, request.focus_columns, request.anomaly_types
    results: list[tuple[str, DetectorResult]] = []

    if AnomalyType.DUPLICATES in types:
        results.append(
            ("duplicates", detect_duplicates(session, table, columns, focus, settings)),
        )

    if AnomalyType.NULLS in types:
        results.append(
            (
                "nulls",
                detect_null_values(session, table, columns, focus, total_rows, settings),
            ),
        )

    if AnomalyType.STATISTICAL in types or AnomalyType.OUTLIERS in types:
        results.append(
            (
                "outliers",
                detect_statistical_outliers(session, table, columns, focus, settings),
            ),
        )

    if AnomalyType.PATTERNS in types:
        results.append(
            ("patterns", detect_length_patterns(session, table, columns, focus, settings)),
        )

    if AnomalyType.BUSINESS_LOGIC in types:
        results.append(
            ("business_logic", detect_business_logic(session, table, columns, settings)),
        )

    return tuple(results)
