# integrity/report.py

import json
import logging
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path

from tabular_integrity.schemas.integrity import (
    AnomalyReport,
    DiagnosticOutput,
    FindingOutput,
)

from .formatters import format_number
from .models import Diagnostic, Finding, Severity

logger = logging.getLogger(__name__)

_SEVERITY_ICONS = {
    Severity.CRITICAL.label: "🚨",
    Severity.HIGH.label: "⚠️",
    Severity.MEDIUM.label: "🔶",
    Severity.LOW.label: "🔵",
}

_RULE = "---"


def build_anomaly_report(
    table_name: str,
    total_rows: int,
    severity_threshold: Severity,
    detectors_run: Sequence[str],
    findings: Sequence[Finding],
    diagnostics: Sequence[Diagnostic] = (),
) -> AnomalyReport:
    """
    Convert ranked findings into a Pydantic AnomalyReport.

    Args:
        table_name: Table that was analysed.
        total_rows: Row count of the table.
        severity_threshold: Minimum severity applied to the findings.
        detectors_run: Names of the detectors dispatched, in order.
        findings: Filtered findings, most severe first.
        diagnostics: Detector steps that failed.

    Returns:
        AnomalyReport: Machine-readable report envelope.
    """
    outputs = tuple(_convert_finding(finding) for finding in findings)

    severity_counts = {
        level.label: count
        for level in sorted(Severity, reverse=True)
        if (count := sum(1 for finding in findings if finding.severity is level))
    }

    return AnomalyReport(
        generated_at=datetime.now(UTC).isoformat(),
        table_name=table_name,
        total_rows=total_rows,
        severity_threshold=severity_threshold.label,
        detectors_run=tuple(detectors_run),
        total_findings=len(outputs),
        severity_counts=severity_counts,
        findings=outputs,
        diagnostics=tuple(
            DiagnosticOutput(
                detector=diagnostic.detector,
                target=diagnostic.target,
                error=diagnostic.error,
            )
            for diagnostic in diagnostics
        ),
    )


def render_anomaly_report(report: AnomalyReport) -> str:
    """
    Render an AnomalyReport as markdown-flavoured text.

    The heading names the table, its size and the threshold. A summary counts
    findings per severity present, followed by one section per finding in
    report order. Failed detector steps, if any, are listed last.

    Args:
        report: The report to render.

    Returns:
        str: The rendered report.
    """
    lines = [
        "# 🔍 Anomaly Detection Report",
        f"**Table:** {report.table_name} ({report.total_rows:,} rows)",
        f"**Severity Threshold:** {report.severity_threshold}",
        "",
    ]

    if not report.findings:
        lines.append(
            f"✅ **No anomalies detected** above {report.severity_threshold}"
            " severity threshold."
        )
    else:
        lines.append("## 📊 Summary")
        lines.extend(
            f"{_SEVERITY_ICONS[label]} **{label.capitalize()}:** {count} anomalies"
            for label, count in report.severity_counts.items()
        )
        lines.append("")
        lines.append("## 🔍 Detailed Findings")
        lines.append("")
        for finding in report.findings:
            lines.extend(_render_finding(finding))

    if report.diagnostics:
        lines.extend(_render_diagnostics(report.diagnostics))

    return "\n".join(lines) + "\n"


def save_anomaly_report(report: AnomalyReport, dest: Path) -> Path:
    """
    Write the anomaly report as JSON.

    Args:
        report: The report to persist.
        dest: Target file path; parent directories are created.

    Returns:
        Path: Path to the written JSON file.
    """
    dest.parent.mkdir(parents=True, exist_ok=True)

    dest.write_text(
        json.dumps(
            report.model_dump(),
            indent=2,
            ensure_ascii=False,
        )
        + "\n",
    )

    logger.info("Anomaly report saved to %s", dest)
    return dest


def _convert_finding(finding: Finding) -> FindingOutput:
    """
    Convert an internal Finding dataclass to a Pydantic FindingOutput.

    Args:
        finding: Internal finding to convert.

    Returns:
        FindingOutput: Pydantic-serialisable finding.
    """
    return FindingOutput(
        kind=finding.kind.value,
        severity=finding.severity.label,
        title=finding.title,
        impact=finding.impact,
        affected_records=finding.affected_records,
        percentage=finding.percentage,
        description=finding.description,
        examples=finding.examples,
        recommendation=finding.recommendation,
    )


def _render_finding(finding: FindingOutput) -> list[str]:
    """
    Render one finding section, closed by a horizontal rule.

    Returns:
        list[str]: Section lines.
    """
    lines = [
        f"### {_SEVERITY_ICONS[finding.severity]} {finding.title}",
        f"**Severity:** {finding.severity.upper()}",
        f"**Impact:** {finding.impact}",
    ]
    if finding.affected_records:
        lines.append(f"**Affected Records:** {finding.affected_records:,}")
    if finding.percentage:
        lines.append(f"**Percentage:** {format_number(finding.percentage)}%")
    lines.append(f"**Details:** {finding.description}")
    if finding.examples:
        lines.extend(("**Examples:**", "```", finding.examples, "```"))
    if finding.recommendation:
        lines.append(f"**Recommendation:** {finding.recommendation}")
    lines.extend(("", _RULE, ""))
    return lines


def _render_diagnostics(diagnostics: Sequence[DiagnosticOutput]) -> list[str]:
    """
    Render the list of detector steps that failed.

    Returns:
        list[str]: Section lines.
    """
    lines = ["", "## ⚙️ Skipped Checks"]
    lines.extend(
        f"- {diagnostic.detector} ({diagnostic.target}): {diagnostic.error}"
        for diagnostic in diagnostics
    )
    return lines
