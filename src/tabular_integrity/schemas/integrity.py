# schemas/integrity.py

from pydantic import BaseModel, ConfigDict


class FindingOutput(BaseModel):
    """
    A single anomaly detected during analysis.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    kind: str
    severity: str
    title: str
    impact: str
    affected_records: int
    percentage: float | None
    description: str
    examples: str | None
    recommendation: str | None


class DiagnosticOutput(BaseModel):
    """
    A detector step that failed and contributed no findings.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    detector: str
    target: str
    error: str


class AnomalyReport(BaseModel):
    """
    Machine-readable envelope for a complete anomaly detection run.

    Contains metadata about the analysed table, the severity-filtered and
    ranked findings, and the diagnostics of any detector steps that failed.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    generated_at: str
    table_name: str
    total_rows: int
    severity_threshold: str
    detectors_run: tuple[str, ...]
    total_findings: int
    severity_counts: dict[str, int]
    findings: tuple[FindingOutput, ...]
    diagnostics: tuple[DiagnosticOutput, ...]
