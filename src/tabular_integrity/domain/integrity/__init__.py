# integrity/__init__.py

from .analyse import (
    detect_anomalies,
    parse_anomaly_types,
    rank_findings,
    run_anomaly_detection,
)
from .models import (
    DEFAULT_ANOMALY_TYPES,
    AnomalyKind,
    AnomalyType,
    DetectionRequest,
    DetectionSettings,
    DetectorResult,
    Diagnostic,
    Finding,
    Severity,
    default_settings,
)
from .report import build_anomaly_report, render_anomaly_report, save_anomaly_report

__all__ = [
    "DEFAULT_ANOMALY_TYPES",
    "AnomalyKind",
    "AnomalyType",
    "DetectionRequest",
    "DetectionSettings",
    "DetectorResult",
    "Diagnostic",
    "Finding",
    "Severity",
    "build_anomaly_report",
    "default_settings",
    "detect_anomalies",
    "parse_anomaly_types",
    "rank_findings",
    "render_anomaly_report",
    "run_anomaly_detection",
    "save_anomaly_report",
]
