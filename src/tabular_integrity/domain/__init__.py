# domain/__init__.py

from .expenses import optimise_expenses
from .inspection import inspect_table, summarise_columns
from .integrity import (
    detect_anomalies,
    render_anomaly_report,
    run_anomaly_detection,
    save_anomaly_report,
)

__all__ = [
    "detect_anomalies",
    "inspect_table",
    "optimise_expenses",
    "render_anomaly_report",
    "run_anomaly_detection",
    "save_anomaly_report",
    "summarise_columns",
]
