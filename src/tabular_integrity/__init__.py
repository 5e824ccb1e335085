# tabular_integrity/__init__.py

from .domain import (
    detect_anomalies,
    inspect_table,
    optimise_expenses,
    render_anomaly_report,
    run_anomaly_detection,
    save_anomaly_report,
    summarise_columns,
)
from .schemas import AnomalyReport, ColumnDescriptor
from .storage import (
    AnalysisSession,
    load_csv,
    load_excel,
    load_multiple_csvs,
    load_multiple_excels,
    open_session,
)

__all__ = [
    "detect_anomalies",
    "inspect_table",
    "optimise_expenses",
    "render_anomaly_report",
    "run_anomaly_detection",
    "save_anomaly_report",
    "summarise_columns",
    "AnomalyReport",
    "ColumnDescriptor",
    "AnalysisSession",
    "load_csv",
    "load_excel",
    "load_multiple_csvs",
    "load_multiple_excels",
    "open_session",
]
