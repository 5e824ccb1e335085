# schemas/__init__.py

from .columns import ColumnCategory, ColumnDescriptor, categorise_type
from .integrity import AnomalyReport, DiagnosticOutput, FindingOutput

__all__ = [
    # columns
    "ColumnCategory",
    "ColumnDescriptor",
    "categorise_type",
    # integrity
    "AnomalyReport",
    "DiagnosticOutput",
    "FindingOutput",
]
