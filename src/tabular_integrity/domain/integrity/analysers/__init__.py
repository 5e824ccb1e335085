# integrity/analysers/__init__.py

from ._helpers import FindingCollector, candidate_names, columns_of_category
from .business_logic import (
    amount_columns,
    date_order_finding,
    detect_business_logic,
    zero_amount_finding,
)
from .duplicates import detect_duplicates, duplicate_finding, duplicate_severity
from .length_patterns import detect_length_patterns, is_extreme_length, length_finding
from .null_values import detect_null_values, null_finding, null_severity
from .statistical_outliers import (
    ColumnStatistics,
    OutlierFences,
    choose_fences,
    column_statistics,
    detect_statistical_outliers,
    iqr_fences,
    outlier_finding,
    outlier_severity,
    sigma_fences,
)

__all__ = [
    "ColumnStatistics",
    "FindingCollector",
    "OutlierFences",
    "amount_columns",
    "candidate_names",
    "choose_fences",
    "column_statistics",
    "columns_of_category",
    "date_order_finding",
    "detect_business_logic",
    "detect_duplicates",
    "detect_length_patterns",
    "detect_null_values",
    "detect_statistical_outliers",
    "duplicate_finding",
    "duplicate_severity",
    "iqr_fences",
    "is_extreme_length",
    "length_finding",
    "null_finding",
    "null_severity",
    "outlier_finding",
    "outlier_severity",
    "sigma_fences",
    "zero_amount_finding",
]
