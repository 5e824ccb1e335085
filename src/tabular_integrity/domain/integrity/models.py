# integrity/models.py

from dataclasses import dataclass
from enum import Enum, IntEnum


class Severity(IntEnum):
    """
    Ordered severity levels; higher values are more severe.
    """

    LOW = 1
    MEDIUM = 2
    HIGH = 3
    CRITICAL = 4

    @property
    def label(self) -> str:
        """
        Lower-case name used in requests and reports.

        Returns:
            str: e.g. "medium".
        """
        return self.name.lower()

    @classmethod
    def parse(cls, value: "str | Severity | None") -> "Severity":
        """
        Resolve a caller-supplied threshold, defaulting to MEDIUM.

        Args:
            value: Severity label (any case), Severity member or None.

        Returns:
            Severity: The matching level, MEDIUM when unrecognised.
        """
        if isinstance(value, Severity):
            return value
        try:
            return cls[str(value).strip().upper()]
        except KeyError:
            return cls.MEDIUM


class AnomalyKind(Enum):
    """
    Category of a finding, one per detector family.
    """

    DUPLICATE = "duplicate"
    NULL_VALUES = "null_values"
    STATISTICAL_OUTLIER = "statistical_outlier"
    LENGTH_PATTERN = "length_pattern"
    BUSINESS_LOGIC = "business_logic"


class AnomalyType(Enum):
    """
    Detector toggles accepted in a detection request.

    STATISTICAL and OUTLIERS are aliases that both enable the statistical
    outlier detector.
    """

    STATISTICAL = "statistical"
    DUPLICATES = "duplicates"
    NULLS = "nulls"
    OUTLIERS = "outliers"
    PATTERNS = "patterns"
    BUSINESS_LOGIC = "business_logic"


DEFAULT_ANOMALY_TYPES: frozenset[AnomalyType] = frozenset(
    {
        AnomalyType.STATISTICAL,
        AnomalyType.DUPLICATES,
        AnomalyType.NULLS,
        AnomalyType.OUTLIERS,
        AnomalyType.PATTERNS,
    },
)


@dataclass(frozen=True)
class DetectionSettings:
    """
    Configuration values controlling detector thresholds and query budgets.
    """

    # Columns scanned for duplicates when no focus list is given
    duplicate_column_limit: int = 8
    # Duplicate groups fetched per column
    duplicate_group_limit: int = 10
    # Duplicate groups shown as examples
    duplicate_example_limit: int = 3
    # Largest repeat count above which duplicates are critical
    duplicate_critical_count: int = 50_000
    # Largest repeat count above which duplicates are high
    duplicate_high_count: int = 1_000
    # Largest repeat count above which duplicates are medium
    duplicate_medium_count: int = 10
    # Null percentage above which a column is critical
    null_critical_percentage: float = 50.0
    # Null percentage above which a column is high
    null_high_percentage: float = 25.0
    # Null percentage above which a column is medium
    null_medium_percentage: float = 10.0
    # Raw null count that is reported even at low severity
    null_count_floor: int = 100
    # Numeric columns scanned for outliers
    outlier_column_limit: int = 5
    # Below this many non-null values the IQR method replaces 3-sigma
    iqr_sample_cutoff: int = 30
    # IQR multiplier for the outlier fences
    iqr_multiplier: float = 1.5
    # Standard deviations from the mean for the 3-sigma fences
    sigma_multiplier: float = 3.0
    # Outlier percentage above which a column is high
    outlier_high_percentage: float = 5.0
    # Outlier percentage above which a column is medium
    outlier_medium_percentage: float = 1.0
    # Outlier values shown as examples
    outlier_example_limit: int = 5
    # Text columns scanned for length patterns
    pattern_column_limit: int = 3
    # Length buckets fetched per column
    length_bucket_limit: int = 20
    # Strings longer than this are extreme
    max_text_length: int = 200
    # Strings shorter than this are extreme
    min_text_length: int = 1
    # Affected rows above which length anomalies are medium
    pattern_medium_count: int = 100
    # Column name fragments identifying monetary amounts
    amount_keywords: tuple[str, ...] = ("amount", "charge", "price")
    # Zero amounts above which a finding is raised
    zero_amount_count: int = 50
    # Zero amounts above which the finding is high
    zero_amount_high_count: int = 500
    # Out-of-order date pairs above which the finding is high
    date_order_high_count: int = 100
    # Per-statement time budget in seconds, None disables the timeout
    query_timeout_seconds: float | None = None


def default_settings() -> DetectionSettings:
    """
    Return default detection thresholds.

    Returns:
        DetectionSettings: Default configuration values.
    """
    return DetectionSettings()


@dataclass(frozen=True)
class DetectionRequest:
    """
    One detection invocation, discarded once the report is rendered.
    """

    table_name: str
    severity_threshold: Severity = Severity.MEDIUM
    focus_columns: tuple[str, ...] = ()
    anomaly_types: frozenset[AnomalyType] = DEFAULT_ANOMALY_TYPES


@dataclass(frozen=True)
class Finding:
    """
    A single anomaly reported by a detector.
    """

    kind: AnomalyKind
    severity: Severity
    title: str
    impact: str
    description: str
    affected_records: int = 0
    percentage: float | None = None
    examples: str | None = None
    recommendation: str | None = None


@dataclass(frozen=True)
class Diagnostic:
    """
    A detector step that failed; the detector contributed nothing for it.
    """

    detector: str
    target: str
    error: str


@dataclass(frozen=True)
class DetectorResult:
    """
    Findings produced by one detector, plus the steps that failed.
    """

    findings: tuple[Finding, ...] = ()
    diagnostics: tuple[Diagnostic, ...] = ()
