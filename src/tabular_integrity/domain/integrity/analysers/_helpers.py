# integrity/analysers/_helpers.py

import logging
from collections.abc import Callable, Sequence

from tabular_integrity.schemas import ColumnCategory, ColumnDescriptor
from tabular_integrity.storage import QueryExecutionError

from ..models import DetectorResult, Diagnostic, Finding

logger = logging.getLogger(__name__)


class FindingCollector:
    """
    Accumulates findings for one detector while isolating per-step failures.

    Each check runs independently; a check whose query the engine rejects is
    recorded as a Diagnostic and the collector moves on, keeping every finding
    gathered so far.
    """

    __slots__ = ("_detector", "_diagnostics", "_findings")

    def __init__(self, detector: str) -> None:
        """
        Start an empty collection.

        Args:
            detector: Detector name recorded on diagnostics.
        """
        self._detector = detector
        self._findings: list[Finding] = []
        self._diagnostics: list[Diagnostic] = []

    def run(self, target: str, check: Callable[[], Finding | None]) -> None:
        """
        Execute one check and keep its finding, if any.

        Args:
            target: Column or rule the check concerns.
            check: Zero-argument callable returning a Finding or None.
        """
        try:
            finding = check()
        except QueryExecutionError as error:
            logger.warning(
                "%s check failed for %s: %s",
                self._detector,
                target,
                error,
            )
            self._diagnostics.append(Diagnostic(self._detector, target, str(error)))
            return

        if finding is not None:
            self._findings.append(finding)

    def result(self) -> DetectorResult:
        """
        Freeze the collected findings and diagnostics.

        Returns:
            DetectorResult: Findings in check order with their diagnostics.
        """
        return DetectorResult(tuple(self._findings), tuple(self._diagnostics))


def candidate_names(
    columns: Sequence[ColumnDescriptor],
    focus_columns: Sequence[str],
    limit: int | None = None,
) -> tuple[str, ...]:
    """
    Choose column names for detectors that accept any column type.

    The focus list is used verbatim when given, so an unknown name reaches the
    detector's query and degrades that detector alone.

    Args:
        columns: Table schema.
        focus_columns: Caller's focus list, possibly empty.
        limit: Maximum number of columns, None for no cap.

    Returns:
        tuple[str, ...]: Column names in focus or schema order.
    """
    names = tuple(focus_columns) if focus_columns else tuple(c.name for c in columns)
    return names if limit is None else names[:limit]


def columns_of_category(
    columns: Sequence[ColumnDescriptor],
    category: ColumnCategory,
    focus_columns: Sequence[str] = (),
) -> tuple[ColumnDescriptor, ...]:
    """
    Filter the schema to one category, optionally restricted to a focus list.

    Args:
        columns: Table schema.
        category: Required column category.
        focus_columns: Caller's focus list, possibly empty.

    Returns:
        tuple[ColumnDescriptor, ...]: Matching columns in schema order.
    """
    focus = set(focus_columns)
    return tuple(
        column
        for column in columns
        if column.category is category and (not focus or column.name in focus)
    )
