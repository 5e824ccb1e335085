# storage/session.py

import logging
import threading
from collections.abc import Iterator, Sequence
from contextlib import contextmanager

import duckdb

from tabular_integrity.schemas import ColumnDescriptor

from ._utils import connect, quote_table_name
from .errors import (
    QueryExecutionError,
    QueryTimeoutError,
    SessionClosedError,
)
from .values import Value, as_count, coerce_row

logger = logging.getLogger(__name__)

Row = dict[str, Value]


@contextmanager
def open_session(
    path: str | None = None,
    *,
    query_timeout: float | None = None,
) -> Iterator["AnalysisSession"]:
    """
    Context manager yielding an AnalysisSession that is closed on exit.

    Args:
        path: Database path; defaults to the configured location.
        query_timeout: Optional per-statement time budget in seconds.

    Yields:
        AnalysisSession: Session bound to a fresh connection.
    """
    session = AnalysisSession(connect(path), query_timeout=query_timeout)
    try:
        yield session
    finally:
        session.close()


class AnalysisSession:
    """
    Explicit handle on one embedded database connection.

    Every component that needs to query data receives the session by
    reference. Results are returned as lists of row mappings whose values have
    already been normalised to plain Python scalars. The session also records
    which tables were loaded and from where.
    """

    __slots__ = ("_closed", "_conn", "_query_timeout", "_tables")

    def __init__(
        self,
        conn: duckdb.DuckDBPyConnection,
        *,
        query_timeout: float | None = None,
    ) -> None:
        """
        Wrap an open connection.

        Args:
            conn: The DuckDB connection to execute statements on.
            query_timeout: Optional per-statement time budget in seconds.
        """
        self._conn = conn
        self._query_timeout = query_timeout
        self._tables: dict[str, str] = {}
        self._closed = False

    def execute(
        self,
        sql: str,
        params: Sequence[object] | None = None,
        *,
        timeout: float | None = None,
    ) -> list[Row]:
        """
        Run a statement and return its rows.

        Args:
            sql: Statement text. Identifiers are interpolated by the caller;
                literal values should be passed through params.
            params: Positional parameters bound to '?' placeholders.
            timeout: Overrides the session's per-statement time budget.

        Returns:
            list[Row]: Result rows, empty for statements without a result set.

        Raises:
            QueryExecutionError: The engine rejected the statement.
            QueryTimeoutError: The statement exceeded its time budget.
            SessionClosedError: The connection is no longer usable.
        """
        if self._closed:
            raise SessionClosedError("Session has been closed")

        budget = timeout if timeout is not None else self._query_timeout
        timer = _start_interrupt_timer(self._conn, budget)

        logger.debug("Executing: %s", " ".join(sql.split()))

        try:
            cursor = self._conn.execute(sql, params) if params else self._conn.execute(sql)
            if cursor.description is None:
                return []
            columns = [column[0] for column in cursor.description]
            return [coerce_row(columns, values) for values in cursor.fetchall()]
        except duckdb.InterruptException as error:
            raise QueryTimeoutError(
                f"Query exceeded {budget}s and was interrupted"
            ) from error
        except duckdb.ConnectionException as error:
            raise SessionClosedError(str(error)) from error
        except duckdb.Error as error:
            raise QueryExecutionError(str(error)) from error
        finally:
            if timer is not None:
                timer.cancel()

    def describe(self, table_name: str) -> list[ColumnDescriptor]:
        """
        Retrieve column metadata for a table.

        Args:
            table_name: Name of the table to describe.

        Returns:
            list[ColumnDescriptor]: Columns in schema order.
        """
        rows = self.execute(f"DESCRIBE {quote_table_name(table_name)}")
        return [
            ColumnDescriptor(
                name=str(row["column_name"]),
                declared_type=str(row["column_type"]),
                nullable=row.get("null") != "NO",
            )
            for row in rows
        ]

    def count_rows(self, table_name: str) -> int:
        """
        Count the rows in a table.

        Args:
            table_name: Name of the table to count.

        Returns:
            int: Total number of rows.
        """
        rows = self.execute(
            f"SELECT COUNT(*) AS row_count FROM {quote_table_name(table_name)}"
        )
        return as_count(rows[0]["row_count"]) if rows else 0

    @contextmanager
    def time_budget(self, seconds: float | None) -> Iterator[None]:
        """
        Temporarily replace the per-statement time budget.

        Args:
            seconds: Budget in seconds, or None to disable timeouts.

        Yields:
            None: Control while the budget is in force.
        """
        previous = self._query_timeout
        self._query_timeout = seconds
        try:
            yield
        finally:
            self._query_timeout = previous

    def register_table(self, table_name: str, source: str) -> None:
        """
        Record that a table was loaded from a given source.

        Args:
            table_name: The loaded table.
            source: File path, pattern or comma-separated file list.
        """
        self._tables[table_name] = source

    def list_tables(self) -> tuple[tuple[str, str], ...]:
        """
        List tables loaded through this session.

        Returns:
            tuple[tuple[str, str], ...]: (table name, source) pairs in load order.
        """
        return tuple(self._tables.items())

    def close(self) -> None:
        """
        Close the underlying connection. Further queries raise SessionClosedError.
        """
        if not self._closed:
            self._conn.close()
            self._closed = True


def _start_interrupt_timer(
    conn: duckdb.DuckDBPyConnection,
    budget: float | None,
) -> threading.Timer | None:
    """
    Arm a timer that interrupts the connection once the budget elapses.

    Returns:
        threading.Timer | None: The running timer, or None when no budget is set.
    """
    if not budget:
        return None
    timer = threading.Timer(budget, conn.interrupt)
    timer.daemon = True
    timer.start()
    return timer
