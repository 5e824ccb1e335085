# storage/errors.py


class SessionError(Exception):
    """
    Base class for failures raised by the analysis session.
    """


class QueryExecutionError(SessionError):
    """
    Raised when the engine rejects a statement.

    Covers malformed SQL, unknown tables or columns and expressions that are
    not valid for a column's type.
    """


class QueryTimeoutError(QueryExecutionError):
    """
    Raised when a statement is interrupted after exceeding its time budget.
    """


class SessionClosedError(SessionError):
    """
    Raised when the underlying connection is no longer usable.
    """


class DataLoadError(SessionError):
    """
    Raised when a file cannot be loaded into a table.
    """
