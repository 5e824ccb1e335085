# storage/__init__.py

from ._utils import (
    escape_literal,
    quote_identifier,
    quote_table_name,
    sanitise_table_name,
    unescape_literal,
)
from .errors import (
    DataLoadError,
    QueryExecutionError,
    QueryTimeoutError,
    SessionClosedError,
    SessionError,
)
from .loaders import (
    DiscoveredFile,
    LoadResult,
    discover_files,
    load_csv,
    load_excel,
    load_multiple_csvs,
    load_multiple_excels,
)
from .session import AnalysisSession, Row, open_session
from .values import Value, as_count, as_float, coerce_value

__all__ = [
    # _utils
    "escape_literal",
    "quote_identifier",
    "quote_table_name",
    "sanitise_table_name",
    "unescape_literal",
    # errors
    "DataLoadError",
    "QueryExecutionError",
    "QueryTimeoutError",
    "SessionClosedError",
    "SessionError",
    # loaders
    "DiscoveredFile",
    "LoadResult",
    "discover_files",
    "load_csv",
    "load_excel",
    "load_multiple_csvs",
    "load_multiple_excels",
    # session
    "AnalysisSession",
    "Row",
    "open_session",
    # values
    "Value",
    "as_count",
    "as_float",
    "coerce_value",
]
