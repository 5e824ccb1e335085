# storage/_utils.py

import os
import re

import duckdb

IN_MEMORY_DATABASE = ":memory:"

_UNSAFE_NAME_CHARS = re.compile(r"[^a-zA-Z0-9_]")


def database_path() -> str:
    """
    Resolve the DuckDB database location for new sessions.

    Reads TABULAR_INTEGRITY_DATABASE from the environment, falling back to an
    in-memory database when unset or empty.

    Returns:
        str: Filesystem path or ":memory:".
    """
    return os.getenv("TABULAR_INTEGRITY_DATABASE") or IN_MEMORY_DATABASE


def connect(path: str | None = None) -> duckdb.DuckDBPyConnection:
    """
    Open a DuckDB connection.

    Args:
        path (str | None, optional): Database path; defaults to database_path().

    Returns:
        duckdb.DuckDBPyConnection: An open connection.
    """
    return duckdb.connect(path or database_path())


def quote_identifier(name: str) -> str:
    """
    Quote a table or column name for interpolation into SQL text.

    Embedded double quotes are doubled so any name round-trips as a single
    identifier.

    Args:
        name (str): Raw identifier.

    Returns:
        str: The identifier wrapped in double quotes.
    """
    return '"' + name.replace('"', '""') + '"'


def quote_table_name(name: str) -> str:
    """
    Quote a possibly schema-qualified table name for interpolation into SQL.

    The name is split on dots and each part is quoted with quote_identifier,
    so "main.orders" becomes "main"."orders". Loaded tables are sanitised and
    never contain dots.

    Args:
        name (str): Bare or qualified table name.

    Returns:
        str: The quoted reference.
    """
    return ".".join(quote_identifier(part) for part in name.split("."))


def escape_literal(value: str) -> str:
    """
    Render a string as a single-quoted SQL literal.

    Args:
        value (str): Raw text.

    Returns:
        str: The quoted literal with embedded single quotes doubled.
    """
    return "'" + value.replace("'", "''") + "'"


def unescape_literal(literal: str) -> str:
    """
    Invert escape_literal.

    Args:
        literal (str): A literal produced by escape_literal.

    Returns:
        str: The original text.

    Raises:
        ValueError: If the input is not a single-quoted literal.
    """
    if len(literal) < 2 or literal[0] != "'" or literal[-1] != "'":
        raise ValueError(f"Not a quoted SQL literal: {literal!r}")
    return literal[1:-1].replace("''", "'")


def sanitise_table_name(raw: str) -> str:
    """
    Replace every character outside [a-zA-Z0-9_] with an underscore.

    Args:
        raw (str): Candidate table name, typically derived from a file name.

    Returns:
        str: A name safe to use as a table identifier.
    """
    return _UNSAFE_NAME_CHARS.sub("_", raw)


def is_glob_pattern(path: str) -> bool:
    """
    Check whether a path contains glob metacharacters.

    Returns:
        bool: True when the path contains '*', '?' or '['.
    """
    return any(char in path for char in "*?[")
