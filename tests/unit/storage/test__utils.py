# storage/test__utils.py

import duckdb
import pytest

from tabular_integrity.storage._utils import (
    IN_MEMORY_DATABASE,
    database_path,
    escape_literal,
    is_glob_pattern,
    quote_identifier,
    quote_table_name,
    sanitise_table_name,
    unescape_literal,
)

pytestmark = pytest.mark.unit


def test_database_path_defaults_to_memory(monkeypatch: pytest.MonkeyPatch) -> None:
    """
    ARRANGE: TABULAR_INTEGRITY_DATABASE unset
    ACT:     database_path
    ASSERT:  returns the in-memory location
    """
    monkeypatch.delenv("TABULAR_INTEGRITY_DATABASE", raising=False)

    actual = database_path()

    assert actual == IN_MEMORY_DATABASE


def test_database_path_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """
    ARRANGE: TABULAR_INTEGRITY_DATABASE set to a file path
    ACT:     database_path
    ASSERT:  returns the configured path
    """
    monkeypatch.setenv("TABULAR_INTEGRITY_DATABASE", "/tmp/analysis.duckdb")

    actual = database_path()

    assert actual == "/tmp/analysis.duckdb"


def test_quote_identifier_wraps_in_double_quotes() -> None:
    """
    ARRANGE: plain column name
    ACT:     quote_identifier
    ASSERT:  name wrapped in double quotes
    """
    actual = quote_identifier("Amount")

    assert actual == '"Amount"'


def test_quote_identifier_doubles_embedded_quotes() -> None:
    """
    ARRANGE: name containing a double quote
    ACT:     quote_identifier
    ASSERT:  embedded quote is doubled
    """
    actual = quote_identifier('say "hi"')

    assert actual == '"say ""hi"""'


@pytest.mark.parametrize(
    "name",
    ['we"ird', "drop table x; --", "spaced name", "ünïcode", '"'],
)
def test_quoted_identifier_selects_the_named_column(name: str) -> None:
    """
    ARRANGE: table whose column has an adversarial name
    ACT:     select the column through quote_identifier
    ASSERT:  engine resolves it to the same single column
    """
    conn = duckdb.connect(":memory:")
    conn.execute(f"CREATE TABLE t AS SELECT 1 AS {quote_identifier(name)}")

    cursor = conn.execute(f"SELECT {quote_identifier(name)} FROM t")

    assert cursor.description[0][0] == name


def test_quote_table_name_quotes_each_qualified_part() -> None:
    """
    ARRANGE: schema-qualified table name
    ACT:     quote_table_name
    ASSERT:  schema and table quoted separately
    """
    actual = quote_table_name("main.orders")

    assert actual == '"main"."orders"'


def test_quote_table_name_matches_quote_identifier_for_bare_names() -> None:
    """
    ARRANGE: bare table name
    ACT:     quote_table_name
    ASSERT:  same as quote_identifier
    """
    actual = quote_table_name("orders")

    assert actual == quote_identifier("orders")


def test_quoted_table_name_resolves_schema_qualified_table() -> None:
    """
    ARRANGE: table created in a non-default schema
    ACT:     select from it through quote_table_name
    ASSERT:  engine resolves the qualified reference
    """
    conn = duckdb.connect(":memory:")
    conn.execute("CREATE SCHEMA sales")
    conn.execute("CREATE TABLE sales.orders AS SELECT 42 AS id")

    actual = conn.execute(f"SELECT id FROM {quote_table_name('sales.orders')}").fetchone()

    assert actual == (42,)


def test_escape_literal_doubles_single_quotes() -> None:
    """
    ARRANGE: text with an apostrophe
    ACT:     escape_literal
    ASSERT:  apostrophe doubled and text wrapped in single quotes
    """
    actual = escape_literal("O'Brien")

    assert actual == "'O''Brien'"


@pytest.mark.parametrize("text", ["", "plain", "O'Brien", "''", "a'; DROP TABLE t; --"])
def test_unescape_literal_inverts_escape_literal(text: str) -> None:
    """
    ARRANGE: arbitrary text
    ACT:     unescape_literal(escape_literal(text))
    ASSERT:  original text returned
    """
    actual = unescape_literal(escape_literal(text))

    assert actual == text


def test_escaped_literal_evaluates_to_original_text() -> None:
    """
    ARRANGE: text containing quotes
    ACT:     select the escaped literal
    ASSERT:  engine returns the original text
    """
    text = "it's a 'test'"
    conn = duckdb.connect(":memory:")

    actual = conn.execute(f"SELECT {escape_literal(text)}").fetchone()[0]

    assert actual == text


def test_unescape_literal_rejects_unquoted_text() -> None:
    """
    ARRANGE: text without surrounding quotes
    ACT:     unescape_literal
    ASSERT:  raises ValueError
    """
    with pytest.raises(ValueError):
        unescape_literal("plain")


def test_sanitise_table_name_replaces_unsafe_characters() -> None:
    """
    ARRANGE: file stem with spaces, dashes and dots
    ACT:     sanitise_table_name
    ASSERT:  unsafe characters become underscores
    """
    actual = sanitise_table_name("sales-2024 Q1.v2")

    assert actual == "sales_2024_Q1_v2"


def test_sanitise_table_name_keeps_safe_names() -> None:
    """
    ARRANGE: name made only of letters, digits and underscores
    ACT:     sanitise_table_name
    ASSERT:  name unchanged
    """
    actual = sanitise_table_name("orders_2024")

    assert actual == "orders_2024"


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("data/*.csv", True),
        ("data/file?.csv", True),
        ("data/[ab].csv", True),
        ("data/file.csv", False),
    ],
)
def test_is_glob_pattern(path: str, expected: bool) -> None:
    """
    ARRANGE: path with or without glob metacharacters
    ACT:     is_glob_pattern
    ASSERT:  detects the metacharacters
    """
    actual = is_glob_pattern(path)

    assert actual is expected
