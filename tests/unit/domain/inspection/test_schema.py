# domain/inspection/test_schema.py

import duckdb
import pytest

from tabular_integrity.domain.inspection.schema import (
    format_sample_rows,
    inspect_table,
    summarise_columns,
)
from tabular_integrity.storage import AnalysisSession

pytestmark = pytest.mark.unit


def _session() -> AnalysisSession:
    session = AnalysisSession(duckdb.connect(":memory:"))
    session.execute(
        "CREATE TABLE people AS SELECT * FROM (VALUES"
        " (1, 'Ada', DATE '1815-12-10'),"
        " (2, 'Grace', DATE '1906-12-09'),"
        " (3, NULL, NULL),"
        " (4, 'Katherine', DATE '1918-08-26'))"
        " AS t(id, name, born)",
    )
    return session


def test_inspect_table_heading() -> None:
    """
    ARRANGE: four-row table
    ACT:     inspect_table
    ASSERT:  heading names the table and row count
    """
    actual = inspect_table(_session(), "people")

    assert actual.startswith('📊 TABLE INSPECTION: "people"') and (
        "📈 Total Rows: 4" in actual
    )


def test_inspect_table_lists_schema_with_icons() -> None:
    """
    ARRANGE: table with numeric, text and date columns
    ACT:     inspect_table
    ASSERT:  numbered schema lines with category icons
    """
    actual = inspect_table(_session(), "people")

    assert (
        "  1. 🔢 id (INTEGER) - nullable" in actual
        and "  2. 📝 name (VARCHAR) - nullable" in actual
        and "  3. 📅 born (DATE) - nullable" in actual
    )


def test_inspect_table_samples_three_rows() -> None:
    """
    ARRANGE: four-row table
    ACT:     inspect_table
    ASSERT:  sample section announces three rows
    """
    actual = inspect_table(_session(), "people")

    assert "👀 SAMPLE DATA (first 3 rows):" in actual


def test_format_sample_rows_without_rows() -> None:
    """
    ARRANGE: no rows
    ACT:     format_sample_rows
    ASSERT:  placeholder line
    """
    actual = format_sample_rows([], ["id"])

    assert actual == ["  No data available"]


def test_format_sample_rows_pads_and_marks_nulls() -> None:
    """
    ARRANGE: row with a short value and a NULL
    ACT:     format_sample_rows
    ASSERT:  cells padded to fifteen characters, NULL shown
    """
    actual = format_sample_rows([{"a": 1, "b": None}], ["a", "b"])[2]

    assert actual == "  " + "1".ljust(15) + " | " + "NULL".ljust(15)


def test_format_sample_rows_truncates_long_values() -> None:
    """
    ARRANGE: row with a value longer than the cell width
    ACT:     format_sample_rows
    ASSERT:  value cut to twelve characters plus an ellipsis
    """
    actual = format_sample_rows([{"a": "abcdefghijklmnopq"}], ["a"])[2]

    assert actual == "  abcdefghijkl..."


def test_summarise_columns_without_columns_counts_rows() -> None:
    """
    ARRANGE: four-row table
    ACT:     summarise_columns with no columns
    ASSERT:  only total_rows returned
    """
    actual = summarise_columns(_session(), "people")

    assert actual == {"total_rows": 4}


def test_summarise_columns_numeric_statistics() -> None:
    """
    ARRANGE: id column 1..4
    ACT:     summarise_columns for id
    ASSERT:  count, distinct count, min, max and average
    """
    actual = summarise_columns(_session(), "people", ["id"])

    assert actual == {
        "id_count": 4,
        "id_unique": 4,
        "id_min": 1,
        "id_max": 4,
        "id_avg": 2.5,
    }


def test_summarise_columns_text_average_is_none() -> None:
    """
    ARRANGE: text column
    ACT:     summarise_columns for name
    ASSERT:  non-null count and no numeric average
    """
    actual = summarise_columns(_session(), "people", ["name"])

    assert (actual["name_count"], actual["name_avg"]) == (3, None)
