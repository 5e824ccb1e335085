# schemas/test_columns.py

import pytest
from pydantic import ValidationError

from tabular_integrity.schemas import ColumnCategory, ColumnDescriptor
from tabular_integrity.schemas.columns import categorise_type

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    ("declared_type", "expected"),
    [
        ("INTEGER", ColumnCategory.NUMERIC),
        ("BIGINT", ColumnCategory.NUMERIC),
        ("HUGEINT", ColumnCategory.NUMERIC),
        ("DOUBLE", ColumnCategory.NUMERIC),
        ("DECIMAL(18,3)", ColumnCategory.NUMERIC),
        ("VARCHAR", ColumnCategory.TEXT),
        ("DATE", ColumnCategory.TEMPORAL),
        ("TIMESTAMP WITH TIME ZONE", ColumnCategory.TEMPORAL),
        ("BOOLEAN", ColumnCategory.BOOLEAN),
        ("BLOB", ColumnCategory.OTHER),
        ("INTEGER[]", ColumnCategory.OTHER),
    ],
)
def test_categorise_type(declared_type: str, expected: ColumnCategory) -> None:
    """
    ARRANGE: declared engine type
    ACT:     categorise_type
    ASSERT:  matches the expected category
    """
    actual = categorise_type(declared_type)

    assert actual is expected


def test_categorise_type_is_case_insensitive() -> None:
    """
    ARRANGE: lower-case type name
    ACT:     categorise_type
    ASSERT:  still recognised
    """
    actual = categorise_type("varchar")

    assert actual is ColumnCategory.TEXT


def test_column_descriptor_category_property() -> None:
    """
    ARRANGE: descriptor with a BIGINT type
    ACT:     read category
    ASSERT:  numeric
    """
    column = ColumnDescriptor(name="id", declared_type="BIGINT")

    actual = column.category

    assert actual is ColumnCategory.NUMERIC


def test_column_descriptor_defaults_to_nullable() -> None:
    """
    ARRANGE: descriptor without nullable
    ACT:     construct ColumnDescriptor
    ASSERT:  nullable is True
    """
    actual = ColumnDescriptor(name="id", declared_type="BIGINT")

    assert actual.nullable is True


def test_column_descriptor_is_frozen() -> None:
    """
    ARRANGE: descriptor
    ACT:     assign to name
    ASSERT:  raises ValidationError
    """
    column = ColumnDescriptor(name="id", declared_type="BIGINT")

    with pytest.raises(ValidationError):
        column.name = "other"


def test_column_descriptor_rejects_non_string_name() -> None:
    """
    ARRANGE: integer column name
    ACT:     construct ColumnDescriptor
    ASSERT:  raises ValidationError under strict validation
    """
    with pytest.raises(ValidationError):
        ColumnDescriptor(name=1, declared_type="BIGINT")
