# storage/values.py

import datetime
from decimal import Decimal
from uuid import UUID

Value = int | float | str | bool | datetime.date | datetime.datetime | datetime.time | None


def coerce_value(raw: object) -> Value:
    """
    Convert an engine-native value into a plain Python scalar.

    Integers of any width, floats, strings, booleans, temporal values and None
    pass through unchanged. Decimals become int when integral and float
    otherwise, UUIDs become their canonical string, binary blobs become hex
    and anything else falls back to its string form.

    Args:
        raw (object): A value as returned by the engine.

    Returns:
        Value: The normalised scalar.
    """
    if raw is None or isinstance(
        raw,
        bool | int | float | str | datetime.date | datetime.time,
    ):
        return raw

    if isinstance(raw, Decimal):
        return _decimal_to_number(raw)

    if isinstance(raw, UUID):
        return str(raw)

    if isinstance(raw, bytes | bytearray | memoryview):
        return bytes(raw).hex()

    return str(raw)


def coerce_row(columns: list[str], values: tuple) -> dict[str, Value]:
    """
    Zip column names with values, normalising each value.

    Args:
        columns (list[str]): Result column names in order.
        values (tuple): One result row.

    Returns:
        dict[str, Value]: Mapping of column name to normalised value.
    """
    return {
        column: coerce_value(value) for column, value in zip(columns, values, strict=True)
    }


def as_float(value: Value) -> float | None:
    """
    Interpret a normalised value as a float.

    Returns:
        float | None: The numeric value, or None for None and non-numeric values.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int | float):
        return float(value)
    return None


def as_count(value: Value) -> int:
    """
    Interpret a normalised aggregate value as a non-negative count.

    Returns:
        int: The count, or 0 when the value is missing or non-numeric.
    """
    number = as_float(value)
    return int(number) if number is not None else 0


def _decimal_to_number(value: Decimal) -> int | float:
    """
    Convert a Decimal to int when it has no fractional part, float otherwise.

    Returns:
        int | float: The converted number.
    """
    if value.is_finite() and value == value.to_integral_value():
        return int(value)
    return float(value)
