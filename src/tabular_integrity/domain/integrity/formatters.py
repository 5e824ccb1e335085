# integrity/formatters.py

import datetime
from collections.abc import Iterable
from itertools import islice

from tabular_integrity.storage import Value


def limit_items(items: Iterable[str], limit: int) -> tuple[str, ...]:
    """
    Take at most `limit` items from an iterable.

    Args:
        items: Items to take from.
        limit: Maximum number of items.

    Returns:
        tuple[str, ...]: The first `limit` items.
    """
    return tuple(islice(items, max(limit, 0)))


def format_number(value: float | int) -> str:
    """
    Round to two decimals and drop a trailing ".0".

    Args:
        value: Number to format.

    Returns:
        str: e.g. "3.25", "7" or "-0.5".
    """
    rounded = round(float(value), 2)
    if rounded.is_integer():
        return str(int(rounded))
    return str(rounded)


def format_value(value: Value) -> str:
    """
    Render a row value for example text.

    Args:
        value: Normalised row value.

    Returns:
        str: "NULL" for None, ISO format for temporal values, lower-case
            booleans and plain text otherwise.
    """
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime.date | datetime.time):
        return value.isoformat()
    if isinstance(value, float):
        return format_number(value) if value.is_integer() else repr(value)
    return str(value)


def percentage_of(count: int, total: int) -> float:
    """
    Express a count as a percentage of a total, rounded to two decimals.

    Args:
        count: Part.
        total: Whole; a zero total yields 0.0.

    Returns:
        float: Percentage in the range 0-100.
    """
    if total <= 0:
        return 0.0
    return round(count * 100.0 / total, 2)
