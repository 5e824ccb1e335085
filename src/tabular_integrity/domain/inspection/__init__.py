# inspection/__init__.py

from .schema import format_sample_rows, inspect_table, summarise_columns

__all__ = [
    "format_sample_rows",
    "inspect_table",
    "summarise_columns",
]
