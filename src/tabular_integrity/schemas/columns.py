# schemas/columns.py

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict

_NUMERIC_TYPES = frozenset(
    {
        "TINYINT",
        "SMALLINT",
        "INTEGER",
        "BIGINT",
        "HUGEINT",
        "UTINYINT",
        "USMALLINT",
        "UINTEGER",
        "UBIGINT",
        "UHUGEINT",
        "FLOAT",
        "REAL",
        "DOUBLE",
        "DECIMAL",
        "NUMERIC",
    },
)

# strips precision/scale and similar suffixes, e.g. DECIMAL(18,3) -> DECIMAL
_TYPE_ARGUMENTS = re.compile(r"\(.*\)$")


class ColumnCategory(Enum):
    """
    Semantic category of a declared column type.

    Attributes:
        NUMERIC: Integer, floating point and fixed point types.
        TEXT: Variable length character types.
        TEMPORAL: Date and timestamp types.
        BOOLEAN: Boolean type.
        OTHER: Anything else (lists, structs, blobs, times, intervals).
    """

    NUMERIC = "numeric"
    TEXT = "text"
    TEMPORAL = "temporal"
    BOOLEAN = "boolean"
    OTHER = "other"


class ColumnDescriptor(BaseModel):
    """
    Column metadata as reported by the engine's DESCRIBE statement.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    name: str
    declared_type: str
    nullable: bool = True

    @property
    def category(self) -> ColumnCategory:
        """
        Semantic category derived from the declared type.

        Returns:
            ColumnCategory: The column's category.
        """
        return categorise_type(self.declared_type)


def categorise_type(declared_type: str) -> ColumnCategory:
    """
    Map an engine type name onto a semantic category.

    Args:
        declared_type (str): Type text such as "BIGINT" or "DECIMAL(18,3)".

    Returns:
        ColumnCategory: The matching category, OTHER when unrecognised.
    """
    upper = declared_type.strip().upper()
    base = _TYPE_ARGUMENTS.sub("", upper).strip()

    if base in _NUMERIC_TYPES:
        return ColumnCategory.NUMERIC
    if "VARCHAR" in upper or "TEXT" in upper or upper == "STRING":
        return ColumnCategory.TEXT
    if "DATE" in upper or "TIMESTAMP" in upper:
        return ColumnCategory.TEMPORAL
    if base in {"BOOLEAN", "BOOL"}:
        return ColumnCategory.BOOLEAN
    return ColumnCategory.OTHER
