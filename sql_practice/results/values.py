import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional


class CellKind(Enum):
    """Kinds of scalar value a result cell can hold."""
    NULL = "null"
    INTEGER = "integer"
    FLOAT = "float"
    TEXT = "text"
    BOOLEAN = "boolean"
    DATETIME = "datetime"


def cell_kind(value: Any) -> CellKind:
    """
    Map a driver value onto a CellKind.

    bool is checked before int because it is an int subclass. Anything the
    store returns that is not a plain scalar (lists, structs, blobs, UUIDs,
    intervals) is treated as text through its string form.
    """
    if value is None:
        return CellKind.NULL
    if isinstance(value, bool):
        return CellKind.BOOLEAN
    if isinstance(value, int):
        return CellKind.INTEGER
    if isinstance(value, (float, Decimal)):
        return CellKind.FLOAT
    if isinstance(value, (datetime.date, datetime.time)):
        return CellKind.DATETIME
    return CellKind.TEXT


def canonical_number(value: Any) -> str:
    """
    Render a number so that 10, 10.0 and Decimal('10.00') all give '10'.
    """
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return repr(value)
        # repr gives the shortest round-tripping form, avoiding binary noise
        number = Decimal(repr(value))
    else:
        try:
            number = Decimal(value)
        except (InvalidOperation, TypeError, ValueError):
            return str(value)

    if not number.is_finite():
        return str(number)
    if number == number.to_integral_value():
        return str(int(number))
    return format(number.normalize(), "f")


def normalize_value(value: Any) -> Optional[Any]:
    """
    Normalise a cell for comparison. Returns None only for SQL NULL.
    """
    kind = cell_kind(value)
    if kind is CellKind.NULL:
        return None
    if kind is CellKind.BOOLEAN:
        return bool(value)
    if kind in (CellKind.INTEGER, CellKind.FLOAT):
        return canonical_number(value)
    if kind is CellKind.DATETIME:
        return value.isoformat()
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    return str(value).strip()


def sort_text(value: Any) -> str:
    """Stringified form of a value used as a row sort key."""
    normalized = normalize_value(value)
    if isinstance(normalized, bool):
        return "true" if normalized else "false"
    return "" if normalized is None else normalized
