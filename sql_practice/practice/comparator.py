from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from sql_practice.results.query_result import TabularResult
from sql_practice.results.values import normalize_value, sort_text


class MismatchKind(Enum):
    ROW_COUNT = "row_count"
    COLUMN_COUNT = "column_count"
    COLUMN_NAME = "column_name"
    VALUE = "value"


@dataclass(frozen=True)
class Comparison:
    equivalent: bool
    mismatch: Optional[MismatchKind] = None
    detail: str = ""


EQUIVALENT = Comparison(equivalent=True)


def sort_rows(rows: List[Dict[str, Any]], first_column: Optional[str]) -> List[Dict[str, Any]]:
    """
    Order rows by the stringified value of the first column only, nulls first.

    Rows that tie on the first column keep their incoming relative order; two
    results holding the same rows can therefore still compare unequal when
    the first column has duplicates.
    """
    if first_column is None:
        return list(rows)

    def key(row):
        value = row.get(first_column)
        return (value is not None, sort_text(value))

    return sorted(rows, key=key)


def compare_results(submitted: TabularResult, reference: TabularResult) -> Comparison:
    """
    Decide whether two results are the same answer.

    Row order does not matter, column order does. Column names are compared
    case-insensitively, cell values after normalisation.
    """
    if submitted.row_count != reference.row_count:
        return Comparison(
            False, MismatchKind.ROW_COUNT,
            f"Row count mismatch: expected {reference.row_count} rows, got {submitted.row_count}.",
        )

    if submitted.column_count != reference.column_count:
        return Comparison(
            False, MismatchKind.COLUMN_COUNT,
            f"Column count mismatch: expected {reference.column_count} columns, got {submitted.column_count}.",
        )

    for position, (got, expected) in enumerate(zip(submitted.column_names, reference.column_names), start=1):
        if got.lower() != expected.lower():
            return Comparison(
                False, MismatchKind.COLUMN_NAME,
                f"Column mismatch at position {position}: expected '{expected}', got '{got}'.",
            )

    submitted_rows = sort_rows(submitted.rows or [], _first(submitted.column_names))
    reference_rows = sort_rows(reference.rows or [], _first(reference.column_names))

    for row_number, (got_row, expected_row) in enumerate(zip(submitted_rows, reference_rows), start=1):
        got_values = submitted.row_values(got_row)
        expected_values = reference.row_values(expected_row)
        for column_name, got, expected in zip(reference.column_names, got_values, expected_values):
            if normalize_value(got) != normalize_value(expected):
                return Comparison(
                    False, MismatchKind.VALUE,
                    f"Value mismatch in row {row_number}, column '{column_name}': "
                    f"expected {_display(expected)}, got {_display(got)}.",
                )

    return EQUIVALENT


def build_hint(comparison: Comparison, static_hint: Optional[str] = None) -> Optional[str]:
    """Mismatch description first, then the question's own hint."""
    if comparison.equivalent:
        return None
    parts = [comparison.detail] if comparison.detail else []
    if static_hint:
        parts.append(static_hint)
    return "\n".join(parts)


def _first(names: List[str]) -> Optional[str]:
    return names[0] if names else None


def _display(value: Any) -> str:
    if value is None:
        return "NULL"
    if isinstance(value, str):
        return f"'{value}'"
    return str(value)
