from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Any, Optional


class StatementCategory(Enum):
    """Coarse statement classification by leading keyword."""
    READ = "read"
    MUTATE = "mutate"
    SCHEMA_DEFINE = "schema_define"
    TRANSACTION_CONTROL = "transaction_control"
    ACCESS_CONTROL = "access_control"
    OTHER = "other"
    UNKNOWN = "unknown"


@dataclass
class TabularResult:
    """
    Standardized container for the outcome of one statement execution.

    Every execution, successful or not, is reported in this format. Rows are
    only present for read statements; a failed execution carries no rows and
    its message explains the failure.
    """
    success: bool
    message: str
    statement_category: StatementCategory = StatementCategory.UNKNOWN
    column_names: List[str] = field(default_factory=list)   # store-reported order
    rows: Optional[List[Dict[str, Any]]] = None              # None for non-read statements
    row_count: int = 0                                       # rows fetched, or rows affected
    execution_time_ms: int = 0
    truncated: bool = False                                  # row cap reached

    def __post_init__(self):
        if self.rows is not None:
            self.row_count = len(self.rows)

    @property
    def column_count(self) -> int:
        return len(self.column_names)

    def is_empty(self) -> bool:
        return not self.rows

    def row_values(self, row: Dict[str, Any]) -> List[Any]:
        """Values of a row in column order."""
        return [row.get(name) for name in self.column_names]

    def value_at(self, row: int, column: int) -> Any:
        if self.rows is not None and row < len(self.rows) and column < self.column_count:
            return self.rows[row].get(self.column_names[column])
        return None

    @classmethod
    def failure(cls, message: str,
                category: StatementCategory = StatementCategory.UNKNOWN,
                execution_time_ms: int = 0) -> "TabularResult":
        return cls(
            success=False,
            message=message,
            statement_category=category,
            execution_time_ms=execution_time_ms,
        )
