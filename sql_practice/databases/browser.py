import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from sql_practice.databases.types import StoreKind
from sql_practice.query_executor import QueryExecutor
from sql_practice.results.query_result import TabularResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColumnInfo:
    name: str
    data_type: str
    nullable: bool
    default: Optional[str] = None


def _literal(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def _identifier(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


class DatabaseBrowser:
    """Read-only look at the tables of a store, for schema panels and the CLI."""

    def __init__(self, executor: QueryExecutor, store: StoreKind = StoreKind.PRACTICE):
        self.executor = executor
        self.store = store

    def _query(self, sql: str) -> TabularResult:
        result = self.executor.execute(sql, self.store)
        if not result.success:
            logger.warning(f"Browser query failed on {self.store.value} store: {result.message}")
        return result

    def list_tables(self) -> List[str]:
        result = self._query(
            "SELECT table_name FROM information_schema.tables "
            "WHERE table_schema = 'main' AND table_type = 'BASE TABLE' ORDER BY table_name"
        )
        return [row["table_name"] for row in result.rows or []]

    def table_columns(self, table_name: str) -> List[ColumnInfo]:
        result = self._query(
            "SELECT column_name, data_type, is_nullable, column_default "
            "FROM information_schema.columns "
            f"WHERE table_schema = 'main' AND table_name = {_literal(table_name)} "
            "ORDER BY ordinal_position"
        )
        return [
            ColumnInfo(
                name=row["column_name"],
                data_type=row["data_type"],
                nullable=row["is_nullable"] == "YES",
                default=row["column_default"],
            )
            for row in result.rows or []
        ]

    def table_row_count(self, table_name: str) -> int:
        result = self._query(f"SELECT COUNT(*) AS row_count FROM {_identifier(table_name)}")
        if not result.rows:
            return 0
        return int(result.rows[0]["row_count"])

    def table_sample(self, table_name: str, limit: int = 10) -> List[Dict[str, Any]]:
        result = self._query(f"SELECT * FROM {_identifier(table_name)} LIMIT {int(limit)}")
        return result.rows or []
