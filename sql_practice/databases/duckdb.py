import os.path
from typing import Dict, Any, List, Optional
import logging

import duckdb

from sql_practice.databases.base_handler import DatabaseHandler
from sql_practice.databases.types import StoreKind
from sql_practice.errors import NotInitializedError

logger = logging.getLogger(__name__)

IN_MEMORY = ":memory:"


class DuckDBHandler(DatabaseHandler):
    def __init__(self, kind: StoreKind, database_path: str = IN_MEMORY,
                 config: Optional[Dict[str, Any]] = None,
                 connection_config: Optional[Dict[str, Any]] = None):
        super().__init__(kind=kind, config=config)
        self.database_path = database_path
        # passed to duckdb.connect; startup-only options such as enable_external_access
        self.connection_config = connection_config or {}
        self.connection: Optional[duckdb.DuckDBPyConnection] = None

    @property
    def is_open(self) -> bool:
        return self.connection is not None

    @property
    def is_in_memory(self) -> bool:
        return self.database_path == IN_MEMORY

    def _get_connection(self) -> duckdb.DuckDBPyConnection:
        if self.connection is None:
            raise NotInitializedError(f"{self.kind.value} store connection is not open")
        return self.connection

    def open(self) -> None:
        if self.connection is not None:
            return

        if not self.is_in_memory:
            parent = os.path.dirname(self.database_path)
            if parent:
                os.makedirs(parent, exist_ok=True)

        conn = duckdb.connect(database=self.database_path, config=dict(self.connection_config))

        # Apply DuckDB-specific settings if configured
        duckdb_settings = self.config.get('duckdb_settings') or {}
        for setting, value in duckdb_settings.items():
            conn.sql(f"SET {setting} = '{value}'")

        self.connection = conn
        self.generation += 1
        logger.debug(f"Opened {self.kind.value} store at {self.database_path}")

    def run(self, sql: str) -> duckdb.DuckDBPyConnection:
        return self._get_connection().execute(sql)

    def execute_ddl(self, sql: str) -> None:
        """
        Execute a DDL/DML statement that doesn't return a result set.
        Used for schema and seed scripts.
        """
        try:
            self._get_connection().execute(sql)
        except duckdb.Error as e:
            logger.error(f"DuckDB DDL/DML failed on {self.kind.value} store: {e}")
            logger.error(f"Failed SQL (first 200 chars): {sql[:200]}")
            raise RuntimeError(f"DuckDB DDL/DML execution failed: {e}") from e

    def parse(self, sql: str) -> List[Any]:
        return self._get_connection().extract_statements(sql)

    def table_exists(self, table_name: str) -> bool:
        row = self._get_connection().execute(
            "SELECT COUNT(*) FROM information_schema.tables WHERE lower(table_name) = lower(?)",
            [table_name],
        ).fetchone()
        return bool(row and row[0])

    def interrupt(self) -> None:
        if self.connection is not None:
            self.connection.interrupt()

    def abandon(self) -> None:
        if self.connection is not None:
            logger.warning(f"Abandoning stuck {self.kind.value} store connection")
        self.connection = None

    def close(self) -> None:
        if self.connection is None:
            return
        conn, self.connection = self.connection, None
        conn.close()
        logger.debug(f"Closed {self.kind.value} store connection")
