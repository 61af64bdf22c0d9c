from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import pytest

from sql_practice.databases.lifecycle import DatabaseLifecycleManager
from sql_practice.query_executor import ExecutionOptions, QueryExecutor

SEED_COUNTS = {
    "departments": 5,
    "employees": 10,
    "projects": 5,
    "employee_projects": 10,
    "customers": 5,
    "orders": 8,
}


@pytest.fixture()
def config(tmp_path: Path) -> Dict[str, Any]:
    return {
        "main_database_path": str(tmp_path / "data" / "main.duckdb"),
        "query_timeout_seconds": 10,
        "max_result_rows": 1000,
        "interrupt_grace_seconds": 5.0,
        "duckdb_settings": {"threads": 1},
    }


@pytest.fixture()
def databases(config: Dict[str, Any]):
    manager = DatabaseLifecycleManager(config)
    manager.open()
    yield manager
    manager.close()


@pytest.fixture()
def executor(databases: DatabaseLifecycleManager):
    ex = QueryExecutor(databases, ExecutionOptions(timeout_seconds=10, max_rows=1000))
    yield ex
    ex.shutdown()


def count_rows(executor: QueryExecutor, table: str) -> int:
    result = executor.execute(f"SELECT COUNT(*) AS n FROM {table}")
    assert result.success, result.message
    return int(result.rows[0]["n"])
