from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict
from unittest import mock

import pytest

from sql_practice.databases.lifecycle import DatabaseLifecycleManager
from sql_practice.databases.types import StoreKind
from sql_practice.errors import (
    InitializationError,
    NotInitializedError,
    ResetError,
    StoreBusyError,
)
from sql_practice.query_executor import QueryExecutor

from conftest import SEED_COUNTS, count_rows


def test_handles_before_open_raise_not_initialized(config: Dict[str, Any]) -> None:
    manager = DatabaseLifecycleManager(config)

    with pytest.raises(NotInitializedError):
        manager.main_handle()
    with pytest.raises(NotInitializedError):
        manager.practice_handle()


def test_open_creates_main_store_file_with_sentinel(databases: DatabaseLifecycleManager,
                                                    config: Dict[str, Any]) -> None:
    assert os.path.exists(config["main_database_path"])

    main = databases.main_handle()
    practice = databases.practice_handle()
    assert main.kind is StoreKind.MAIN and main.is_open
    assert practice.kind is StoreKind.PRACTICE and practice.is_open
    assert main.table_exists("user_progress")
    assert not practice.table_exists("user_progress")


def test_main_schema_is_applied_only_once(config: Dict[str, Any]) -> None:
    with DatabaseLifecycleManager(config) as first:
        first.main_handle().execute_ddl(
            "INSERT INTO user_progress (question_id, completed, attempts) VALUES ('easy_2', TRUE, 3)"
        )

    second = DatabaseLifecycleManager(config)
    with mock.patch.object(second.schema_manager, "apply_script",
                           wraps=second.schema_manager.apply_script) as spy:
        second.open()
    try:
        applied = [c.args[1] for c in spy.call_args_list]
        assert applied == ["practice_schema", "practice_seed"]

        row = second.main_handle().run("SELECT attempts FROM user_progress WHERE question_id = 'easy_2'").fetchone()
        assert row == (3,)
    finally:
        second.close()


@pytest.mark.parametrize("table, expected", sorted(SEED_COUNTS.items()))
def test_open_seeds_practice_store(executor: QueryExecutor, table: str, expected: int) -> None:
    assert count_rows(executor, table) == expected


def test_reset_restores_seed_counts_after_mutations(databases: DatabaseLifecycleManager,
                                                    executor: QueryExecutor) -> None:
    assert executor.execute("DELETE FROM employees WHERE department_id = 1").success
    assert executor.execute("INSERT INTO orders (id, customer_id, total_amount) VALUES (99, 1, 10.0)").success
    assert executor.execute("DROP TABLE projects").success
    assert executor.execute("CREATE TABLE scratch (x INTEGER)").success

    for _ in range(2):
        databases.reset()
        for table, expected in SEED_COUNTS.items():
            assert count_rows(executor, table) == expected

    assert not databases.practice_handle().table_exists("scratch")


def test_reset_does_not_touch_main_store(databases: DatabaseLifecycleManager,
                                         executor: QueryExecutor) -> None:
    result = executor.execute("INSERT INTO user_progress (question_id) VALUES ('pro_1')", StoreKind.MAIN)
    assert result.success, result.message

    databases.reset()

    check = executor.execute("SELECT question_id FROM user_progress", StoreKind.MAIN)
    assert [row["question_id"] for row in check.rows] == ["pro_1"]


def test_reset_fails_fast_while_statement_holds_handle(databases: DatabaseLifecycleManager) -> None:
    handle = databases.practice_handle()
    assert handle.try_acquire()
    try:
        with pytest.raises(StoreBusyError):
            databases.reset()
    finally:
        handle.release()

    databases.reset()


def test_reset_retries_once_before_failing(databases: DatabaseLifecycleManager,
                                           executor: QueryExecutor) -> None:
    real_apply = databases.schema_manager.apply_script
    calls = {"n": 0}

    def flaky_apply(handle, script_name):
        calls["n"] += 1
        if calls["n"] == 1:
            raise InitializationError("simulated failure")
        return real_apply(handle, script_name)

    with mock.patch.object(databases.schema_manager, "apply_script", side_effect=flaky_apply):
        databases.reset()

    assert count_rows(executor, "employees") == 10


def test_reset_raises_reset_error_after_second_failure(databases: DatabaseLifecycleManager) -> None:
    with mock.patch.object(databases.schema_manager, "apply_script",
                           side_effect=InitializationError("broken script")) as spy:
        with pytest.raises(ResetError):
            databases.reset()

    assert spy.call_count == 2
    assert not databases.practice_handle().is_open


def test_open_fails_when_script_is_missing(config: Dict[str, Any], tmp_path: Path) -> None:
    schema_dir = tmp_path / "schemas"
    schema_dir.mkdir()
    (schema_dir / "main_schema.sql").write_text("CREATE TABLE user_progress (question_id VARCHAR);")
    (schema_dir / "practice_schema.sql").write_text("CREATE TABLE t (x INTEGER);")

    manager = DatabaseLifecycleManager({**config, "schema_directory": str(schema_dir)})
    with pytest.raises(InitializationError, match="practice_seed"):
        manager.open()

    assert not manager.is_open
    with pytest.raises(NotInitializedError):
        manager.practice_handle()


def test_open_fails_when_script_does_not_apply(config: Dict[str, Any], tmp_path: Path) -> None:
    schema_dir = tmp_path / "schemas"
    schema_dir.mkdir()
    (schema_dir / "main_schema.sql").write_text("CREATE TABLE user_progress (question_id VARCHAR);")
    (schema_dir / "practice_schema.sql").write_text("CREATE TABLE t (x INTEGER);")
    (schema_dir / "practice_seed.sql").write_text("INSERT INTO missing_table VALUES (1);")

    manager = DatabaseLifecycleManager({**config, "schema_directory": str(schema_dir)})
    with pytest.raises(InitializationError, match="statement 1"):
        manager.open()


def test_close_is_idempotent(config: Dict[str, Any]) -> None:
    manager = DatabaseLifecycleManager(config)
    manager.open()
    main = manager.main_handle()
    practice = manager.practice_handle()

    manager.close()
    manager.close()

    assert not main.is_open
    assert not practice.is_open
    with pytest.raises(NotInitializedError):
        manager.main_handle()


def test_close_swallows_individual_close_errors(config: Dict[str, Any]) -> None:
    manager = DatabaseLifecycleManager(config)
    manager.open()
    main = manager.main_handle()

    with mock.patch.object(manager.practice_handle(), "close", side_effect=RuntimeError("boom")):
        manager.close()

    assert not main.is_open
