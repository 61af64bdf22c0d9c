from __future__ import annotations

from pathlib import Path
from unittest import mock

import pytest

from sql_practice.databases.config_manager import DEFAULT_CONFIG
from sql_practice.databases.duckdb import DuckDBHandler
from sql_practice.databases.types import StoreKind
from sql_practice.errors import InitializationError, ScriptNotFoundError
from sql_practice.schemas.schema_manager import SchemaManager


def test_split_statements_drops_comments_and_blanks() -> None:
    script = """
    -- header comment
    CREATE TABLE a (x INTEGER); -- trailing
    /* block
       comment */
    INSERT INTO a VALUES (1);
    ;
    /* one */ INSERT INTO a VALUES (2); /* two */
    """

    assert SchemaManager.split_statements(script) == [
        "CREATE TABLE a (x INTEGER)",
        "INSERT INTO a VALUES (1)",
        "INSERT INTO a VALUES (2)",
    ]


def test_split_statements_of_comment_only_script() -> None:
    assert SchemaManager.split_statements("-- nothing\n/* here */\n") == []


def test_missing_schema_directory(tmp_path: Path) -> None:
    with pytest.raises(ScriptNotFoundError):
        SchemaManager(tmp_path / "absent")


def test_missing_script_is_reported_as_file_not_found(tmp_path: Path) -> None:
    manager = SchemaManager(tmp_path)

    with pytest.raises(FileNotFoundError, match="nope.sql"):
        manager.load_script("nope")


def test_empty_script_is_an_initialization_error(tmp_path: Path) -> None:
    (tmp_path / "empty.sql").write_text("-- only a comment\n")

    with pytest.raises(InitializationError, match="No SQL statements"):
        SchemaManager(tmp_path).load_script("empty")


@pytest.mark.parametrize(
    "script_name, statements",
    [("main_schema", 3), ("practice_schema", 6), ("practice_seed", 6)],
)
def test_packaged_scripts_load(script_name: str, statements: int) -> None:
    manager = SchemaManager(Path(DEFAULT_CONFIG["schema_directory"]))

    assert len(manager.load_script(script_name)) == statements


def test_apply_script_runs_statements_in_order(tmp_path: Path) -> None:
    (tmp_path / "build.sql").write_text(
        "CREATE TABLE a (x INTEGER);\nINSERT INTO a VALUES (1), (2);\nINSERT INTO a SELECT x + 10 FROM a;\n"
    )
    handler = DuckDBHandler(StoreKind.PRACTICE)
    handler.open()
    try:
        applied = SchemaManager(tmp_path).apply_script(handler, "build")

        assert applied == 3
        assert handler.run("SELECT COUNT(*) FROM a").fetchone() == (4,)
    finally:
        handler.close()


def test_apply_script_stops_at_failing_statement(tmp_path: Path) -> None:
    (tmp_path / "broken.sql").write_text("CREATE TABLE a (x INTEGER);\nINSERT INTO b VALUES (1);\nDROP TABLE a;\n")
    handler = DuckDBHandler(StoreKind.PRACTICE)
    handler.open()
    try:
        with mock.patch.object(handler, "execute_ddl", wraps=handler.execute_ddl) as spy, \
                pytest.raises(InitializationError, match="broken failed on statement 2"):
            SchemaManager(tmp_path).apply_script(handler, "broken")

        assert spy.call_count == 2
        assert handler.table_exists("a")
    finally:
        handler.close()
