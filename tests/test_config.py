from __future__ import annotations

import logging
from pathlib import Path

import pytest

from sql_practice.databases.config_manager import (
    DEFAULT_CONFIG,
    ConfigurationManager,
    merge_config,
)
from sql_practice.databases.database_factory import DatabaseFactory
from sql_practice.databases.duckdb import IN_MEMORY
from sql_practice.databases.types import StoreKind


def test_packaged_config_loads() -> None:
    config = ConfigurationManager().load_database_config()

    assert config["query_timeout_seconds"] == 30
    assert config["max_result_rows"] == 1000
    assert config["duckdb_settings"] == {"threads": 1}
    assert config["schema_directory"] == DEFAULT_CONFIG["schema_directory"]


def test_yaml_values_override_defaults(tmp_path: Path) -> None:
    (tmp_path / "practice.yaml").write_text(
        "main_database_path: /tmp/elsewhere.duckdb\nquery_timeout_seconds: 5\n"
    )

    config = ConfigurationManager(str(tmp_path)).load_database_config()

    assert config["main_database_path"] == "/tmp/elsewhere.duckdb"
    assert config["query_timeout_seconds"] == 5
    assert config["max_result_rows"] == DEFAULT_CONFIG["max_result_rows"]


def test_empty_yaml_gives_defaults(tmp_path: Path) -> None:
    (tmp_path / "practice.yaml").write_text("")

    assert ConfigurationManager(str(tmp_path)).load_database_config() == DEFAULT_CONFIG


def test_missing_config_directory(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        ConfigurationManager(str(tmp_path / "absent"))


def test_missing_config_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        ConfigurationManager(str(tmp_path)).load_database_config("other.yaml")


@pytest.mark.parametrize("content", ["key: [unclosed", "- just\n- a list\n"])
def test_malformed_config_is_rejected(tmp_path: Path, content: str) -> None:
    (tmp_path / "practice.yaml").write_text(content)

    with pytest.raises(ValueError):
        ConfigurationManager(str(tmp_path)).load_database_config()


def test_unknown_keys_are_ignored_with_warning(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        config = merge_config({"max_result_rows": 5, "colour": "blue"})

    assert config["max_result_rows"] == 5
    assert "colour" not in config
    assert "colour" in caplog.text


def test_merge_does_not_share_nested_defaults() -> None:
    config = merge_config()
    config["duckdb_settings"]["threads"] = 8

    assert DEFAULT_CONFIG["duckdb_settings"] == {}


def test_factory_creates_file_backed_main_and_in_memory_practice(tmp_path: Path) -> None:
    config = merge_config({"main_database_path": str(tmp_path / "main.duckdb")})

    main = DatabaseFactory.create_handler(StoreKind.MAIN, config)
    practice = DatabaseFactory.create_handler(StoreKind.PRACTICE, config)

    assert main.database_path == str(tmp_path / "main.duckdb")
    assert practice.database_path == IN_MEMORY
    assert not main.is_open and not practice.is_open
    assert practice.connection_config == {"enable_external_access": False}
    assert main.connection_config == {}


def test_practice_external_access_can_be_enabled() -> None:
    config = merge_config({"practice_external_access": True})

    practice = DatabaseFactory.create_handler(StoreKind.PRACTICE, config)

    assert practice.connection_config == {"enable_external_access": True}
    assert DatabaseFactory.get_supported_store_kinds() == ["main", "practice"]


def test_factory_requires_main_path() -> None:
    with pytest.raises(ValueError):
        DatabaseFactory.create_handler(StoreKind.MAIN, merge_config({"main_database_path": ""}))
