from typing import List, Dict, Any

from sql_practice.databases.base_handler import DatabaseHandler
from sql_practice.databases.duckdb import DuckDBHandler, IN_MEMORY
from sql_practice.databases.types import StoreKind


class DatabaseFactory:

    @classmethod
    def create_handler(cls, kind: StoreKind, config: Dict[str, Any]) -> DatabaseHandler:
        """Main is file-backed, practice always lives in memory."""
        if kind is StoreKind.MAIN:
            database_path = config.get('main_database_path', "")
            if not database_path:
                raise ValueError("main_database_path is not configured")
            return DuckDBHandler(kind=kind, database_path=str(database_path), config=config)
        if kind is StoreKind.PRACTICE:
            # learner SQL runs here, so no COPY/ATTACH/read_csv against the host filesystem
            external_access = bool(config.get('practice_external_access', False))
            return DuckDBHandler(kind=kind, database_path=IN_MEMORY, config=config,
                                 connection_config={'enable_external_access': external_access})
        raise ValueError(f'Store kind {kind} not supported')

    @classmethod
    def get_supported_store_kinds(cls) -> List[str]:
        return [kind.value for kind in StoreKind]
