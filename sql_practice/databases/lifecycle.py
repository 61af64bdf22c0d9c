import logging
import threading
from pathlib import Path
from typing import Dict, Any, Optional

from sql_practice.databases.base_handler import DatabaseHandler
from sql_practice.databases.config_manager import merge_config
from sql_practice.databases.database_factory import DatabaseFactory
from sql_practice.databases.types import StoreKind
from sql_practice.errors import (
    InitializationError,
    NotInitializedError,
    ResetError,
    StoreBusyError,
)
from sql_practice.schemas.schema_manager import SchemaManager

logger = logging.getLogger(__name__)


class DatabaseLifecycleManager:
    """
    Owns the durable main store and the disposable practice store.

    The practice store is rebuilt from the schema and seed scripts on every
    open() and reset(), so it always starts from the same dataset. The main
    store gets its schema script only once, when the sentinel table is missing.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None,
                 schema_manager: Optional[SchemaManager] = None):
        self.config = merge_config(config)
        self._schema_manager = schema_manager
        self._handles: Dict[StoreKind, DatabaseHandler] = {}
        self._initialized = False
        self._reset_lock = threading.Lock()

    def __enter__(self) -> "DatabaseLifecycleManager":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @property
    def is_open(self) -> bool:
        return self._initialized

    @property
    def schema_manager(self) -> SchemaManager:
        if self._schema_manager is None:
            self._schema_manager = SchemaManager(Path(self.config['schema_directory']))
        return self._schema_manager

    def open(self) -> None:
        if self._initialized:
            return
        logger.info("Initializing embedded database system...")

        try:
            main = self._handles.get(StoreKind.MAIN) or DatabaseFactory.create_handler(StoreKind.MAIN, self.config)
            practice = self._handles.get(StoreKind.PRACTICE) or DatabaseFactory.create_handler(StoreKind.PRACTICE, self.config)
            self._handles = {StoreKind.MAIN: main, StoreKind.PRACTICE: practice}

            self._initialize_main(main)
            self._seed_practice(practice)
        except InitializationError:
            logger.error("Failed to initialize database system")
            self._close_handles()
            raise
        except Exception as e:
            logger.error(f"Failed to initialize database system: {e}")
            self._close_handles()
            raise InitializationError(f"Database initialization failed: {e}") from e

        self._initialized = True
        logger.info("Database system initialized successfully")

    def _initialize_main(self, handle: DatabaseHandler) -> None:
        handle.open()
        sentinel = self.config['sentinel_table']
        if handle.table_exists(sentinel):
            logger.info("Main database schema already exists")
            return
        logger.info("Creating main database schema...")
        self.schema_manager.apply_script(handle, self.config['main_schema_script'])

    def _seed_practice(self, handle: DatabaseHandler) -> None:
        handle.open()
        self.schema_manager.apply_script(handle, self.config['practice_schema_script'])
        self.schema_manager.apply_script(handle, self.config['practice_seed_script'])

    def handle(self, kind: StoreKind) -> DatabaseHandler:
        if not self._initialized:
            raise NotInitializedError("Database not initialized")
        return self._handles[kind]

    def main_handle(self) -> DatabaseHandler:
        return self.handle(StoreKind.MAIN)

    def practice_handle(self) -> DatabaseHandler:
        return self.handle(StoreKind.PRACTICE)

    def reset(self) -> None:
        """
        Rebuild the practice store from scratch.

        Raises StoreBusyError if a statement currently holds the practice
        handle, and ResetError if the store cannot be rebuilt after one retry.
        """
        handle = self.practice_handle()
        with self._reset_lock:
            if not handle.try_acquire():
                raise StoreBusyError("Cannot reset practice database while a statement is running")
            try:
                logger.info("Resetting practice database...")
                self._rebuild_practice(handle)
                logger.info("Practice database reset completed")
            finally:
                handle.release()

    def recover(self, handle: DatabaseHandler) -> None:
        """
        Replace a connection that did not respond to an interrupt.

        The caller must already hold the handle's exclusivity flag.
        """
        logger.warning(f"Recovering {handle.kind.value} store after an unresponsive statement")
        handle.abandon()
        if handle.kind is StoreKind.PRACTICE:
            self._rebuild_practice(handle)
        else:
            handle.open()

    def _rebuild_practice(self, handle: DatabaseHandler) -> None:
        self._quiet_close(handle)
        try:
            self._seed_practice(handle)
            return
        except Exception as e:
            logger.warning(f"Practice database rebuild failed, retrying with a clean connection: {e}")

        self._quiet_close(handle)
        try:
            self._seed_practice(handle)
        except Exception as e:
            logger.error(f"Practice database rebuild failed again: {e}")
            self._quiet_close(handle)
            raise ResetError(f"Practice database reset failed: {e}") from e

    @staticmethod
    def _quiet_close(handle: DatabaseHandler) -> None:
        try:
            handle.close()
        except Exception as e:
            logger.warning(f"Error closing {handle.kind.value} connection: {e}")
            handle.abandon()

    def _close_handles(self) -> None:
        # Practice first, main last
        for kind in (StoreKind.PRACTICE, StoreKind.MAIN):
            handle = self._handles.get(kind)
            if handle is not None:
                self._quiet_close(handle)

    def close(self) -> None:
        if not self._initialized and not any(h.is_open for h in self._handles.values()):
            return
        logger.info("Closing database connections...")
        self._close_handles()
        self._initialized = False
        logger.info("Database shutdown completed")
