import threading
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Any

from sql_practice.databases.types import StoreKind


class DatabaseHandler(ABC):
    """
    One live connection to a relational store.

    The handler object outlives its connection: the lifecycle manager may close
    and reopen the connection any number of times, while the exclusivity flag
    below stays the same for the whole process.
    """

    def __init__(self, kind: StoreKind, config: Optional[Dict[str, Any]] = None):
        self.kind = kind
        self.config = config or {}
        self._in_use = threading.Lock()
        # bumped by every open(), so work submitted against an older connection can tell
        self.generation = 0

    def try_acquire(self) -> bool:
        """Take exclusive ownership of the handle without waiting."""
        return self._in_use.acquire(blocking=False)

    def release(self) -> None:
        self._in_use.release()

    @property
    def is_busy(self) -> bool:
        return self._in_use.locked()

    @property
    @abstractmethod
    def is_open(self) -> bool:
        pass

    @abstractmethod
    def open(self) -> None:
        pass

    @abstractmethod
    def run(self, sql: str):
        """Execute sql and return a cursor positioned on its result."""

    @abstractmethod
    def execute_ddl(self, sql: str) -> None:
        pass

    @abstractmethod
    def parse(self, sql: str) -> List[Any]:
        """Parse sql without executing it, returning the parsed statements."""

    @abstractmethod
    def table_exists(self, table_name: str) -> bool:
        pass

    @abstractmethod
    def interrupt(self) -> None:
        pass

    @abstractmethod
    def abandon(self) -> None:
        """Drop the current connection without closing it."""

    @abstractmethod
    def close(self) -> None:
        pass
