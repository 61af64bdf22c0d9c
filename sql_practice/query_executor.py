import logging
import re
import threading
import time
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FuturesTimeoutError, Future
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import duckdb

from sql_practice.databases.base_handler import DatabaseHandler
from sql_practice.databases.lifecycle import DatabaseLifecycleManager
from sql_practice.databases.types import StoreKind
from sql_practice.errors import ConnectionReplacedError, PracticeError
from sql_practice.results.query_result import StatementCategory, TabularResult
from sql_practice.results.validation_result import SyntaxCheck

logger = logging.getLogger(__name__)

_CATEGORY_KEYWORDS = {
    StatementCategory.READ: ("SELECT", "WITH", "VALUES", "TABLE", "FROM", "SHOW",
                             "DESCRIBE", "DESC", "EXPLAIN", "SUMMARIZE"),
    StatementCategory.MUTATE: ("INSERT", "UPDATE", "DELETE", "MERGE", "UPSERT", "REPLACE", "COPY"),
    StatementCategory.SCHEMA_DEFINE: ("CREATE", "DROP", "ALTER", "TRUNCATE", "COMMENT", "RENAME"),
    StatementCategory.TRANSACTION_CONTROL: ("BEGIN", "START", "COMMIT", "END", "ROLLBACK",
                                            "ABORT", "SAVEPOINT", "RELEASE"),
    StatementCategory.ACCESS_CONTROL: ("GRANT", "REVOKE"),
}

CATEGORY_BY_KEYWORD: Dict[str, StatementCategory] = {
    keyword: category
    for category, keywords in _CATEGORY_KEYWORDS.items()
    for keyword in keywords
}

# Statements that EXPLAIN can bind without running them
_BINDABLE_KEYWORDS = ("SELECT", "WITH", "VALUES", "TABLE", "FROM")

_LEADING_NOISE = re.compile(r"^(?:\s+|--[^\n]*(?:\n|$)|/\*.*?\*/|\()+", re.DOTALL)
_KEYWORD = re.compile(r"[A-Za-z_]+")


def leading_keyword(sql: str) -> str:
    """Upper-cased first keyword after whitespace, comments and opening parentheses."""
    stripped = _LEADING_NOISE.sub("", sql, count=1)
    match = _KEYWORD.match(stripped)
    return match.group(0).upper() if match else ""


def classify(sql: str) -> StatementCategory:
    if sql is None or not sql.strip():
        raise ValueError("Empty query")
    return CATEGORY_BY_KEYWORD.get(leading_keyword(sql), StatementCategory.OTHER)


def unique_column_names(names: List[str]) -> List[str]:
    """Suffix repeated names (id, id -> id, id_1) so every row maps each column once."""
    seen: Dict[str, int] = {}
    taken = set(names)
    unique = []
    for name in names:
        if name not in seen:
            seen[name] = 0
            unique.append(name)
            continue
        suffix = seen[name]
        candidate = name
        while candidate in taken:
            suffix += 1
            candidate = f"{name}_{suffix}"
        seen[name] = suffix
        taken.add(candidate)
        unique.append(candidate)
    return unique


@dataclass(frozen=True)
class ExecutionOptions:
    timeout_seconds: float = 30
    max_rows: int = 1000


@dataclass
class _Fetched:
    columns: List[str]
    rows: Optional[List[Tuple[Any, ...]]]
    truncated: bool = False
    affected: Optional[int] = None


def elapsed_ms(start: float) -> int:
    """Milliseconds since a time.perf_counter() reading, never negative."""
    return max(0, int((time.perf_counter() - start) * 1000))


class QueryExecutor:
    """
    Runs one SQL statement against a store handle under a time bound and a row cap.

    Nothing raised by the store escapes execute(): empty input, store errors,
    timeouts and busy handles all come back as a failed TabularResult.

    Each store gets its own single-worker pool. A worker stuck on a connection
    that ignored an interrupt is left behind with its pool, and the store's
    next statement starts on a fresh one.
    """

    def __init__(self, databases: DatabaseLifecycleManager,
                 options: Optional[ExecutionOptions] = None,
                 interrupt_grace_seconds: Optional[float] = None):
        self.databases = databases
        config = databases.config
        self.default_options = options or ExecutionOptions(
            timeout_seconds=config['query_timeout_seconds'],
            max_rows=config['max_result_rows'],
        )
        if interrupt_grace_seconds is None:
            interrupt_grace_seconds = config['interrupt_grace_seconds']
        self.interrupt_grace_seconds = interrupt_grace_seconds
        self._pools: Dict[StoreKind, ThreadPoolExecutor] = {}
        self._pools_lock = threading.Lock()

    def _pool_for(self, kind: StoreKind) -> ThreadPoolExecutor:
        with self._pools_lock:
            pool = self._pools.get(kind)
            if pool is None:
                pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"sql-{kind.value}")
                self._pools[kind] = pool
            return pool

    def _retire_pool(self, kind: StoreKind) -> None:
        with self._pools_lock:
            pool = self._pools.pop(kind, None)
        if pool is not None:
            pool.shutdown(wait=False, cancel_futures=True)

    def shutdown(self) -> None:
        with self._pools_lock:
            pools, self._pools = list(self._pools.values()), {}
        for pool in pools:
            pool.shutdown(wait=False, cancel_futures=True)

    def execute(self, sql: str, store: StoreKind = StoreKind.PRACTICE,
                options: Optional[ExecutionOptions] = None) -> TabularResult:
        if sql is None or not sql.strip():
            return TabularResult.failure("Empty query")
        return self.execute_on_handle(sql, self.databases.handle(store), options)

    def execute_on_handle(self, sql: str, handle: DatabaseHandler,
                          options: Optional[ExecutionOptions] = None) -> TabularResult:
        if sql is None or not sql.strip():
            return TabularResult.failure("Empty query")

        options = options or self.default_options
        sql = sql.strip()
        category = classify(sql)

        if not handle.try_acquire():
            logger.info(f"Rejected statement: {handle.kind.value} store is busy")
            return TabularResult.failure(
                f"Store busy: the {handle.kind.value} database is being reset or is running another statement",
                category,
            )

        try:
            logger.debug(f"Executing {category.value} statement: {sql[:200]}")
            return self._execute_exclusive(sql, handle, category, options)
        except Exception as e:
            logger.exception("Unexpected error during query execution")
            return TabularResult.failure(f"Unexpected error: {e}", category)
        finally:
            handle.release()

    def _execute_exclusive(self, sql: str, handle: DatabaseHandler,
                           category: StatementCategory, options: ExecutionOptions) -> TabularResult:
        start = time.perf_counter()
        try:
            statements = handle.parse(sql)
        except duckdb.Error as e:
            logger.error(f"SQL parse error: {e}")
            return TabularResult.failure(f"SQL Error: {e}", category, elapsed_ms(start))
        if not statements:
            return TabularResult.failure("No SQL statement found", category, elapsed_ms(start))
        if len(statements) > 1:
            return TabularResult.failure("Only one statement can be executed at a time", category, elapsed_ms(start))

        future = self._pool_for(handle.kind).submit(
            self._run_statement, handle, handle.generation, sql, category, options.max_rows
        )
        try:
            fetched = future.result(timeout=options.timeout_seconds)
        except FuturesTimeoutError:
            execution_time = elapsed_ms(start)
            logger.warning(f"Statement exceeded {options.timeout_seconds}s on {handle.kind.value} store, interrupting")
            if not future.cancel():
                self._cancel(handle, future)
            return TabularResult.failure(
                f"Query timed out after {options.timeout_seconds} seconds",
                category,
                execution_time,
            )
        except duckdb.Error as e:
            execution_time = elapsed_ms(start)
            logger.error(f"SQL execution error: {e}")
            return TabularResult.failure(f"SQL Error: {e}", category, execution_time)
        except ConnectionReplacedError as e:
            logger.warning(str(e))
            return TabularResult.failure(f"Statement discarded: {e}", category, elapsed_ms(start))

        execution_time = elapsed_ms(start)
        return self._build_result(sql, category, fetched, execution_time)

    def _cancel(self, handle: DatabaseHandler, future: Future) -> None:
        handle.interrupt()
        try:
            future.result(timeout=self.interrupt_grace_seconds)
        except FuturesTimeoutError:
            # the worker is stuck on the old connection; leave it there with its pool
            self._retire_pool(handle.kind)
            try:
                self.databases.recover(handle)
            except PracticeError as e:
                logger.error(f"Could not recover {handle.kind.value} store after timeout: {e}")
        except Exception as e:
            logger.debug(f"Interrupted statement ended with: {e}")

    @staticmethod
    def _run_statement(handle: DatabaseHandler, generation: int, sql: str,
                       category: StatementCategory, max_rows: int) -> _Fetched:
        if handle.generation != generation:
            raise ConnectionReplacedError(
                f"{handle.kind.value} store connection was replaced before the statement started"
            )
        cursor = handle.run(sql)
        columns = [d[0] for d in cursor.description] if cursor.description else []

        if category is StatementCategory.READ:
            # one extra row tells us whether the cap cut the result short
            rows = cursor.fetchmany(max_rows + 1)
            truncated = len(rows) > max_rows
            return _Fetched(columns=columns, rows=rows[:max_rows], truncated=truncated)

        affected = None
        if category is StatementCategory.MUTATE and columns == ["Count"]:
            row = cursor.fetchone()
            affected = int(row[0]) if row else 0
        return _Fetched(columns=columns, rows=None, affected=affected)

    @staticmethod
    def _build_result(sql: str, category: StatementCategory,
                      fetched: _Fetched, execution_time: int) -> TabularResult:
        if category is StatementCategory.READ:
            column_names = unique_column_names(fetched.columns)
            rows = [dict(zip(column_names, row)) for row in fetched.rows]
            message = f"Query executed successfully. Retrieved {len(rows)} row(s)."
            if fetched.truncated:
                message += f" Result truncated to the first {len(rows)} row(s)."
            return TabularResult(
                success=True,
                message=message,
                statement_category=category,
                column_names=column_names,
                rows=rows,
                execution_time_ms=execution_time,
                truncated=fetched.truncated,
            )

        keyword = leading_keyword(sql)
        if category is StatementCategory.MUTATE:
            affected = fetched.affected or 0
            message = f"{keyword} executed successfully. {affected} row(s) affected."
        elif category is StatementCategory.SCHEMA_DEFINE:
            affected = 0
            message = f"{keyword} statement executed successfully."
        else:
            affected = 0
            message = "Statement executed successfully."

        return TabularResult(
            success=True,
            message=message,
            statement_category=category,
            row_count=affected,
            execution_time_ms=execution_time,
        )

    def validate_syntax(self, sql: str, store: StoreKind = StoreKind.PRACTICE) -> SyntaxCheck:
        """
        Check that sql parses (and, for a single query, binds) without running it.
        """
        if sql is None or not sql.strip():
            return SyntaxCheck(valid=False, message="Empty query")

        handle = self.databases.handle(store)
        if not handle.try_acquire():
            return SyntaxCheck(valid=False, message=f"Store busy: the {handle.kind.value} database is in use")

        try:
            statements = handle.parse(sql)
            if not statements:
                return SyntaxCheck(valid=False, message="No SQL statement found")
            if len(statements) == 1 and leading_keyword(sql) in _BINDABLE_KEYWORDS:
                handle.run(f"EXPLAIN {sql.strip().rstrip(';')}").fetchall()
            return SyntaxCheck(valid=True, message="SQL syntax is valid")
        except duckdb.Error as e:
            return SyntaxCheck(valid=False, message=f"SQL syntax error: {e}")
        finally:
            handle.release()
