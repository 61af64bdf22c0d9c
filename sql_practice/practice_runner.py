import os
import sys
import logging

from sql_practice.databases.browser import DatabaseBrowser
from sql_practice.databases.config_manager import ConfigurationManager
from sql_practice.databases.lifecycle import DatabaseLifecycleManager
from sql_practice.errors import PracticeError
from sql_practice.practice.practice_service import PracticeService
from sql_practice.query_executor import QueryExecutor
from sql_practice.results.progress import InMemoryProgressRecorder
from sql_practice.results.query_result import TabularResult

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

USAGE = """Usage:
  python -m sql_practice.practice_runner list
  python -m sql_practice.practice_runner tables
  python -m sql_practice.practice_runner run <sql>
  python -m sql_practice.practice_runner check <sql>
  python -m sql_practice.practice_runner validate <question_id> <sql>
  python -m sql_practice.practice_runner reset

Set SQL_PRACTICE_CONFIG_DIR to load practice.yaml from another directory."""


def print_result(result: TabularResult) -> None:
    print(result.message)
    if result.rows is None:
        return
    print(" | ".join(result.column_names))
    for row in result.rows:
        print(" | ".join("NULL" if v is None else str(v) for v in result.row_values(row)))
    print(f"({result.row_count} row(s), {result.execution_time_ms} ms)")


def main() -> int:
    if len(sys.argv) < 2:
        print(USAGE)
        return 1

    command = sys.argv[1]
    args = sys.argv[2:]

    try:
        config = ConfigurationManager(os.getenv("SQL_PRACTICE_CONFIG_DIR")).load_database_config()
    except (FileNotFoundError, ValueError, RuntimeError) as e:
        print(f"Configuration error: {e}")
        return 1

    try:
        with DatabaseLifecycleManager(config) as databases:
            executor = QueryExecutor(databases)
            try:
                return run_command(command, args, databases, executor)
            finally:
                executor.shutdown()
    except PracticeError as e:
        logger.error(f"Database error: {e}")
        return 1


def run_command(command: str, args, databases: DatabaseLifecycleManager, executor: QueryExecutor) -> int:
    if command == "list":
        service = PracticeService(executor)
        for question in service.all_questions():
            print(f"{question.id:<10} {question.difficulty.display_name:<7} "
                  f"{question.effective_points:>3} pts  {question.title}")
        return 0

    if command == "tables":
        browser = DatabaseBrowser(executor)
        for table_name in browser.list_tables():
            print(f"{table_name:<20} {browser.table_row_count(table_name):>5} rows")
        return 0

    if command == "run" and len(args) == 1:
        result = executor.execute(args[0])
        print_result(result)
        return 0 if result.success else 2

    if command == "check" and len(args) == 1:
        check = executor.validate_syntax(args[0])
        print(check.message)
        return 0 if check.valid else 2

    if command == "validate" and len(args) == 2:
        service = PracticeService(executor, progress=InMemoryProgressRecorder())
        outcome = service.validate(args[0], args[1])
        print(f"{outcome.formatted_message} [{outcome.execution_time_display}]")
        if outcome.hint:
            print(outcome.hint)
        return 0 if outcome.correct else 2

    if command == "reset" and not args:
        databases.reset()
        print("Practice database reset completed")
        return 0

    print(USAGE)
    return 1


if __name__ == "__main__":
    sys.exit(main())
