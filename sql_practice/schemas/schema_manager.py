from pathlib import Path
import logging
from typing import List

from sql_practice.databases.base_handler import DatabaseHandler
from sql_practice.errors import InitializationError, ScriptNotFoundError

logger = logging.getLogger(__name__)


class SchemaManager:
    """Manages schema and seed creation using external SQL files."""

    def __init__(self, schema_dir: Path):
        self.schema_dir = Path(schema_dir)
        if not self.schema_dir.exists():
            raise ScriptNotFoundError(f"Schema directory not found: {schema_dir}")

        logger.debug(f"Initialized SchemaManager with schema directory: {schema_dir}")

    def _get_script_path(self, script_name: str) -> Path:
        """
        Get the file path for a named script.
        """
        script_file = self.schema_dir / f"{script_name}.sql"

        if not script_file.exists():
            raise ScriptNotFoundError(
                f"Script not found: {script_file}. "
                f"Please create a file named {script_name}.sql in {self.schema_dir}"
            )

        return script_file

    @staticmethod
    def split_statements(script: str) -> List[str]:
        """Strip comments and split a script on ';' terminators."""
        lines = []
        for line in script.split("\n"):
            if '--' in line:
                line = line[:line.index('--')]
            lines.append(line)

        sql_without_comments = "\n".join(lines)

        while "/*" in sql_without_comments and "*/" in sql_without_comments:
            start = sql_without_comments.index("/*")
            end = sql_without_comments.find("*/", start)
            if end == -1:
                break
            sql_without_comments = sql_without_comments[:start] + sql_without_comments[end + 2:]

        statements = []
        for statement in sql_without_comments.split(';'):
            cleaned_statement = statement.strip()
            if cleaned_statement:
                statements.append(cleaned_statement)

        return statements

    def load_script(self, script_name: str) -> List[str]:
        script_file = self._get_script_path(script_name)
        with open(script_file, "r", encoding="utf-8") as script:
            sql_script = script.read()

        statements = self.split_statements(sql_script)
        if not statements:
            raise InitializationError(f"No SQL statements found in script file {script_file}")

        return statements

    def apply_script(self, database_handler: DatabaseHandler, script_name: str) -> int:
        """
        Apply every statement of a named script to the handler, in order.
        Returns the number of statements executed.
        """
        logger.info(f"Applying script {script_name} to {database_handler.kind.value} store")

        sql_statements = self.load_script(script_name)

        for i, statement in enumerate(sql_statements):
            try:
                logger.debug(f"Executing statement {i+1}/{len(sql_statements)}: "
                             f"{statement[:50]}{'...' if len(statement) > 50 else ''}")
                database_handler.execute_ddl(statement)
            except Exception as e:
                logger.error(f"Failed to execute statement {i+1} of {script_name}: {statement[:100]}")
                raise InitializationError(
                    f"Script {script_name} failed on statement {i+1}: {e}"
                ) from e

        logger.info(f"Successfully applied {script_name} with {len(sql_statements)} statements")
        return len(sql_statements)
