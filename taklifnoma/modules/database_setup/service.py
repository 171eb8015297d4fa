import re
import logging
from typing import List
from supabase import Client
from taklifnoma.database.schema import SCHEMA_STEPS, REQUIRED_TABLES
from taklifnoma.modules.database_setup.schemas import SetupResult, DatabaseStatus

logger = logging.getLogger(__name__)

# PostgREST code returned when the called RPC function does not exist
RPC_NOT_FOUND_CODE = "PGRST202"

_DOLLAR_TAG = re.compile(r"\$(?:[A-Za-z_][A-Za-z0-9_]*)?\$")


class SchemaSetupError(Exception):
    pass


def split_sql_statements(sql: str) -> List[str]:
    """Split a SQL script into statements on top-level semicolons.

    Semicolons inside quoted strings, quoted identifiers and dollar-quoted
    function bodies are kept. Line comments are dropped.
    """
    statements = []
    buf = []
    quote = None
    dollar_tag = None
    i = 0
    n = len(sql)
    while i < n:
        ch = sql[i]
        if dollar_tag:
            if sql.startswith(dollar_tag, i):
                buf.append(dollar_tag)
                i += len(dollar_tag)
                dollar_tag = None
            else:
                buf.append(ch)
                i += 1
            continue
        if quote:
            buf.append(ch)
            if ch == quote:
                quote = None
            i += 1
            continue
        if sql.startswith("--", i):
            end = sql.find("\n", i)
            i = n if end == -1 else end
            continue
        if ch in ("'", '"'):
            quote = ch
        elif ch == "$":
            match = _DOLLAR_TAG.match(sql, i)
            if match:
                dollar_tag = match.group(0)
                buf.append(dollar_tag)
                i = match.end()
                continue
        elif ch == ";":
            statement = "".join(buf).strip()
            if statement:
                statements.append(statement)
            buf = []
            i += 1
            continue
        buf.append(ch)
        i += 1

    statement = "".join(buf).strip()
    if statement:
        statements.append(statement)
    return statements


class DatabaseSetupService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _exec(self, sql: str) -> None:
        self.supabase.rpc("exec_sql", {"sql_query": sql}).execute()

    def execute_sql(self, sql: str) -> None:
        """Run a script through the exec_sql RPC.

        If the script as a whole is rejected, each statement is retried on its
        own so one bad statement does not hide the rest. Raises
        SchemaSetupError when the RPC is missing or any statement failed.
        """
        try:
            self._exec(sql)
            return
        except Exception as e:
            if getattr(e, "code", None) == RPC_NOT_FOUND_CODE:
                raise SchemaSetupError(
                    "exec_sql RPC function is not installed; create it with the bootstrap SQL first"
                ) from e
            logger.warning(f"exec_sql rejected script ({e}), retrying statement by statement")

        failures = []
        for statement in split_sql_statements(sql):
            try:
                self._exec(statement)
            except Exception as e:
                logger.error(f"SQL statement failed: {statement[:50]}... ({e})")
                failures.append(str(e))
        if failures:
            raise SchemaSetupError(f"{len(failures)} statement(s) failed: {failures[0]}")

    def setup_database(self) -> SetupResult:
        """Create tables, RLS policies, indexes and triggers in order.

        Stops at the first failing step; steps already applied stay applied.
        """
        logger.info("Database setup started")
        completed = []
        for step in SCHEMA_STEPS:
            logger.info(f"Provisioning: {step.description}")
            try:
                self.execute_sql(step.sql)
            except Exception as e:
                logger.error(f"Database setup failed at step '{step.name}': {e}")
                return SetupResult(
                    success=False,
                    message=str(e),
                    completed_steps=completed,
                    failed_step=step.name,
                )
            completed.append(step.name)

        logger.info("Database setup completed")
        return SetupResult(success=True, message="Database setup completed", completed_steps=completed)

    def check_database_status(self) -> DatabaseStatus:
        logger.info("Checking database status")
        status = {}
        for table in REQUIRED_TABLES:
            try:
                self.supabase.table(table).select("id").limit(1).execute()
                status[table] = True
                logger.info(f"Table {table} exists")
            except Exception as e:
                status[table] = False
                logger.warning(f"Table {table} is missing or unreadable: {e}")

        all_tables_exist = all(status.values())
        return DatabaseStatus(
            status=status,
            all_tables_exist=all_tables_exist,
            message="All tables exist" if all_tables_exist else "Some tables are missing",
        )

    def reset_database(self) -> SetupResult:
        logger.info("Database reset started")
        result = self.setup_database()
        if result.success:
            result.message = "Database reset completed"
        return result
