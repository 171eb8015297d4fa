"""
Database Setup Script
Provisions the Supabase schema (tables, RLS policies, indexes, triggers).
Run once per project, or again at any time: every step is idempotent.

    python -m taklifnoma.scripts.setup_database            # set up
    python -m taklifnoma.scripts.setup_database --check    # report missing tables
    python -m taklifnoma.scripts.setup_database --reset    # run the full setup again
    python -m taklifnoma.scripts.setup_database --print-bootstrap
"""

import argparse
import logging
import sys

from taklifnoma.database.schema import EXEC_SQL_FUNCTION_SQL
from taklifnoma.database.supabase_client import get_service_supabase
from taklifnoma.modules.database_setup.service import DatabaseSetupService

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Provision the TaklifNoma database schema")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--check", action="store_true", help="only report which tables exist")
    group.add_argument("--reset", action="store_true", help="re-run the whole setup")
    group.add_argument(
        "--print-bootstrap",
        action="store_true",
        help="print the SQL that installs the exec_sql RPC function",
    )
    args = parser.parse_args(argv)

    if args.print_bootstrap:
        print(EXEC_SQL_FUNCTION_SQL.strip())
        return 0

    service = DatabaseSetupService(get_service_supabase())

    if args.check:
        status = service.check_database_status()
        for table, exists in status.status.items():
            logger.info(f"{table}: {'ok' if exists else 'missing'}")
        logger.info(status.message)
        return 0 if status.all_tables_exist else 1

    result = service.reset_database() if args.reset else service.setup_database()
    if result.success:
        logger.info(result.message)
        return 0
    logger.error(f"{result.message} (failed step: {result.failed_step})")
    return 1


if __name__ == "__main__":
    sys.exit(main())
