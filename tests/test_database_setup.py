import logging

from taklifnoma.database.schema import SCHEMA_STEPS, REQUIRED_TABLES, NEW_USER_TRIGGER_SQL
from taklifnoma.database.supabase_client import SupabaseClient
from taklifnoma.main import provision_database_if_needed
from taklifnoma.modules.database_setup.service import (
    DatabaseSetupService, SchemaSetupError, split_sql_statements
)
from taklifnoma.scripts import setup_database as setup_script
from tests.conftest import api_error

import pytest


class TestSplitSqlStatements:
    def test_splits_on_top_level_semicolons(self):
        sql = "CREATE TABLE a (id INT);\nCREATE TABLE b (id INT);"
        assert split_sql_statements(sql) == ["CREATE TABLE a (id INT)", "CREATE TABLE b (id INT)"]

    def test_keeps_last_statement_without_semicolon(self):
        assert split_sql_statements("SELECT 1; SELECT 2") == ["SELECT 1", "SELECT 2"]

    def test_semicolons_inside_strings_are_not_separators(self):
        sql = "INSERT INTO t VALUES ('a;b'); SELECT 'it''s; fine'"
        assert split_sql_statements(sql) == ["INSERT INTO t VALUES ('a;b')", "SELECT 'it''s; fine'"]

    def test_dollar_quoted_function_body_stays_whole(self):
        statements = split_sql_statements(NEW_USER_TRIGGER_SQL)
        assert len(statements) == 3
        assert statements[0].startswith("CREATE OR REPLACE FUNCTION public.handle_new_user()")
        assert "RETURN NEW;" in statements[0]
        assert statements[0].endswith("SECURITY DEFINER")

    def test_tagged_dollar_quotes(self):
        sql = "DO $body$ BEGIN PERFORM 1; END $body$; SELECT 1;"
        assert split_sql_statements(sql) == ["DO $body$ BEGIN PERFORM 1; END $body$", "SELECT 1"]

    def test_line_comments_are_dropped(self):
        sql = "-- create things; really\nSELECT 1; -- trailing\n"
        assert split_sql_statements(sql) == ["SELECT 1"]

    def test_every_schema_step_splits_into_statements(self):
        for step in SCHEMA_STEPS:
            statements = split_sql_statements(step.sql)
            assert statements, step.name
            assert all(s.strip() for s in statements)


class TestSetupDatabase:
    def test_runs_every_step_in_order(self, fake_db):
        result = DatabaseSetupService(fake_db).setup_database()

        assert result.success is True
        assert result.message == "Database setup completed"
        assert result.completed_steps == [step.name for step in SCHEMA_STEPS]
        assert [call[0] for call in fake_db.rpc_calls] == ["exec_sql"] * len(SCHEMA_STEPS)
        assert fake_db.rpc_calls[0][1]["sql_query"] == SCHEMA_STEPS[0].sql

    def test_failure_stops_and_reports_step(self, fake_db):
        def handler(name, params):
            if "public.invitations (" in params["sql_query"]:
                raise api_error("permission denied for schema auth", "42501")

        fake_db.rpc_handler = handler
        result = DatabaseSetupService(fake_db).setup_database()

        assert result.success is False
        assert result.failed_step == "invitations"
        assert result.completed_steps == ["profiles", "custom_templates"]
        assert "statement(s) failed" in result.message

    def test_whole_script_rejection_falls_back_to_single_statements(self, fake_db):
        def handler(name, params):
            if params["sql_query"] == SCHEMA_STEPS[5].sql:
                raise api_error("cannot run multiple statements", "XX000")

        fake_db.rpc_handler = handler
        service = DatabaseSetupService(fake_db)
        service.execute_sql(SCHEMA_STEPS[5].sql)

        statements = split_sql_statements(SCHEMA_STEPS[5].sql)
        assert len(fake_db.rpc_calls) == 1 + len(statements)
        assert [p["sql_query"] for _, p in fake_db.rpc_calls[1:]] == statements

    def test_missing_rpc_fails_without_retrying(self, fake_db):
        def handler(name, params):
            raise api_error("Could not find the function public.exec_sql", "PGRST202")

        fake_db.rpc_handler = handler
        with pytest.raises(SchemaSetupError, match="exec_sql"):
            DatabaseSetupService(fake_db).execute_sql("SELECT 1; SELECT 2;")
        assert len(fake_db.rpc_calls) == 1

    def test_reset_reruns_setup(self, fake_db):
        result = DatabaseSetupService(fake_db).reset_database()
        assert result.success is True
        assert result.message == "Database reset completed"
        assert len(fake_db.rpc_calls) == len(SCHEMA_STEPS)


class TestCheckDatabaseStatus:
    def test_all_tables_present(self, fake_db):
        status = DatabaseSetupService(fake_db).check_database_status()
        assert status.all_tables_exist is True
        assert status.status == {table: True for table in REQUIRED_TABLES}
        assert status.message == "All tables exist"

    def test_reports_missing_tables(self, fake_db):
        fake_db.missing_tables = {"guests", "rsvps"}
        status = DatabaseSetupService(fake_db).check_database_status()
        assert status.all_tables_exist is False
        assert status.status["guests"] is False
        assert status.status["profiles"] is True
        assert status.message == "Some tables are missing"


class TestFirstRunProvisioning:
    @pytest.fixture(autouse=True)
    def _service_client(self, fake_db, monkeypatch):
        monkeypatch.setattr(SupabaseClient, "get_service_client", lambda: fake_db)

    def test_nothing_to_do_when_schema_present(self, fake_db):
        provision_database_if_needed()
        assert fake_db.rpc_calls == []

    def test_missing_table_runs_full_setup(self, fake_db):
        fake_db.missing_tables = {"rsvps"}
        provision_database_if_needed()
        assert len(fake_db.rpc_calls) == len(SCHEMA_STEPS)

    def test_failed_setup_is_logged_not_raised(self, fake_db, caplog):
        fake_db.missing_tables = {"profiles"}

        def handler(name, params):
            raise api_error("Could not find the function public.exec_sql", "PGRST202")

        fake_db.rpc_handler = handler
        with caplog.at_level(logging.ERROR):
            provision_database_if_needed()
        assert "Database setup failed at profiles" in caplog.text

    def test_unreachable_database_is_logged_not_raised(self, monkeypatch, caplog):
        def boom():
            raise RuntimeError("no route to host")

        monkeypatch.setattr(SupabaseClient, "get_service_client", boom)
        with caplog.at_level(logging.ERROR):
            provision_database_if_needed()
        assert "Database provisioning skipped: no route to host" in caplog.text


class TestSetupCli:
    @pytest.fixture(autouse=True)
    def _service_client(self, fake_db, monkeypatch):
        monkeypatch.setattr(setup_script, "get_service_supabase", lambda: fake_db)

    def test_check(self, fake_db):
        assert setup_script.main(["--check"]) == 0
        fake_db.missing_tables = {"guests"}
        assert setup_script.main(["--check"]) == 1
        assert fake_db.rpc_calls == []

    def test_setup_and_reset(self, fake_db):
        assert setup_script.main([]) == 0
        assert setup_script.main(["--reset"]) == 0
        assert len(fake_db.rpc_calls) == 2 * len(SCHEMA_STEPS)

    def test_failed_setup_exit_code(self, fake_db):
        def handler(name, params):
            raise api_error("Could not find the function public.exec_sql", "PGRST202")

        fake_db.rpc_handler = handler
        assert setup_script.main([]) == 1

    def test_print_bootstrap(self, fake_db, capsys):
        assert setup_script.main(["--print-bootstrap"]) == 0
        assert "CREATE OR REPLACE FUNCTION public.exec_sql" in capsys.readouterr().out
        assert fake_db.rpc_calls == []
