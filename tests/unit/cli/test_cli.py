"""Tests for the bookshelf command line interface."""

import pytest
from sqlalchemy.exc import OperationalError
from typer.testing import CliRunner

from src.bookshelf.cli import app
from src.bookshelf.cli import db_commands
from src.bookshelf.core.services import StorageGateway

runner = CliRunner()


@pytest.fixture
def cli_gateway(file_gateway: StorageGateway, monkeypatch) -> StorageGateway:
    monkeypatch.setattr(db_commands, "build_gateway", lambda: file_gateway)
    return file_gateway


def test_db_init_creates_schema(cli_gateway):
    result = runner.invoke(app, ["db", "init"])

    assert result.exit_code == 0, result.output
    assert "Schema is up to date" in result.output
    assert cli_gateway.count_books() == 0


def test_db_seed_inserts_once(cli_gateway):
    first = runner.invoke(app, ["db", "seed"])
    second = runner.invoke(app, ["db", "seed"])

    assert first.exit_code == 0, first.output
    assert "Inserted 5 example books" in first.output
    assert second.exit_code == 0, second.output
    assert "nothing inserted" in second.output
    assert cli_gateway.count_books() == 5


def test_db_list_prints_books(cli_gateway):
    cli_gateway.seed()

    result = runner.invoke(app, ["db", "list"])

    assert result.exit_code == 0, result.output
    assert "Dummy Book 1" in result.output
    assert "Emma White" in result.output


def test_db_list_reports_store_failure(cli_gateway, monkeypatch):
    def broken(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("connection refused"))

    monkeypatch.setattr(cli_gateway.database_service, "session_scope", broken)

    result = runner.invoke(app, ["db", "list"])

    assert result.exit_code == 1
    assert "Could not list books" in result.output


def test_no_arguments_shows_help():
    result = runner.invoke(app, [])

    assert "db" in result.output
    assert "serve" in result.output
