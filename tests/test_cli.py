from __future__ import annotations

import json

import pytest

from sqlitehelper import Column, DataType, cli
from sqlitehelper.client import DatabaseClient


@pytest.fixture(autouse=True)
def _no_logging_setup(monkeypatch):
    monkeypatch.setattr(cli, "configure_logging", lambda **kwargs: None)


@pytest.fixture
def database(db_path) -> str:
    with DatabaseClient(str(db_path)) as db:
        db.create_table(
            "company",
            [
                Column(name="id", primary_key=True, type=DataType.INTEGER, nullable=False),
                Column(name="name", type=DataType.TEXT),
                Column(name="postal", type=DataType.INTEGER),
            ],
        )
        db.insert("company", {"name": "Alice", "postal": 80000})
    return str(db_path)


def test_tables(database, capsys):
    assert cli.main(["tables", database]) == 0
    assert capsys.readouterr().out.splitlines() == ["company"]


def test_describe(database, capsys):
    assert cli.main(["describe", database, "company"]) == 0
    assert capsys.readouterr().out.splitlines()[0] == "  [id] PK Type: Integer Nullable: False"


def test_describe_missing_table(database, capsys):
    assert cli.main(["describe", database, "missing"]) == 1
    assert "Table not found" in capsys.readouterr().err


def test_query_json(database, capsys):
    assert cli.main(["query", database, "SELECT id, name FROM company", "--json"]) == 0
    assert json.loads(capsys.readouterr().out) == [{"id": 1, "name": "Alice"}]


def test_query_without_rows(database, capsys):
    assert cli.main(["query", database, "SELECT * FROM company WHERE id = 42"]) == 0
    assert capsys.readouterr().out.strip() == "No rows returned"


def test_backup(database, tmp_path, capsys):
    destination = tmp_path / "backup.db"
    assert cli.main(["backup", database, str(destination)]) == 0
    assert destination.exists()


def test_log_flags_reach_logging_setup(database, monkeypatch):
    calls = []
    monkeypatch.setattr(cli, "configure_logging", lambda **kwargs: calls.append(kwargs))

    assert cli.main(["--log-queries", "--log-jsonl", "tables", database]) == 0
    assert calls == [{"level": "DEBUG", "log_file": None, "jsonl": True}]
