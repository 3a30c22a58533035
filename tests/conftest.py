from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from sqlitehelper import Column, DataType, DatabaseClient  # noqa: E402


COMPANY_COLUMNS = [
    Column(name="id", primary_key=True, type=DataType.INTEGER, nullable=False),
    Column(name="name", type=DataType.TEXT, nullable=True),
    Column(name="postal", type=DataType.INTEGER, nullable=True),
]


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "test.db"


@pytest.fixture
def client(db_path: Path):
    with DatabaseClient(str(db_path)) as db:
        db.create_table("company", COMPANY_COLUMNS)
        yield db
