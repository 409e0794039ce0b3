"""
Shared fixtures
"""

import sqlite3

import pytest

from mcp_db_schema_server.config import DatabaseConfig, ServerConfig
from mcp_db_schema_server.models import DatabaseMetadata


class FakeDatabase:
    """Records calls made against the database contract"""

    def __init__(self, tables=None, columns=None, metadata=None):
        self.tables = list(tables or [])
        self.columns = columns or {}
        self.metadata = metadata or DatabaseMetadata(type="sqlite", path="/data/app.db")
        self.all_calls = []
        self.exec_calls = []
        self.fail_exec = None
        self.default_id = "main"

    def database_ids(self):
        return [self.default_id]

    def get_database_metadata(self, db_id):
        return self.metadata

    def get_list_tables_query(self, db_id):
        return "LIST TABLES"

    def get_describe_table_query(self, db_id, table_name):
        return f"DESCRIBE {table_name}"

    def quote_identifier(self, db_id, name):
        return f'"{name}"'

    def db_all(self, db_id, query):
        self.all_calls.append(query)
        if query == "LIST TABLES":
            return [{"name": name} for name in self.tables]
        table_name = query[len("DESCRIBE "):]
        return self.columns.get(table_name, [])

    def db_exec(self, db_id, query):
        self.exec_calls.append(query)
        if self.fail_exec:
            raise self.fail_exec


USERS_COLUMNS = [
    {"name": "id", "type": "INTEGER", "notnull": 1, "dflt_value": None, "pk": 1},
    {"name": "email", "type": "TEXT", "notnull": 0, "dflt_value": "'x'", "pk": 0},
]


@pytest.fixture
def fake_db():
    return FakeDatabase(tables=["users", "orders"], columns={"users": USERS_COLUMNS})


@pytest.fixture
def sqlite_path(tmp_path):
    db_path = tmp_path / "app.db"
    conn = sqlite3.connect(db_path)
    conn.execute("CREATE TABLE users (id INTEGER PRIMARY KEY, email TEXT NOT NULL DEFAULT 'none')")
    conn.execute("CREATE TABLE orders (id INTEGER PRIMARY KEY, user_id INTEGER)")
    conn.commit()
    conn.close()
    return str(db_path)


@pytest.fixture
def sqlite_config(sqlite_path):
    return ServerConfig(databases={"main": DatabaseConfig(type="sqlite", path=sqlite_path)})


@pytest.fixture
def make_db():
    return FakeDatabase
