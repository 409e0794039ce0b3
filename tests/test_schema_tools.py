"""
Tests for SchemaTools
"""

import pytest

from mcp_db_schema_server.errors import (
    ExecutionError,
    NotFoundError,
    SchemaToolError,
    ValidationError,
)
from mcp_db_schema_server.schema_tools import SchemaTools


@pytest.fixture
def tools(fake_db):
    return SchemaTools(fake_db)


@pytest.mark.parametrize("query", [
    "CREATE TABLE t (id INTEGER)",
    "create table t (id INTEGER)",
    "   Create Table t (id INTEGER)  \n",
])
def test_create_table(tools, fake_db, query):
    result = tools.create_table("main", query)

    assert result == {"success": True, "message": "Table created successfully"}
    assert fake_db.exec_calls == [query]


@pytest.mark.parametrize("query", [
    "DROP TABLE users",
    "ALTER TABLE users ADD COLUMN x TEXT",
    "createtable t (id INTEGER)",
    "SELECT 1; CREATE TABLE t (id INTEGER)",
    "",
    "   ",
])
def test_create_table_rejects_other_statements(tools, fake_db, query):
    with pytest.raises(ValidationError, match="^SQL Error: Only CREATE TABLE statements are allowed$"):
        tools.create_table("main", query)
    assert fake_db.exec_calls == []


def test_alter_table(tools, fake_db):
    query = "  alter TABLE users ADD COLUMN age INTEGER"
    result = tools.alter_table("main", query)

    assert result == {"success": True, "message": "Table altered successfully"}
    assert fake_db.exec_calls == [query]


@pytest.mark.parametrize("query", [
    "CREATE TABLE t (id INTEGER)",
    "UPDATE users SET x = 1",
    "\talter  table users ADD COLUMN x TEXT",
])
def test_alter_table_rejects_other_statements(tools, fake_db, query):
    with pytest.raises(ValidationError, match="^SQL Error: Only ALTER TABLE statements are allowed$"):
        tools.alter_table("main", query)
    assert fake_db.exec_calls == []


def test_create_table_wraps_execution_error(tools, fake_db):
    """Test database errors keep their detail behind the tool prefix"""
    original = RuntimeError("table t already exists")
    fake_db.fail_exec = original

    with pytest.raises(ExecutionError) as exc_info:
        tools.create_table("main", "CREATE TABLE t (id INTEGER)")

    assert str(exc_info.value) == "SQL Error: table t already exists"
    assert exc_info.value.__cause__ is original


def test_drop_table_requires_confirmation(tools, fake_db):
    """Test an unconfirmed drop is refused without touching the database"""
    result = tools.drop_table("main", "users", False)

    assert result["success"] is False
    assert result["message"].startswith("Safety confirmation required")
    assert fake_db.exec_calls == []
    assert fake_db.all_calls == []


def test_drop_table(tools, fake_db):
    result = tools.drop_table("main", "users", True)

    assert result == {"success": True, "message": "Table 'users' dropped successfully"}
    assert fake_db.all_calls == ["LIST TABLES"]
    assert fake_db.exec_calls == ['DROP TABLE "users"']


def test_drop_table_missing_table(tools, fake_db):
    with pytest.raises(NotFoundError, match="^Error dropping table: Table 'ghosts' does not exist$"):
        tools.drop_table("main", "ghosts", True)
    assert fake_db.exec_calls == []


def test_drop_table_requires_name(tools, fake_db):
    with pytest.raises(ValidationError, match="^Error dropping table: Table name is required$"):
        tools.drop_table("main", "", True)
    assert fake_db.all_calls == []


def test_list_tables(tools):
    """Test tables come back in query order"""
    assert tools.list_tables("main") == {"success": True, "data": ["users", "orders"]}


def test_list_tables_empty(make_db):
    assert SchemaTools(make_db()).list_tables("main") == {"success": True, "data": []}


def test_list_tables_wraps_failures(fake_db, tools):
    def broken(db_id):
        raise ExecutionError("Database 'main' is not configured")

    fake_db.get_list_tables_query = broken
    with pytest.raises(ExecutionError, match="^Error listing tables: Database 'main' is not configured$"):
        tools.list_tables("main")


def test_describe_table(make_db):
    db = make_db(
        tables=["users"],
        columns={"users": [{"name": "id", "type": "INTEGER", "notnull": 1, "dflt_value": None, "pk": 1}]},
    )
    result = SchemaTools(db).describe_table("main", "users")

    assert result == {
        "success": True,
        "data": [
            {"name": "id", "type": "INTEGER", "notnull": True, "default_value": None, "primary_key": True}
        ],
    }


def test_describe_table_coerces_flags(tools):
    columns = tools.describe_table("main", "users")["data"]

    assert columns[1] == {
        "name": "email",
        "type": "TEXT",
        "notnull": False,
        "default_value": "'x'",
        "primary_key": False,
    }


def test_describe_table_composite_primary_key(make_db):
    db = make_db(
        tables=["links"],
        columns={"links": [
            {"name": "a", "type": "INTEGER", "notnull": 0, "dflt_value": None, "pk": 1},
            {"name": "b", "type": "INTEGER", "notnull": 0, "dflt_value": None, "pk": 2},
        ]},
    )
    columns = SchemaTools(db).describe_table("main", "links")["data"]

    assert [column["primary_key"] for column in columns] == [True, True]


def test_describe_table_missing_table(tools, fake_db):
    with pytest.raises(NotFoundError, match="ghosts"):
        tools.describe_table("main", "ghosts")
    assert fake_db.all_calls == ["LIST TABLES"]


def test_describe_table_requires_name(tools):
    with pytest.raises(ValidationError, match="^Error describing table: Table name is required$"):
        tools.describe_table("main", "")


def test_errors_share_base_class(tools):
    with pytest.raises(SchemaToolError):
        tools.describe_table("main", "ghosts")
