"""
Database layer - per-type queries and statement execution
"""

import logging
import sqlite3
from typing import Any, Dict, List

try:
    import psycopg2
    import psycopg2.extras
    POSTGRESQL_AVAILABLE = True
except ImportError:
    POSTGRESQL_AVAILABLE = False

try:
    import mysql.connector
    MYSQL_AVAILABLE = True
except ImportError:
    MYSQL_AVAILABLE = False

from .config import DatabaseConfig, ServerConfig
from .errors import ExecutionError
from .models import DatabaseMetadata

logger = logging.getLogger(__name__)


def _quote_literal(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


class DatabaseAdapter:
    """Queries and connections for one configured database"""

    quote_char = '"'

    def __init__(self, config: DatabaseConfig):
        self.config = config

    def quote_identifier(self, name: str) -> str:
        return f"{self.quote_char}{name}{self.quote_char}"

    def list_tables_query(self) -> str:
        raise NotImplementedError

    def describe_table_query(self, table_name: str) -> str:
        raise NotImplementedError

    def connect(self):
        raise NotImplementedError

    def cursor(self, conn):
        return conn.cursor()

    def all(self, query: str) -> List[Dict[str, Any]]:
        """Run a read query and return rows as dicts"""
        conn = self.connect()
        try:
            cursor = self.cursor(conn)
            cursor.execute(query)
            return [dict(row) for row in cursor.fetchall()]
        finally:
            conn.close()

    def exec(self, query: str) -> None:
        """Run a statement that returns no rows and commit it"""
        conn = self.connect()
        try:
            cursor = self.cursor(conn)
            cursor.execute(query)
            conn.commit()
        except Exception:
            try:
                conn.rollback()
            except Exception:
                logger.warning("Rollback failed after statement error", exc_info=True)
            raise
        finally:
            conn.close()


class SqliteAdapter(DatabaseAdapter):

    def list_tables_query(self) -> str:
        return (
            "SELECT name FROM sqlite_master "
            "WHERE type='table' AND name NOT LIKE 'sqlite_%'"
        )

    def describe_table_query(self, table_name: str) -> str:
        escaped = table_name.replace('"', '""')
        return f'PRAGMA table_info("{escaped}")'

    def connect(self):
        if not self.config.path:
            raise ValueError("SQLite database requires a path")
        conn = sqlite3.connect(self.config.path)
        conn.row_factory = sqlite3.Row
        return conn


class PostgresqlAdapter(DatabaseAdapter):

    def list_tables_query(self) -> str:
        return (
            "SELECT table_name AS name FROM information_schema.tables "
            "WHERE table_schema = 'public' AND table_type = 'BASE TABLE' "
            "ORDER BY table_name"
        )

    def describe_table_query(self, table_name: str) -> str:
        table = _quote_literal(table_name)
        return f"""
            SELECT c.column_name AS name,
                   c.data_type AS type,
                   CASE WHEN c.is_nullable = 'NO' THEN 1 ELSE 0 END AS "notnull",
                   c.column_default AS dflt_value,
                   CASE WHEN k.column_name IS NOT NULL THEN 1 ELSE 0 END AS pk
            FROM information_schema.columns c
            LEFT JOIN (
                SELECT ku.column_name
                FROM information_schema.table_constraints t
                JOIN information_schema.key_column_usage ku
                  ON t.constraint_name = ku.constraint_name
                 AND t.table_schema = ku.table_schema
                WHERE t.constraint_type = 'PRIMARY KEY'
                  AND t.table_schema = 'public'
                  AND t.table_name = {table}
            ) k ON c.column_name = k.column_name
            WHERE c.table_schema = 'public' AND c.table_name = {table}
            ORDER BY c.ordinal_position
        """

    def connect(self):
        if not POSTGRESQL_AVAILABLE:
            raise ImportError("psycopg2 is required for PostgreSQL support. Install with: pip install psycopg2-binary")
        if self.config.connection_string:
            return psycopg2.connect(self.config.connection_string)
        parts = self.config.connection_parts()
        return psycopg2.connect(
            host=parts["host"],
            port=parts["port"],
            user=parts["user"],
            password=parts["password"],
            dbname=parts["database"],
        )

    def cursor(self, conn):
        return conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor)


class MysqlAdapter(DatabaseAdapter):

    quote_char = "`"

    def list_tables_query(self) -> str:
        return (
            "SELECT TABLE_NAME AS name FROM information_schema.TABLES "
            "WHERE TABLE_SCHEMA = DATABASE() AND TABLE_TYPE = 'BASE TABLE' "
            "ORDER BY TABLE_NAME"
        )

    def describe_table_query(self, table_name: str) -> str:
        return f"""
            SELECT COLUMN_NAME AS name,
                   COLUMN_TYPE AS type,
                   CASE WHEN IS_NULLABLE = 'NO' THEN 1 ELSE 0 END AS `notnull`,
                   COLUMN_DEFAULT AS dflt_value,
                   CASE WHEN COLUMN_KEY = 'PRI' THEN 1 ELSE 0 END AS pk
            FROM information_schema.COLUMNS
            WHERE TABLE_SCHEMA = DATABASE() AND TABLE_NAME = {_quote_literal(table_name)}
            ORDER BY ORDINAL_POSITION
        """

    def connect(self):
        if not MYSQL_AVAILABLE:
            raise ImportError("mysql-connector-python is required for MySQL support. Install with: pip install mysql-connector-python")
        parts = self.config.connection_parts()
        return mysql.connector.connect(
            host=parts["host"],
            port=parts["port"] or 3306,
            user=parts["user"],
            password=parts["password"],
            database=parts["database"],
            autocommit=False,
        )

    def cursor(self, conn):
        return conn.cursor(dictionary=True)


ADAPTERS = {
    "sqlite": SqliteAdapter,
    "postgresql": PostgresqlAdapter,
    "mysql": MysqlAdapter,
}


class DatabaseRegistry:
    """Resolves database ids to adapters and runs queries against them"""

    def __init__(self, config: ServerConfig):
        self.config = config
        self._adapters: Dict[str, DatabaseAdapter] = {}

    @property
    def default_id(self) -> str:
        return self.config.default_id

    def database_ids(self) -> List[str]:
        return list(self.config.databases)

    def _database_config(self, db_id: str) -> DatabaseConfig:
        try:
            return self.config.databases[db_id]
        except KeyError:
            raise ExecutionError(f"Database '{db_id}' is not configured") from None

    def adapter(self, db_id: str) -> DatabaseAdapter:
        if db_id not in self._adapters:
            db_config = self._database_config(db_id)
            adapter_class = ADAPTERS.get(db_config.type)
            if adapter_class is None:
                raise ExecutionError(
                    f"Unsupported database type: {db_config.type}. Supported: {list(ADAPTERS)}"
                )
            self._adapters[db_id] = adapter_class(db_config)
        return self._adapters[db_id]

    def get_database_metadata(self, db_id: str) -> DatabaseMetadata:
        return self._database_config(db_id).metadata()

    def get_list_tables_query(self, db_id: str) -> str:
        return self.adapter(db_id).list_tables_query()

    def get_describe_table_query(self, db_id: str, table_name: str) -> str:
        return self.adapter(db_id).describe_table_query(table_name)

    def quote_identifier(self, db_id: str, name: str) -> str:
        return self.adapter(db_id).quote_identifier(name)

    def db_all(self, db_id: str, query: str) -> List[Dict[str, Any]]:
        logger.debug("[%s] query: %s", db_id, query.strip())
        return self.adapter(db_id).all(query)

    def db_exec(self, db_id: str, query: str) -> None:
        logger.debug("[%s] exec: %s", db_id, query.strip())
        self.adapter(db_id).exec(query)
