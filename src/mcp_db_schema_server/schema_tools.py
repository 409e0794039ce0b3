"""
Schema Tools - guarded table creation, alteration, removal and inspection
"""

import logging
from typing import Any, Dict, List

from .errors import NotFoundError, ValidationError, wrap_errors
from .formatting import format_success_response
from .models import parse_column_rows, parse_table_rows

logger = logging.getLogger(__name__)

DROP_CONFIRMATION_MESSAGE = (
    "Safety confirmation required. Set confirm=true to proceed with dropping the table."
)


class SchemaTools:
    """Checks tool input before any statement reaches the database"""

    def __init__(self, db):
        self.db = db

    def create_table(self, db_id: str, query: str) -> Dict[str, Any]:
        with wrap_errors("SQL Error: "):
            self._require_prefix(query, "create table", "Only CREATE TABLE statements are allowed")
            self.db.db_exec(db_id, query)
            logger.info("Created table in '%s'", db_id)
            return format_success_response(
                {"success": True, "message": "Table created successfully"}
            )

    def alter_table(self, db_id: str, query: str) -> Dict[str, Any]:
        with wrap_errors("SQL Error: "):
            self._require_prefix(query, "alter table", "Only ALTER TABLE statements are allowed")
            self.db.db_exec(db_id, query)
            logger.info("Altered table in '%s'", db_id)
            return format_success_response(
                {"success": True, "message": "Table altered successfully"}
            )

    def drop_table(self, db_id: str, table_name: str, confirm: bool = False) -> Dict[str, Any]:
        with wrap_errors("Error dropping table: "):
            self._require_table_name(table_name)
            if confirm is not True:
                return format_success_response(
                    {"success": False, "message": DROP_CONFIRMATION_MESSAGE}
                )
            self._require_table(db_id, table_name)
            # existence check and drop are separate round trips, not atomic
            self.db.db_exec(db_id, f"DROP TABLE {self.db.quote_identifier(db_id, table_name)}")
            logger.info("Dropped table '%s' in '%s'", table_name, db_id)
            return format_success_response(
                {"success": True, "message": f"Table '{table_name}' dropped successfully"}
            )

    def list_tables(self, db_id: str) -> Dict[str, Any]:
        with wrap_errors("Error listing tables: "):
            return format_success_response(self._table_names(db_id))

    def describe_table(self, db_id: str, table_name: str) -> Dict[str, Any]:
        with wrap_errors("Error describing table: "):
            self._require_table_name(table_name)
            self._require_table(db_id, table_name)
            query = self.db.get_describe_table_query(db_id, table_name)
            columns = parse_column_rows(self.db.db_all(db_id, query))
            return format_success_response([column.to_column() for column in columns])

    def _table_names(self, db_id: str) -> List[str]:
        query = self.db.get_list_tables_query(db_id)
        return [row.name for row in parse_table_rows(self.db.db_all(db_id, query))]

    def _require_table(self, db_id: str, table_name: str) -> None:
        if table_name not in self._table_names(db_id):
            raise NotFoundError(f"Table '{table_name}' does not exist")

    @staticmethod
    def _require_table_name(table_name: str) -> None:
        if not table_name:
            raise ValidationError("Table name is required")

    @staticmethod
    def _require_prefix(query: str, prefix: str, message: str) -> None:
        if not query or not query.strip().lower().startswith(prefix):
            raise ValidationError(message)
