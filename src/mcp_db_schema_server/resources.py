"""
Resource Locator - table schemas addressed by URI
"""

import json
import logging
from typing import Any, Dict
from urllib.parse import quote, unquote, urlsplit

from .errors import ValidationError, wrap_errors
from .models import database_kind, parse_column_rows, parse_table_rows

logger = logging.getLogger(__name__)

SCHEMA_PATH = "schema"
MIME_TYPE = "application/json"


def build_resource_uri(base_uri: str, table_name: str) -> str:
    return f"{base_uri.rstrip('/')}/{quote(table_name, safe='')}/{SCHEMA_PATH}"


def parse_resource_uri(uri: str) -> str:
    """Return the table name addressed by a ``.../<table>/schema`` URI"""
    path_components = urlsplit(uri).path.split("/")
    if len(path_components) < 2 or path_components[-1] != SCHEMA_PATH:
        raise ValidationError("Invalid resource URI")
    table_name = unquote(path_components[-2])
    if not table_name:
        raise ValidationError("Invalid resource URI")
    return table_name


class ResourceLocator:
    """Lists table schema resources and reads them back"""

    def __init__(self, db):
        self.db = db

    def base_uri(self, db_id: str) -> str:
        metadata = self.db.get_database_metadata(db_id)
        return database_kind(metadata).base_uri()

    def list_resources(self, db_id: str) -> Dict[str, Any]:
        with wrap_errors("Error listing resources: "):
            base_uri = self.base_uri(db_id)
            query = self.db.get_list_tables_query(db_id)
            tables = parse_table_rows(self.db.db_all(db_id, query))
            logger.debug("Listed %d schema resources for '%s'", len(tables), db_id)
            return {
                "resources": [
                    {
                        "uri": build_resource_uri(base_uri, table.name),
                        "mimeType": MIME_TYPE,
                        "name": f'"{table.name}" database schema',
                    }
                    for table in tables
                ]
            }

    def read_resource(self, db_id: str, uri: str) -> Dict[str, Any]:
        with wrap_errors("Error reading resource: "):
            table_name = parse_resource_uri(uri)
            query = self.db.get_describe_table_query(db_id, table_name)
            columns = parse_column_rows(self.db.db_all(db_id, query))
            return {
                "contents": [
                    {
                        "uri": uri,
                        "mimeType": MIME_TYPE,
                        "text": json.dumps(
                            [
                                {"column_name": column.name, "data_type": column.type}
                                for column in columns
                            ],
                            indent=2,
                        ),
                    }
                ]
            }
