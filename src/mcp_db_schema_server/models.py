"""
Row descriptors and database kinds
"""

from typing import Any, Dict, Iterable, List, Optional, Union
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict


class DatabaseMetadata(BaseModel):
    """Connection details that are safe to expose to resource callers"""

    type: str
    path: Optional[str] = None
    server: Optional[str] = None
    database: Optional[str] = None


class TableRow(BaseModel):
    """One row of a list-tables query"""

    model_config = ConfigDict(extra="ignore")

    name: str


class ColumnRow(BaseModel):
    """One row of a describe-table query"""

    model_config = ConfigDict(extra="ignore")

    name: str
    type: Optional[str] = None
    notnull: Union[bool, int] = 0
    dflt_value: Any = None
    pk: Union[bool, int] = 0

    def to_column(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "notnull": bool(self.notnull),
            "default_value": self.dflt_value,
            "primary_key": bool(self.pk),
        }


def parse_table_rows(rows: Iterable[Any]) -> List[TableRow]:
    return [TableRow.model_validate(dict(row)) for row in rows]


def parse_column_rows(rows: Iterable[Any]) -> List[ColumnRow]:
    return [ColumnRow.model_validate(dict(row)) for row in rows]


class FileDatabase:
    """File-based database addressed by its path"""

    def __init__(self, path: str):
        self.path = path

    def base_uri(self) -> str:
        return f"sqlite:///{quote(self.path, safe='/:')}"


class ServerDatabase:
    """Client-server database addressed by server and database name"""

    def __init__(self, scheme: str, server: str, database: str):
        self.scheme = scheme
        self.server = server
        self.database = database

    def base_uri(self) -> str:
        return f"{self.scheme}://{quote(self.server, safe=':@[]')}/{quote(self.database, safe='')}"


class GenericDatabase:
    """Fallback for metadata that matches neither shape"""

    def base_uri(self) -> str:
        return "db:///database"


DatabaseKind = Union[FileDatabase, ServerDatabase, GenericDatabase]

FILE_DATABASE_TYPES = {"sqlite"}


def database_kind(metadata: DatabaseMetadata) -> DatabaseKind:
    """Pick the database variant matching the metadata; never fails"""
    if metadata.type in FILE_DATABASE_TYPES:
        if metadata.path:
            return FileDatabase(metadata.path)
    elif metadata.type and metadata.server and metadata.database:
        return ServerDatabase(metadata.type, metadata.server, metadata.database)
    return GenericDatabase()
