"""
Configuration - which databases the server exposes
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import unquote, urlsplit

from pydantic import BaseModel, model_validator

from .models import DatabaseMetadata

DEFAULT_DB_ID = "default"


class DatabaseConfig(BaseModel):
    """Connection settings for one database"""

    type: str = "sqlite"
    path: Optional[str] = None
    server: Optional[str] = None
    database: Optional[str] = None
    port: Optional[int] = None
    user: Optional[str] = None
    password: Optional[str] = None
    connection_string: Optional[str] = None

    def connection_parts(self) -> Dict[str, Any]:
        """Host, port, user, password and database, filled from the URL-form
        connection string where the explicit fields are empty"""
        parts = {
            "host": self.server,
            "port": self.port,
            "user": self.user,
            "password": self.password,
            "database": self.database,
        }
        if self.connection_string and "://" in self.connection_string:
            url = urlsplit(self.connection_string)
            parsed = {
                "host": url.hostname,
                "port": url.port,
                "user": unquote(url.username) if url.username else None,
                "password": unquote(url.password) if url.password else None,
                "database": url.path.lstrip("/") or None,
            }
            for key, value in parsed.items():
                if parts[key] is None:
                    parts[key] = value
        return parts

    def metadata(self) -> DatabaseMetadata:
        parts = self.connection_parts()
        return DatabaseMetadata(
            type=self.type,
            path=self.path,
            server=parts["host"],
            database=parts["database"],
        )


class ServerConfig(BaseModel):
    """All configured databases plus the one used when no id is given"""

    databases: Dict[str, DatabaseConfig]
    default: Optional[str] = None

    @model_validator(mode="after")
    def _check_databases(self) -> "ServerConfig":
        if not self.databases:
            raise ValueError("At least one database must be configured")
        if self.default is not None and self.default not in self.databases:
            raise ValueError(f"Default database '{self.default}' is not configured")
        return self

    @property
    def default_id(self) -> str:
        return self.default or next(iter(self.databases))


def load_config(config_content: str) -> ServerConfig:
    """Load config from JSON content or a JSON file path"""
    try:
        data = json.loads(config_content)
    except json.JSONDecodeError:
        config_path = Path(config_content)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_content}")
        data = json.loads(config_path.read_text(encoding="utf-8"))
    return ServerConfig.model_validate(data)


def single_database(db_config: DatabaseConfig, db_id: str = DEFAULT_DB_ID) -> ServerConfig:
    return ServerConfig(databases={db_id: db_config}, default=db_id)


def config_from_args(args: Any) -> ServerConfig:
    """Build the server config from parsed command line arguments.

    Precedence: --config, then a single database given by --sqlite,
    --postgresql, --mysql or --server/--database, then the MCP_DB_CONFIG
    and MCP_DB_PATH environment variables.
    """
    if getattr(args, "config", None):
        return load_config(args.config)

    db_id = getattr(args, "db_id", None) or DEFAULT_DB_ID

    if getattr(args, "sqlite", None):
        return single_database(DatabaseConfig(type="sqlite", path=args.sqlite), db_id)
    if getattr(args, "postgresql", None):
        return single_database(
            DatabaseConfig(type="postgresql", connection_string=args.postgresql), db_id
        )
    if getattr(args, "mysql", None):
        return single_database(
            DatabaseConfig(type="mysql", connection_string=args.mysql), db_id
        )
    if getattr(args, "server", None) and getattr(args, "database", None):
        return single_database(
            DatabaseConfig(
                type=args.type or "postgresql",
                server=args.server,
                database=args.database,
                port=getattr(args, "port", None),
                user=getattr(args, "user", None),
                password=getattr(args, "password", None),
            ),
            db_id,
        )

    env_config = os.environ.get("MCP_DB_CONFIG")
    if env_config:
        return load_config(env_config)
    env_path = os.environ.get("MCP_DB_PATH")
    if env_path:
        return single_database(DatabaseConfig(type="sqlite", path=env_path), db_id)

    raise ValueError(
        "No database configured. Use --config, --sqlite, --postgresql, --mysql "
        "or --server/--database"
    )
