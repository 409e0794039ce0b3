"""
MCP DB Schema Server

MCP server exposing database table schemas as URI-addressed resources.
Provides guarded tools for creating, altering, dropping, listing and
describing tables in SQLite, PostgreSQL and MySQL databases.
"""

__version__ = "0.1.0"
