"""Database connection string helpers."""

from apihelpers.db.connection import DatabaseSettings
from apihelpers.db.connection import build_db_conn_string
from apihelpers.db.connection import database_settings_from_env
from apihelpers.db.connection import get_database_url
from apihelpers.db.connection import parse_database_url

__all__ = [
    "DatabaseSettings",
    "build_db_conn_string",
    "database_settings_from_env",
    "get_database_url",
    "parse_database_url",
]
