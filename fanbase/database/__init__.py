# fanbase/database/__init__.py
from .connection import get_db_connection, release_db_connection, db_connection, DatabaseConnection
from .dependencies import Repositories, repository_session, get_repositories

__all__ = [
    "get_db_connection",
    "release_db_connection",
    "db_connection",
    "DatabaseConnection",
    "Repositories",
    "repository_session",
    "get_repositories",
]
