"""
Database module with abstraction layer.

This module provides:
- DatabaseAdapter interface: Abstract base class for database implementations
- SQLiteAdapter / ServerDatabaseAdapter: concrete engine configurations
- Session management: engine, session factory and the FastAPI dependency
"""

from shortlinks.db.interface import DatabaseAdapter
from shortlinks.db.session import (
    create_engine_for_url,
    create_session_maker,
    get_session,
    init_db,
)

__all__ = [
    "DatabaseAdapter",
    "create_engine_for_url",
    "create_session_maker",
    "get_session",
    "init_db",
]
