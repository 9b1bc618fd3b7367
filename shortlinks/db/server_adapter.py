"""
Server Database Adapter

Adapter for client/server databases reached through an async SQLAlchemy
driver (e.g. postgresql+asyncpg). The driver itself is a deployment
dependency and is not installed with the package.
"""

from typing import Any, Optional

from sqlalchemy.pool import Pool

from shortlinks.db.interface import DatabaseAdapter


class ServerDatabaseAdapter(DatabaseAdapter):
    """Pooled engine with connection health checks."""

    def __init__(self, dialect_name: str):
        self.dialect_name = dialect_name

    def get_pool_class(self) -> Optional[type[Pool]]:
        # SQLAlchemy's default async queue pool
        return None

    def get_connect_args(self) -> dict[str, Any]:
        return {}

    def get_engine_kwargs(self) -> dict[str, Any]:
        return {
            "echo": False,
            "pool_pre_ping": True,
        }

    def get_dialect_name(self) -> str:
        return self.dialect_name
