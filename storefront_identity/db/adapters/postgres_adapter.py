# =============================================================================
# STOREFRONT IDENTITY - POSTGRESQL ADAPTER
# =============================================================================
# File: db/adapters/postgres_adapter.py
# Description: PostgreSQL database adapter for production environments
#              Uses asyncpg for async operations with SQLAlchemy
# =============================================================================

from typing import Any, Dict, Optional

from sqlalchemy import text

from storefront_identity.db.base import BaseDBAdapter
from storefront_identity.core.config import Settings, settings as default_settings


class PostgresAdapter(BaseDBAdapter):
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    POSTGRESQL DATABASE ADAPTER                           │
    │  Pooled async PostgreSQL implementation for production                  │
    └─────────────────────────────────────────────────────────────────────────┘

    Connection Pool Configuration:
        - pool_size:     Initial connections (settings.db_pool_size)
        - max_overflow:  Extra connections allowed (settings.db_max_overflow)
        - pool_timeout:  Wait time for connection (settings.db_pool_timeout)
        - pool_recycle:  Recycle connections after 1800s
    """

    def __init__(
        self,
        database_url: Optional[str] = None,
        config: Optional[Settings] = None,
        **kwargs: Any
    ):
        config = config or default_settings
        if database_url is None:
            database_url = config.database_url

        default_options: Dict[str, Any] = {
            "pool_size": config.db_pool_size,
            "max_overflow": config.db_max_overflow,
            "pool_timeout": config.db_pool_timeout,
            "pool_recycle": 1800,
            "pool_pre_ping": True,
            "echo": config.debug and config.is_development,
            "connect_args": {
                "statement_cache_size": 100,
                "command_timeout": 60,
            },
        }
        default_options.update(kwargs)

        super().__init__(database_url, **default_options)

    async def connect(self) -> None:
        """Connect and verify the server answers."""
        if self._is_connected:
            return
        await super().connect()

        async with self.get_session() as session:
            result = await session.execute(text("SELECT 1"))
            result.scalar()

    async def get_pool_status(self) -> Dict[str, int]:
        """
        Current connection pool statistics.

        Returns:
            Dict with size, checked_in, checked_out and overflow counts
        """
        if not self._engine:
            return {"size": 0, "checked_in": 0, "checked_out": 0, "overflow": 0}

        pool = self._engine.pool
        return {
            "size": pool.size(),
            "checked_in": pool.checkedin(),
            "checked_out": pool.checkedout(),
            "overflow": pool.overflow(),
        }
