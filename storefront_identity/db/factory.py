# =============================================================================
# STOREFRONT IDENTITY - DATABASE FACTORY
# =============================================================================
# File: db/factory.py
# Description: Factory for database adapter instantiation
#              Switches between SQLite and PostgreSQL from configuration
# =============================================================================

import logging
from typing import Optional, Dict
from enum import Enum

from sqlalchemy.exc import SQLAlchemyError

from storefront_identity.db.base import BaseDBAdapter
from storefront_identity.db.adapters.sqlite_adapter import SQLiteAdapter
from storefront_identity.db.adapters.postgres_adapter import PostgresAdapter
from storefront_identity.core.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class DatabaseType(str, Enum):
    """Supported database types."""
    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"


class DBFactory:
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    DATABASE FACTORY                                      │
    │  Creates and caches the process-wide database adapter                   │
    └─────────────────────────────────────────────────────────────────────────┘

    Usage:
        db = DBFactory.get_db_adapter()
        await db.connect()
    """

    _db_adapter: Optional[BaseDBAdapter] = None

    @classmethod
    def get_db_adapter(
        cls,
        db_type: Optional[str] = None,
        force_new: bool = False,
        config: Optional[Settings] = None,
        **kwargs
    ) -> BaseDBAdapter:
        """
        Get database adapter based on configuration or specified type.

        Args:
            db_type: Override database type (sqlite/postgresql).
                     Defaults to config.db_type
            force_new: Build a fresh adapter instead of the cached one
            config: Settings the adapter reads its URL and pool options from
            **kwargs: Additional options passed to the adapter

        Raises:
            ValueError: If an unsupported database type is requested
        """
        if not force_new and cls._db_adapter is not None:
            return cls._db_adapter

        config = config or default_settings
        selected_type = db_type or config.db_type

        if selected_type == DatabaseType.SQLITE:
            adapter: BaseDBAdapter = SQLiteAdapter(config=config, **kwargs)
        elif selected_type == DatabaseType.POSTGRESQL:
            adapter = PostgresAdapter(config=config, **kwargs)
        else:
            raise ValueError(
                f"Unsupported database type: {selected_type}. "
                f"Supported types: {[t.value for t in DatabaseType]}"
            )

        if not force_new:
            cls._db_adapter = adapter

        return adapter

    @classmethod
    async def connect(cls) -> BaseDBAdapter:
        """Connect the cached adapter."""
        adapter = cls.get_db_adapter()
        await adapter.connect()
        logger.info("Database connection established (%s)", type(adapter).__name__)
        return adapter

    @classmethod
    async def create_tables(cls) -> None:
        await cls.get_db_adapter().create_tables()

    @classmethod
    async def disconnect(cls) -> None:
        if cls._db_adapter:
            await cls._db_adapter.disconnect()
            cls._db_adapter = None
            logger.info("Database connection closed")

    @classmethod
    async def health_check(cls) -> Dict[str, bool]:
        """
        Check the database connection.

        Returns:
            Dict with the health status of the database
        """
        results = {"database": False}
        if cls._db_adapter is None or not cls._db_adapter.is_connected:
            return results

        try:
            await cls._db_adapter.execute("SELECT 1")
            results["database"] = True
        except SQLAlchemyError as e:
            logger.warning("Database health check failed: %s", e)

        return results

    @classmethod
    def reset(cls) -> None:
        """Forget the cached adapter (tests)."""
        cls._db_adapter = None
