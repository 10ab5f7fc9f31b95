# =============================================================================
# STOREFRONT IDENTITY - SQLITE ADAPTER
# =============================================================================
# File: db/adapters/sqlite_adapter.py
# Description: SQLite database adapter for development and testing
#              Uses aiosqlite for async operations with SQLAlchemy
# =============================================================================

from typing import Any, Dict, Optional
from pathlib import Path

from sqlalchemy import text
from sqlalchemy.pool import StaticPool

from storefront_identity.db.base import BaseDBAdapter
from storefront_identity.core.config import Settings, settings as default_settings

MEMORY_URL = "sqlite+aiosqlite:///:memory:"


class SQLiteAdapter(BaseDBAdapter):
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    SQLITE DATABASE ADAPTER                               │
    │  Async SQLite implementation for development and testing environments   │
    └─────────────────────────────────────────────────────────────────────────┘

    Features:
        - Zero-configuration setup
        - File-based persistent storage with WAL journaling
        - Single shared connection for in-memory test databases

    Usage:
        adapter = SQLiteAdapter()
        await adapter.connect()
        async with adapter.get_session() as session:
            ...
        await adapter.disconnect()
    """

    def __init__(
        self,
        database_url: Optional[str] = None,
        config: Optional[Settings] = None,
        **kwargs: Any
    ):
        """
        Args:
            database_url: Optional custom database URL.
                          Defaults to config.database_url
            config: Settings; defaults to the process settings
            **kwargs: Additional engine options
        """
        config = config or default_settings
        if database_url is None:
            database_url = config.database_url

        self._in_memory = ":memory:" in database_url

        # Ensure database directory exists for file-based SQLite
        if not self._in_memory:
            db_path = database_url.replace("sqlite+aiosqlite:///", "")
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        default_options: Dict[str, Any] = {
            "echo": config.debug,
            "connect_args": {
                "check_same_thread": False,
                "timeout": 30,
            },
        }
        if self._in_memory:
            # Every pooled connection would otherwise open its own empty database
            default_options["poolclass"] = StaticPool
        else:
            default_options["pool_pre_ping"] = True

        default_options.update(kwargs)

        super().__init__(database_url, **default_options)

    async def connect(self) -> None:
        """Connect and apply SQLite pragmas."""
        if self._is_connected:
            return
        await super().connect()

        async with self.get_session() as session:
            if not self._in_memory:
                await session.execute(text("PRAGMA journal_mode=WAL"))
                await session.execute(text("PRAGMA synchronous=NORMAL"))
            await session.execute(text("PRAGMA foreign_keys=ON"))
            await session.execute(text("PRAGMA busy_timeout=30000"))

    @classmethod
    def create_for_testing(cls) -> "SQLiteAdapter":
        """In-memory adapter; data lives as long as the adapter stays connected."""
        return cls(database_url=MEMORY_URL, echo=False)
