# =============================================================================
# STOREFRONT IDENTITY - DATABASE BASE MODULE
# =============================================================================
# File: db/base.py
# Description: Declarative base and the adapter contract every database
#              backend (SQLite, PostgreSQL) implements
# =============================================================================

from abc import ABC, abstractmethod
from typing import Any, Optional, Dict, AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import (
    create_async_engine,
    AsyncSession,
    AsyncEngine,
    async_sessionmaker,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy import MetaData, text


# =============================================================================
# SQLALCHEMY BASE CONFIGURATION
# =============================================================================

# Naming convention for constraints (important for migrations)
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s"
}

metadata = MetaData(naming_convention=NAMING_CONVENTION)


class Base(DeclarativeBase):
    """SQLAlchemy declarative base shared by every ORM model."""
    metadata = metadata


# =============================================================================
# ABSTRACT DATABASE ADAPTER INTERFACE
# =============================================================================

class IDBAdapter(ABC):
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    ABSTRACT DATABASE ADAPTER INTERFACE                   │
    │  Contract shared by the SQLite and PostgreSQL backends                  │
    └─────────────────────────────────────────────────────────────────────────┘

    Methods:
        connect()       - Establish database connection
        disconnect()    - Close database connection
        get_session()   - Get async session for operations
        execute()       - Execute raw SQL
        create_tables() - Initialize database schema
    """

    @abstractmethod
    async def connect(self) -> None:
        """Establish connection to the database and build the session factory."""

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the connection pool and release resources."""

    @abstractmethod
    def get_session(self) -> Any:
        """
        Provide an async database session context manager.

        Usage:
            async with adapter.get_session() as session:
                result = await session.execute(query)
        """

    @abstractmethod
    async def execute(
        self,
        query: str,
        params: Optional[Dict[str, Any]] = None
    ) -> Any:
        """
        Execute a raw SQL query.

        Args:
            query: SQL query string
            params: Query parameters for safe interpolation
        """

    @abstractmethod
    async def create_tables(self) -> None:
        """Create all tables registered on ``Base.metadata``."""

    @property
    @abstractmethod
    def engine(self) -> AsyncEngine:
        """Underlying SQLAlchemy async engine."""

    @property
    @abstractmethod
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Session factory bound to the engine."""


# =============================================================================
# BASE ADAPTER IMPLEMENTATION
# =============================================================================

class BaseDBAdapter(IDBAdapter):
    """
    Common engine/session handling. Concrete adapters only decide the URL
    and the engine options.
    """

    def __init__(self, database_url: str, **engine_options: Any):
        """
        Args:
            database_url: Async-compatible database URL
            **engine_options: Additional SQLAlchemy engine options
        """
        self._database_url = database_url
        self._engine_options = engine_options
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None
        self._is_connected = False

    async def connect(self) -> None:
        if self._is_connected:
            return

        self._engine = create_async_engine(
            self._database_url,
            **self._engine_options
        )
        self._session_factory = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        self._is_connected = True

    async def disconnect(self) -> None:
        if self._engine:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            self._is_connected = False

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Provide session with automatic commit/rollback handling.

        Commits on successful exit, rolls back on exception.
        """
        if not self._session_factory:
            await self.connect()

        session = self._session_factory()  # type: ignore
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def execute(
        self,
        query: str,
        params: Optional[Dict[str, Any]] = None
    ) -> Any:
        async with self.get_session() as session:
            return await session.execute(text(query), params or {})

    async def create_tables(self) -> None:
        if not self._engine:
            await self.connect()

        async with self._engine.begin() as conn:  # type: ignore
            await conn.run_sync(Base.metadata.create_all)

    @property
    def engine(self) -> AsyncEngine:
        if not self._engine:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        if not self._session_factory:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self._session_factory

    @property
    def is_connected(self) -> bool:
        return self._is_connected
