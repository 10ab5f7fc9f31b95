# =============================================================================
# DATABASE ADAPTERS INITIALIZATION
# =============================================================================
# File: db/adapters/__init__.py
# Description: Adapters module exports
# =============================================================================

from storefront_identity.db.adapters.sqlite_adapter import SQLiteAdapter
from storefront_identity.db.adapters.postgres_adapter import PostgresAdapter

__all__ = [
    "SQLiteAdapter",
    "PostgresAdapter",
]
