# =============================================================================
# DATABASE MODULE INITIALIZATION
# =============================================================================
# File: db/__init__.py
# Description: Database module exports
# =============================================================================

from storefront_identity.db.base import Base, IDBAdapter, BaseDBAdapter
from storefront_identity.db.models import AccountModel, UserRole
from storefront_identity.db.adapters import SQLiteAdapter, PostgresAdapter
from storefront_identity.db.factory import DBFactory, DatabaseType

__all__ = [
    # Base
    "Base",
    "IDBAdapter",
    "BaseDBAdapter",

    # Models
    "AccountModel",
    "UserRole",

    # Adapters
    "SQLiteAdapter",
    "PostgresAdapter",

    # Factory
    "DBFactory",
    "DatabaseType",
]
