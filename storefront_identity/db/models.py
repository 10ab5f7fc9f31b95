# =============================================================================
# STOREFRONT IDENTITY - DATABASE MODELS
# =============================================================================
# File: db/models.py
# Description: SQLAlchemy ORM model for storefront accounts and their
#              credential material (password, refresh and reset hashes)
# =============================================================================

from typing import Optional
from datetime import datetime
from enum import Enum
from uuid import uuid4

from sqlalchemy import (
    String,
    Boolean,
    DateTime,
    Index,
)
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from storefront_identity.db.base import Base
from storefront_identity.utils.helpers import utc_now


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def generate_uuid() -> str:
    """Generate a new UUID string."""
    return str(uuid4())


# =============================================================================
# ROLES
# =============================================================================

class UserRole(str, Enum):
    """Authorization tier embedded verbatim in issued access tokens."""

    TARGET = "TARGET"
    MARKETING = "MARKETING"
    MANAGER = "MANAGER"
    ADMIN = "ADMIN"


# =============================================================================
# ACCOUNT MODEL
# =============================================================================

class AccountModel(Base):
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    ACCOUNT MODEL                                         │
    │  Storefront principal with password, refresh and reset credentials      │
    └─────────────────────────────────────────────────────────────────────────┘

    Fields:
        - id:                     UUID primary key (auto-generated)
        - email:                  Unique normalized email (indexed)
        - password_hash:          One-way hash of the current password
        - role:                   Authorization tier
        - is_active:              False blocks authentication
        - deleted_at:             Soft-delete marker; set blocks authentication
        - refresh_token_hash:     Hash of the single valid refresh token
        - password_reset_token:   Hash of the outstanding reset token
        - password_reset_expires: Absolute expiry of the reset token
        - last_login_at:          Last successful login
    """

    __tablename__ = "accounts"

    # Primary Key
    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=generate_uuid,
    )

    # Identity
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True
    )
    password_hash: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True
    )
    first_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    role: Mapped[UserRole] = mapped_column(
        SAEnum(UserRole, name="user_role", native_enum=False, length=20),
        default=UserRole.TARGET,
        nullable=False
    )

    # Account Status
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False
    )
    email_verified_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True
    )

    # Credentials
    refresh_token_hash: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True
    )
    password_reset_token: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True
    )
    password_reset_expires: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True
    )

    # Timestamps
    last_login_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        nullable=False
    )

    __table_args__ = (
        Index("ix_accounts_reset_outstanding", "password_reset_token"),
    )

    def __repr__(self) -> str:
        return f"<AccountModel(id={self.id}, email={self.email}, role={self.role})>"
