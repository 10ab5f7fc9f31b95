# =============================================================================
# STOREFRONT IDENTITY - AUTH SCHEMAS
# =============================================================================
# File: auth/schemas.py
# Description: Pydantic models for accounts, token payloads and validated input
# =============================================================================

from typing import Optional
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from storefront_identity.db.models import UserRole


# =============================================================================
# BASE SCHEMAS
# =============================================================================

class BaseSchema(BaseModel):
    """Base schema with common configuration."""
    model_config = ConfigDict(from_attributes=True)


# =============================================================================
# ACCOUNT SCHEMAS
# =============================================================================

class Account(BaseSchema):
    """
    Full account snapshot as returned by a credential store (internal use).

    Carries every hash field; never hand this to a caller outside the core,
    use ``AccountResponse`` instead.
    """
    id: str
    email: str
    password_hash: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: UserRole = UserRole.TARGET
    is_active: bool = True
    email_verified_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None
    refresh_token_hash: Optional[str] = None
    password_reset_token: Optional[str] = None
    password_reset_expires: Optional[datetime] = None
    last_login_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def can_authenticate(self) -> bool:
        """Inactive and soft-deleted accounts are blocked identically."""
        return self.is_active and self.deleted_at is None


class AccountResponse(BaseSchema):
    """Public account projection (excludes every credential hash)."""
    id: str = Field(..., description="Account UUID")
    email: str = Field(..., description="Normalized email address")
    first_name: Optional[str] = Field(None, description="Given name")
    last_name: Optional[str] = Field(None, description="Family name")
    role: UserRole = Field(..., description="Authorization tier")
    is_active: bool = Field(..., description="Account active status")
    email_verified_at: Optional[datetime] = Field(None, description="Email verification time")
    last_login_at: Optional[datetime] = Field(None, description="Last login time")
    created_at: Optional[datetime] = Field(None, description="Account creation date")

    @classmethod
    def from_account(cls, account: Account) -> "AccountResponse":
        return cls.model_validate(account.model_dump())


# =============================================================================
# TOKEN SCHEMAS
# =============================================================================

class TokenPayload(BaseSchema):
    """
    Claims carried by an access token.

    Attributes:
        user_id: Account identifier
        email: Normalized email at issue time
        role: Authorization tier at issue time
    """
    model_config = ConfigDict(extra="ignore")

    user_id: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    role: UserRole


class TokenPair(BaseSchema):
    """Access and refresh token pair produced by a rotation."""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


# =============================================================================
# VALIDATED INPUT
# =============================================================================

class RegistrationData(BaseSchema):
    email: str
    password: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class CredentialsData(BaseSchema):
    email: str
    password: str


class RefreshData(BaseSchema):
    refresh_token: str
    account_id: str


class PasswordResetData(BaseSchema):
    token: str
    new_password: str
