# =============================================================================
# STOREFRONT IDENTITY - INPUT VALIDATORS
# =============================================================================
# File: auth/validators.py
# Description: Validation and normalization of service inputs
#              Every failure raises ValidationError naming the offending field
# =============================================================================

from typing import Optional

from storefront_identity.auth.schemas import (
    RegistrationData,
    CredentialsData,
    RefreshData,
    PasswordResetData,
)
from storefront_identity.core.exceptions import ValidationError
from storefront_identity.core.security import PasswordPolicy
from storefront_identity.utils.helpers import (
    normalize_email,
    is_valid_email,
    is_canonical_uuid,
)

NAME_MAX_LENGTH = 100
TOKEN_MIN_LENGTH = 32
TOKEN_MAX_LENGTH = 256


# =============================================================================
# FIELD VALIDATORS
# =============================================================================

def validate_email(email: Optional[str]) -> str:
    """
    Normalize and check an email address.

    Returns:
        str: Trimmed, lowercased email

    Raises:
        ValidationError: Missing or malformed email
    """
    if not isinstance(email, str) or not email.strip():
        raise ValidationError(message="Email is required", field="email")
    normalized = normalize_email(email)
    if not is_valid_email(normalized):
        raise ValidationError(message="Invalid email format", field="email")
    return normalized


def validate_name(value: Optional[str], field: str) -> Optional[str]:
    """Optional profile name; blank becomes None."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(message=f"{field} must be a string", field=field)
    value = value.strip()
    if len(value) > NAME_MAX_LENGTH:
        raise ValidationError(
            message=f"{field} must be less than {NAME_MAX_LENGTH} characters",
            field=field,
        )
    return value or None


def validate_opaque_token(
    token: Optional[str],
    field: str,
    label: str,
) -> str:
    if not isinstance(token, str) or not token:
        raise ValidationError(message=f"{label} is required", field=field)
    if not TOKEN_MIN_LENGTH <= len(token) <= TOKEN_MAX_LENGTH:
        raise ValidationError(message=f"Invalid {label.lower()} format", field=field)
    return token


# =============================================================================
# OPERATION VALIDATORS
# =============================================================================

def validate_registration(
    email: Optional[str],
    password: Optional[str],
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
) -> RegistrationData:
    normalized = validate_email(email)
    PasswordPolicy.ensure_valid(password, field="password")
    return RegistrationData(
        email=normalized,
        password=password,
        first_name=validate_name(first_name, "first_name"),
        last_name=validate_name(last_name, "last_name"),
    )


def validate_credentials(email: Optional[str], password: Optional[str]) -> CredentialsData:
    """Login input. The password is only required, never policy-checked."""
    normalized = validate_email(email)
    if not isinstance(password, str) or not password:
        raise ValidationError(message="Password is required", field="password")
    return CredentialsData(email=normalized, password=password)


def validate_refresh(refresh_token: Optional[str], account_id: Optional[str]) -> RefreshData:
    token = validate_opaque_token(refresh_token, "refresh_token", "Refresh token")
    if not isinstance(account_id, str) or not account_id:
        raise ValidationError(message="User ID is required", field="account_id")
    if not is_canonical_uuid(account_id):
        raise ValidationError(message="Invalid user ID format", field="account_id")
    return RefreshData(refresh_token=token, account_id=account_id)


def validate_password_reset(
    token: Optional[str],
    new_password: Optional[str],
) -> PasswordResetData:
    presented = validate_opaque_token(token, "token", "Reset token")
    PasswordPolicy.ensure_valid(new_password, field="new_password")
    return PasswordResetData(token=presented, new_password=new_password)
