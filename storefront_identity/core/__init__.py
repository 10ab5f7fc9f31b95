# =============================================================================
# CORE MODULE INITIALIZATION
# =============================================================================
# File: core/__init__.py
# Description: Core module exports for centralized access
# =============================================================================

from storefront_identity.core.config import settings, get_settings, Settings
from storefront_identity.core.exceptions import (
    # Base
    IdentityError,

    # Authentication
    AuthenticationError,
    InvalidCredentialsError,
    AccountNotActiveError,
    TokenError,
    TokenExpiredError,
    InvalidTokenError,

    # Account
    AccountError,
    AccountNotFoundError,
    AccountAlreadyExistsError,

    # Validation
    ValidationError,

    # Password reset
    PasswordResetError,
    PasswordResetTokenInvalidError,
    PasswordResetTokenExpiredError,

    # Configuration
    ConfigurationError,
    SigningKeyNotConfiguredError,
)
from storefront_identity.core.security import (
    IHashFunction,
    BcryptHashFunction,
    Argon2HashFunction,
    build_hash_function,
    IRandomTokenGenerator,
    SecureTokenGenerator,
    ISignedTokenCodec,
    JWTCodec,
    PasswordPolicy,
    token_generator,
    password_policy,
)
from storefront_identity.core.logging import setup_logging

__all__ = [
    # Config
    "settings",
    "get_settings",
    "Settings",

    # Exceptions
    "IdentityError",
    "AuthenticationError",
    "InvalidCredentialsError",
    "AccountNotActiveError",
    "TokenError",
    "TokenExpiredError",
    "InvalidTokenError",
    "AccountError",
    "AccountNotFoundError",
    "AccountAlreadyExistsError",
    "ValidationError",
    "PasswordResetError",
    "PasswordResetTokenInvalidError",
    "PasswordResetTokenExpiredError",
    "ConfigurationError",
    "SigningKeyNotConfiguredError",

    # Security
    "IHashFunction",
    "BcryptHashFunction",
    "Argon2HashFunction",
    "build_hash_function",
    "IRandomTokenGenerator",
    "SecureTokenGenerator",
    "ISignedTokenCodec",
    "JWTCodec",
    "PasswordPolicy",
    "token_generator",
    "password_policy",

    # Logging
    "setup_logging",
]
