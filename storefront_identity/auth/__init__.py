# =============================================================================
# AUTH MODULE INITIALIZATION
# =============================================================================
# File: auth/__init__.py
# Description: Auth module exports
# =============================================================================

from storefront_identity.auth.schemas import (
    Account,
    AccountResponse,
    TokenPayload,
    TokenPair,
    RegistrationData,
    CredentialsData,
    RefreshData,
    PasswordResetData,
)
from storefront_identity.auth.repository import (
    ICredentialStore,
    AccountRepository,
    InMemoryAccountRepository,
)
from storefront_identity.auth.service import AuthService
from storefront_identity.auth.tokens import TokenService
from storefront_identity.auth.password_reset import PasswordResetFlow
from storefront_identity.auth.dependencies import (
    configure_credential_store,
    get_config,
    get_credential_store,
    get_auth_service,
    get_token_service,
    get_password_reset_flow,
    reset_dependencies,
    extract_bearer_token,
    authenticate_bearer,
    optional_bearer_payload,
)

__all__ = [
    # Schemas
    "Account",
    "AccountResponse",
    "TokenPayload",
    "TokenPair",
    "RegistrationData",
    "CredentialsData",
    "RefreshData",
    "PasswordResetData",

    # Repository
    "ICredentialStore",
    "AccountRepository",
    "InMemoryAccountRepository",

    # Services
    "AuthService",
    "TokenService",
    "PasswordResetFlow",

    # Dependencies
    "configure_credential_store",
    "get_config",
    "get_credential_store",
    "get_auth_service",
    "get_token_service",
    "get_password_reset_flow",
    "reset_dependencies",
    "extract_bearer_token",
    "authenticate_bearer",
    "optional_bearer_payload",
]
