# =============================================================================
# STOREFRONT IDENTITY - AUTH DEPENDENCIES
# =============================================================================
# File: auth/dependencies.py
# Description: Process-wide wiring of the store and services, plus
#              transport-agnostic bearer token extraction
# =============================================================================

from typing import Optional
import logging

from storefront_identity.auth.password_reset import PasswordResetFlow
from storefront_identity.auth.repository import AccountRepository, ICredentialStore
from storefront_identity.auth.schemas import TokenPayload
from storefront_identity.auth.service import AuthService
from storefront_identity.auth.tokens import TokenService
from storefront_identity.core.config import Settings, settings as default_settings
from storefront_identity.core.exceptions import InvalidTokenError, TokenError
from storefront_identity.core.security import IHashFunction, build_hash_function
from storefront_identity.db.factory import DBFactory

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


# =============================================================================
# SINGLETONS
# =============================================================================

_config: Optional[Settings] = None
_store: Optional[ICredentialStore] = None
_hash_function: Optional[IHashFunction] = None
_auth_service: Optional[AuthService] = None
_token_service: Optional[TokenService] = None
_password_reset_flow: Optional[PasswordResetFlow] = None


def configure_credential_store(store: ICredentialStore, config: Optional[Settings] = None) -> None:
    """Install ``store`` (and optionally ``config``) and drop services built on the old ones."""
    global _config, _store, _hash_function, _auth_service, _token_service, _password_reset_flow
    _config = config
    _store = store
    _hash_function = None
    _auth_service = None
    _token_service = None
    _password_reset_flow = None


def get_config() -> Settings:
    return _config or default_settings


def get_credential_store() -> ICredentialStore:
    """Shared store; defaults to the SQLAlchemy repository on the factory adapter."""
    global _store
    if _store is None:
        _store = AccountRepository(DBFactory.get_db_adapter())
    return _store


def get_hash_function() -> IHashFunction:
    global _hash_function
    if _hash_function is None:
        _hash_function = build_hash_function(get_config())
    return _hash_function


def get_auth_service() -> AuthService:
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService(get_credential_store(), get_hash_function(), config=get_config())
    return _auth_service


def get_token_service() -> TokenService:
    global _token_service
    if _token_service is None:
        _token_service = TokenService(get_credential_store(), get_hash_function(), config=get_config())
    return _token_service


def get_password_reset_flow() -> PasswordResetFlow:
    global _password_reset_flow
    if _password_reset_flow is None:
        _password_reset_flow = PasswordResetFlow(
            get_credential_store(), get_hash_function(), config=get_config()
        )
    return _password_reset_flow


def reset_dependencies() -> None:
    """Forget every singleton (tests, shutdown)."""
    global _config, _store, _hash_function, _auth_service, _token_service, _password_reset_flow
    _config = None
    _store = None
    _hash_function = None
    _auth_service = None
    _token_service = None
    _password_reset_flow = None


# =============================================================================
# BEARER TOKENS
# =============================================================================

def extract_bearer_token(authorization: Optional[str]) -> str:
    """
    Pull the token out of an ``Authorization: Bearer <token>`` header value.

    Raises:
        InvalidTokenError: Header missing or not a bearer credential
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise InvalidTokenError(details={"error": "No token provided"})
    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise InvalidTokenError(details={"error": "No token provided"})
    return token


def authenticate_bearer(
    authorization: Optional[str],
    token_service: Optional[TokenService] = None,
) -> TokenPayload:
    """
    Verify the bearer token in ``authorization``.

    Returns:
        TokenPayload: user_id, email and role of the caller

    Raises:
        InvalidTokenError: Missing, malformed or forged token
        TokenExpiredError: Token expired
        SigningKeyNotConfiguredError: No signing secret configured
    """
    service = token_service or get_token_service()
    return service.verify_access_token(extract_bearer_token(authorization))


def optional_bearer_payload(
    authorization: Optional[str],
    token_service: Optional[TokenService] = None,
) -> Optional[TokenPayload]:
    """Like ``authenticate_bearer`` but anonymous (None) on any token failure."""
    try:
        return authenticate_bearer(authorization, token_service)
    except TokenError as e:
        logger.debug("Ignoring unusable bearer token: %s", e.error_code)
        return None
