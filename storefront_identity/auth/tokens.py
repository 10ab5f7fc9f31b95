# =============================================================================
# STOREFRONT IDENTITY - TOKEN SERVICE
# =============================================================================
# File: auth/tokens.py
# Description: Signed access tokens and rotating opaque refresh tokens
# =============================================================================

from typing import Optional
from datetime import timedelta
import logging

from pydantic import ValidationError as PydanticValidationError

from storefront_identity.auth.repository import ICredentialStore
from storefront_identity.auth.schemas import Account, TokenPair, TokenPayload
from storefront_identity.auth.validators import validate_refresh
from storefront_identity.core.config import Settings, settings as default_settings
from storefront_identity.core.exceptions import (
    AccountNotFoundError,
    InvalidTokenError,
    SigningKeyNotConfiguredError,
)
from storefront_identity.core.security import (
    IHashFunction,
    IRandomTokenGenerator,
    ISignedTokenCodec,
    JWTCodec,
    SecureTokenGenerator,
    build_hash_function,
)

logger = logging.getLogger(__name__)


class TokenService:
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    TOKEN SERVICE                                         │
    │  Access token issue/verify, refresh token issue/rotate                  │
    └─────────────────────────────────────────────────────────────────────────┘

    Token Types:
        - Access Token:  Signed, self-contained, short-lived. Carries exactly
                         user_id, email and role.
        - Refresh Token: Opaque random hex. Only its hash is stored, one per
                         account; every use replaces it.

    A stolen refresh token stops working as soon as the legitimate client
    refreshes, and vice versa.
    """

    def __init__(
        self,
        store: ICredentialStore,
        hash_function: Optional[IHashFunction] = None,
        token_generator: Optional[IRandomTokenGenerator] = None,
        codec: Optional[ISignedTokenCodec] = None,
        config: Optional[Settings] = None,
        access_token_ttl: Optional[timedelta] = None,
    ):
        """
        Args:
            store: Credential store shared with the other services
            hash_function: One-way hash for refresh tokens
            token_generator: Source of refresh token bytes
            codec: Signed token codec; defaults to JWT with the configured algorithm
            config: Settings; defaults to the process settings
            access_token_ttl: Override of jwt_access_token_expire_minutes
        """
        self._config = config or default_settings
        self._store = store
        self._hash = hash_function or build_hash_function(self._config)
        self._generator = token_generator or SecureTokenGenerator()
        self._codec = codec or JWTCodec(self._config.jwt_algorithm)
        self._access_token_ttl = access_token_ttl or timedelta(
            minutes=self._config.jwt_access_token_expire_minutes
        )

    @property
    def access_token_ttl(self) -> timedelta:
        return self._access_token_ttl

    def _signing_key(self) -> str:
        secret = self._config.jwt_secret_key
        if not secret:
            logger.critical("JWT_SECRET_KEY is not configured; cannot sign or verify tokens")
            raise SigningKeyNotConfiguredError()
        return secret

    # =========================================================================
    # ACCESS TOKENS
    # =========================================================================

    def generate_access_token(self, account: Account) -> str:
        """
        Sign an access token for ``account``.

        Raises:
            SigningKeyNotConfiguredError: No signing secret configured
        """
        secret = self._signing_key()
        payload = {
            "user_id": account.id,
            "email": account.email,
            "role": account.role.value,
        }
        return self._codec.sign(payload, secret, self._access_token_ttl)

    def verify_access_token(self, token: str) -> TokenPayload:
        """
        Verify an access token and return its claims.

        Raises:
            SigningKeyNotConfiguredError: No signing secret configured
            TokenExpiredError: Valid signature, expired
            InvalidTokenError: Bad signature, malformed token or payload
        """
        secret = self._signing_key()
        claims = self._codec.verify(token, secret)
        try:
            return TokenPayload.model_validate(claims)
        except PydanticValidationError as e:
            raise InvalidTokenError(details={"error": "Invalid token payload", "fields": e.error_count()})

    # =========================================================================
    # REFRESH TOKENS
    # =========================================================================

    async def generate_refresh_token(self, account_id: str) -> str:
        """
        Issue a refresh token, replacing whatever the account held before.

        Returns:
            str: Plaintext token; only its hash is persisted

        Raises:
            AccountNotFoundError: The id does not resolve
        """
        if await self._store.find_by_id(account_id) is None:
            raise AccountNotFoundError(account_id)

        token = self._generator.generate(self._config.refresh_token_bytes)
        token_hash = await self._hash.hash(token, self._config.hash_cost_factor)

        if await self._store.update(account_id, refresh_token_hash=token_hash) is None:
            raise AccountNotFoundError(account_id)

        logger.info("Refresh token issued for account %s", account_id)
        return token

    async def refresh_tokens(self, presented_token: str, account_id: str) -> TokenPair:
        """
        Rotate: consume the presented refresh token, issue a new pair.

        The new refresh hash is stored before the access token is signed, so
        the presented token is dead even if signing fails afterwards.

        Raises:
            ValidationError: Malformed token or account id
            AccountNotFoundError: The id does not resolve
            InvalidTokenError: No live refresh token, or it does not match
            SigningKeyNotConfiguredError: No signing secret configured
        """
        data = validate_refresh(presented_token, account_id)

        account = await self._store.find_by_id(data.account_id)
        if account is None:
            raise AccountNotFoundError(data.account_id)

        if account.refresh_token_hash is None or not await self._hash.compare(
            data.refresh_token, account.refresh_token_hash
        ):
            logger.info("Refresh rejected for account %s", account.id)
            raise InvalidTokenError()

        refresh_token = await self.generate_refresh_token(account.id)
        access_token = self.generate_access_token(account)

        logger.info("Refresh token rotated for account %s", account.id)
        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=int(self._access_token_ttl.total_seconds()),
        )
