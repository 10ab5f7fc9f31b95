# =============================================================================
# STOREFRONT IDENTITY - AUTH SERVICE
# =============================================================================
# File: auth/service.py
# Description: Registration, password login and logout
#              Orchestrates the credential store and the hash function
# =============================================================================

from typing import Callable, Optional
from datetime import datetime
import logging

from storefront_identity.auth.repository import ICredentialStore
from storefront_identity.auth.schemas import AccountResponse
from storefront_identity.auth.validators import (
    validate_registration,
    validate_credentials,
)
from storefront_identity.core.config import Settings, settings as default_settings
from storefront_identity.core.exceptions import (
    AccountAlreadyExistsError,
    AccountNotActiveError,
    AccountNotFoundError,
    InvalidCredentialsError,
)
from storefront_identity.core.security import IHashFunction, build_hash_function
from storefront_identity.utils.helpers import mask_email, utc_now

logger = logging.getLogger(__name__)


class AuthService:
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    AUTHENTICATION SERVICE                                │
    │  Account registration, password login and logout                        │
    └─────────────────────────────────────────────────────────────────────────┘

    Responsibilities:
        - Registration with input validation and password hashing
        - Login with enumeration-resistant failure modes
        - Logout by revoking the single refresh credential

    Login never runs the password compare for inactive or soft-deleted
    accounts, and reports a missing account exactly like a wrong password.
    """

    def __init__(
        self,
        store: ICredentialStore,
        hash_function: Optional[IHashFunction] = None,
        config: Optional[Settings] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Args:
            store: Credential store shared with the other services
            hash_function: One-way hash; defaults to the configured algorithm
            config: Settings; defaults to the process settings
            clock: Source of "now" for last_login_at
        """
        self._config = config or default_settings
        self._store = store
        self._hash = hash_function or build_hash_function(self._config)
        self._clock = clock

    # =========================================================================
    # REGISTRATION
    # =========================================================================

    async def register(
        self,
        email: str,
        password: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
    ) -> AccountResponse:
        """
        Register a new account.

        Returns:
            AccountResponse: Created account, without any credential material

        Raises:
            ValidationError: Malformed email, weak password or oversized name
            AccountAlreadyExistsError: The normalized email is taken
        """
        data = validate_registration(email, password, first_name, last_name)

        if await self._store.find_by_email(data.email) is not None:
            logger.info("Registration rejected, email exists: %s", mask_email(data.email))
            raise AccountAlreadyExistsError(field="email")

        password_hash = await self._hash.hash(data.password, self._config.hash_cost_factor)

        account = await self._store.create(
            email=data.email,
            password_hash=password_hash,
            first_name=data.first_name,
            last_name=data.last_name,
            is_active=True,
            refresh_token_hash=None,
        )

        logger.info("Account registered: %s (%s)", account.id, mask_email(account.email))
        return AccountResponse.from_account(account)

    # =========================================================================
    # LOGIN
    # =========================================================================

    async def login(self, email: str, password: str) -> AccountResponse:
        """
        Authenticate with email and password.

        Flow:
            1. Validate and normalize the email
            2. Resolve the account (missing or password-less -> invalid credentials)
            3. Reject inactive or soft-deleted accounts before any compare
            4. Compare the password against the stored hash
            5. Stamp last_login_at

        Raises:
            ValidationError: Missing or malformed input
            InvalidCredentialsError: Unknown email, no password set, wrong password
            AccountNotActiveError: Inactive or soft-deleted account
        """
        data = validate_credentials(email, password)

        account = await self._store.find_by_email(data.email)
        if account is None or account.password_hash is None:
            logger.info("Login failed (no credential): %s", mask_email(data.email))
            raise InvalidCredentialsError()

        if not account.can_authenticate:
            logger.info("Login refused for inactive account %s", account.id)
            raise AccountNotActiveError()

        if not await self._hash.compare(data.password, account.password_hash):
            logger.info("Login failed (password mismatch) for account %s", account.id)
            raise InvalidCredentialsError()

        updated = await self._store.update(account.id, last_login_at=self._clock())
        if updated is None:
            raise AccountNotFoundError(account.id)

        logger.info("Login succeeded for account %s", account.id)
        return AccountResponse.from_account(updated)

    # =========================================================================
    # LOGOUT
    # =========================================================================

    async def logout(self, account_id: str) -> None:
        """
        Revoke the account's refresh credential. Idempotent.

        Raises:
            AccountNotFoundError: The id does not resolve
        """
        if await self._store.find_by_id(account_id) is None:
            raise AccountNotFoundError(account_id)

        await self._store.update(account_id, refresh_token_hash=None)
        logger.info("Logout for account %s", account_id)
