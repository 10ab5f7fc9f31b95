# =============================================================================
# STOREFRONT IDENTITY - PASSWORD RESET FLOW
# =============================================================================
# File: auth/password_reset.py
# Description: Issue and redeem one-time, time-boxed password reset tokens
# =============================================================================

from typing import Callable, Optional
from datetime import datetime, timedelta
import logging

from storefront_identity.auth.repository import ICredentialStore
from storefront_identity.auth.validators import validate_email, validate_password_reset
from storefront_identity.core.config import Settings, settings as default_settings
from storefront_identity.core.exceptions import (
    AccountNotFoundError,
    PasswordResetTokenExpiredError,
    PasswordResetTokenInvalidError,
)
from storefront_identity.core.security import (
    IHashFunction,
    IRandomTokenGenerator,
    SecureTokenGenerator,
    build_hash_function,
)
from storefront_identity.utils.helpers import ensure_aware, mask_email, utc_now

logger = logging.getLogger(__name__)


class PasswordResetFlow:
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    PASSWORD RESET FLOW                                   │
    │  Out-of-band reset tokens: one outstanding per account, 60 minute life  │
    └─────────────────────────────────────────────────────────────────────────┘

    Requesting a reset for an unknown email is silent so the caller can
    answer identically either way. Redeeming proves possession of the
    token before it reveals whether the token has expired.
    """

    def __init__(
        self,
        store: ICredentialStore,
        hash_function: Optional[IHashFunction] = None,
        token_generator: Optional[IRandomTokenGenerator] = None,
        config: Optional[Settings] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._config = config or default_settings
        self._store = store
        self._hash = hash_function or build_hash_function(self._config)
        self._generator = token_generator or SecureTokenGenerator()
        self._clock = clock
        self._lifetime = timedelta(minutes=self._config.password_reset_expire_minutes)

    async def request_password_reset(self, email: str) -> Optional[str]:
        """
        Issue a reset token for ``email``.

        Returns:
            The plaintext token for out-of-band delivery, or None when no
            account has this email (nothing is written in that case).

        Raises:
            ValidationError: Missing or malformed email
        """
        normalized = validate_email(email)

        account = await self._store.find_by_email(normalized)
        if account is None:
            logger.info("Password reset requested for unknown email %s", mask_email(normalized))
            return None

        token = self._generator.generate(self._config.password_reset_token_bytes)
        token_hash = await self._hash.hash(token, self._config.reset_hash_cost_factor)

        updated = await self._store.update(
            account.id,
            password_reset_token=token_hash,
            password_reset_expires=self._clock() + self._lifetime,
        )
        if updated is None:
            raise AccountNotFoundError(account.id)

        logger.info("Password reset token issued for account %s", account.id)
        return token

    async def reset_password(self, presented_token: str, new_password: str) -> None:
        """
        Redeem a reset token and set a new password.

        Every account with an outstanding token is a candidate; the first
        whose stored hash matches wins. Expiry is only checked after a match.

        Raises:
            ValidationError: Malformed token or weak password
            PasswordResetTokenInvalidError: No candidate matches
            PasswordResetTokenExpiredError: Matched, but the window has elapsed
        """
        data = validate_password_reset(presented_token, new_password)

        candidates = await self._store.find_candidates_with_outstanding_reset_token()
        matched = None
        for candidate in candidates:
            if candidate.password_reset_token is None:
                continue
            if await self._hash.compare(data.token, candidate.password_reset_token):
                matched = candidate
                break

        if matched is None:
            logger.info("Password reset rejected: no matching token")
            raise PasswordResetTokenInvalidError()

        expires = matched.password_reset_expires
        if expires is None or ensure_aware(expires) < self._clock():
            logger.info("Password reset rejected: token expired for account %s", matched.id)
            raise PasswordResetTokenExpiredError()

        password_hash = await self._hash.hash(data.new_password, self._config.hash_cost_factor)

        updated = await self._store.update(
            matched.id,
            password_hash=password_hash,
            password_reset_token=None,
            password_reset_expires=None,
        )
        if updated is None:
            raise AccountNotFoundError(matched.id)

        logger.info("Password reset completed for account %s", matched.id)
