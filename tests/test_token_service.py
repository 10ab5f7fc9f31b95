# =============================================================================
# STOREFRONT IDENTITY - TOKEN SERVICE TESTS
# =============================================================================
# File: tests/test_token_service.py
# Description: Access token issue/verify and refresh token rotation
# =============================================================================

import logging
import uuid
from datetime import timedelta

import pytest
from jose import jwt

from storefront_identity.auth.tokens import TokenService
from storefront_identity.core.exceptions import (
    AccountNotFoundError,
    InvalidTokenError,
    SigningKeyNotConfiguredError,
    TokenExpiredError,
)
from storefront_identity.db.models import UserRole

from tests.conftest import TEST_SECRET


class TestAccessTokens:
    """Test suite for access token issue and verification."""

    async def test_round_trip(self, token_service, store, registered):
        account = await store.find_by_id(registered.id)

        token = token_service.generate_access_token(account)
        payload = token_service.verify_access_token(token)

        assert payload.user_id == account.id
        assert payload.email == account.email
        assert payload.role == UserRole.TARGET

    async def test_payload_is_exactly_identity_and_role(self, token_service, store, registered):
        account = await store.find_by_id(registered.id)

        claims = jwt.get_unverified_claims(token_service.generate_access_token(account))

        assert set(claims) == {"user_id", "email", "role", "iat", "exp"}
        assert claims["exp"] - claims["iat"] == 15 * 60

    async def test_role_carried(self, token_service, store, registered):
        account = await store.update(registered.id, role=UserRole.ADMIN)

        payload = token_service.verify_access_token(token_service.generate_access_token(account))

        assert payload.role == UserRole.ADMIN

    async def test_expired(self, store, hash_function, test_settings, registered):
        service = TokenService(
            store, hash_function, config=test_settings,
            access_token_ttl=timedelta(seconds=-5),
        )
        account = await store.find_by_id(registered.id)

        with pytest.raises(TokenExpiredError):
            service.verify_access_token(service.generate_access_token(account))

    def test_tampered(self, token_service):
        forged = jwt.encode(
            {"user_id": "x", "email": "x@example.com", "role": "ADMIN"},
            "some-other-secret-which-is-long-enough",
            algorithm="HS256",
        )

        with pytest.raises(InvalidTokenError):
            token_service.verify_access_token(forged)

    def test_malformed(self, token_service):
        with pytest.raises(InvalidTokenError):
            token_service.verify_access_token("garbage")

    def test_valid_signature_bad_payload(self, token_service):
        token = jwt.encode({"user_id": "x", "role": "EMPEROR"}, TEST_SECRET, algorithm="HS256")

        with pytest.raises(InvalidTokenError):
            token_service.verify_access_token(token)

    async def test_signing_key_missing(self, store, hash_function, unsigned_settings, registered, caplog):
        service = TokenService(store, hash_function, config=unsigned_settings)
        account = await store.find_by_id(registered.id)

        with caplog.at_level(logging.CRITICAL, logger="storefront_identity.auth.tokens"):
            with pytest.raises(SigningKeyNotConfiguredError) as exc_info:
                service.generate_access_token(account)

        assert exc_info.value.operational is True
        assert any(r.levelno == logging.CRITICAL for r in caplog.records)

        with pytest.raises(SigningKeyNotConfiguredError):
            service.verify_access_token("anything")


class TestRefreshTokens:
    """Test suite for refresh token issue and rotation."""

    async def test_generate_stores_only_hash(self, token_service, store, registered, test_settings):
        token = await token_service.generate_refresh_token(registered.id)

        assert len(token) == test_settings.refresh_token_bytes * 2
        stored = await store.find_by_id(registered.id)
        assert stored.refresh_token_hash is not None
        assert stored.refresh_token_hash != token

    async def test_generate_replaces_previous(self, token_service, registered):
        first = await token_service.generate_refresh_token(registered.id)
        second = await token_service.generate_refresh_token(registered.id)

        with pytest.raises(InvalidTokenError):
            await token_service.refresh_tokens(first, registered.id)

        pair = await token_service.refresh_tokens(second, registered.id)
        assert pair.refresh_token != second

    async def test_generate_unknown_account(self, token_service):
        with pytest.raises(AccountNotFoundError):
            await token_service.generate_refresh_token(str(uuid.uuid4()))

    async def test_rotation_single_use(self, token_service, registered):
        original = await token_service.generate_refresh_token(registered.id)

        pair = await token_service.refresh_tokens(original, registered.id)

        assert pair.refresh_token != original
        assert pair.token_type == "bearer"
        assert pair.expires_in == 15 * 60
        assert token_service.verify_access_token(pair.access_token).user_id == registered.id

        with pytest.raises(InvalidTokenError):
            await token_service.refresh_tokens(original, registered.id)

        second = await token_service.refresh_tokens(pair.refresh_token, registered.id)
        assert second.refresh_token != pair.refresh_token

    async def test_no_live_token(self, token_service, registered):
        with pytest.raises(InvalidTokenError):
            await token_service.refresh_tokens("a" * 64, registered.id)

    async def test_mismatch(self, token_service, registered):
        await token_service.generate_refresh_token(registered.id)

        with pytest.raises(InvalidTokenError):
            await token_service.refresh_tokens("b" * 64, registered.id)

    async def test_token_bound_to_account(self, token_service, auth_service, registered):
        other = await auth_service.register("other@example.com", "OtherPass1234")
        token = await token_service.generate_refresh_token(registered.id)
        await token_service.generate_refresh_token(other.id)

        with pytest.raises(InvalidTokenError):
            await token_service.refresh_tokens(token, other.id)

    async def test_unknown_account(self, token_service):
        with pytest.raises(AccountNotFoundError):
            await token_service.refresh_tokens("a" * 64, str(uuid.uuid4()))

    async def test_rotation_without_signing_key_still_consumes(
        self, store, hash_function, unsigned_settings, registered
    ):
        """The new refresh hash is stored before signing is attempted."""
        service = TokenService(store, hash_function, config=unsigned_settings)
        original = await service.generate_refresh_token(registered.id)

        with pytest.raises(SigningKeyNotConfiguredError):
            await service.refresh_tokens(original, registered.id)

        with pytest.raises(InvalidTokenError):
            await service.refresh_tokens(original, registered.id)
