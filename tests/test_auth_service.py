# =============================================================================
# STOREFRONT IDENTITY - AUTH SERVICE TESTS
# =============================================================================
# File: tests/test_auth_service.py
# Description: Registration, login and logout behaviour
# =============================================================================

import uuid

import pytest

from storefront_identity.core.exceptions import (
    AccountAlreadyExistsError,
    AccountNotActiveError,
    AccountNotFoundError,
    InvalidCredentialsError,
    InvalidTokenError,
    ValidationError,
)
from storefront_identity.db.models import UserRole
from storefront_identity.utils.helpers import utc_now

from tests.conftest import VALID_PASSWORD


class TestRegister:
    """Test suite for AuthService.register."""

    async def test_creates_active_account(self, auth_service, store, hash_function):
        account = await auth_service.register("New@Example.com", VALID_PASSWORD, "Ada", "Lovelace")

        assert account.email == "new@example.com"
        assert account.is_active is True
        assert account.role == UserRole.TARGET
        assert not hasattr(account, "password_hash")
        assert hash_function.hash_calls == 1

        stored = await store.find_by_id(account.id)
        assert stored.password_hash != VALID_PASSWORD
        assert stored.refresh_token_hash is None
        assert stored.first_name == "Ada"

    async def test_duplicate_email_case_insensitive(self, auth_service, registered):
        with pytest.raises(AccountAlreadyExistsError) as exc_info:
            await auth_service.register("USER@example.com", VALID_PASSWORD)

        assert exc_info.value.error_code == "ACCOUNT_ALREADY_EXISTS"

    async def test_invalid_email(self, auth_service, store):
        with pytest.raises(ValidationError) as exc_info:
            await auth_service.register("not-an-email", VALID_PASSWORD)

        assert exc_info.value.field == "email"
        assert store.writes == 0

    async def test_weak_password(self, auth_service, store):
        with pytest.raises(ValidationError) as exc_info:
            await auth_service.register("new@example.com", "password")

        assert exc_info.value.field == "password"
        assert store.writes == 0


class TestLogin:
    """Test suite for AuthService.login."""

    async def test_success(self, auth_service, registered, clock):
        account = await auth_service.login("user@example.com", VALID_PASSWORD)

        assert account.id == registered.id
        assert account.last_login_at == clock.now

    async def test_case_insensitive_email(self, auth_service, registered):
        account = await auth_service.login("USER@Example.com", VALID_PASSWORD)

        assert account.id == registered.id

    async def test_wrong_password(self, auth_service, registered, store):
        with pytest.raises(InvalidCredentialsError):
            await auth_service.login("user@example.com", "WrongPass999")

        stored = await store.find_by_id(registered.id)
        assert stored.last_login_at is None

    async def test_unknown_email_never_compares(self, auth_service, hash_function):
        with pytest.raises(InvalidCredentialsError):
            await auth_service.login("ghost@example.com", VALID_PASSWORD)

        assert hash_function.compare_calls == 0

    async def test_no_password_hash_same_as_unknown(self, auth_service, store, hash_function):
        await store.create(email="sso@example.com", password_hash=None)

        with pytest.raises(InvalidCredentialsError) as exc_info:
            await auth_service.login("sso@example.com", VALID_PASSWORD)

        assert exc_info.value.message == InvalidCredentialsError().message
        assert hash_function.compare_calls == 0

    async def test_inactive_account_never_compares(self, auth_service, registered, store, hash_function):
        await store.update(registered.id, is_active=False)

        with pytest.raises(AccountNotActiveError):
            await auth_service.login("user@example.com", VALID_PASSWORD)

        assert hash_function.compare_calls == 0

    async def test_inactive_account_with_wrong_password(self, auth_service, registered, store):
        """Status is reported before the password is looked at."""
        await store.update(registered.id, is_active=False)

        with pytest.raises(AccountNotActiveError):
            await auth_service.login("user@example.com", "WrongPass999")

    async def test_soft_deleted_account(self, auth_service, registered, store, hash_function):
        await store.update(registered.id, deleted_at=utc_now())

        with pytest.raises(AccountNotActiveError):
            await auth_service.login("user@example.com", VALID_PASSWORD)

        assert hash_function.compare_calls == 0


class TestLogout:
    """Test suite for AuthService.logout."""

    async def test_clears_refresh_token(self, auth_service, token_service, registered, store):
        await token_service.generate_refresh_token(registered.id)

        await auth_service.logout(registered.id)

        stored = await store.find_by_id(registered.id)
        assert stored.refresh_token_hash is None

    async def test_idempotent(self, auth_service, registered, store):
        await auth_service.logout(registered.id)
        await auth_service.logout(registered.id)

        stored = await store.find_by_id(registered.id)
        assert stored.refresh_token_hash is None

    async def test_unknown_account(self, auth_service):
        with pytest.raises(AccountNotFoundError):
            await auth_service.logout(str(uuid.uuid4()))

    async def test_refresh_fails_after_logout(self, auth_service, token_service, registered):
        refresh_token = await token_service.generate_refresh_token(registered.id)

        await auth_service.logout(registered.id)

        with pytest.raises(InvalidTokenError):
            await token_service.refresh_tokens(refresh_token, registered.id)
