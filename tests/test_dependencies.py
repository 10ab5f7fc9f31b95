# =============================================================================
# STOREFRONT IDENTITY - WIRING AND BEARER TESTS
# =============================================================================
# File: tests/test_dependencies.py
# Description: Bearer header handling, singleton wiring, lifecycle, settings
# =============================================================================

from datetime import timedelta

import pytest
from pydantic import ValidationError as SettingsValidationError

from storefront_identity.auth import dependencies
from storefront_identity.auth.dependencies import (
    authenticate_bearer,
    configure_credential_store,
    extract_bearer_token,
    get_auth_service,
    get_credential_store,
    get_token_service,
    optional_bearer_payload,
    reset_dependencies,
)
from storefront_identity.auth.repository import InMemoryAccountRepository
from storefront_identity.auth.tokens import TokenService
from storefront_identity.core.config import Settings
from storefront_identity.core.exceptions import (
    InvalidTokenError,
    SigningKeyNotConfiguredError,
    TokenExpiredError,
)
from storefront_identity.db.adapters.sqlite_adapter import MEMORY_URL, SQLiteAdapter
from storefront_identity.db.models import UserRole
from storefront_identity.main import lifespan

from tests.conftest import TEST_SECRET, VALID_PASSWORD


class BrokenSchemaAdapter(SQLiteAdapter):
    """Connects fine, fails while creating tables."""

    async def create_tables(self) -> None:
        raise RuntimeError("schema creation failed")


@pytest.fixture(autouse=True)
def clean_singletons():
    reset_dependencies()
    yield
    reset_dependencies()


class TestBearer:
    """Test suite for bearer token extraction."""

    def test_extract(self):
        assert extract_bearer_token("Bearer abc.def.ghi") == "abc.def.ghi"

    @pytest.mark.parametrize("header", [None, "", "Bearer ", "Basic dXNlcjpwYXNz", "abc.def.ghi"])
    def test_extract_rejects(self, header):
        with pytest.raises(InvalidTokenError):
            extract_bearer_token(header)

    async def test_authenticate(self, token_service, store, registered):
        account = await store.find_by_id(registered.id)
        header = f"Bearer {token_service.generate_access_token(account)}"

        payload = authenticate_bearer(header, token_service)

        assert payload.user_id == registered.id
        assert payload.role == UserRole.TARGET

    async def test_optional_is_anonymous_on_failure(self, store, hash_function, test_settings, registered):
        expired_service = TokenService(
            store, hash_function, config=test_settings,
            access_token_ttl=timedelta(seconds=-5),
        )
        account = await store.find_by_id(registered.id)
        expired = f"Bearer {expired_service.generate_access_token(account)}"

        with pytest.raises(TokenExpiredError):
            authenticate_bearer(expired, expired_service)

        assert optional_bearer_payload(expired, expired_service) is None
        assert optional_bearer_payload(None, expired_service) is None
        assert optional_bearer_payload("Bearer junk", expired_service) is None

    def test_optional_still_raises_on_misconfiguration(self, store, hash_function, unsigned_settings):
        service = TokenService(store, hash_function, config=unsigned_settings)

        with pytest.raises(SigningKeyNotConfiguredError):
            optional_bearer_payload("Bearer something", service)


class TestWiring:
    """Test suite for the shared store and services."""

    def test_services_share_store(self):
        store = InMemoryAccountRepository()
        configure_credential_store(store)

        assert get_credential_store() is store
        assert get_auth_service() is get_auth_service()
        assert get_auth_service()._store is get_token_service()._store is store

    def test_configure_drops_old_services(self):
        configure_credential_store(InMemoryAccountRepository())
        first = get_auth_service()

        configure_credential_store(InMemoryAccountRepository())

        assert get_auth_service() is not first
        assert dependencies._store is get_credential_store()


class TestLifespan:
    """Test suite for the lifecycle manager."""

    async def test_lifespan_runs_services(self, test_settings):
        adapter = SQLiteAdapter.create_for_testing()

        async with lifespan(test_settings, adapter) as core:
            registered = await core.auth.register("life@example.com", VALID_PASSWORD)
            refresh_token = await core.tokens.generate_refresh_token(registered.id)
            pair = await core.tokens.refresh_tokens(refresh_token, registered.id)
            assert pair.access_token

            assert await core.password_reset.request_password_reset("ghost@example.com") is None

        assert adapter.is_connected is False

    async def test_lifespan_opens_configured_database(self, tmp_path):
        db_file = tmp_path / "identity" / "mine.db"
        config = Settings(
            _env_file=None,
            app_env="test",
            jwt_secret_key=TEST_SECRET,
            bcrypt_rounds=4,
            password_reset_hash_rounds=4,
            sqlite_path=str(db_file),
        )

        async with lifespan(config) as core:
            await core.auth.register("file@example.com", VALID_PASSWORD)

        assert db_file.exists()

    async def test_failed_startup_disconnects(self, test_settings):
        adapter = BrokenSchemaAdapter(database_url=MEMORY_URL)

        with pytest.raises(RuntimeError):
            async with lifespan(test_settings, adapter):
                pass

        assert adapter.is_connected is False
        assert dependencies._store is None


class TestSettings:
    """Test suite for configuration validation."""

    def test_short_secret_rejected(self):
        with pytest.raises(SettingsValidationError):
            Settings(_env_file=None, jwt_secret_key="too-short")

    def test_empty_secret_is_absent(self):
        assert Settings(_env_file=None, jwt_secret_key="").jwt_secret_key is None

    def test_production_requires_secret(self):
        with pytest.raises(SettingsValidationError):
            Settings(_env_file=None, app_env="production", jwt_secret_key=None)

    def test_production_bcrypt_bounds(self):
        with pytest.raises(SettingsValidationError):
            Settings(_env_file=None, app_env="production", jwt_secret_key=TEST_SECRET, bcrypt_rounds=4)

    def test_development_bcrypt_bounds(self):
        with pytest.raises(SettingsValidationError):
            Settings(_env_file=None, app_env="development", bcrypt_rounds=4)
        with pytest.raises(SettingsValidationError):
            Settings(_env_file=None, app_env="development", bcrypt_rounds=15)

    def test_test_env_allows_cheap_bcrypt(self):
        assert Settings(_env_file=None, app_env="test", bcrypt_rounds=4).bcrypt_rounds == 4

    def test_cost_factor_follows_algorithm(self):
        bcrypt_settings = Settings(_env_file=None, bcrypt_rounds=11)
        argon_settings = Settings(_env_file=None, password_hash_algorithm="argon2", argon2_time_cost=2)

        assert bcrypt_settings.hash_cost_factor == 11
        assert bcrypt_settings.reset_hash_cost_factor == 10
        assert argon_settings.hash_cost_factor == 2
