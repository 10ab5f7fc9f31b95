# =============================================================================
# STOREFRONT IDENTITY - TEST CONFIGURATION
# =============================================================================
# File: tests/conftest.py
# Description: Pytest fixtures: test settings, in-memory stores, a counting
#              hash function, a controllable clock and in-memory SQLite
# =============================================================================

from typing import Any, AsyncGenerator, Optional
from datetime import datetime, timedelta, timezone
import secrets

import pytest
import pytest_asyncio

from storefront_identity.auth.password_reset import PasswordResetFlow
from storefront_identity.auth.repository import AccountRepository, InMemoryAccountRepository
from storefront_identity.auth.service import AuthService
from storefront_identity.auth.tokens import TokenService
from storefront_identity.core.config import Settings
from storefront_identity.core.security import IHashFunction
from storefront_identity.db.adapters.sqlite_adapter import SQLiteAdapter

TEST_SECRET = "test-signing-secret-0123456789-abcdefghij"
VALID_PASSWORD = "ValidPass123"


# =============================================================================
# TEST DOUBLES
# =============================================================================

class CountingHashFunction(IHashFunction):
    """Fast salted stand-in for bcrypt that records how often it is called."""

    def __init__(self):
        self.hash_calls = 0
        self.compare_calls = 0

    async def hash(self, secret: str, cost_factor: int) -> str:
        self.hash_calls += 1
        return f"fake${cost_factor}${secrets.token_hex(8)}${secret}"

    async def compare(self, secret: str, digest: str) -> bool:
        self.compare_calls += 1
        parts = digest.split("$", 3) if digest else []
        return len(parts) == 4 and parts[0] == "fake" and parts[3] == secret


class RecordingStore(InMemoryAccountRepository):
    """In-memory store that counts writes."""

    def __init__(self):
        super().__init__()
        self.writes = 0

    async def create(self, **fields: Any):
        self.writes += 1
        return await super().create(**fields)

    async def update(self, account_id: str, **fields: Any):
        self.writes += 1
        return await super().update(account_id, **fields)


class FixedClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: Optional[datetime] = None):
        self.now = now or datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


# =============================================================================
# SETTINGS FIXTURES
# =============================================================================

@pytest.fixture
def test_settings() -> Settings:
    """Settings with a fixed secret and the cheapest bcrypt cost."""
    return Settings(
        _env_file=None,
        app_env="test",
        jwt_secret_key=TEST_SECRET,
        bcrypt_rounds=4,
        password_reset_hash_rounds=4,
    )


@pytest.fixture
def unsigned_settings() -> Settings:
    """Settings without a signing secret."""
    return Settings(_env_file=None, app_env="test", jwt_secret_key=None, bcrypt_rounds=4)


# =============================================================================
# STORE / COLLABORATOR FIXTURES
# =============================================================================

@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture
def hash_function() -> CountingHashFunction:
    return CountingHashFunction()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


# =============================================================================
# SERVICE FIXTURES
# =============================================================================

@pytest.fixture
def auth_service(store, hash_function, test_settings, clock) -> AuthService:
    return AuthService(store, hash_function, config=test_settings, clock=clock)


@pytest.fixture
def token_service(store, hash_function, test_settings) -> TokenService:
    return TokenService(store, hash_function, config=test_settings)


@pytest.fixture
def reset_flow(store, hash_function, test_settings, clock) -> PasswordResetFlow:
    return PasswordResetFlow(store, hash_function, config=test_settings, clock=clock)


@pytest_asyncio.fixture
async def registered(auth_service):
    """A registered, active account."""
    return await auth_service.register("user@example.com", VALID_PASSWORD, "Ada", "Lovelace")


# =============================================================================
# DATABASE FIXTURES
# =============================================================================

@pytest_asyncio.fixture
async def db_adapter() -> AsyncGenerator[SQLiteAdapter, None]:
    """
    In-memory SQLite adapter.

    Yields fresh database for each test.
    """
    adapter = SQLiteAdapter.create_for_testing()
    await adapter.connect()
    await adapter.create_tables()

    yield adapter

    await adapter.disconnect()


@pytest.fixture
def account_repository(db_adapter) -> AccountRepository:
    return AccountRepository(db_adapter)
