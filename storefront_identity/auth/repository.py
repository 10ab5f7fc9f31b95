# =============================================================================
# STOREFRONT IDENTITY - AUTH REPOSITORY
# =============================================================================
# File: auth/repository.py
# Description: Credential store contract and its implementations
#              SQLAlchemy async repository plus an in-process store
# =============================================================================

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from storefront_identity.auth.schemas import Account
from storefront_identity.core.exceptions import AccountAlreadyExistsError
from storefront_identity.db.base import IDBAdapter
from storefront_identity.db.models import AccountModel, generate_uuid
from storefront_identity.utils.helpers import utc_now

logger = logging.getLogger(__name__)

# Columns a caller may write through create()/update()
WRITABLE_FIELDS = frozenset({
    "email",
    "password_hash",
    "first_name",
    "last_name",
    "role",
    "is_active",
    "email_verified_at",
    "deleted_at",
    "refresh_token_hash",
    "password_reset_token",
    "password_reset_expires",
    "last_login_at",
})


def _check_fields(fields: Dict[str, Any]) -> None:
    unknown = set(fields) - WRITABLE_FIELDS
    if unknown:
        raise ValueError(f"Unknown account fields: {sorted(unknown)}")


# =============================================================================
# CREDENTIAL STORE CONTRACT
# =============================================================================

class ICredentialStore(ABC):
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    CREDENTIAL STORE INTERFACE                            │
    │  Persistence contract the services depend on                            │
    └─────────────────────────────────────────────────────────────────────────┘

    Emails are stored already normalized; lookups are exact matches.
    Every method returns detached ``Account`` snapshots.
    """

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[Account]:
        """Account with exactly this (normalized) email, or None."""

    @abstractmethod
    async def find_by_id(self, account_id: str) -> Optional[Account]:
        """Account with this id, or None."""

    @abstractmethod
    async def find_candidates_with_outstanding_reset_token(self) -> List[Account]:
        """Every account whose reset-token hash is set, expired or not."""

    @abstractmethod
    async def create(self, **fields: Any) -> Account:
        """
        Insert a new account.

        Raises:
            AccountAlreadyExistsError: The email is already taken
        """

    @abstractmethod
    async def update(self, account_id: str, **fields: Any) -> Optional[Account]:
        """Apply all ``fields`` in one write. None when the id does not resolve."""


# =============================================================================
# SQLALCHEMY REPOSITORY
# =============================================================================

class AccountRepository(ICredentialStore):
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    ACCOUNT REPOSITORY                                    │
    │  SQLAlchemy async data access for AccountModel                          │
    └─────────────────────────────────────────────────────────────────────────┘

    Each call runs in its own session from the adapter; the adapter commits
    on success and rolls back on error, so every ``update`` is atomic.
    """

    def __init__(self, adapter: IDBAdapter):
        """
        Args:
            adapter: Connected database adapter
        """
        self._adapter = adapter

    # =========================================================================
    # READ OPERATIONS
    # =========================================================================

    async def find_by_email(self, email: str) -> Optional[Account]:
        async with self._adapter.get_session() as session:
            result = await session.execute(
                select(AccountModel).where(AccountModel.email == email)
            )
            model = result.scalar_one_or_none()
            return Account.model_validate(model) if model else None

    async def find_by_id(self, account_id: str) -> Optional[Account]:
        async with self._adapter.get_session() as session:
            model = await session.get(AccountModel, account_id)
            return Account.model_validate(model) if model else None

    async def find_candidates_with_outstanding_reset_token(self) -> List[Account]:
        async with self._adapter.get_session() as session:
            result = await session.execute(
                select(AccountModel).where(
                    AccountModel.password_reset_token.is_not(None)
                )
            )
            return [Account.model_validate(m) for m in result.scalars().all()]

    # =========================================================================
    # WRITE OPERATIONS
    # =========================================================================

    async def create(self, **fields: Any) -> Account:
        _check_fields(fields)
        try:
            async with self._adapter.get_session() as session:
                model = AccountModel(**fields)
                session.add(model)
                await session.flush()
                await session.refresh(model)
                account = Account.model_validate(model)
        except IntegrityError:
            raise AccountAlreadyExistsError(field="email")
        return account

    async def update(self, account_id: str, **fields: Any) -> Optional[Account]:
        _check_fields(fields)
        async with self._adapter.get_session() as session:
            model = await session.get(AccountModel, account_id)
            if model is None:
                return None
            for key, value in fields.items():
                setattr(model, key, value)
            await session.flush()
            await session.refresh(model)
            return Account.model_validate(model)


# =============================================================================
# IN-PROCESS STORE
# =============================================================================

class InMemoryAccountRepository(ICredentialStore):
    """
    Dict-backed store with the same semantics as ``AccountRepository``.

    Used by tests and by tooling that needs the services without a database.
    """

    def __init__(self):
        self._accounts: Dict[str, Account] = {}

    async def find_by_email(self, email: str) -> Optional[Account]:
        for account in self._accounts.values():
            if account.email == email:
                return account.model_copy()
        return None

    async def find_by_id(self, account_id: str) -> Optional[Account]:
        account = self._accounts.get(account_id)
        return account.model_copy() if account else None

    async def find_candidates_with_outstanding_reset_token(self) -> List[Account]:
        return [
            account.model_copy()
            for account in self._accounts.values()
            if account.password_reset_token is not None
        ]

    async def create(self, **fields: Any) -> Account:
        _check_fields(fields)
        if await self.find_by_email(fields.get("email", "")) is not None:
            raise AccountAlreadyExistsError(field="email")
        now = utc_now()
        account = Account.model_validate({
            **fields,
            "id": generate_uuid(),
            "created_at": now,
            "updated_at": now,
        })
        self._accounts[account.id] = account
        return account.model_copy()

    async def update(self, account_id: str, **fields: Any) -> Optional[Account]:
        _check_fields(fields)
        account = self._accounts.get(account_id)
        if account is None:
            return None
        # Re-validate so writes are coerced like the SQL store
        updated = Account.model_validate(
            {**account.model_dump(), **fields, "updated_at": utc_now()}
        )
        self._accounts[account_id] = updated
        return updated.model_copy()

    def __len__(self) -> int:
        return len(self._accounts)
