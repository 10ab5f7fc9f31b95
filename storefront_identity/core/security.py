# =============================================================================
# STOREFRONT IDENTITY - CORE SECURITY MODULE
# =============================================================================
# File: core/security.py
# Description: Cryptographic primitives used by the services
#              One-way hashing (bcrypt / Argon2id), random opaque tokens,
#              signed access tokens (HS256 family) and the password policy
# =============================================================================

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple
from datetime import datetime, timedelta, timezone
import asyncio
import secrets

from passlib.context import CryptContext
from argon2 import PasswordHasher
from argon2.exceptions import VerificationError, InvalidHashError
from jose import jwt, JWTError, ExpiredSignatureError

from storefront_identity.core.config import Settings, settings
from storefront_identity.core.exceptions import (
    InvalidTokenError,
    TokenExpiredError,
    ValidationError,
)


# =============================================================================
# ONE-WAY HASHING
# =============================================================================

class IHashFunction(ABC):
    """
    Salted, slow one-way hash.

    ``hash`` of the same secret twice yields different digests; ``compare``
    accepts any digest produced by ``hash`` regardless of cost factor.
    """

    @abstractmethod
    async def hash(self, secret: str, cost_factor: int) -> str:
        """Hash ``secret`` with the given work factor."""

    @abstractmethod
    async def compare(self, secret: str, digest: str) -> bool:
        """True iff ``secret`` produced ``digest``. Malformed digests are a mismatch."""


class BcryptHashFunction(IHashFunction):
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    BCRYPT HASH FUNCTION                                  │
    │  passlib CryptContext, one context per cost factor                      │
    └─────────────────────────────────────────────────────────────────────────┘

    Hashing runs in a worker thread so the event loop stays responsive
    while a cost-12 hash takes a few hundred milliseconds.
    """

    def __init__(self):
        self._contexts: Dict[int, CryptContext] = {}

    def _context(self, cost_factor: int) -> CryptContext:
        context = self._contexts.get(cost_factor)
        if context is None:
            context = CryptContext(
                schemes=["bcrypt"],
                deprecated="auto",
                bcrypt__rounds=cost_factor,
            )
            self._contexts[cost_factor] = context
        return context

    async def hash(self, secret: str, cost_factor: int) -> str:
        return await asyncio.to_thread(self._context(cost_factor).hash, secret)

    async def compare(self, secret: str, digest: str) -> bool:
        if not digest:
            return False
        # Rounds are encoded in the digest; any context verifies any cost
        context = self._context(4)
        try:
            return await asyncio.to_thread(context.verify, secret, digest)
        except (ValueError, TypeError):
            return False


class Argon2HashFunction(IHashFunction):
    """
    Argon2id via argon2-cffi. ``cost_factor`` is the time cost; memory and
    parallelism come from settings.

    Argon2id Parameters (OWASP recommended):
        - Memory:      64 MB (65536 KB)
        - Iterations:  3
        - Parallelism: 4
    """

    def __init__(self, config: Optional[Settings] = None):
        config = config or settings
        self._memory_cost = config.argon2_memory_cost
        self._parallelism = config.argon2_parallelism
        self._hashers: Dict[int, PasswordHasher] = {}

    def _hasher(self, cost_factor: int) -> PasswordHasher:
        hasher = self._hashers.get(cost_factor)
        if hasher is None:
            hasher = PasswordHasher(
                time_cost=cost_factor,
                memory_cost=self._memory_cost,
                parallelism=self._parallelism,
                hash_len=32,
                salt_len=16,
            )
            self._hashers[cost_factor] = hasher
        return hasher

    async def hash(self, secret: str, cost_factor: int) -> str:
        return await asyncio.to_thread(self._hasher(cost_factor).hash, secret)

    async def compare(self, secret: str, digest: str) -> bool:
        if not digest:
            return False
        # Parameters are encoded in the digest
        hasher = self._hasher(1)
        try:
            return await asyncio.to_thread(hasher.verify, digest, secret)
        except (VerificationError, InvalidHashError):
            return False


def build_hash_function(config: Optional[Settings] = None) -> IHashFunction:
    """Hash function selected by ``password_hash_algorithm``."""
    config = config or settings
    if config.password_hash_algorithm == "argon2":
        return Argon2HashFunction(config)
    return BcryptHashFunction()


# =============================================================================
# RANDOM OPAQUE TOKENS
# =============================================================================

class IRandomTokenGenerator(ABC):
    """Source of unguessable opaque tokens."""

    @abstractmethod
    def generate(self, byte_length: int) -> str:
        """Return ``byte_length`` random bytes as lowercase hex."""


class SecureTokenGenerator(IRandomTokenGenerator):
    """OS CSPRNG backed generator (``secrets.token_hex``)."""

    def generate(self, byte_length: int) -> str:
        return secrets.token_hex(byte_length)


# =============================================================================
# SIGNED ACCESS TOKENS
# =============================================================================

class ISignedTokenCodec(ABC):
    """Symmetric signer/verifier for self-contained tokens."""

    @abstractmethod
    def sign(self, payload: Dict[str, Any], secret: str, expires_delta: timedelta) -> str:
        """Sign ``payload`` with issue time now and expiry now + ``expires_delta``."""

    @abstractmethod
    def verify(self, token: str, secret: str) -> Dict[str, Any]:
        """
        Verify signature and expiry and return the claims.

        Raises:
            TokenExpiredError: Signature valid, expiry passed
            InvalidTokenError: Anything else
        """


class JWTCodec(ISignedTokenCodec):
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    JWT CODEC                                             │
    │  python-jose HS256/HS384/HS512 signing and verification                 │
    └─────────────────────────────────────────────────────────────────────────┘

    Only the configured algorithm is accepted on verify, so tokens signed
    with "none" or a different HMAC width are rejected.
    """

    def __init__(self, algorithm: Optional[str] = None):
        self._algorithm = algorithm or settings.jwt_algorithm

    @property
    def algorithm(self) -> str:
        return self._algorithm

    def sign(self, payload: Dict[str, Any], secret: str, expires_delta: timedelta) -> str:
        now = datetime.now(timezone.utc)
        claims = dict(payload)
        claims["iat"] = now
        claims["exp"] = now + expires_delta
        return jwt.encode(claims, secret, algorithm=self._algorithm)

    def verify(self, token: str, secret: str) -> Dict[str, Any]:
        if not isinstance(token, str) or not token:
            raise InvalidTokenError(details={"error": "Token is empty"})
        try:
            return jwt.decode(token, secret, algorithms=[self._algorithm])
        except ExpiredSignatureError:
            raise TokenExpiredError()
        except JWTError as e:
            raise InvalidTokenError(details={"error": str(e)})


# =============================================================================
# PASSWORD POLICY
# =============================================================================

class PasswordPolicy:
    """
    Password strength rules applied at registration and reset.

    Rules:
        - Minimum 12 characters
        - Maximum 128 characters
        - At least one uppercase letter
        - At least one lowercase letter
        - At least one digit
    """

    MIN_LENGTH = 12
    MAX_LENGTH = 128

    @classmethod
    def validate(cls, password: str) -> Tuple[bool, List[str]]:
        """
        Validate password strength.

        Returns:
            tuple[bool, list[str]]: (is_valid, list of error messages)
        """
        errors = []

        if len(password) < cls.MIN_LENGTH:
            errors.append(f"Password must be at least {cls.MIN_LENGTH} characters")

        if len(password) > cls.MAX_LENGTH:
            errors.append(f"Password must not exceed {cls.MAX_LENGTH} characters")

        if not any(c.isupper() for c in password):
            errors.append("Password must contain at least one uppercase letter")

        if not any(c.islower() for c in password):
            errors.append("Password must contain at least one lowercase letter")

        if not any(c.isdigit() for c in password):
            errors.append("Password must contain at least one number")

        return len(errors) == 0, errors

    @classmethod
    def ensure_valid(cls, password: Optional[str], field: str = "password") -> None:
        """
        Raises:
            ValidationError: If the password is missing or too weak
        """
        if not password:
            raise ValidationError(message="Password is required", field=field)
        is_valid, errors = cls.validate(password)
        if not is_valid:
            raise ValidationError(
                message=errors[0],
                field=field,
                details={"validation_errors": errors}
            )


# =============================================================================
# SINGLETON INSTANCES
# =============================================================================

token_generator = SecureTokenGenerator()
password_policy = PasswordPolicy()
