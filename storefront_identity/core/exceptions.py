# =============================================================================
# STOREFRONT IDENTITY - CORE EXCEPTIONS MODULE
# =============================================================================
# File: core/exceptions.py
# Description: Error taxonomy for the identity core
#              Each class is a distinguishable kind; transport layers map
#              kinds to their own status codes
# =============================================================================

from typing import Optional, Dict, Any


class IdentityError(Exception):
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    BASE EXCEPTION CLASS                                  │
    │  All identity-core exceptions inherit from this base class              │
    │  Provides consistent error structure across the package                 │
    └─────────────────────────────────────────────────────────────────────────┘

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable error kind
        details: Additional context for debugging
        operational: True for deployment faults that should alert operators
    """

    operational = False

    def __init__(
        self,
        message: str = "An error occurred",
        error_code: str = "IDENTITY_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON serialization."""
        return {
            "error": True,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }


# =============================================================================
# AUTHENTICATION EXCEPTIONS
# =============================================================================

class AuthenticationError(IdentityError):
    """
    Raised when authentication fails.

    Examples:
        - Invalid email/password combination
        - Inactive or soft-deleted account
        - Expired or malformed token
    """

    def __init__(
        self,
        message: str = "Authentication failed",
        error_code: str = "AUTHENTICATION_FAILED",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            details=details
        )


class InvalidCredentialsError(AuthenticationError):
    """
    Raised when email/password combination is invalid.

    Used for "no such account", "account without a password" and "wrong
    password" alike so callers cannot enumerate accounts.
    """

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="Invalid email or password",
            error_code="INVALID_CREDENTIALS",
            details=details
        )


class AccountNotActiveError(AuthenticationError):
    """Raised when an inactive or soft-deleted account attempts to log in."""

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="Account is not active",
            error_code="ACCOUNT_NOT_ACTIVE",
            details=details
        )


class TokenError(AuthenticationError):
    """Base class for all token-related errors."""

    def __init__(
        self,
        message: str = "Token error",
        error_code: str = "TOKEN_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            details=details
        )


class TokenExpiredError(TokenError):
    """Raised when a signed token has expired. Callers may attempt a refresh."""

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="Token has expired",
            error_code="TOKEN_EXPIRED",
            details=details
        )


class InvalidTokenError(TokenError):
    """Raised when a token is malformed, forged, carries a bad payload or does not match."""

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="Invalid token",
            error_code="TOKEN_INVALID",
            details=details
        )


# =============================================================================
# ACCOUNT EXCEPTIONS
# =============================================================================

class AccountError(IdentityError):
    """Base class for account-related errors."""

    def __init__(
        self,
        message: str = "Account error",
        error_code: str = "ACCOUNT_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            details=details
        )


class AccountNotFoundError(AccountError):
    """Raised when an operation addresses an account id that does not resolve."""

    def __init__(self, account_id: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        message = "Account not found"
        if account_id:
            message = f"Account with ID '{account_id}' not found"
        super().__init__(
            message=message,
            error_code="ACCOUNT_NOT_FOUND",
            details=details
        )


class AccountAlreadyExistsError(AccountError):
    """Raised when registering an email that already belongs to an account."""

    def __init__(
        self,
        field: str = "email",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=f"Account with this {field} already exists",
            error_code="ACCOUNT_ALREADY_EXISTS",
            details=details
        )


# =============================================================================
# VALIDATION EXCEPTIONS
# =============================================================================

class ValidationError(IdentityError):
    """Raised when input validation fails. ``field`` names the offending input."""

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.field = field
        details = dict(details or {})
        if field:
            details.setdefault("field", field)
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            details=details
        )


# =============================================================================
# PASSWORD RESET EXCEPTIONS
# =============================================================================

class PasswordResetError(IdentityError):
    """Base class for password reset errors."""

    def __init__(
        self,
        message: str = "Password reset error",
        error_code: str = "PASSWORD_RESET_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            details=details
        )


class PasswordResetTokenInvalidError(PasswordResetError):
    """Raised when no outstanding reset token matches the presented one."""

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="Password reset token is invalid",
            error_code="PASSWORD_RESET_TOKEN_INVALID",
            details=details
        )


class PasswordResetTokenExpiredError(PasswordResetError):
    """Raised when the presented reset token matched but its window has elapsed."""

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="Password reset token has expired",
            error_code="PASSWORD_RESET_TOKEN_EXPIRED",
            details=details
        )


# =============================================================================
# CONFIGURATION EXCEPTIONS
# =============================================================================

class ConfigurationError(IdentityError):
    """Deployment fault. Not caused by the request; should page an operator."""

    operational = True

    def __init__(
        self,
        message: str = "Configuration error",
        error_code: str = "CONFIGURATION_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            details=details
        )


class SigningKeyNotConfiguredError(ConfigurationError):
    """Raised when a token must be signed or verified but no secret is configured."""

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="Token signing key is not configured",
            error_code="SIGNING_KEY_NOT_CONFIGURED",
            details=details
        )
