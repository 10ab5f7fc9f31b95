# =============================================================================
# STOREFRONT IDENTITY - UTILITIES
# =============================================================================
# File: utils/helpers.py
# Description: Small helpers shared by the services and validators
# =============================================================================

from datetime import datetime, timezone
import re
import uuid

# Anything@anything.anything, no whitespace
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def utc_now() -> datetime:
    """
    Get current UTC timestamp.

    Returns:
        datetime: Current UTC time with timezone info
    """
    return datetime.now(timezone.utc)


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes (as returned by SQLite) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def normalize_email(email: str) -> str:
    """Trim and lowercase an email address."""
    return email.strip().lower()


def is_valid_email(email: str) -> bool:
    """
    Validate email format.

    Args:
        email: Email address to validate (already trimmed)

    Returns:
        bool: True if valid format
    """
    return bool(EMAIL_PATTERN.match(email))


def is_canonical_uuid(value: str) -> bool:
    """True for the hyphenated 8-4-4-4-12 form of any UUID version."""
    try:
        parsed = uuid.UUID(value)
    except (ValueError, AttributeError, TypeError):
        return False
    return str(parsed) == value.lower()


def mask_email(email: str) -> str:
    """
    Mask email address for display/logging.

    Example: test@example.com -> t***@example.com

    Args:
        email: Email to mask

    Returns:
        str: Masked email
    """
    if "@" not in email:
        return "***"

    local, domain = email.rsplit("@", 1)
    if len(local) <= 1:
        masked_local = "*"
    else:
        masked_local = local[0] + "***"

    return f"{masked_local}@{domain}"
