# =============================================================================
# UTILS MODULE INITIALIZATION
# =============================================================================
# File: utils/__init__.py
# Description: Utils module exports
# =============================================================================

from storefront_identity.utils.helpers import (
    utc_now,
    ensure_aware,
    normalize_email,
    is_valid_email,
    is_canonical_uuid,
    mask_email,
)

__all__ = [
    "utc_now",
    "ensure_aware",
    "normalize_email",
    "is_valid_email",
    "is_canonical_uuid",
    "mask_email",
]
