# =============================================================================
# STOREFRONT IDENTITY
# =============================================================================
# Credential issuance and session lifecycle for the storefront backend:
# registration, login, access/refresh tokens and password reset.
# =============================================================================

__version__ = "1.0.0"
