# =============================================================================
# STOREFRONT IDENTITY - APPLICATION LIFECYCLE
# =============================================================================
# File: main.py
# Description: Startup/shutdown of the identity core for embedding processes
# =============================================================================

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Optional

from storefront_identity.auth.dependencies import (
    configure_credential_store,
    get_auth_service,
    get_password_reset_flow,
    get_token_service,
    reset_dependencies,
)
from storefront_identity.auth.password_reset import PasswordResetFlow
from storefront_identity.auth.repository import AccountRepository
from storefront_identity.auth.service import AuthService
from storefront_identity.auth.tokens import TokenService
from storefront_identity.core.config import Settings, settings as default_settings
from storefront_identity.core.logging import setup_logging
from storefront_identity.db.base import BaseDBAdapter
from storefront_identity.db.factory import DBFactory

logger = logging.getLogger(__name__)


@dataclass
class IdentityCore:
    """The three services, sharing one credential store."""
    auth: AuthService
    tokens: TokenService
    password_reset: PasswordResetFlow


@asynccontextmanager
async def lifespan(
    config: Optional[Settings] = None,
    adapter: Optional[BaseDBAdapter] = None,
) -> AsyncIterator[IdentityCore]:
    """
    Identity core lifecycle manager.

    Handles startup and shutdown:
    - Startup: configure logging, connect the database, create tables
      outside production
    - Shutdown: forget the services, close the connection pool
      (also when startup itself fails)

    Usage:
        async with lifespan() as core:
            account = await core.auth.login(email, password)
    """
    config = config or default_settings
    setup_logging(level=config.log_level, log_format=config.log_format)

    # STARTUP
    logger.info("Starting %s in %s mode", config.app_name, config.app_env)

    if adapter is None:
        adapter = DBFactory.get_db_adapter(config=config, force_new=True)

    try:
        await adapter.connect()
        if not config.is_production:
            await adapter.create_tables()
            logger.info("Database tables created/verified")

        if not config.jwt_secret_key:
            logger.warning("JWT_SECRET_KEY is not set; access tokens cannot be issued")

        configure_credential_store(AccountRepository(adapter), config)
        core = IdentityCore(
            auth=get_auth_service(),
            tokens=get_token_service(),
            password_reset=get_password_reset_flow(),
        )
        logger.info("%s started successfully", config.app_name)

        yield core
    finally:
        # SHUTDOWN
        logger.info("Shutting down %s", config.app_name)
        reset_dependencies()
        await adapter.disconnect()
        DBFactory.reset()
        logger.info("%s shutdown complete", config.app_name)
