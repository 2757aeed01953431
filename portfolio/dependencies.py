"""
Dependency wiring for the FastAPI app.

The store and the rate limiters are built once per application in
`create_app()` and kept on `app.state`; handlers reach them through the
getters below.
"""

from __future__ import annotations

import logging
from typing import Dict

from fastapi import Request

from portfolio.config import Settings
from portfolio.db import DbClient, InMemoryDbClient, SqliteDbClient
from portfolio.ratelimit import RateLimiter
from portfolio.security import hash_password

logger = logging.getLogger(__name__)

EVENTS_LIMITER = "events"
CONTACT_LIMITER = "contact"


def build_db_client(settings: Settings) -> DbClient:
    """
    Pick the store for this process and seed it. SQLite is preferred; any
    failure while opening it downgrades to the in-memory client.
    """
    password_hash = hash_password(settings.admin_password)
    db_client: DbClient | None = None
    if settings.vercel or settings.use_in_memory_backends:
        logger.info(
            "Restricted environment detected. Using InMemoryDbClient instead of SQLite."
        )
    else:
        try:
            db_client = SqliteDbClient(settings.database_path)
            db_client.seed(settings.admin_username, password_hash)
        except Exception as exc:
            logger.warning(
                "Failed to initialize SQLite at %s. Falling back to InMemoryDbClient: %s",
                settings.database_path,
                exc,
            )
            if db_client is not None:
                db_client.close()
            db_client = None

    if db_client is None:
        db_client = InMemoryDbClient()
        db_client.seed(settings.admin_username, password_hash)
    logger.info("Using %s", type(db_client).__name__)
    return db_client


def build_rate_limiters(settings: Settings) -> Dict[str, RateLimiter]:
    return {
        EVENTS_LIMITER: RateLimiter(
            settings.events_rate_limit, settings.events_rate_window_seconds
        ),
        CONTACT_LIMITER: RateLimiter(
            settings.contact_rate_limit, settings.contact_rate_window_seconds
        ),
    }


def get_db_client(request: Request) -> DbClient:
    return request.app.state.db


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
