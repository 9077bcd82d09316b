"""
Database bootstrap for the loyalty backend.

This module builds the application's ``Store`` (``init_db``), runs
the connectivity check on startup (``check_connection``) and exposes
the FastAPI dependency that hands the store to route handlers
(``get_db``).

Only the in-memory store is bundled.  When ``USE_MOCK_DB`` is turned
off the check reports that no relational backend is available and the
service keeps running on the in-memory store.
"""

import logging
from typing import Optional

from fastapi import Request

from .config import Settings, settings as default_settings
from .seed import demo_data
from .store import Store

logger = logging.getLogger(__name__)


def init_db(config: Optional[Settings] = None) -> Store:
    """Create a store, seeded with demo rows when configured to."""
    config = config or default_settings
    store = Store()
    if config.seed_demo_data:
        store.load(demo_data())
        logger.info("Loaded demo data into the in-memory store")
    return store


async def check_connection(store: Store, config: Optional[Settings] = None) -> bool:
    """Probe the database and log the outcome.  Never raises."""
    config = config or default_settings
    if not config.use_mock_db:
        logger.error("Database connection failed: no relational backend is bundled with this service")
        logger.info("For demo mode set USE_MOCK_DB=true; continuing with the in-memory store")
        return False
    await store.raw("SELECT 1")
    return True


def get_db(request: Request) -> Store:
    """FastAPI dependency returning the application's store."""
    return request.app.state.db
