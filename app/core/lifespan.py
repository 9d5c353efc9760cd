"""Application lifespan: startup and shutdown.

Single place for startup/shutdown logic. Used by main.py; no business
logic here, only wiring of infrastructure (storage root, schema, DB engine).
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.core.config import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup: create the storage root and its staging folder, then create
    missing tables when DATABASE_AUTO_CREATE is set. Shutdown: dispose the
    SQL engine.
    """
    settings = get_settings()

    # ---- Startup ----
    from app.infrastructure.external.storage import SafeStorageRoot

    storage_root = SafeStorageRoot(settings.storage_root, settings.max_segment_bytes)
    storage_root.ensure_exists()
    (storage_root.root / settings.staging_dir_name).mkdir(parents=True, exist_ok=True)
    logger.info("Storage root ready at %s", storage_root.root)

    if settings.database_url and settings.database_auto_create:
        from app.infrastructure.persistence.database import create_all

        await create_all()
        logger.info("Database schema created")

    yield

    # ---- Shutdown ----
    from app.infrastructure.persistence.database import dispose_engine

    await dispose_engine()
    logger.info("Database engine disposed")
