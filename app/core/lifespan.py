"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic (SRP). Used by main.py;
no business logic here, only wiring of infrastructure (Supabase REST
client, telemetry).
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.core.config import get_settings
from app.infrastructure.supabase.client import close_supabase, init_supabase
from app.shared.telemetry.telemetry import Telemetry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: telemetry (if enabled), Supabase client. Shutdown order:
    Supabase client close (waits for no in-flight request), telemetry
    shutdown (flushes spans).
    """
    settings = get_settings()

    # ---- Startup ----
    telemetry = Telemetry(settings) if settings.telemetry_enabled else None
    if telemetry is not None:
        telemetry.start(app)

    if not init_supabase():
        logger.error("Supabase client unavailable; provisioning endpoints will return 503")

    yield

    # ---- Shutdown ----
    await close_supabase()

    if telemetry is not None:
        telemetry.shutdown()
