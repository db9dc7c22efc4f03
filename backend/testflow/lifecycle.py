from __future__ import annotations

import logging

from fastapi import FastAPI

from .db.session import initialise_database

logger = logging.getLogger(__name__)


def register_events(app: FastAPI) -> None:
    @app.on_event("startup")
    async def _on_startup() -> None:
        await initialise_database()
        rearmed = await app.state.scheduler.reconcile_orphaned_runs()
        logger.info("Startup complete; %s orphaned run(s) re-armed", rearmed)

    @app.on_event("shutdown")
    async def _on_shutdown() -> None:
        await app.state.scheduler.shutdown()
