from __future__ import annotations

import asyncio
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from wsbstonks.api.routes import router as api_router
from wsbstonks.jobs.price_sync import run_price_cycle
from wsbstonks.jobs.scheduler import run_every
from wsbstonks.state import Services

log = logging.getLogger("server")


def create_app(services: Services, start_jobs: bool = True) -> FastAPI:
    """
    Build the API around an explicit set of services.

    start_jobs=False skips the background tasks (timestamp load, price
    sync), which tests drive themselves.
    """
    app = FastAPI(title="WSB Stonks API", version="0.1.0")
    app.state.services = services
    app.state.tasks = []
    app.add_middleware(CORSMiddleware, allow_origin_regex=".*", allow_methods=["*"], allow_headers=["*"])
    app.include_router(api_router)

    @app.on_event("startup")
    async def _startup():
        await services.store.init_schema()
        if not start_jobs:
            return

        # Timestamps first; reads wait on context.ready until this is done
        app.state.tasks.append(asyncio.create_task(services.context.load(services.store)))

        # Price sync: now, then every sync_interval_ms
        async def cycle():
            await run_price_cycle(services.context, services.store, services.provider)

        app.state.tasks.append(
            asyncio.create_task(run_every(cycle, services.settings.sync_interval_ms))
        )
        log.info("Background jobs started interval_ms=%d", services.settings.sync_interval_ms)

    @app.on_event("shutdown")
    async def _shutdown():
        for task in app.state.tasks:
            task.cancel()
        await asyncio.gather(*app.state.tasks, return_exceptions=True)
        await services.provider.aclose()

    return app
